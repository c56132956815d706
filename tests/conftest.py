"""Shared test fixtures for asql."""

from collections.abc import Generator
from pathlib import Path

import pytest

from asql import Database, Table

CAR_COLUMNS = """
    make    text                    # The make of the car.
    model   text
    year    integer
    color   "text collate nocase"   # This column is case-insensitive.
"""


@pytest.fixture
def memory_db() -> Generator[Database, None, None]:
    """Create a Database with an in-memory SQLite store."""
    database = Database().init()
    yield database
    database.close()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Path of a SQLite file inside the test's temp directory."""
    return tmp_path / "asql_test.db"


@pytest.fixture
def file_db(db_path: Path) -> Generator[Database, None, None]:
    """Create a Database backed by a SQLite file."""
    database = Database().init(db_path)
    yield database
    database.close()


@pytest.fixture
def car(memory_db: Database) -> Table:
    """Define the car table on the in-memory database."""
    return memory_db.define("car", CAR_COLUMNS)


@pytest.fixture
def cars(car: Table) -> Table:
    """Car table holding three rows (rowids 1-3)."""
    car.add({"make": "Ford", "model": "Ranger", "year": 1996, "color": "tan"})
    car.add({"make": "Chevrolet", "model": "Camaro", "year": 1967, "color": "burgandy"})
    car.add({"make": "Ford", "model": "Thunderbird", "year": 2004, "color": "black"})
    return car


@pytest.fixture
def hook_messages(memory_db: Database) -> list[str]:
    """Collect update hook messages of the in-memory database."""
    messages: list[str] = []
    memory_db.hook("operation=%o, table=%t, rowid=%r", messages.append)
    return messages
