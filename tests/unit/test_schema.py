"""Tests for column block parsing and table registration."""

import pytest
from sqlalchemy import inspect

from asql import Database
from asql.core.types import ColumnSpec
from asql.exceptions import EngineError, SchemaError, StateError, TableNotDefinedError
from asql.schema.parser import parse_column_block, parse_column_mapping


class TestColumnBlockParser:
    """Tests for parse_column_block."""

    def test_basic_columns(self):
        """Each line yields a (name, type) pair in source order."""
        schema = parse_column_block("car", "make text\nmodel text\nyear integer")
        assert schema.column_names == ["make", "model", "year"]
        assert schema.columns[2] == ColumnSpec(name="year", type_spec="integer")

    def test_comments_and_blank_lines(self):
        """Comments are dropped and blank or comment-only lines skipped."""
        block = """
            # A comment-only line
            make    text        # The make of the car.

            model   text
        """
        schema = parse_column_block("car", block)
        assert schema.column_names == ["make", "model"]
        assert schema.columns[0].type_spec == "text"

    def test_quoted_type(self):
        """Quoted type text is kept whole."""
        schema = parse_column_block("car", 'color   "text collate nocase"   # Case-insensitive.')
        assert schema.columns[0].type_spec == "text collate nocase"

    def test_unquoted_type_words_joined(self):
        """Extra tokens after the name form the type."""
        schema = parse_column_block("abc", "a integer primary key")
        assert schema.columns[0].type_spec == "integer primary key"

    def test_type_keeps_sql_literals(self):
        """Quoted SQL literals in an unquoted type reach the engine as written."""
        schema = parse_column_block("t", "status text default 'two words'  # Default.")
        assert schema.columns[0].type_spec == "text default 'two words'"

    def test_column_without_type(self):
        """A bare name is a column with no declared type."""
        schema = parse_column_block("t", "anything")
        assert schema.columns[0].definition() == "anything"

    def test_empty_leading_token_skipped(self):
        """A line whose first token is empty is ignored."""
        schema = parse_column_block("t", '"" text\nname text')
        assert schema.column_names == ["name"]

    def test_composite_primary_key(self):
        """The 'primary key' pseudo-column becomes a table constraint."""
        block = """
            x   integer
            y   text
            z   integer
            "primary key"   "(x, y)"
        """
        schema = parse_column_block("xyz", block)
        assert schema.column_names == ["x", "y", "z"]
        assert schema.constraints == ("primary key (x, y)",)
        assert schema.create_statement() == (
            "CREATE TABLE xyz (x integer, y text, z integer, primary key (x, y))"
        )

    def test_unquoted_primary_key(self):
        """Unquoted 'primary key (...)' is recognized too."""
        schema = parse_column_block("xyz", "x integer\ny text\nprimary key (x, y)")
        assert schema.constraints == ("primary key (x, y)",)

    def test_unbalanced_quote(self):
        """Unbalanced quotes raise SchemaError with the line number."""
        with pytest.raises(SchemaError) as exc_info:
            parse_column_block("car", 'make text\ncolor "text collate')
        assert "line 2" in str(exc_info.value)

    def test_no_columns(self):
        """A block without columns is rejected."""
        with pytest.raises(SchemaError):
            parse_column_block("car", "# nothing here\n")

    def test_mapping_form(self):
        """A {column: type} mapping is accepted."""
        schema = parse_column_mapping("car", {"make": "text", "primary key": "(make)"})
        assert schema.column_names == ["make"]
        assert schema.constraints == ("primary key (make)",)


class TestSchemaRegistrar:
    """Tests for define() against the engine."""

    def test_define_requires_init(self):
        """define() before init() raises StateError."""
        with pytest.raises(StateError) as exc_info:
            Database().define("car", "make text")
        assert "init()" in str(exc_info.value)

    def test_define_creates_table(self, memory_db: Database):
        """Defining a table creates it in the store."""
        car = memory_db.define("car", "make text\nyear integer")
        assert car.name == "car"
        assert car.cols() == ["make", "year"]
        assert memory_db.tables == ["car"]

    def test_redefine_does_not_alter(self, memory_db: Database):
        """An existing table is left unchanged by a new definition."""
        memory_db.define("car", "make text\nyear integer")
        car = memory_db.define("car", "make text\nyear integer\ncolor text")
        assert car.cols() == ["make", "year"]

    def test_cols_ignore_type_text(self, memory_db: Database):
        """cols() returns only names."""
        car = memory_db.define("car", 'color "text collate nocase" # comment')
        assert car.cols() == ["color"]

    def test_column_default_literal(self, memory_db: Database):
        """A default with a quoted literal is applied by the engine."""
        task = memory_db.define("task", "name text\nstatus text default 'not started'")
        rowid = task.add({"name": "wash"})
        assert task.get("status", rowid=rowid) == "not started"

    def test_table_lookup(self, memory_db: Database):
        """Defined tables can be looked up by name."""
        car = memory_db.define("car", "make text")
        assert memory_db.table("car") is car
        assert memory_db["car"] is car

    def test_undefined_table(self, memory_db: Database):
        """Looking up an undefined table lists the defined ones."""
        memory_db.define("car", "make text")
        with pytest.raises(TableNotDefinedError) as exc_info:
            memory_db.table("truck")
        assert "Defined tables: car" in str(exc_info.value)

    def test_invalid_type_text_surfaces_engine_error(self, memory_db: Database):
        """The engine's diagnostic is preserved."""
        with pytest.raises(EngineError) as exc_info:
            memory_db.define("bad", "a integer primary key primary key")
        assert "primary key" in str(exc_info.value)

    def test_hook_triggers_installed(self, memory_db: Database):
        """Row-change triggers exist for every defined table."""
        memory_db.define("car", "make text")
        result = memory_db._connection.execute(
            "SELECT name FROM sqlite_temp_master WHERE type='trigger' AND tbl_name='car'"
        )
        assert sorted(row[0] for row in result.rows) == [
            "asql_hook_car_delete",
            "asql_hook_car_insert",
            "asql_hook_car_update",
        ]

    def test_table_visible_to_sqlalchemy(self, file_db: Database):
        """Created tables are regular tables in the store."""
        file_db.define("car", "make text")
        inspector = inspect(file_db._connection.engine)
        assert "car" in inspector.get_table_names()
