"""Tests for the exception hierarchy."""

from asql.exceptions import (
    ArgumentError,
    ASQLError,
    EngineError,
    FormatError,
    SchemaError,
    StateError,
    TableNotDefinedError,
)


class TestExceptions:
    """Tests for error payloads."""

    def test_all_derive_from_base(self):
        """Every error is an ASQLError."""
        for cls in (StateError, SchemaError, ArgumentError, FormatError, EngineError):
            assert issubclass(cls, ASQLError)

    def test_to_dict(self):
        """Errors serialize with their context."""
        error = TableNotDefinedError("truck", ["car"])
        payload = error.to_dict()
        assert payload["error"] == "TableNotDefinedError"
        assert payload["context"] == {"table": "truck", "defined_tables": ["car"]}

    def test_format_error_lists_formats(self):
        """FormatError names the valid formats."""
        error = FormatError("csv")
        assert "csv" in str(error)
        assert error.context["valid_formats"] == ["list", "dict"]

    def test_state_error_mentions_init(self):
        """StateError tells how to fix it."""
        assert "init()" in str(StateError("define"))
