from __future__ import annotations

import json
import logging

from records_demo.errors import ErrorKind
from records_demo.utils.logging import _json_formatter

EXPECTED_ROWS_AFFECTED = 1


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test.logger",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg="hello",
        args=(),
        exc_info=None,
    )


def test_json_formatter_promotes_standard_extra_fields() -> None:
    record = _record()
    record.rows_affected = EXPECTED_ROWS_AFFECTED
    record.step = "insert"

    payload = json.loads(_json_formatter(record))

    assert payload["level"] == "INFO"
    assert payload["logger"] == "test.logger"
    assert payload["message"] == "hello"
    assert payload["rows_affected"] == EXPECTED_ROWS_AFFECTED
    assert payload["step"] == "insert"
    assert "lineno" not in payload


def test_json_formatter_supports_nested_extra_field() -> None:
    record = _record()
    record.extra = {"table": "mytable"}

    payload = json.loads(_json_formatter(record))

    assert payload["table"] == "mytable"


def test_json_formatter_stringifies_unserializable_values() -> None:
    record = _record()
    record.error_kind = ErrorKind.WRITE

    payload = json.loads(_json_formatter(record))

    assert payload["error_kind"] == "write"
