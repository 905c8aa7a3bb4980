from __future__ import annotations

import json

from entry_validator.models.lined_error import LinedError
from entry_validator.validation.errors import (
    MalformedRowError,
    NotAlphanumericError,
    UnexpectedRowError,
)

"""Unit tests for the LinedError model and its report formats."""


def test_to_line_format():
    err = LinedError(page="A", line=3, error=MalformedRowError(15, 10))
    assert err.to_line() == "A:3: invalid amount of columns: expected 15, got 10"


def test_page_names_with_spaces_and_colons_are_kept_verbatim():
    err = LinedError(page="Hoja 1: enero", line=12, error=NotAlphanumericError("document number", "AB 12"))
    assert err.to_line() == "Hoja 1: enero:12: document number \"AB 12\" must be alphanumeric"


def test_to_json_line_fixed_keys():
    err = LinedError(page="Ñuñoa", line=7, error=NotAlphanumericError("document number", "AB 12"))
    data = json.loads(err.to_json_line())

    assert set(data.keys()) == {"page", "line", "error_type", "message"}
    assert data["page"] == "Ñuñoa"
    assert data["line"] == 7
    assert data["error_type"] == "NOT_ALPHANUMERIC"
    assert data["message"] == "document number \"AB 12\" must be alphanumeric"
    # non-ASCII kept readable
    assert "Ñuñoa" in err.to_json_line()


def test_unexpected_error_type():
    err = LinedError(page="A", line=1, error=UnexpectedRowError(KeyError("x")))
    assert err.error_type == "UNEXPECTED_ERROR"
    assert err.description == "unexpected error: KeyError: 'x'"


def test_plain_exception_error_type_falls_back():
    err = LinedError(page="A", line=1, error=RuntimeError("boom"))
    assert err.error_type == "UNEXPECTED_ERROR"
    assert err.to_line() == "A:1: boom"


def test_sort_key_orders_by_page_then_line():
    errors = [
        LinedError("B", 1, MalformedRowError(15, 1)),
        LinedError("A", 10, MalformedRowError(15, 1)),
        LinedError("A", 2, MalformedRowError(15, 1)),
    ]
    ordered = sorted(errors, key=LinedError.sort_key)
    assert [(e.page, e.line) for e in ordered] == [("A", 2), ("A", 10), ("B", 1)]
