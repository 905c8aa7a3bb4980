from __future__ import annotations

import json
from collections.abc import Sequence

"""Row-level error taxonomy.

Every rule the parser or validator can reject a row for has its own
``EntryError`` subclass carrying the data needed to rebuild the message
(field name, offending value, allowed set). ``code`` is the UPPER_SNAKE
classification used in JSON Lines error reports.

Values are double-quoted with backslash escapes; allowed sets render as
``[A B C]``.
"""

__all__ = [
    "EntryError",
    "MalformedRowError",
    "BadDateError",
    "MissingNameError",
    "NotInVocabularyError",
    "NotAlphanumericError",
    "PriorityMismatchError",
    "UnexpectedRowError",
    "quoted",
]


def quoted(value: str) -> str:
    """Double-quote ``value``, escaping quotes, backslashes and control characters."""
    return json.dumps(value, ensure_ascii=False)


class EntryError(Exception):
    """Base class for failures reported against a single row."""

    code = "ENTRY_ERROR"

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other) and self.args == other.args  # type: ignore[union-attr]

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class MalformedRowError(EntryError):
    """Row does not carry exactly the expected number of cells."""

    code = "MALFORMED_ROW"

    def __init__(self, expected: int, actual: int) -> None:
        super().__init__(expected, actual)
        self.expected = expected
        self.actual = actual

    def __str__(self) -> str:
        return f"invalid amount of columns: expected {self.expected}, got {self.actual}"


class BadDateError(EntryError):
    """Date cell does not match day/month/4-digit-year."""

    code = "BAD_DATE"

    def __init__(self, index: int, value: str) -> None:
        super().__init__(index, value)
        self.index = index
        self.value = value

    def __str__(self) -> str:
        return f"error parsing date {self.value}: expected day/month/year (column {self.index})"


class MissingNameError(EntryError):
    """First given name or first family name is empty."""

    code = "MISSING_NAME"

    def __str__(self) -> str:
        return "first name and first last name must not be empty"


class NotInVocabularyError(EntryError):
    """Categorical field holds a value outside its fixed vocabulary."""

    code = "NOT_IN_VOCABULARY"

    def __init__(self, field: str, value: str, allowed: Sequence[str]) -> None:
        super().__init__(field, value, tuple(allowed))
        self.field = field
        self.value = value
        self.allowed = tuple(allowed)

    def __str__(self) -> str:
        allowed = " ".join(self.allowed)
        return f"{self.field} {quoted(self.value)} must be one of [{allowed}]"


class NotAlphanumericError(EntryError):
    """Field must contain ASCII letters and digits only (and not be empty)."""

    code = "NOT_ALPHANUMERIC"

    def __init__(self, field: str, value: str) -> None:
        super().__init__(field, value)
        self.field = field
        self.value = value

    def __str__(self) -> str:
        return f"{self.field} {quoted(self.value)} must be alphanumeric"


class PriorityMismatchError(EntryError):
    """has-priority flag disagrees with the motive's priority eligibility."""

    code = "PRIORITY_MISMATCH"

    def __init__(self, motive: str, expected: bool) -> None:
        super().__init__(motive, expected)
        self.motive = motive
        self.expected = expected

    def __str__(self) -> str:
        if self.expected:
            return f"entry with motive {quoted(self.motive)} must have priority"
        return f"entry with motive {quoted(self.motive)} must not have priority"


class UnexpectedRowError(EntryError):
    """Unexpected runtime fault caught at the row boundary."""

    code = "UNEXPECTED_ERROR"

    def __init__(self, cause: BaseException) -> None:
        super().__init__(type(cause).__name__, str(cause))
        self.cause = cause

    def __str__(self) -> str:
        return f"unexpected error: {type(self.cause).__name__}: {self.cause}"
