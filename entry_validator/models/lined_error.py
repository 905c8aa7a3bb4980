from __future__ import annotations

import json
from dataclasses import dataclass

"""LinedError model for per-row failures.

A LinedError tags the failure with the sheet (page) and 0-based row position
(line) that produced it. The raw row is intentionally not retained.

Text form (one per line in the error report):
    <page>:<line>: <description>
"""

__all__ = [
    "LinedError",
]


@dataclass(frozen=True)
class LinedError:
    """Failure reported for a single row.

    Attributes:
        page: Sheet name the row came from
        line: 0-based position of the row within the sheet
        error: The rule violation or fault (an ``EntryError`` for row-level
            failures); its ``str()`` is the human-readable description
    """
    page: str
    line: int
    error: Exception

    @property
    def description(self) -> str:
        return str(self.error)

    @property
    def error_type(self) -> str:
        """Classification in UPPER_SNAKE_CASE, taken from the error's code if present."""
        code = getattr(self.error, "code", None)
        return code if isinstance(code, str) else "UNEXPECTED_ERROR"

    def to_line(self) -> str:
        """Render the error report line ``"<page>:<line>: <description>"``."""
        return f"{self.page}:{self.line}: {self.description}"

    def to_json_line(self) -> str:
        """Serialize to a JSON Lines record with a fixed key set."""
        return json.dumps(
            {
                "page": self.page,
                "line": self.line,
                "error_type": self.error_type,
                "message": self.description,
            },
            ensure_ascii=False,
        )

    def sort_key(self) -> tuple[str, int]:
        return (self.page, self.line)
