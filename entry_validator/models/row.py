from __future__ import annotations

from dataclasses import dataclass

"""Row model: one spreadsheet line as handed from the Row Source to a worker.

A Row is consumed exactly once by exactly one worker and discarded after the
outcome (Entry or LinedError) is published.
"""

__all__ = [
    "Row",
    "ROW_WIDTH",
]

# Number of cells a well-formed row carries
ROW_WIDTH = 15


@dataclass(frozen=True)
class Row:
    """Raw text cells of a single sheet line.

    The line refers to the 0-based position within the sheet; the header row
    (position 0) is never forwarded, so data rows start at line 1.
    """
    page: str  # Sheet name
    line: int  # 0-based position within the sheet
    cells: tuple[str, ...]  # Raw text cells (any width; the parser checks arity)
