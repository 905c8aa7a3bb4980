from __future__ import annotations

import math
from datetime import date, datetime
from pathlib import Path
from typing import Any, Protocol

import pandas as pd

"""Row Source backed by pandas (openpyxl engine).

The source exposes the workbook as "list of sheets" and "list of string cells
per row per sheet". Cells are rendered the way a spreadsheet displays them:
- empty / NaN -> ""
- date/datetime cells -> "day/month/year"
- integral floats -> integer text (12345.0 -> "12345")
Trailing empty cells are dropped from each row. A blank row before the last
non-empty row is kept as an empty cell tuple (it fails the cell-count check
like any other short row); blank rows after it are dropped.
"""

__all__ = [
    "RowSource",
    "ExcelRowSource",
    "SourceOpenError",
    "SheetReadError",
    "open_excel_source",
    "cell_to_text",
]


class SourceOpenError(Exception):
    """Raised when the workbook cannot be opened (fatal)."""


class SheetReadError(Exception):
    """Raised when row extraction of a single sheet fails (sheet is skipped)."""


class RowSource(Protocol):
    """Contract consumed by the pipeline producer."""

    def sheet_names(self) -> list[str]:
        ...

    def rows(self, sheet_name: str) -> list[tuple[int, tuple[str, ...]]]:
        """Return ``(position, cells)`` pairs up to the last non-empty row, header included."""
        ...

    def close(self) -> None:
        ...


def cell_to_text(value: Any) -> str:
    """Render a raw pandas cell value as displayed text."""
    if value is None or value is pd.NaT:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
        return str(value)
    if isinstance(value, (datetime, date)):
        # pd.Timestamp is a datetime subclass
        return f"{value.day}/{value.month}/{value.year}"
    return str(value)


def _trim_trailing(cells: list[str]) -> tuple[str, ...]:
    end = len(cells)
    while end > 0 and cells[end - 1] == "":
        end -= 1
    return tuple(cells[:end])


class ExcelRowSource:
    """Workbook opened with ``pd.ExcelFile``.

    Use ``open_excel_source`` (or the class directly) as a context manager so
    the underlying file handle is released.
    """

    def __init__(self, path: Path) -> None:
        self.path = path
        try:
            self._xls = pd.ExcelFile(path)
        except FileNotFoundError as e:
            raise SourceOpenError(f"file not found: {path}") from e
        except Exception as e:
            raise SourceOpenError(f"cannot open workbook {path}: {e}") from e

    def sheet_names(self) -> list[str]:
        return [str(name) for name in self._xls.sheet_names]

    def rows(self, sheet_name: str) -> list[tuple[int, tuple[str, ...]]]:
        try:
            # Raw read: no header inference, no NA string conversion
            df = self._xls.parse(sheet_name, header=None, dtype=object, keep_default_na=False)
        except Exception as e:
            raise SheetReadError(f"error getting rows from sheet {sheet_name}: {e}") from e

        result = [
            (position, _trim_trailing([cell_to_text(v) for v in raw]))
            for position, raw in enumerate(df.itertuples(index=False, name=None))
        ]
        while result and not result[-1][1]:
            result.pop()
        return result

    def close(self) -> None:
        self._xls.close()

    def __enter__(self) -> ExcelRowSource:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()


def open_excel_source(path: Path | str) -> ExcelRowSource:
    """Open a workbook as a Row Source.

    Raises:
        SourceOpenError: if the file is missing or is not a readable workbook
    """
    return ExcelRowSource(Path(path))
