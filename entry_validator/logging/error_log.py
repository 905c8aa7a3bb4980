from __future__ import annotations

from pathlib import Path
from typing import IO

from ..models.config_models import ERROR_FORMATS
from ..models.lined_error import LinedError

"""Error sink: append-only writer for the per-row error report.

Two line formats are supported:
- ``text``: ``<page>:<line>: <description>``
- ``jsonl``: one JSON object per line (keys: page, line, error_type, message)

The sink is opened and closed by the caller (the CLI), never by the pipeline.
Errors are buffered and written on ``flush()`` / ``close()``.
"""

__all__ = [
    "ErrorSink",
    "ErrorSinkError",
]


class ErrorSinkError(Exception):
    """Raised when the error report cannot be opened or written."""


class ErrorSink:
    """Append-mode error report file.

    Usage::

        with ErrorSink(Path("errors.txt")) as sink:
            for err in run.errors:
                sink.append(err)
    """

    def __init__(self, path: Path, *, error_format: str = "text", buffer_size: int = 500) -> None:
        if error_format not in ERROR_FORMATS:
            raise ErrorSinkError(f"unknown error format: {error_format!r} (expected one of {list(ERROR_FORMATS)})")
        self.path = path
        self.error_format = error_format
        self.buffer_size = buffer_size
        self._records: list[LinedError] = []
        self._fh: IO[str] | None = None
        self.written = 0

    def open(self) -> ErrorSink:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self.path.open("a", encoding="utf-8")
        except OSError as e:
            raise ErrorSinkError(f"cannot open error output {self.path}: {e}") from e
        return self

    def format(self, record: LinedError) -> str:
        if self.error_format == "jsonl":
            return record.to_json_line()
        return record.to_line()

    def append(self, record: LinedError) -> None:
        self._records.append(record)
        if len(self._records) >= self.buffer_size:
            self.flush()

    def extend(self, records: list[LinedError]) -> None:
        for r in records:
            self.append(r)

    def __len__(self) -> int:  # pragma: no cover (trivial)
        return len(self._records)

    def flush(self) -> None:
        if not self._records:
            return
        if self._fh is None:
            raise ErrorSinkError("error sink is not open")
        try:
            for r in self._records:
                self._fh.write(self.format(r) + "\n")
            self._fh.flush()
        except OSError as e:
            raise ErrorSinkError(f"cannot write error output {self.path}: {e}") from e
        self.written += len(self._records)
        self._records.clear()

    def close(self) -> None:
        if self._fh is None:
            return
        try:
            self.flush()
        finally:
            self._fh.close()
            self._fh = None

    def __enter__(self) -> ErrorSink:
        return self.open()

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()
