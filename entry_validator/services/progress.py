from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

The total number of rows is unknown while the producer is still reading the
workbook, so the bar is an open-ended counter of consumed outcomes with the
valid/error split shown as postfix. In non-TTY environments (CI, redirected
output) no bar is created to avoid ANSI control sequence spam.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Return True if stdout is a TTY and progress should be displayed."""
    return sys.stdout.isatty()


class ProgressTracker:
    """Row counter fed by the consumer of the pipeline output streams."""

    def __init__(self, *, description: str = "Validating rows", refresh_every: int = 100) -> None:
        self.description = description
        self.refresh_every = refresh_every
        self.valid = 0
        self.errors = 0

        self.enabled = is_tty_enabled()
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=None,
                desc=description,
                unit="row",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    @property
    def processed(self) -> int:
        return self.valid + self.errors

    def record(self, *, valid: bool) -> None:
        """Count one consumed outcome."""
        if valid:
            self.valid += 1
        else:
            self.errors += 1

        if self.enabled and self.pbar is not None:
            self.pbar.update(1)
            # postfix refreshed every refresh_every rows
            if self.processed % self.refresh_every == 0:
                self.pbar.set_postfix(valid=self.valid, errors=self.errors)

    def close(self) -> None:
        if self.enabled and self.pbar is not None:
            self.pbar.set_postfix(valid=self.valid, errors=self.errors)
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
