from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Run result model for the ingestion pipeline.

Aggregates the counters collected by the orchestrator and workers into the
figures printed on the SUMMARY line.
"""

__all__ = [
    "RunResult",
]


@dataclass(frozen=True)
class RunResult:
    """Aggregated metrics of one pipeline run.

    Invariant: ``valid_entries + errors == total_rows``.
    """
    total_rows: int  # Rows enqueued by the producer
    valid_entries: int  # Entries published on the valid-record stream
    errors: int  # LinedErrors published on the error stream
    total_sheets: int  # Sheets declared by the source
    skipped_sheets: int  # Sheets whose row extraction failed
    start_time: datetime  # UTC
    end_time: datetime  # UTC
    elapsed_seconds: float
    throughput_rows_per_sec: float

    @property
    def has_errors(self) -> bool:
        return self.errors > 0

    @staticmethod
    def build(
        *,
        total_rows: int,
        valid_entries: int,
        errors: int,
        total_sheets: int,
        skipped_sheets: int,
        start_time: datetime,
        end_time: datetime,
    ) -> RunResult:
        """Create a RunResult deriving elapsed time and throughput."""
        elapsed = (end_time - start_time).total_seconds()
        # Avoid division by zero on instantaneous runs
        throughput = total_rows / elapsed if elapsed > 0 else 0.0
        return RunResult(
            total_rows=total_rows,
            valid_entries=valid_entries,
            errors=errors,
            total_sheets=total_sheets,
            skipped_sheets=skipped_sheets,
            start_time=start_time,
            end_time=end_time,
            elapsed_seconds=elapsed,
            throughput_rows_per_sec=throughput,
        )
