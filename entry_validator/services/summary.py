from __future__ import annotations

from ..models.processing_result import RunResult

"""Summary line rendering for the entry validator.

Format:
SUMMARY rows={rows} valid={valid} errors={errors} sheets={sheets}
skipped_sheets={skipped} elapsed_sec={elapsed} throughput_rps={throughput}
(single line, fields separated by one space)
"""


def _format_number(value: float) -> str:
    """Integers without decimals, tiny values without scientific notation."""
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        return f"{value:.6f}".rstrip("0").rstrip(".")
    return str(round(value, 3))


def render_summary_line(result: RunResult) -> str:
    """Render a SUMMARY line from a RunResult.

    Examples:
        >>> from datetime import datetime, timezone
        >>> start = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        >>> end = datetime(2024, 1, 1, 10, 0, 2, tzinfo=timezone.utc)
        >>> result = RunResult.build(
        ...     total_rows=1000, valid_entries=990, errors=10, total_sheets=2,
        ...     skipped_sheets=0, start_time=start, end_time=end,
        ... )
        >>> render_summary_line(result)
        'SUMMARY rows=1000 valid=990 errors=10 sheets=2 skipped_sheets=0 elapsed_sec=2 throughput_rps=500'
    """
    return (
        f"SUMMARY rows={result.total_rows} "
        f"valid={result.valid_entries} "
        f"errors={result.errors} "
        f"sheets={result.total_sheets} "
        f"skipped_sheets={result.skipped_sheets} "
        f"elapsed_sec={_format_number(result.elapsed_seconds)} "
        f"throughput_rps={_format_number(result.throughput_rows_per_sec)}"
    )
