from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

from entry_validator.models.processing_result import RunResult
from entry_validator.services.summary import render_summary_line

SUMMARY_PATTERN = re.compile(
    r"^SUMMARY rows=([0-9]+) valid=([0-9]+) errors=([0-9]+) sheets=([0-9]+) "
    r"skipped_sheets=([0-9]+) elapsed_sec=([0-9]+\.?[0-9]*) throughput_rps=([0-9]+\.?[0-9]*)$"
)

START = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


def _result(rows: int, valid: int, seconds: float, skipped: int = 0) -> RunResult:
    return RunResult.build(
        total_rows=rows,
        valid_entries=valid,
        errors=rows - valid,
        total_sheets=2,
        skipped_sheets=skipped,
        start_time=START,
        end_time=START + timedelta(seconds=seconds),
    )


def test_render_integer_values():
    line = render_summary_line(_result(1000, 990, 2))
    assert line == (
        "SUMMARY rows=1000 valid=990 errors=10 sheets=2 skipped_sheets=0 "
        "elapsed_sec=2 throughput_rps=500"
    )
    assert SUMMARY_PATTERN.match(line)


def test_render_fractional_values():
    match = SUMMARY_PATTERN.match(render_summary_line(_result(10, 7, 3, skipped=1)))
    assert match
    assert match.group(3) == "3"
    assert match.group(5) == "1"
    assert match.group(6) == "3"
    assert match.group(7) == "3.333"


def test_render_tiny_elapsed_without_scientific_notation():
    line = render_summary_line(_result(1, 1, 0.000123))
    assert "elapsed_sec=0.000123" in line
    assert "e-" not in line
    assert SUMMARY_PATTERN.match(line)


def test_render_zero_elapsed():
    line = render_summary_line(_result(0, 0, 0))
    assert "elapsed_sec=0 throughput_rps=0" in line


def test_run_result_invariants():
    result = _result(5, 3, 1)
    assert result.valid_entries + result.errors == result.total_rows
    assert result.has_errors
    assert result.throughput_rows_per_sec == 5.0
