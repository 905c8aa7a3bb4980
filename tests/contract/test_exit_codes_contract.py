from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from entry_validator.cli import main as cli_main
from entry_validator.excel.reader import ExcelRowSource
from entry_validator.logging.init import reset_logging
from entry_validator.services.pipeline import PipelineError

"""Exit code contract: 0 all rows valid, 2 row errors, 1 fatal."""


def test_exit_code_all_success(temp_workdir: Path, make_workbook, valid_row, capsys):
    reset_logging()
    path = make_workbook(temp_workdir / "data" / "ok.xlsx", {"S": [[f"h{i}" for i in range(15)], valid_row()]})

    assert cli_main(["--file", str(path)]) == 0
    assert "SUMMARY rows=1 valid=1 errors=0" in capsys.readouterr().out


def test_exit_code_row_errors(sample_workbook: Path, capsys):
    reset_logging()
    assert cli_main(["--file", str(sample_workbook)]) == 2
    assert "SUMMARY rows=4 valid=2 errors=2" in capsys.readouterr().out


def test_exit_code_skipped_sheet_only_is_success(temp_workdir: Path, make_workbook, valid_row, capsys):
    reset_logging()
    path = make_workbook(
        temp_workdir / "data" / "two.xlsx",
        {"A": [[f"h{i}" for i in range(15)], valid_row()], "B": [["x"]]},
    )
    real_rows = ExcelRowSource.rows

    def rows(self, sheet_name):
        if sheet_name == "B":
            raise OSError("broken sheet")
        return real_rows(self, sheet_name)

    with patch("entry_validator.excel.reader.ExcelRowSource.rows", rows):
        code = cli_main(["--file", str(path)])
    out = capsys.readouterr().out

    assert code == 0
    assert "WARN skipping sheet B: broken sheet" in out
    assert "skipped_sheets=1" in out


def test_exit_code_fatal_not_a_workbook(temp_workdir: Path, capsys):
    reset_logging()
    bogus = temp_workdir / "data" / "notes.xlsx"
    bogus.write_text("not a zip archive", encoding="utf-8")

    assert cli_main(["--file", str(bogus)]) == 1
    assert "ERROR source: cannot open workbook" in capsys.readouterr().out


def test_exit_code_fatal_processing(sample_workbook: Path, capsys):
    reset_logging()
    with patch(
        "entry_validator.services.pipeline.PipelineRun.result",
        side_effect=PipelineError("pipeline run failed: boom"),
    ):
        code = cli_main(["--file", str(sample_workbook)])
    out = capsys.readouterr().out

    assert code == 1
    assert "ERROR processing: pipeline run failed: boom" in out
    assert "SUMMARY" not in out
