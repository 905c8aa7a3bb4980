# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable, Sequence
from pathlib import Path

import pandas as pd
import pytest

HEADER = [
    "PRIMER NOMBRE",
    "SEGUNDO NOMBRE",
    "PRIMER APELLIDO",
    "SEGUNDO APELLIDO",
    "FECHA NACIMIENTO",
    "MEDICAMENTO",
    "FECHA ENTREGA",
    "MOTIVO",
    "TIPO DOCUMENTO",
    "NUMERO DOCUMENTO",
    "DIRECCION",
    "LOCALIDAD",
    "SUBRED",
    "FECHA ORDEN",
    "PRIORIDAD",
]

VALID_ROW = [
    "Ana",
    "María",
    "Pérez",
    "Gómez",
    "15/03/1950",
    "LOSARTAN 50MG",
    "20/01/2024",
    "1. PERSONA MAYOR DE 60 AÑOS",
    "CC",
    "52123456",
    "CALLE 1 # 2-3",
    "USAQUÉN",
    "NORTE",
    "10/01/2024",
    "SI",
]


class FakeRowSource:
    """In-memory Row Source.

    ``sheets`` maps sheet name -> list of rows (header first), or an
    Exception instance to raise from ``rows()`` for that sheet.
    """

    def __init__(self, sheets: dict[str, list[Sequence[str]] | Exception]) -> None:
        self.sheets = sheets
        self.closed = False
        self.rows_calls: list[str] = []

    def sheet_names(self) -> list[str]:
        return list(self.sheets)

    def rows(self, sheet_name: str) -> list[tuple[int, tuple[str, ...]]]:
        self.rows_calls.append(sheet_name)
        data = self.sheets[sheet_name]
        if isinstance(data, Exception):
            raise data
        return [(i, tuple(r)) for i, r in enumerate(data)]

    def close(self) -> None:
        self.closed = True


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def valid_row() -> Callable[..., list[str]]:
    """Factory returning a valid row, with cells overridden by column index."""

    def make(overrides: dict[int, str] | None = None) -> list[str]:
        row = list(VALID_ROW)
        for index, value in (overrides or {}).items():
            row[index] = value
        return row

    return make


@pytest.fixture()
def make_workbook() -> Callable[[Path, dict[str, list[list[object]]]], Path]:
    """Write an .xlsx with one sheet per key (rows written as-is, no pandas header)."""

    def make(path: Path, sheets: dict[str, list[list[object]]]) -> Path:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
        return path

    return make


@pytest.fixture()
def sample_workbook(temp_workdir: Path, make_workbook) -> Path:
    """Sheet "A": header + 2 valid rows + 1 short row; sheet "B": header + 1 bad document number."""
    bad_doc = list(VALID_ROW)
    bad_doc[9] = "AB 12"
    return make_workbook(
        temp_workdir / "data" / "entregas.xlsx",
        {
            "A": [HEADER, VALID_ROW, VALID_ROW, VALID_ROW[:10]],
            "B": [HEADER, bad_doc],
        },
    )


@pytest.fixture()
def write_config(temp_workdir: Path) -> Callable[[str], Path]:
    def write(text: str) -> Path:
        cfg = temp_workdir / "config" / "validator.yml"
        cfg.write_text(text, encoding="utf-8")
        return cfg

    return write


@pytest.fixture()
def fake_source() -> type[FakeRowSource]:
    return FakeRowSource
