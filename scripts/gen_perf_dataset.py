#!/usr/bin/env python3
"""Dataset generation script for throughput testing.

Generates a synthetic delivery-entries workbook in the layout the validator
expects:
- Row 1: Header row with the 15 column names
- Row 2+: Data rows (mostly valid, a configurable share deliberately broken)

Broken rows cycle through the rule violations the validator reports, so a run
over the generated file exercises every error path.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path

import numpy as np
import pandas as pd

from entry_validator.models.vocabulary import (
    DISTRICTS,
    DIVISIONS,
    DOCUMENT_TYPES,
    MOTIVES,
    PRIORITY_MOTIVES,
    PRIORITY_NO,
    PRIORITY_YES,
)

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

FIRST_NAMES = ["Ana", "Luis", "María", "Jorge", "Camila", "Andrés", "Sofía", "Julián"]
LAST_NAMES = ["Pérez", "Gómez", "Rodríguez", "López", "Martínez", "Díaz", "Torres"]
MEDICINES = ["LOSARTAN 50MG", "METFORMINA 850MG", "ACETAMINOFEN 500MG", "OMEPRAZOL 20MG"]


def _date_text(rng: np.random.Generator, start: str, end: str) -> str:
    days = (pd.Timestamp(end) - pd.Timestamp(start)).days
    day = pd.Timestamp(start) + pd.Timedelta(days=int(rng.integers(0, days)))
    return f"{day.day:02d}/{day.month:02d}/{day.year}"


def _valid_row(rng: np.random.Generator) -> list[str]:
    motive = str(rng.choice(MOTIVES))
    return [
        str(rng.choice(FIRST_NAMES)),
        str(rng.choice(FIRST_NAMES)) if rng.random() < 0.5 else "",
        str(rng.choice(LAST_NAMES)),
        str(rng.choice(LAST_NAMES)),
        _date_text(rng, "1930-01-01", "2015-12-31"),
        str(rng.choice(MEDICINES)),
        _date_text(rng, "2024-01-01", "2024-12-31"),
        motive,
        str(rng.choice(DOCUMENT_TYPES)),
        str(rng.integers(1_000_000, 99_999_999)),
        f"CALLE {rng.integers(1, 200)} # {rng.integers(1, 99)}-{rng.integers(1, 99)}",
        str(rng.choice(DISTRICTS)),
        str(rng.choice(DIVISIONS)),
        _date_text(rng, "2023-06-01", "2023-12-31"),
        PRIORITY_YES if motive in PRIORITY_MOTIVES else PRIORITY_NO,
    ]


def _break_row(row: list[str], kind: int) -> list[str]:
    """Apply one of the known rule violations to a valid row."""
    broken = list(row)
    if kind == 0:
        return broken[:10]  # wrong cell count
    if kind == 1:
        broken[4] = "31/02/1980"
    elif kind == 2:
        broken[0] = ""
    elif kind == 3:
        broken[12] = "ESTE"
    elif kind == 4:
        broken[9] = f"{broken[9][:3]} {broken[9][3:]}"
    else:
        broken[14] = PRIORITY_NO if broken[14] == PRIORITY_YES else PRIORITY_YES
    return broken


VIOLATION_KINDS = 6


def generate_rows(rows: int, invalid_ratio: float, seed: int = 42) -> list[list[str]]:
    """Generate ``rows`` data rows, about ``invalid_ratio`` of them invalid.

    Args:
        rows: Number of data rows to generate
        invalid_ratio: Share of rows (0..1) carrying one rule violation
        seed: Random seed for reproducible data

    Returns:
        List of rows, each a list of cell texts
    """
    rng = np.random.default_rng(seed)
    broken_mask = rng.random(rows) < invalid_ratio
    result = []
    for i in range(rows):
        row = _valid_row(rng)
        if broken_mask[i]:
            row = _break_row(row, i % VIOLATION_KINDS)
        result.append(row)
    return result


def create_excel_file(
    output_path: Path,
    rows: int,
    sheets: list[str],
    invalid_ratio: float,
    seed: int = 42,
) -> None:
    """Create the workbook, one header + ``rows`` data rows per sheet."""
    output_path.parent.mkdir(parents=True, exist_ok=True)

    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        for offset, sheet_name in enumerate(sheets):
            sheet_rows = [HEADER, *generate_rows(rows, invalid_ratio, seed + offset)]
            pd.DataFrame(sheet_rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)

    print(f"Created Excel file: {output_path}")
    print(f"  Sheets: {len(sheets)} ({', '.join(sheets)})")
    print(f"  Rows per sheet: {rows} (+ 1 header row)")
    print(f"  Invalid ratio: {invalid_ratio:.2%}")


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Generate a synthetic delivery-entries workbook for throughput testing",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # 50k rows, 5%% invalid
  %(prog)s data/entries.xlsx

  # Two sheets, 20%% invalid
  %(prog)s data/mixed.xlsx --rows 10000 --sheets ENERO FEBRERO --invalid-ratio 0.2
        """,
    )
    parser.add_argument("output", type=Path, help="Output Excel file path")
    parser.add_argument("--rows", type=int, default=50_000, help="Data rows per sheet (default: 50,000)")
    parser.add_argument("--sheets", nargs="+", default=["ENTREGAS"], help="Sheet names (default: ENTREGAS)")
    parser.add_argument("--invalid-ratio", type=float, default=0.05, help="Share of invalid rows (default: 0.05)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    parser.add_argument("--dry-run", action="store_true", help="Show the plan without creating files")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if not 0.0 <= args.invalid_ratio <= 1.0:
        print("Error: --invalid-ratio must be between 0 and 1", file=sys.stderr)
        return 1

    print("Dataset generation plan:")
    print(f"  Output file: {args.output}")
    print(f"  Sheets: {len(args.sheets)} ({', '.join(args.sheets)})")
    print(f"  Rows per sheet: {args.rows:,}")
    print(f"  Random seed: {args.seed}")

    if args.dry_run:
        print("\n[DRY RUN] Would generate files but not creating them.")
        return 0

    try:
        create_excel_file(args.output, args.rows, args.sheets, args.invalid_ratio, args.seed)
    except OSError as e:
        print(f"\nError generating dataset: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
