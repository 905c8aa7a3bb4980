from __future__ import annotations

import argparse
import sys
from collections.abc import Iterable
from pathlib import Path

from dotenv import load_dotenv

from entry_validator.config.loader import ConfigError, apply_overrides, load_config
from entry_validator.excel.reader import SourceOpenError, open_excel_source
from entry_validator.logging.error_log import ErrorSink, ErrorSinkError
from entry_validator.logging.init import log_summary, set_debug, setup_logging
from entry_validator.models.config_models import ERROR_FORMATS
from entry_validator.models.lined_error import LinedError
from entry_validator.services.pipeline import EntryPipeline, PipelineError
from entry_validator.services.progress import ProgressTracker
from entry_validator.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, YAML config and CLI overrides
- Open the error report (append mode) and the workbook
- Run the pipeline, writing every LinedError to the report and counting entries
- Print the SUMMARY line

Exit codes: 0 every row valid, 2 at least one row error, 1 fatal.
"""

EXIT_SUCCESS_ALL = 0
EXIT_ROW_ERRORS = 2
EXIT_FATAL = 1

INSPECT_SAMPLE_ROWS = 3


def _load_env_file(path: Path) -> None:
    """Load .env via python-dotenv without overriding variables already set."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Validate medicine delivery entries from an Excel workbook")
    p.add_argument("--file", required=True, help="Path to the .xlsx workbook")
    p.add_argument("--output", help="Error report path (appended to; default errors.txt)")
    p.add_argument("--workers", type=int, help="Number of worker threads (default 10)")
    p.add_argument("--config", help="YAML config path (default config/validator.yml if present)")
    p.add_argument("--format", choices=ERROR_FORMATS, help="Error report format")
    p.add_argument("--sort-errors", action="store_true", help="Sort the error report by sheet and line")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument("--inspect-data", action="store_true", help="Print sheet names & first rows then exit")
    return p.parse_args(argv)


def _inspect_data(path: Path) -> int:
    try:
        source = open_excel_source(path)
    except SourceOpenError as e:
        print(f"inspect: {e}")
        return EXIT_FATAL
    with source:
        for name in source.sheet_names():
            try:
                rows = source.rows(name)
            except Exception as e:
                print(f"  SHEET: {name} error={e}")
                continue
            header = rows[0][1] if rows and rows[0][0] == 0 else ()
            print(f"  SHEET: {name} header_cells={len(header)} rows={len(rows)}")
            for position, cells in rows[1 : 1 + INSPECT_SAMPLE_ROWS]:
                print(f"    {position}: {list(cells)}")
    return EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # None only: an explicit [] must not fall back to sys.argv (pytest args)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    try:
        cfg = load_config(Path(args.config) if args.config else None)
        cfg = apply_overrides(
            cfg,
            workers=args.workers,
            output=args.output,
            error_format=args.format,
            sort_errors=True if args.sort_errors else None,
        )
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.debug:
        set_debug(logger)
        logger.debug("debug mode enabled")

    source_path = Path(args.file)
    if args.inspect_data:
        return _inspect_data(source_path)

    pipeline = EntryPipeline.from_config(cfg)
    logger.info(f"Validating entries from: {source_path} (workers={cfg.workers})")

    try:
        with ErrorSink(Path(cfg.output), error_format=cfg.error_format) as sink:
            try:
                run = pipeline.parse_file(source_path)
            except SourceOpenError as e:
                logger.error(f"source: {e}")
                return EXIT_FATAL

            with ProgressTracker() as progress:
                for _ in run.entries:
                    progress.record(valid=True)
                errors: Iterable[LinedError] = run.errors
                if cfg.sort_errors:
                    errors = sorted(errors, key=LinedError.sort_key)
                for err in errors:
                    sink.append(err)
                    progress.record(valid=False)
    except ErrorSinkError as e:
        logger.error(f"output: {e}")
        return EXIT_FATAL

    try:
        result = run.result()
    except PipelineError as e:
        logger.error(f"processing: {e}")
        return EXIT_FATAL

    if result.errors:
        logger.info(f"{result.errors} row error(s) written to {cfg.output}")

    summary_line = render_summary_line(result)
    # log_summary adds the "SUMMARY " prefix
    log_summary(summary_line[len("SUMMARY "):])

    return EXIT_ROW_ERRORS if result.has_errors else EXIT_SUCCESS_ALL


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
