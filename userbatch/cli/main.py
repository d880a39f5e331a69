from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import DEFAULT_CONFIG_PATH, ConfigError, load_config
from ..logging.init import log_summary, setup_logging
from ..services.orchestrator import VerificationError, verify_all
from ..services.summary import render_summary_line, render_table_line

"""CLI entrypoint.

Flow:
- Load .env (USERBATCH_CONFIG may point at the config file)
- Load and validate config
- Verify the Create / Update tables of each workbook
- Print per-table lines, optional JSON, and the SUMMARY line
"""

__all__ = [
    "main",
    "EXIT_SUCCESS_ALL",
    "EXIT_FATAL",
    "EXIT_PROBLEMS",
]

EXIT_SUCCESS_ALL = 0
EXIT_FATAL = 1
EXIT_PROBLEMS = 2

CONFIG_ENV_VAR = "USERBATCH_CONFIG"


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="userbatch-verify",
        description="Verify Create / Update user tables in Excel workbooks",
    )
    p.add_argument("paths", nargs="*", type=Path, help="Workbooks to verify (default: scan source_directory)")
    p.add_argument("--config", type=Path, default=None, help="Config file (default: config/verify.yml)")
    p.add_argument("--table", choices=["create", "update", "all"], default="all", help="Table(s) to verify")
    p.add_argument("--json", action="store_true", help="Print one JSON object per verified table")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_config_path(arg: Path | None) -> Path:
    if arg is not None:
        return arg
    env_path = os.getenv(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return DEFAULT_CONFIG_PATH


def main(argv: list[str] | None = None) -> int:
    # None のときのみ sys.argv を読む ([] はテストからの明示呼び出し)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    logger.debug("debug mode enabled")

    load_dotenv(dotenv_path=Path(".env"), override=False)
    config_path = _resolve_config_path(args.config)
    try:
        cfg = load_config(config_path)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    paths: list[Path] | None = list(args.paths) or None
    if paths is None:
        directory = Path(cfg.source_directory)
        if not directory.exists():
            logger.error(f"directory not found: {directory}")
            return EXIT_FATAL
        logger.info(f"Verifying workbooks in: {directory}")

    table_keys = None if args.table == "all" else [args.table]
    try:
        run = verify_all(cfg, paths=paths, table_keys=table_keys)
    except VerificationError as e:
        logger.error(f"verification: {e}")
        return EXIT_FATAL

    for wb in run.workbooks:
        if wb.error:
            logger.error(f"file={wb.name} status={wb.status.value} error={wb.error}")
        for report in wb.tables:
            logger.info(render_table_line(wb.name, report))
            if args.json:
                print(json.dumps(
                    {
                        "file": wb.name,
                        "table": report.table,
                        "sheet": report.sheet,
                        "result": report.result.to_dict(),
                        "annotations": {str(k): v for k, v in report.annotations.items()},
                    },
                    ensure_ascii=False,
                ))

    summary_line = render_summary_line(run)
    # log_summary adds the "SUMMARY " label itself
    log_summary(summary_line.removeprefix("SUMMARY "))

    return EXIT_SUCCESS_ALL if run.success else EXIT_PROBLEMS
