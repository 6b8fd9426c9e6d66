"""
rxren.cli

Command-line entry point (`rxren` console script).

    rxren -match '(.*)\\.txt$' -replace '$1.bak' -forext txt 'photos/*'

Option values come from the command line first, then from the `tasks.rename`
section of the YAML config, then from built-in defaults.

Exit codes: 0 success, 1 failed renames or aborted run, 2 usage errors,
130 interrupted.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import argcomplete

from rxcommon.base.logging import get_logger, setup_logging
from rxcommon.shared.loader import load_task_config, merge_overrides
from rxcommon.shared.report import export_report, summarize_counts

from .errors import ConfigError, RenameToolError
from .models import RenameConfig
from .pipeline import run_rename

log = get_logger(__name__)

TASK_NAME = "rename"
REPORT_BASE_NAME = "rename_report"
REPORT_COLUMNS = ["path", "newpath", "type", "status", "message"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rxren",
        description="Rename files and directories under the given roots with a regular expression.",
        allow_abbrev=False,
    )
    parser.add_argument("paths", nargs="*", help="Root paths to walk (glob patterns allowed).")
    parser.add_argument("-match", "--match", dest="match", help="Regular expression matched against each name (default: '.').")
    parser.add_argument("-replace", "--replace", dest="replace", help="Replacement; $1, ${1}, $name and $$ are expanded.")
    scope = parser.add_mutually_exclusive_group()
    scope.add_argument("-fileonly", "--file-only", dest="fileonly", action="store_true", default=None, help="Only rename non-directories.")
    scope.add_argument("-dironly", "--dir-only", dest="dironly", action="store_true", default=None, help="Only rename directories.")
    parser.add_argument("-forext", "--for-ext", dest="forext", help="Only consider names ending in '.<ext>'.")
    parser.add_argument("-dryrun", "--dry-run", dest="dryrun", action="store_true", default=None, help="Print planned renames without touching the filesystem.")
    parser.add_argument("-c", "--workers", dest="workers", type=int, help="Number of concurrent rename workers (default: 2).")
    parser.add_argument("--queue-size", dest="queue_size", type=int, help="Capacity of the work and result queues (default: 1000).")
    parser.add_argument("--overwrite", action="store_true", default=None, help="Allow replacing an existing target path.")
    parser.add_argument("--bottom-up", dest="bottom_up", action="store_true", default=None, help="Visit directory contents before the directory itself.")
    parser.add_argument("--progress", action="store_true", default=None, help="Show a progress counter on stderr.")
    parser.add_argument("--report", dest="report_dir", type=Path, help="Write a CSV report of the run into this directory.")
    parser.add_argument("--config", help="Path to YAML configuration (defaults to configs/config.yaml when present).")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging verbosity (default: from config, else INFO).",
    )
    parser.add_argument("--log-dir", help="Also write a per-run log file into this directory.")
    return parser


def _configure_logging(logging_cfg: Dict[str, Any], args: argparse.Namespace) -> None:
    setup_logging(
        level=args.log_level or logging_cfg.get("level"),
        use_rich=logging_cfg.get("use_rich"),
        log_dir=args.log_dir or logging_cfg.get("log_dir"),
        file_prefix=logging_cfg.get("file_prefix"),
    )


def _cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    keys = (
        "match", "replace", "fileonly", "dironly", "forext", "dryrun",
        "workers", "queue_size", "overwrite", "bottom_up", "progress", "report_dir",
    )
    overrides = {key: getattr(args, key) for key in keys}
    if args.paths:
        overrides["roots"] = list(args.paths)
    return overrides


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    argcomplete.autocomplete(parser)
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        task_cfg = load_task_config(TASK_NAME, args.config)
    except (OSError, ValueError) as exc:
        parser.error(f"invalid configuration: {exc}")

    _configure_logging(task_cfg.get("__logging__") or {}, args)

    settings = merge_overrides(task_cfg, _cli_overrides(args))
    patterns = settings.get("roots") or []
    if not patterns:
        parser.error("at least one root path is required")

    try:
        config = RenameConfig.from_mapping(settings)
    except ConfigError as exc:
        parser.error(str(exc))

    report_dir = settings.get("report_dir")
    log.info(f"🚀 Renaming under {len(patterns)} root pattern(s) with {config.workers} worker(s)")
    if config.dry_run:
        log.info("[DRY-RUN] No changes will be applied.")
    log.debug(f"Settings: {settings}")

    try:
        summary = run_rename(
            config,
            patterns,
            collect=report_dir is not None,
            progress=bool(settings.get("progress")),
        )
    except KeyboardInterrupt:
        log.warning("⚠️ Operation cancelled by user.")
        return 130
    except RenameToolError as exc:
        log.error(f"❌ Run aborted: {exc}")
        return 1

    if report_dir is not None:
        export_report(summary.rows, REPORT_BASE_NAME, Path(report_dir), fieldnames=REPORT_COLUMNS)

    log.info(summarize_counts("Rename Summary", summary.counts()))
    if not summary.ok:
        log.warning(f"{summary.failed} rename(s) failed")
        return 1
    return 0
