"""
rxren.pipeline

Wires walker → rename workers → result printer:

  1. start the printer and `config.workers` worker threads sharing one
     TargetGuard (no two workers can claim the same target)
  2. walk every root on the calling thread, then close the work queue
  3. join the workers, push the end-of-stream marker into the result queue
  4. join the printer

A walk failure sets the abort flag so workers drain the rest of the queue
without renaming anything, shuts the pipeline down in the same order and
re-raises. Renames already done stay done.
"""

from __future__ import annotations

import queue
import threading
from typing import Iterable, List, Optional, TextIO

from rxcommon.base.logging import get_logger

from .errors import WalkError, WorkerError
from .models import Entry, RenameConfig, RunSummary
from .printer import ResultPrinter
from .walker import SENTINEL, Walker
from .worker import RenameWorker, TargetGuard

log = get_logger(__name__)


def run_rename(
    config: RenameConfig,
    patterns: Iterable[str],
    out: Optional[TextIO] = None,
    *,
    collect: bool = False,
    progress: bool = False,
    cwd: Optional[str] = None,
) -> RunSummary:
    """
    Rename everything under `patterns` according to `config`.

    Returns:
        RunSummary with visited/matched/renamed/failed counts (and per-entry
        rows when `collect` is set).

    Raises:
        WalkError: a root could not be traversed; the run was aborted.
        WorkerError: a worker crashed; its remaining input was discarded.
    """
    summary = RunSummary(dry_run=config.dry_run)
    work_queue: "queue.Queue[Optional[Entry]]" = queue.Queue(maxsize=config.queue_size)
    result_queue: "queue.Queue[Optional[Entry]]" = queue.Queue(maxsize=config.queue_size)
    abort = threading.Event()
    guard = TargetGuard()

    printer = ResultPrinter(result_queue, summary, out, collect=collect, progress=progress, cwd=cwd)
    printer.start()

    workers: List[RenameWorker] = [
        RenameWorker(index, config, work_queue, result_queue, abort, guard)
        for index in range(1, config.workers + 1)
    ]
    for worker in workers:
        worker.start()
    log.debug(f"Started {len(workers)} rename workers (queue size {config.queue_size})")

    walker = Walker(work_queue, config.filter_mode, bottom_up=config.bottom_up)
    walk_error: Optional[WalkError] = None
    try:
        walker.run(patterns)
    except WalkError as exc:
        walk_error = exc
        abort.set()
        walker.close()
    finally:
        summary.visited = walker.visited

    for worker in workers:
        worker.join()
    result_queue.put(SENTINEL)
    printer.join()

    if walk_error is not None:
        raise walk_error

    crashed = [worker for worker in workers if worker.error is not None]
    if crashed:
        first = crashed[0]
        raise WorkerError(f"{first.name} crashed: {first.error}") from first.error

    return summary
