"""
rxren.worker

Rename workers: pull entries from the work queue, filter them by extension
and name pattern, compute the new name and apply (or simulate) the rename.

Rename failures are never fatal. A failed entry carries the reason in
`Entry.error`, is logged, and is still forwarded so the printer reports it.
"""

from __future__ import annotations

import os
import queue
import threading
from typing import Optional, Set

from rxcommon.base.logging import get_logger

from .models import Entry, RenameConfig
from .walker import SENTINEL

log = get_logger(__name__)


def compute_new_name(config: RenameConfig, name: str) -> Optional[str]:
    """Return the replacement name, or None when the entry is filtered out."""
    if config.ext_pattern is not None and not config.ext_pattern.search(name):
        return None
    if not config.match.search(name):
        return None
    return config.template.sub(config.match, name)


def _invalid_target(new_name: str) -> bool:
    if new_name in {"", ".", ".."}:
        return True
    return os.sep in new_name or (os.altsep is not None and os.altsep in new_name)


def _is_same_object(path: str, newpath: str) -> bool:
    try:
        return os.path.samestat(os.lstat(path), os.lstat(newpath))
    except OSError:
        return False


class TargetGuard:
    """
    Shared by all workers of a run. The existence check and the rename happen
    under one lock, so two sources can never both claim the same free target.
    In dry-run mode targets planned earlier in the run count as taken.
    """

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.planned: Set[str] = set()

    def is_taken(self, entry: Entry, dry_run: bool) -> bool:
        if dry_run and entry.newpath in self.planned:
            return True
        return os.path.lexists(entry.newpath) and not _is_same_object(entry.path, entry.newpath)


def rename_entry(config: RenameConfig, entry: Entry, guard: Optional[TargetGuard] = None) -> Optional[Entry]:
    """
    Process one entry. Returns None when the entry does not match, otherwise
    the entry with `newpath` set and `error` filled in on failure.
    """
    new_name = compute_new_name(config, entry.name)
    if new_name is None:
        return None
    if guard is None:
        guard = TargetGuard()

    entry.dry_run = config.dry_run
    entry.newpath = os.path.normpath(os.path.join(os.path.dirname(entry.path), new_name))

    if _invalid_target(new_name):
        entry.newpath = os.path.join(os.path.dirname(entry.path), new_name)
        entry.error = "invalid target name"
    elif new_name == entry.name:
        entry.newpath = entry.path
        return entry
    else:
        with guard.lock:
            if not config.overwrite and guard.is_taken(entry, config.dry_run):
                entry.error = "target exists"
            elif config.dry_run:
                guard.planned.add(entry.newpath)
            else:
                try:
                    os.rename(entry.path, entry.newpath)
                except OSError as exc:
                    entry.error = exc.strerror or str(exc)

    if entry.error:
        log.error(f"Rename failed {entry.path} → {entry.newpath}: {entry.error}")
    elif config.dry_run:
        log.debug(f"[DRY-RUN] Would rename {entry.path} → {entry.newpath}")
    else:
        log.debug(f"Renamed {entry.path} → {entry.newpath}")
    return entry


class RenameWorker(threading.Thread):
    """
    One consumer of the work queue. On the sentinel it puts the sentinel back
    for its siblings and exits.

    If processing raises unexpectedly, the exception is kept in `self.error`
    and the worker keeps draining input (without processing) until the
    sentinel so the walker never blocks on a full queue. The same draining
    happens once `abort` is set.
    """

    def __init__(
        self,
        index: int,
        config: RenameConfig,
        work_queue: "queue.Queue[Optional[Entry]]",
        result_queue: "queue.Queue[Optional[Entry]]",
        abort: threading.Event,
        guard: Optional[TargetGuard] = None,
    ):
        super().__init__(name=f"rename-worker-{index}", daemon=True)
        self.config = config
        self.work_queue = work_queue
        self.result_queue = result_queue
        self.abort = abort
        self.guard = guard or TargetGuard()
        self.error: Optional[BaseException] = None
        self.processed = 0

    def run(self) -> None:
        while True:
            entry = self.work_queue.get()
            if entry is SENTINEL:
                self.work_queue.put(SENTINEL)
                break
            if self.error is not None or self.abort.is_set():
                continue
            try:
                result = rename_entry(self.config, entry, self.guard)
            except Exception as exc:
                log.error(f"{self.name} crashed on {entry.path}: {exc}", exc_info=True)
                self.error = exc
                continue
            if result is not None:
                self.processed += 1
                self.result_queue.put(result)
        log.debug(f"{self.name} finished ({self.processed} forwarded)")
