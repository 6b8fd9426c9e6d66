"""
rxren.walker

Expands root arguments as glob patterns and walks every match, feeding one
Entry per visited filesystem object into the work queue.

Traversal is depth-first pre-order (a directory, then each child in lexical
order, descending into subdirectories as they come) and does not follow
symlinks. With `bottom_up=True` the children of a directory are emitted
before the directory itself.
"""

from __future__ import annotations

import glob
import os
import queue
from typing import Iterable, Iterator, List, Optional

from rxcommon.base.logging import get_logger

from .errors import WalkError
from .models import Entry, EntryInfo, FilterMode

log = get_logger(__name__)

# End-of-stream marker for both pipeline queues.
SENTINEL = None


def expand_roots(patterns: Iterable[str]) -> List[str]:
    """Resolve each argument as a glob pattern. Unmatched patterns contribute nothing."""
    roots: List[str] = []
    for pattern in patterns:
        matches = sorted(glob.glob(pattern))
        if not matches:
            log.warning(f"No match for root pattern: {pattern}")
        roots.extend(matches)
    return roots


def _snapshot(path: str) -> EntryInfo:
    try:
        return EntryInfo.from_path(path)
    except OSError as exc:
        raise WalkError(f"Cannot stat {path}: {exc}") from exc


def _list_dir(path: str) -> List[str]:
    try:
        with os.scandir(path) as it:
            return sorted(entry.name for entry in it)
    except OSError as exc:
        raise WalkError(f"Cannot read directory {path}: {exc.strerror or exc}") from exc


def _walk(path: str, info: EntryInfo, mode: FilterMode, bottom_up: bool) -> Iterator[Entry]:
    if not bottom_up and mode.accepts(info.is_dir):
        yield Entry(path=path, info=info)

    # A directory is listed only after it has been handed out, so a worker
    # may already have renamed it; that surfaces here as a WalkError.
    if info.is_dir:
        for name in _list_dir(path):
            child = os.path.join(path, name)
            yield from _walk(child, _snapshot(child), mode, bottom_up)

    if bottom_up and mode.accepts(info.is_dir):
        yield Entry(path=path, info=info)


def iter_entries(root: str, mode: FilterMode = FilterMode.BOTH, bottom_up: bool = False) -> Iterator[Entry]:
    """
    Yield an Entry for `root` and everything below it that passes `mode`.

    Raises:
        WalkError: when any directory cannot be listed or an entry vanishes
            before its metadata is read.
    """
    # "dir/" from shell completion must rename "dir", not a child of it
    root = os.path.normpath(root)
    yield from _walk(root, _snapshot(root), mode, bottom_up)


class Walker:
    """Producer stage: fills the work queue, then closes it with one sentinel."""

    def __init__(self, work_queue: "queue.Queue[Optional[Entry]]", mode: FilterMode, bottom_up: bool = False):
        self.work_queue = work_queue
        self.mode = mode
        self.bottom_up = bottom_up
        self.visited = 0

    def run(self, patterns: Iterable[str]) -> int:
        for root in expand_roots(patterns):
            log.debug(f"Walking {root}")
            for entry in iter_entries(root, self.mode, self.bottom_up):
                self.work_queue.put(entry)
                self.visited += 1
        self.close()
        log.debug(f"Walk finished: {self.visited} entries queued")
        return self.visited

    def close(self) -> None:
        self.work_queue.put(SENTINEL)
