"""
rxren.printer

Single consumer of the result queue. Writes one `<old> => <new>` line per
processed entry and keeps the run counters.
"""

from __future__ import annotations

import os
import queue
import sys
import threading
from typing import Optional, TextIO

from rxcommon.base.logging import get_logger
from rxcommon.shared.utils import Progress

from .models import Entry, RunSummary
from .walker import SENTINEL

log = get_logger(__name__)


def display_path(path: str, cwd: str) -> str:
    """Show paths below `cwd` relative to it; anything else unchanged."""
    prefix = cwd.rstrip(os.sep) + os.sep
    if path.startswith(prefix):
        return path[len(prefix):].lstrip(os.sep)
    return path


def format_line(entry: Entry, cwd: str) -> str:
    line = f"{display_path(entry.path, cwd)} => {display_path(entry.newpath, cwd)}"
    if entry.error:
        line += f"  [FAILED: {entry.error}]"
    return line


class ResultPrinter(threading.Thread):
    def __init__(
        self,
        result_queue: "queue.Queue[Optional[Entry]]",
        summary: RunSummary,
        out: Optional[TextIO] = None,
        *,
        collect: bool = False,
        progress: bool = False,
        cwd: Optional[str] = None,
    ):
        super().__init__(name="result-printer", daemon=True)
        self.result_queue = result_queue
        self.summary = summary
        self.out = out or sys.stdout
        self.collect = collect
        self.progress = progress
        self.cwd = cwd or os.getcwd()

    def run(self) -> None:
        with Progress(desc="Renaming", enabled=self.progress) as bar:
            while True:
                entry = self.result_queue.get()
                if entry is SENTINEL:
                    break
                self._record(entry)
                bar.write(format_line(entry, self.cwd), file=self.out)
                bar.update()
        self.out.flush()

    def _record(self, entry: Entry) -> None:
        self.summary.matched += 1
        if entry.failed:
            self.summary.failed += 1
        elif entry.status in {"renamed", "planned"}:
            self.summary.renamed += 1
        if self.collect:
            self.summary.rows.append(entry.as_row())
