from __future__ import annotations

import io
import os
import queue
from pathlib import Path

from rxren.models import Entry, EntryInfo, RunSummary
from rxren.printer import ResultPrinter, display_path, format_line
from rxren.walker import SENTINEL

CWD = os.path.join(os.sep, "home", "user", "project")


def _entry(path: str, newpath: str, *, is_dir: bool = False, error: str | None = None, dry_run: bool = False) -> Entry:
    info = EntryInfo(name=os.path.basename(path), is_dir=is_dir, size=0, mode=0, mtime=0.0)
    return Entry(path=path, info=info, newpath=newpath, error=error, dry_run=dry_run)


def test_display_path_strips_working_directory() -> None:
    assert display_path(os.path.join(CWD, "docs", "a.txt"), CWD) == os.path.join("docs", "a.txt")


def test_display_path_leaves_other_paths_alone() -> None:
    sibling = CWD + "-old" + os.sep + "a.txt"
    assert display_path(sibling, CWD) == sibling
    assert display_path(os.path.join("rel", "a.txt"), CWD) == os.path.join("rel", "a.txt")
    assert display_path(CWD, CWD) == CWD


def test_format_line_uses_new_path_under_working_directory() -> None:
    entry = _entry(os.path.join(CWD, "a.txt"), os.path.join(CWD, "a.bak"))

    assert format_line(entry, CWD) == "a.txt => a.bak"


def test_format_line_marks_failures() -> None:
    entry = _entry("/data/a.txt", "/data/a.bak", error="target exists")

    assert format_line(entry, CWD) == "/data/a.txt => /data/a.bak  [FAILED: target exists]"


def test_printer_writes_one_line_per_entry_and_counts(tmp_path: Path) -> None:
    results: "queue.Queue" = queue.Queue()
    results.put(_entry("/data/a.txt", "/data/a.bak"))
    results.put(_entry("/data/b.txt", "/data/b.bak", error="Permission denied"))
    results.put(_entry("/data/c.txt", "/data/c.txt"))
    results.put(SENTINEL)
    out = io.StringIO()
    summary = RunSummary()

    printer = ResultPrinter(results, summary, out, collect=True, cwd=CWD)
    printer.start()
    printer.join(timeout=10)

    assert not printer.is_alive()
    assert out.getvalue() == (
        "/data/a.txt => /data/a.bak\n"
        "/data/b.txt => /data/b.bak  [FAILED: Permission denied]\n"
        "/data/c.txt => /data/c.txt\n"
    )
    assert (summary.matched, summary.renamed, summary.failed) == (3, 1, 1)
    assert [row["status"] for row in summary.rows] == ["renamed", "failed", "unchanged"]


def test_printer_with_progress_still_writes_lines() -> None:
    results: "queue.Queue" = queue.Queue()
    results.put(_entry("/data/a.txt", "/data/a.bak", dry_run=True))
    results.put(SENTINEL)
    out = io.StringIO()
    summary = RunSummary(dry_run=True)

    printer = ResultPrinter(results, summary, out, progress=True, cwd=CWD)
    printer.start()
    printer.join(timeout=10)

    assert out.getvalue() == "/data/a.txt => /data/a.bak\n"
    assert summary.renamed == 1
    assert summary.rows == []
