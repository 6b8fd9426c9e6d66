from __future__ import annotations

import io
import os
import shutil
from pathlib import Path
from typing import Dict, Set, Tuple

import pytest

from rxren.errors import WalkError
from rxren.models import RenameConfig, RunSummary
from rxren.pipeline import run_rename


def _run(config: RenameConfig, root: Path, **kwargs) -> Tuple[Set[str], RunSummary]:
    out = io.StringIO()
    summary = run_rename(config, [str(root)], out, cwd=str(root), **kwargs)
    lines = out.getvalue().splitlines()
    assert len(lines) == len(set(lines))
    return set(lines), summary


def _make_fixture(root: Path) -> Path:
    for directory in ("alpha", "alpha/beta", "gamma"):
        (root / directory).mkdir(parents=True, exist_ok=True)
    for index in range(30):
        parent = ("alpha", "alpha/beta", "gamma")[index % 3]
        (root / parent / f"file_{index}.txt").write_text(str(index), encoding="utf-8")
        (root / parent / f"file_{index}.log").write_text(str(index), encoding="utf-8")
    return root


def _snapshot(root: Path) -> Dict[str, float]:
    return {
        str(path.relative_to(root)): os.stat(path).st_mtime
        for path in root.rglob("*")
    }


def test_renames_matching_files_and_leaves_others(tmp_path: Path) -> None:
    for name in ("a.txt", "b.txt", "note.md"):
        (tmp_path / name).write_text(name, encoding="utf-8")
    config = RenameConfig.build(r"(.*)\.txt$", "$1.bak", forext="txt")

    lines, summary = _run(config, tmp_path)

    assert lines == {"a.txt => a.bak", "b.txt => b.bak"}
    assert sorted(p.name for p in tmp_path.iterdir()) == ["a.bak", "b.bak", "note.md"]
    assert (summary.matched, summary.renamed, summary.failed) == (2, 2, 0)
    assert summary.visited == 4


def test_dry_run_output_matches_real_run_without_touching_files(tmp_path: Path) -> None:
    dry_root = _make_fixture(tmp_path / "dry")
    real_root = tmp_path / "real"
    shutil.copytree(dry_root, real_root)
    before = _snapshot(dry_root)

    dry_lines, dry_summary = _run(RenameConfig.build(r"^file_(\d+)\.txt$", "doc_$1.txt", dryrun=True), dry_root)
    real_lines, _ = _run(RenameConfig.build(r"^file_(\d+)\.txt$", "doc_$1.txt"), real_root)

    assert _snapshot(dry_root) == before
    assert dry_lines == real_lines
    assert len(dry_lines) == 30
    assert dry_summary.renamed == 30
    assert (real_root / "gamma" / "doc_2.txt").exists()


def test_worker_count_does_not_change_result_set(tmp_path: Path) -> None:
    root = _make_fixture(tmp_path / "tree")

    single, _ = _run(RenameConfig.build(r"_(\d+)", "-$1", dryrun=True, workers=1), root)
    many, _ = _run(RenameConfig.build(r"_(\d+)", "-$1", dryrun=True, workers=8), root)

    assert single == many
    assert len(single) == 60


def test_small_queues_apply_backpressure_without_deadlock(tmp_path: Path) -> None:
    root = _make_fixture(tmp_path / "tree")

    lines, summary = _run(RenameConfig.build("^file", "f", dryrun=True, workers=3, queue_size=1), root)

    assert len(lines) == 60
    assert summary.visited == 64


def test_dironly_and_fileonly_filters(tmp_path: Path) -> None:
    root = _make_fixture(tmp_path / "tree")

    dir_lines, _ = _run(RenameConfig.build("^", "x_", dironly=True, dryrun=True), root)
    file_lines, _ = _run(RenameConfig.build("^", "x_", fileonly=True, dryrun=True), root)

    dir_olds = {line.split(" => ")[0] for line in dir_lines}
    file_olds = {line.split(" => ")[0] for line in file_lines}
    assert dir_olds == {"alpha", os.path.join("alpha", "beta"), "gamma", str(root)}
    assert all((root / old).is_file() for old in file_olds)
    assert len(file_olds) == 60


def test_rename_failures_are_reported(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_text("a", encoding="utf-8")
    (tmp_path / "a.bak").write_text("keep", encoding="utf-8")
    (tmp_path / "b.txt").write_text("b", encoding="utf-8")
    config = RenameConfig.build(r"(.*)\.txt$", "$1.bak")

    lines, summary = _run(config, tmp_path)

    assert lines == {"a.txt => a.bak  [FAILED: target exists]", "b.txt => b.bak"}
    assert not summary.ok
    assert (summary.renamed, summary.failed) == (1, 1)
    assert (tmp_path / "a.bak").read_text(encoding="utf-8") == "keep"


def test_bottom_up_renames_nested_directories(tmp_path: Path) -> None:
    root = tmp_path / "tree"
    (root / "x_dir" / "x_sub").mkdir(parents=True)
    (root / "x_dir" / "x_sub" / "x_file").write_text("x", encoding="utf-8")

    _, summary = _run(RenameConfig.build("^x_", "y_", workers=1, bottom_up=True), root)

    assert summary.failed == 0
    assert (root / "y_dir" / "y_sub" / "y_file").exists()
    assert not (root / "x_dir").exists()


def test_collect_gathers_report_rows(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_text("a", encoding="utf-8")

    _, summary = _run(RenameConfig.build(r"\.txt$", ".md", dryrun=True), tmp_path, collect=True)

    assert summary.rows == [
        {
            "path": str(tmp_path / "a.txt"),
            "newpath": str(tmp_path / "a.md"),
            "type": "f",
            "status": "planned",
            "message": "",
        }
    ]


def test_unmatched_root_pattern_is_not_an_error(tmp_path: Path) -> None:
    config = RenameConfig.build(".", "x")

    _, summary = _run(config, tmp_path / "missing*")

    assert summary.visited == 0
    assert summary.matched == 0


def test_walk_failure_aborts_run(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "a.txt").write_text("a", encoding="utf-8")

    def _denied(path):
        raise PermissionError(13, "Permission denied", str(path))

    monkeypatch.setattr(os, "scandir", _denied)
    config = RenameConfig.build(r"(.*)\.txt$", "$1.bak", forext="txt")

    with pytest.raises(WalkError):
        run_rename(config, [str(tmp_path)], io.StringIO())

    assert (tmp_path / "a.txt").exists()


def _make_colliding_pairs(root: Path, count: int) -> Path:
    root.mkdir()
    for index in range(count):
        (root / f"x{index}a").write_text(f"{index}a", encoding="utf-8")
        (root / f"x{index}b").write_text(f"{index}b", encoding="utf-8")
    return root


def test_colliding_targets_never_lose_files(tmp_path: Path) -> None:
    root = _make_colliding_pairs(tmp_path / "pairs", 300)

    lines, summary = _run(RenameConfig.build("[ab]$", "c", fileonly=True, workers=8), root)

    remaining = sorted(path.name for path in root.iterdir())
    assert len(remaining) == 600
    assert (summary.renamed, summary.failed) == (300, 300)
    assert sum(line.endswith("[FAILED: target exists]") for line in lines) == 300
    names = set(remaining)
    for index in range(300):
        assert f"x{index}c" in names
        assert (f"x{index}a" in names) != (f"x{index}b" in names)


def test_dry_run_reports_the_same_collisions(tmp_path: Path) -> None:
    root = _make_colliding_pairs(tmp_path / "pairs", 100)
    before = _snapshot(root)

    _, summary = _run(RenameConfig.build("[ab]$", "c", fileonly=True, dryrun=True, workers=8), root)

    assert (summary.renamed, summary.failed) == (100, 100)
    assert _snapshot(root) == before


def test_root_with_trailing_separator_is_renamed_in_place(tmp_path: Path) -> None:
    (tmp_path / "olddir").mkdir()

    out = io.StringIO()
    summary = run_rename(
        RenameConfig.build("old", "new", dironly=True, bottom_up=True),
        [str(tmp_path / "olddir") + os.sep],
        out,
        cwd=str(tmp_path),
    )

    assert out.getvalue() == "olddir => newdir\n"
    assert summary.failed == 0
    assert (tmp_path / "newdir").is_dir()
    assert not (tmp_path / "olddir").exists()
