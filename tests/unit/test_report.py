from __future__ import annotations

import csv
from pathlib import Path

from rxcommon.shared.report import export_report, summarize_counts, timestamped_filename, write_csv


def _read_rows(path: Path) -> list[dict[str, str]]:
    with path.open(newline="", encoding="utf-8") as handle:
        return list(csv.DictReader(handle))


def test_export_report_writes_timestamped_csv(tmp_path: Path) -> None:
    rows = [
        {"path": "a.txt", "newpath": "a.bak", "status": "renamed"},
        {"path": "b.txt", "newpath": "b.bak", "status": "failed"},
    ]

    path = export_report(rows, "rename_report", output_dir=tmp_path)

    assert path.parent == tmp_path
    assert path.suffix == ".csv"
    assert path.stem.startswith("rename_report_")
    assert _read_rows(path) == rows


def test_export_report_respects_column_order_and_drops_extras(tmp_path: Path) -> None:
    rows = [{"status": "renamed", "path": "a.txt", "extra": "x"}]

    path = export_report(rows, "ordered", output_dir=tmp_path, fieldnames=["path", "status"])

    assert path.read_text(encoding="utf-8").splitlines()[0] == "path,status"
    assert _read_rows(path) == [{"path": "a.txt", "status": "renamed"}]


def test_write_csv_with_no_rows_writes_header_only(tmp_path: Path) -> None:
    path = write_csv([], tmp_path / "empty.csv", fieldnames=["path", "newpath"])

    assert path.read_text(encoding="utf-8").strip() == "path,newpath"


def test_timestamped_filename_never_reuses_existing_file(tmp_path: Path) -> None:
    first = timestamped_filename("report", "csv", tmp_path)
    first.write_text("taken", encoding="utf-8")

    second = timestamped_filename("report", "csv", tmp_path)

    assert second != first
    assert not second.exists()


def test_summarize_counts() -> None:
    text = summarize_counts("Rename Summary", {"Renamed": 2, "Failed": 1})

    lines = text.splitlines()
    assert lines[0] == "===== RENAME SUMMARY ====="
    assert "Renamed: 2" in lines
    assert "Failed: 1" in lines
