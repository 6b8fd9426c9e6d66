"""
rxcommon.shared.report

Reporting utilities for rxren runs.

 - timestamped CSV filenames
 - export_report() wrapper for one-shot CSV output
 - human-readable count summaries for the log
"""

from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from rxcommon.base.file_io import ensure_dir, open_csv
from rxcommon.base.logging import get_logger

log = get_logger(__name__)


# ----------------------------------------------------------------------
# TIMESTAMPED FILENAMES
# ----------------------------------------------------------------------

def timestamped_filename(base_name: str, ext: str = "csv", output_dir: Optional[Path] = None) -> Path:
    """
    Generate a timestamped output filename (e.g., rename_report_2025-10-06_103000.csv)
    """
    ts = datetime.now().strftime("%Y-%m-%d_%H%M%S")
    output_dir = ensure_dir(output_dir or Path.cwd())
    candidate = output_dir / f"{base_name}_{ts}.{ext}"
    counter = 1
    while candidate.exists():
        candidate = output_dir / f"{base_name}_{ts}_{counter:02d}.{ext}"
        counter += 1
    return candidate


# ----------------------------------------------------------------------
# CSV WRITERS
# ----------------------------------------------------------------------

def write_csv(
    data: List[Dict[str, Any]],
    output_path: Path,
    fieldnames: Optional[Sequence[str]] = None,
) -> Path:
    """Write structured rows to a CSV file. Writes only a header when `data` is empty."""
    columns = list(fieldnames or (data[0].keys() if data else []))
    if not columns:
        log.warning("No data provided for CSV export.")
        return output_path

    with open_csv(output_path) as handle:
        writer = csv.DictWriter(handle, fieldnames=columns, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(data)
    log.debug(f"📊 CSV report saved → {output_path}")
    return output_path


# ----------------------------------------------------------------------
# HUMAN-READABLE SUMMARY
# ----------------------------------------------------------------------

def summarize_counts(title: str, summary: Dict[str, int]) -> str:
    """
    Return a formatted, human-readable summary string.
    Example:
        summarize_counts("Rename Summary", {"Renamed": 12, "Failed": 3})
    """
    lines = [f"===== {title.upper()} ====="]
    for key, val in summary.items():
        lines.append(f"{key}: {val}")
    lines.append("=" * len(lines[0]))
    return "\n".join(lines)


# ----------------------------------------------------------------------
# UNIFIED EXPORT WRAPPER
# ----------------------------------------------------------------------

def export_report(
    data: List[Dict[str, Any]],
    base_name: str,
    output_dir: Optional[Path] = None,
    fieldnames: Optional[Sequence[str]] = None,
) -> Path:
    """
    Export report rows to a timestamped CSV file.

    Args:
        data: List of dicts (one per row)
        base_name: Base filename for the report (e.g. 'rename_report')
        output_dir: Directory for report storage (defaults to cwd)
        fieldnames: Column order; defaults to the keys of the first row

    Returns:
        Path of the written CSV file
    """
    output_path = timestamped_filename(base_name, "csv", output_dir)
    write_csv(data, output_path, fieldnames=fieldnames)
    log.info(f"📂 Report for '{base_name}' written to: {output_path}")
    return output_path
