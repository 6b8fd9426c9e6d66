"""
rxcommon.base.file_io

File helpers for configuration and report files. All text is UTF-8.

 - YAML config files must have a mapping at the root; parse errors are
   raised as ValueError naming the file
 - CSV reports are opened with `newline=""` after creating their directory
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Mapping, TextIO

import yaml


DEFAULT_ENCODING = "utf-8"


def _to_path(path: Path | str) -> Path:
    return Path(path).expanduser()


def ensure_dir(path: Path | str) -> Path:
    directory = _to_path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def read_yaml_mapping(path: Path | str) -> Dict[str, Any]:
    """Load a YAML document whose root is a mapping. An empty file yields {}."""
    path_obj = _to_path(path)
    with path_obj.open("r", encoding=DEFAULT_ENCODING) as handle:
        try:
            data = yaml.safe_load(handle)
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {path_obj}: {exc}") from exc

    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ValueError(f"Configuration root must be a mapping in {path_obj}")
    return dict(data)


@contextmanager
def open_csv(path: Path | str) -> Iterator[TextIO]:
    """Open a CSV file for writing, creating its directory first."""
    path_obj = _to_path(path)
    ensure_dir(path_obj.parent)
    with path_obj.open("w", encoding=DEFAULT_ENCODING, newline="") as handle:
        yield handle
