"""
Concurrent regular-expression bulk renamer.

Walks one or more roots, renames every matching file or directory with a
regular-expression replacement and prints one `<old> => <new>` line per entry.
"""

from .errors import ConfigError, RenameToolError, WalkError, WorkerError
from .models import Entry, EntryInfo, FilterMode, RenameConfig, RunSummary
from .pipeline import run_rename
from .template import ReplacementTemplate

__version__ = "1.0.0"

__all__ = [
    "ConfigError",
    "Entry",
    "EntryInfo",
    "FilterMode",
    "RenameConfig",
    "RenameToolError",
    "ReplacementTemplate",
    "RunSummary",
    "WalkError",
    "WorkerError",
    "run_rename",
]
