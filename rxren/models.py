"""Data model shared by the walker, the rename workers and the result printer."""

from __future__ import annotations

import os
import re
import stat
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Pattern

from .errors import ConfigError
from .template import ReplacementTemplate

DEFAULT_MATCH = "."
DEFAULT_WORKERS = 2
DEFAULT_QUEUE_SIZE = 1000


class FilterMode(Enum):
    BOTH = "both"
    FILE_ONLY = "file"
    DIR_ONLY = "dir"

    @classmethod
    def from_flags(cls, fileonly: bool, dironly: bool) -> "FilterMode":
        if fileonly and dironly:
            raise ConfigError("fileonly and dironly are mutually exclusive")
        if dironly:
            return cls.DIR_ONLY
        if fileonly:
            return cls.FILE_ONLY
        return cls.BOTH

    def accepts(self, is_dir: bool) -> bool:
        if self is FilterMode.DIR_ONLY:
            return is_dir
        if self is FilterMode.FILE_ONLY:
            return not is_dir
        return True


@dataclass(frozen=True)
class EntryInfo:
    """Metadata snapshot taken with lstat at walk time. Never refreshed."""

    name: str
    is_dir: bool
    size: int
    mode: int
    mtime: float

    @classmethod
    def from_path(cls, path: str) -> "EntryInfo":
        st = os.lstat(path)
        return cls(
            name=os.path.basename(os.path.normpath(path)),
            is_dir=stat.S_ISDIR(st.st_mode),
            size=st.st_size,
            mode=st.st_mode,
            mtime=st.st_mtime,
        )


@dataclass
class Entry:
    path: str
    info: EntryInfo
    newpath: str = ""
    error: Optional[str] = None
    dry_run: bool = False

    @property
    def name(self) -> str:
        return self.info.name

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def status(self) -> str:
        if self.error is not None:
            return "failed"
        if self.newpath == self.path:
            return "unchanged"
        return "planned" if self.dry_run else "renamed"

    def as_row(self) -> Dict[str, str]:
        return {
            "path": self.path,
            "newpath": self.newpath,
            "type": "d" if self.info.is_dir else "f",
            "status": self.status,
            "message": self.error or "",
        }


@dataclass(frozen=True)
class RenameConfig:
    """Run configuration, built once at startup and handed to every component."""

    match: Pattern[str]
    template: ReplacementTemplate
    ext_pattern: Optional[Pattern[str]] = None
    filter_mode: FilterMode = FilterMode.BOTH
    dry_run: bool = False
    workers: int = DEFAULT_WORKERS
    queue_size: int = DEFAULT_QUEUE_SIZE
    overwrite: bool = False
    bottom_up: bool = False

    @classmethod
    def build(
        cls,
        match: str = DEFAULT_MATCH,
        replace: str = "",
        *,
        forext: str = "",
        fileonly: bool = False,
        dironly: bool = False,
        dryrun: bool = False,
        workers: int = DEFAULT_WORKERS,
        queue_size: int = DEFAULT_QUEUE_SIZE,
        overwrite: bool = False,
        bottom_up: bool = False,
    ) -> "RenameConfig":
        if not match:
            raise ConfigError("match pattern is required. use -match 'pattern'")
        if not replace:
            raise ConfigError("replacement is required. use -replace 'replacement'")
        if workers < 1:
            raise ConfigError(f"worker count must be at least 1 (got {workers})")
        if queue_size < 1:
            raise ConfigError(f"queue size must be at least 1 (got {queue_size})")

        try:
            compiled = re.compile(match)
        except re.error as exc:
            raise ConfigError(f"invalid match pattern {match!r}: {exc}") from exc

        ext_pattern = None
        if forext:
            try:
                ext_pattern = re.compile(rf"\.(?:{forext})\Z")
            except re.error as exc:
                raise ConfigError(f"invalid extension {forext!r}: {exc}") from exc

        return cls(
            match=compiled,
            template=ReplacementTemplate(replace),
            ext_pattern=ext_pattern,
            filter_mode=FilterMode.from_flags(fileonly, dironly),
            dry_run=dryrun,
            workers=workers,
            queue_size=queue_size,
            overwrite=overwrite,
            bottom_up=bottom_up,
        )

    @classmethod
    def from_mapping(cls, values: Dict[str, Any]) -> "RenameConfig":
        """Build from a merged config/CLI mapping, ignoring unrelated keys."""
        keys = (
            "forext", "fileonly", "dironly", "dryrun",
            "workers", "queue_size", "overwrite", "bottom_up",
        )
        options = {key: values[key] for key in keys if values.get(key) is not None}
        match = values.get("match")
        return cls.build(
            DEFAULT_MATCH if match is None else match,
            values.get("replace") or "",
            **options,
        )


@dataclass
class RunSummary:
    dry_run: bool = False
    visited: int = 0
    matched: int = 0
    renamed: int = 0
    failed: int = 0
    rows: List[Dict[str, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failed == 0

    def counts(self) -> Dict[str, int]:
        return {
            "Visited": self.visited,
            "Matched": self.matched,
            "Planned" if self.dry_run else "Renamed": self.renamed,
            "Failed": self.failed,
        }
