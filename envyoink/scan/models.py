"""Value types shared by the scan pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class FileEntry:
    """A regular file discovered by the enumerator."""

    path: Path

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_hidden(self) -> bool:
        return self.name.startswith('.')


@dataclass(frozen=True)
class ScanError:
    # One skipped (file, pattern) extraction, kept for reporting.
    path: Path
    pattern: str
    kind: str
    message: str


@dataclass
class ScanReport:
    names: list[str] = field(default_factory=list)
    files_scanned: int = 0
    matches: int = 0
    errors: list[ScanError] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    per_file: dict[Path, int] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


__all__ = ['FileEntry', 'ScanError', 'ScanReport']
