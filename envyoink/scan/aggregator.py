"""Aggregator: de-duplicate extracted names and render the env example file.

The ResultSet is an explicit accumulator owned by one run. It is populated
as extraction results arrive and can absorb another ResultSet via ``merge``
so per-file results could be computed elsewhere and combined later.

Rendered output is one ``NAME=`` line per unique name, sorted
lexicographically, newline-terminated. An empty set renders as ''.
"""
from __future__ import annotations

import logging
import os
import stat
import tempfile
from collections.abc import Iterable, Iterator
from pathlib import Path

from ..utils.exceptions import OutputError

logger = logging.getLogger(__name__)


class ResultSet:
    def __init__(self, names: Iterable[str] = ()) -> None:
        self._names: set[str] = set()
        self.added = 0
        self.extend(names)

    def add(self, name: str) -> None:
        self.added += 1
        self._names.add(name)

    def extend(self, names: Iterable[str]) -> None:
        for n in names:
            self.add(n)

    def merge(self, other: ResultSet) -> None:
        self._names |= other._names
        self.added += other.added

    def sorted(self) -> list[str]:
        return sorted(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __len__(self) -> int:
        return len(self._names)

    def __iter__(self) -> Iterator[str]:
        return iter(self.sorted())


def aggregate(names: Iterable[str]) -> ResultSet:
    return ResultSet(names)


def render(names: ResultSet | Iterable[str]) -> str:
    ordered = names.sorted() if isinstance(names, ResultSet) else sorted(set(names))
    return ''.join(f'{name}=\n' for name in ordered)


def _target_mode(dest: Path) -> int:
    # keep an existing file's mode, otherwise what a plain open() would give
    if dest.exists():
        return stat.S_IMODE(dest.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_output(path: str | os.PathLike[str], text: str) -> Path:
    """Atomically replace ``path`` with ``text``; raises OutputError on failure.

    The temp file lives in the destination directory so the final replace
    never crosses filesystems.
    """
    dest = Path(path)
    tmp: Path | None = None
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile('w', delete=False, encoding='utf-8', newline='',
                                         dir=dest.parent, prefix=f'.{dest.name}.', suffix='.tmp') as tf:
            tmp = Path(tf.name)
            tf.write(text)
        os.chmod(tmp, _target_mode(dest))
        tmp.replace(dest)
    except OSError as e:
        if tmp is not None and tmp.exists():
            tmp.unlink()
        raise OutputError(f"Failed to write {dest}: {e.strerror or e}") from e
    logger.debug("Wrote %s (%d bytes)", dest, len(text.encode('utf-8')))
    return dest


__all__ = ['ResultSet', 'aggregate', 'render', 'write_output']
