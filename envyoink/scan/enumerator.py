"""File enumerator: lazy, depth-first walk of a workspace.

Rules:
  * Entries whose base name starts with '.' are pruned while walking, so a
    hidden directory's subtree is never visited.
  * Extra base names passed via ``exclude`` are pruned the same way.
  * Only regular files are yielded. Symbolic links are not followed and never
    yielded; an entry that cannot be stat'ed is skipped silently.
  * Directory and file names are visited in sorted order so two walks over an
    unchanged tree yield the same sequence.

A root that is not an existing directory logs a warning and yields nothing.
"""
from __future__ import annotations

import logging
import os
import stat
from collections.abc import Callable, Iterable, Iterator
from pathlib import Path

from .models import FileEntry

logger = logging.getLogger(__name__)


def is_hidden_name(name: str) -> bool:
    return name.startswith('.')


def _pruned(name: str, exclude: frozenset[str]) -> bool:
    return is_hidden_name(name) or name in exclude


def _is_regular_file(path: str) -> bool:
    try:
        return stat.S_ISREG(os.lstat(path).st_mode)
    except OSError:
        # permission denied or vanished mid-walk
        return False


def enumerate_files(
    root: str | os.PathLike[str],
    *,
    exclude: Iterable[str] = (),
    on_warning: Callable[[str], None] | None = None,
) -> Iterator[FileEntry]:
    """Yield every visible regular file under ``root``.

    ``on_warning`` receives the message when the root is missing, in addition
    to the WARNING log record.
    """
    root_str = os.fspath(root)
    if not os.path.isdir(root_str):
        msg = f"Directory {root_str} not found"
        logger.warning(msg)
        if on_warning is not None:
            on_warning(msg)
        return
    excluded = frozenset(exclude)

    def _walk_error(err: OSError) -> None:
        logger.debug("Skipping unreadable directory %s: %s", err.filename, err)

    for dirpath, dirnames, filenames in os.walk(root_str, onerror=_walk_error):
        # in-place prune: os.walk will not descend into removed names
        dirnames[:] = sorted(d for d in dirnames if not _pruned(d, excluded))
        for fname in sorted(filenames):
            if _pruned(fname, excluded):
                continue
            full = os.path.join(dirpath, fname)
            if not _is_regular_file(full):
                continue
            yield FileEntry(Path(full))


__all__ = ['enumerate_files', 'is_hidden_name']
