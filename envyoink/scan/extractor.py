"""Extractor: stream one file line by line and pull capture group 1 from matches.

Matching is two-step. The pattern first locates match boundaries on the line;
the capture is then re-applied to the matched span only, and group 1 of that
replay is the extracted name. Every non-overlapping match on a line is
extracted, in line order.

A call is all-or-nothing: either the whole file is read and every name is
returned, or an ExtractError subclass is raised and nothing is returned.

  UnreadableFileError   - open/read failed (missing, permissions, is a dir ...)
  UndecodableFileError  - content is not valid UTF-8
  NoCaptureGroupError   - a match produced no group 1 (pattern without a group,
                          or an optional group that did not participate)
"""
from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable
from pathlib import Path

from ..utils.exceptions import NoCaptureGroupError, UndecodableFileError, UnreadableFileError
from .models import FileEntry

logger = logging.getLogger(__name__)


def _as_pattern(pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


def _path_of(file: FileEntry | str | os.PathLike[str]) -> Path:
    if isinstance(file, FileEntry):
        return file.path
    return Path(file)


def extract_from_lines(
    regex: re.Pattern[str],
    lines: Iterable[str],
    *,
    path: Path,
) -> list[str]:
    names: list[str] = []
    for lineno, line in enumerate(lines, start=1):
        for m in regex.finditer(line):
            span = m.group(0)
            replay = regex.search(span)
            if replay is None:
                # lookarounds can depend on text outside the span
                logger.debug("%s:%d capture replay missed span %r", path, lineno, span)
                continue
            captured = replay.group(1) if regex.groups >= 1 else None
            if captured is None:
                raise NoCaptureGroupError(
                    path, f"line {lineno}: pattern {regex.pattern!r} matched but has no capture group 1"
                )
            name = captured.strip()
            if not name:
                logger.debug("%s:%d empty capture ignored", path, lineno)
                continue
            names.append(name)
    return names


def extract(pattern: str | re.Pattern[str], file: FileEntry | str | os.PathLike[str]) -> list[str]:
    """Return the trimmed group-1 captures of ``pattern`` in ``file``."""
    regex = _as_pattern(pattern)
    path = _path_of(file)
    try:
        # split on \n only, like a grep line searcher; a lone \r stays inside the line
        with open(path, encoding='utf-8', newline='\n') as fh:
            names = extract_from_lines(regex, fh, path=path)
    except UnicodeDecodeError as e:
        raise UndecodableFileError(path, f"not valid UTF-8 text ({e.reason} at byte {e.start})") from e
    except OSError as e:
        raise UnreadableFileError(path, e.strerror or str(e)) from e
    if names:
        logger.debug("%s: %d name(s) for %r", path, len(names), regex.pattern)
    return names


__all__ = ['extract', 'extract_from_lines']
