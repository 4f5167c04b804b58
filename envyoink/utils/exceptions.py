"""envyoink exception hierarchy.

A small exception tree for categorizing failures across a run. The CLI maps
each category to an exit code; the scan pipeline uses the ExtractError
subclasses to decide between skip-and-continue and abort.
"""
from __future__ import annotations

from pathlib import Path


class YoinkError(Exception):
    """Base class for all envyoink exceptions."""


class ConfigError(YoinkError):
    """Invalid or missing pattern/preset selection, or a bad config file."""


class OutputError(YoinkError):
    """The rendered env example could not be written to its destination."""


class ExtractError(YoinkError):
    """Extraction from a single file failed."""

    kind = "extract"

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(f"{path}: {message}")


class UnreadableFileError(ExtractError):
    """File missing, permission denied or any other OS level read failure."""

    kind = "unreadable"


class UndecodableFileError(ExtractError):
    """File content is not valid UTF-8 text."""

    kind = "undecodable"


class NoCaptureGroupError(ExtractError):
    """A pattern matched but produced no capture group 1."""

    kind = "no_capture_group"


__all__ = [
    "YoinkError",
    "ConfigError",
    "OutputError",
    "ExtractError",
    "UnreadableFileError",
    "UndecodableFileError",
    "NoCaptureGroupError",
]
