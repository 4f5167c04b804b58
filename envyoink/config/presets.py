"""Pattern sources and the built-in preset table.

A run is configured with one or more pattern sources:

  * ``CustomPattern(pattern)``   - a literal regular expression.
  * ``PresetPattern(tag)``       - a named ecosystem preset that expands to
                                   one or more alternative patterns.

``resolve_patterns`` turns the sources into a concrete, validated list of
pattern strings exactly once, before any file is read, so the scan layer never
needs to know where a pattern came from.

Every pattern must carry a capture group; group 1 is the extracted name.
"""
from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Union

from ..utils.exceptions import ConfigError

logger = logging.getLogger(__name__)


class Ecosystem(Enum):
    JS = "JS"
    PYTHON = "Python"
    RUST = "Rust"
    GO = "Go"


PRESETS: dict[Ecosystem, tuple[str, ...]] = {
    Ecosystem.JS: (
        r"process\.env\.([a-zA-Z_][a-zA-Z0-9_]*)\b",
        r"process\.env\[['\"]([^'\"]+)['\"]\]",
    ),
    Ecosystem.PYTHON: (
        r"os\.environ\[['\"]([^'\"]+)['\"]\]",
        r"os\.environ\.get\(['\"]([^'\"]+)['\"]\)",
    ),
    Ecosystem.RUST: (
        r"env::var\([\"']([^\"']+)[\"']\)",
    ),
    Ecosystem.GO: (
        r"os\.Getenv\([\"']([^\"']+)[\"']\)",
    ),
}


@dataclass(frozen=True)
class CustomPattern:
    pattern: str


@dataclass(frozen=True)
class PresetPattern:
    tag: str


PatternSource = Union[CustomPattern, PresetPattern]


def preset_table(extra_presets: Mapping[str, Iterable[str]] | None = None) -> dict[str, tuple[str, ...]]:
    """Return the preset table keyed by display name, built-ins first.

    User presets (from the YAML config) may add names but never shadow a
    built-in one; a clash raises ConfigError.
    """
    table = {eco.value: pats for eco, pats in PRESETS.items()}
    builtin_keys = {k.casefold() for k in table}
    for name, patterns in (extra_presets or {}).items():
        if name.casefold() in builtin_keys:
            raise ConfigError(f"Preset '{name}' clashes with a built-in preset")
        pats = tuple(patterns)
        if not pats:
            raise ConfigError(f"Preset '{name}' defines no patterns")
        table[name] = pats
    return table


def lookup_preset(tag: str, table: Mapping[str, tuple[str, ...]]) -> tuple[str, ...]:
    # Tags are matched case-insensitively: 'js', 'JS' and 'Js' are the same preset.
    wanted = tag.strip().casefold()
    for name, patterns in table.items():
        if name.casefold() == wanted:
            return patterns
    known = ", ".join(sorted(table))
    raise ConfigError(f"Unknown preset '{tag}' (known: {known})")


def validate_pattern(pattern: str) -> re.Pattern[str]:
    """Compile ``pattern`` and ensure it has at least one capture group."""
    if not pattern:
        raise ConfigError("Empty pattern")
    try:
        compiled = re.compile(pattern)
    except re.error as e:
        raise ConfigError(f"Pattern {pattern!r} does not compile: {e}") from e
    if compiled.groups < 1:
        raise ConfigError(f"Pattern {pattern!r} has no capture group; group 1 is the extracted name")
    if compiled.groups > 1:
        logger.debug("Pattern %r has %d groups; only group 1 is used", pattern, compiled.groups)
    return compiled


def resolve_patterns(
    sources: Iterable[PatternSource],
    extra_presets: Mapping[str, Iterable[str]] | None = None,
) -> list[str]:
    """Expand pattern sources into a de-duplicated, validated list of patterns.

    Order follows the order of ``sources`` (and of each preset's patterns).
    Raises ConfigError for an empty selection, an unknown preset, a pattern
    that fails to compile, or a pattern without a capture group.
    """
    table = preset_table(extra_presets)
    resolved: list[str] = []
    seen: set[str] = set()
    for src in sources:
        if isinstance(src, CustomPattern):
            candidates: tuple[str, ...] = (src.pattern,)
        elif isinstance(src, PresetPattern):
            candidates = lookup_preset(src.tag, table)
        else:
            raise ConfigError(f"Unsupported pattern source: {src!r}")
        for pat in candidates:
            if pat in seen:
                continue
            validate_pattern(pat)
            seen.add(pat)
            resolved.append(pat)
    if not resolved:
        raise ConfigError("No pattern selected: pass --pattern or --preset")
    logger.debug("Resolved %d pattern(s): %s", len(resolved), resolved)
    return resolved


__all__ = [
    "Ecosystem",
    "PRESETS",
    "CustomPattern",
    "PresetPattern",
    "PatternSource",
    "preset_table",
    "lookup_preset",
    "validate_pattern",
    "resolve_patterns",
]
