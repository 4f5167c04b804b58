"""Run settings: CLI flags layered over environment, YAML config and defaults.

Precedence (highest first):
  1. explicit keyword arguments (the CLI passes parsed flags, None = not given)
  2. environment: ENVYOINK_ON_ERROR, ENVYOINK_LOG_LEVEL, ENVYOINK_CONFIG
  3. YAML config file (``--config`` or ENVYOINK_CONFIG)
  4. defaults below

YAML example::

    preset: [JS, Python]
    on_error: skip
    exclude: [node_modules, dist]
    presets:
      Ruby:
        - ENV\\[['"]([^'"]+)['"]\\]

The file is parsed with yaml.safe_load and validated against CONFIG_SCHEMA
(jsonschema draft-07). Unknown top-level keys are rejected.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema
import yaml

from ..utils.env_flags import env_str
from ..utils.exceptions import ConfigError
from .presets import CustomPattern, PatternSource, PresetPattern

logger = logging.getLogger(__name__)

DEFAULT_WORKSPACE = "./"
DEFAULT_OUTPUT_DIR = "./"
DEFAULT_EXAMPLE_FILE = ".env.example"
DEFAULT_ON_ERROR = "skip"
ON_ERROR_CHOICES = ("skip", "abort")

_STR_LIST = {"type": "array", "items": {"type": "string", "minLength": 1}}

CONFIG_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "workspace": {"type": "string", "minLength": 1},
        "out": {"type": "string", "minLength": 1},
        "example_file": {"type": "string", "minLength": 1},
        "on_error": {"enum": list(ON_ERROR_CHOICES)},
        "exclude": _STR_LIST,
        "log_level": {"type": "string"},
        "metrics_file": {"type": "string", "minLength": 1},
        "pattern": {"type": "string", "minLength": 1},
        "preset": {"anyOf": [{"type": "string", "minLength": 1}, _STR_LIST]},
        "presets": {
            "type": "object",
            "additionalProperties": {**_STR_LIST, "minItems": 1},
        },
    },
}


@dataclass
class YoinkSettings:
    workspace_dir: Path = Path(DEFAULT_WORKSPACE)
    output_dir: Path = Path(DEFAULT_OUTPUT_DIR)
    example_file: str = DEFAULT_EXAMPLE_FILE
    sources: list[PatternSource] = field(default_factory=list)
    on_error: str = DEFAULT_ON_ERROR
    exclude: tuple[str, ...] = ()
    metrics_file: Path | None = None
    log_level: str = "INFO"
    extra_presets: dict[str, list[str]] = field(default_factory=dict)

    @property
    def output_path(self) -> Path:
        return self.output_dir / self.example_file


def load_config_file(path: str | Path) -> dict[str, Any]:
    """Load and validate a YAML config file; raises ConfigError on any problem."""
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {p}: {e}") from e
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file {p} is not valid YAML: {e}") from e
    if data is None:
        return {}
    try:
        jsonschema.validate(data, CONFIG_SCHEMA)
    except jsonschema.ValidationError as e:
        where = "/".join(str(x) for x in e.absolute_path) or "<root>"
        raise ConfigError(f"Config file {p} invalid at {where}: {e.message}") from e
    logger.debug("Loaded config file %s (keys=%s)", p, sorted(data))
    return data


def _first(*values: Any) -> Any:
    for v in values:
        if v is not None:
            return v
    return None


def _sources_from_config(cfg: dict[str, Any]) -> list[PatternSource]:
    out: list[PatternSource] = []
    if "pattern" in cfg:
        out.append(CustomPattern(cfg["pattern"]))
    preset = cfg.get("preset")
    if isinstance(preset, str):
        preset = [preset]
    for tag in preset or []:
        out.append(PresetPattern(tag))
    return out


def load_settings(
    *,
    workspace_dir: str | None = None,
    output_dir: str | None = None,
    example_file: str | None = None,
    sources: Sequence[PatternSource] = (),
    on_error: str | None = None,
    exclude: Iterable[str] = (),
    metrics_file: str | None = None,
    log_level: str | None = None,
    config_path: str | None = None,
) -> YoinkSettings:
    config_path = _first(config_path, env_str("ENVYOINK_CONFIG"))
    cfg = load_config_file(config_path) if config_path else {}

    chosen_on_error = _first(on_error, env_str("ENVYOINK_ON_ERROR"), cfg.get("on_error"), DEFAULT_ON_ERROR)
    chosen_on_error = str(chosen_on_error).lower()
    if chosen_on_error not in ON_ERROR_CHOICES:
        raise ConfigError(f"on_error must be one of {ON_ERROR_CHOICES}, got {chosen_on_error!r}")

    # CLI pattern selection replaces the config file's selection rather than adding to it.
    chosen_sources = list(sources) if sources else _sources_from_config(cfg)

    # Exclusions accumulate: config file names plus any given on the command line.
    excluded = tuple(dict.fromkeys([*cfg.get("exclude", []), *exclude]))

    metrics = _first(metrics_file, cfg.get("metrics_file"))
    settings = YoinkSettings(
        workspace_dir=Path(_first(workspace_dir, cfg.get("workspace"), DEFAULT_WORKSPACE)),
        output_dir=Path(_first(output_dir, cfg.get("out"), DEFAULT_OUTPUT_DIR)),
        example_file=_first(example_file, cfg.get("example_file"), DEFAULT_EXAMPLE_FILE),
        sources=chosen_sources,
        on_error=chosen_on_error,
        exclude=excluded,
        metrics_file=Path(metrics) if metrics else None,
        log_level=_first(log_level, env_str("ENVYOINK_LOG_LEVEL"), cfg.get("log_level"), "INFO"),
        extra_presets={k: list(v) for k, v in (cfg.get("presets") or {}).items()},
    )
    return settings


__all__ = [
    "CONFIG_SCHEMA",
    "DEFAULT_EXAMPLE_FILE",
    "ON_ERROR_CHOICES",
    "YoinkSettings",
    "load_config_file",
    "load_settings",
]
