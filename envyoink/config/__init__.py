"""
Configuration module for envyoink: pattern presets and run settings.
"""
from .presets import (
    PRESETS,
    CustomPattern,
    Ecosystem,
    PatternSource,
    PresetPattern,
    resolve_patterns,
)
from .settings import YoinkSettings, load_settings

__all__ = [
    "PRESETS",
    "CustomPattern",
    "Ecosystem",
    "PatternSource",
    "PresetPattern",
    "resolve_patterns",
    "YoinkSettings",
    "load_settings",
]
