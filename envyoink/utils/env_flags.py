"""Environment flag helpers.

Consolidates the common pattern of interpreting environment variables as boolean
feature flags using the canonical truthy set {"1","true","yes","on"} (case-insensitive).

Usage examples:
    from envyoink.utils.env_flags import is_truthy_env
    if is_truthy_env('ENVYOINK_JSON_LOGS'):
        ...
"""
from __future__ import annotations

import os

TRUTHY_SET: set[str] = {"1","true","yes","on"}

def is_truthy(value: str | None) -> bool:
    if not value:
        return False
    return value.strip().lower() in TRUTHY_SET

def is_truthy_env(name: str, default: str | None = None) -> bool:
    return is_truthy(os.getenv(name, default or ''))

def env_str(name: str, default: str | None = None) -> str | None:
    """Return the stripped value of ``name`` or ``default`` when unset/blank."""
    v = os.getenv(name)
    if v is None or not v.strip():
        return default
    return v.strip()

__all__ = [
    'TRUTHY_SET',
    'is_truthy',
    'is_truthy_env',
    'env_str',
]
