"""Unified logging utilities for envyoink."""
from __future__ import annotations

import json
import logging
import os
import sys

from .env_flags import is_truthy_env

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
# Minimal console format (message only) used for cleaner terminal output.
MINIMAL_CONSOLE_FORMAT = '%(message)s'


class JsonFormatter(logging.Formatter):
    """One JSON object per record (ENVYOINK_JSON_LOGS=1)."""

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload = {
            'ts': record.created,
            'level': record.levelname,
            'logger': record.name,
            'msg': record.getMessage(),
        }
        if record.exc_info:
            payload['exc_info'] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(level: str = 'INFO', log_file: str | None = None, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """Configure root logging.

    Console handler writes to stderr so rendered output on stdout (``--stdout``)
    stays clean. By default it uses the minimal message-only format; set
    ENVYOINK_VERBOSE_CONSOLE=1 to restore the full DEFAULT_FORMAT or
    ENVYOINK_JSON_LOGS=1 for JSON lines.

    File handler (if enabled) always uses full DEFAULT_FORMAT for diagnostics.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(log_level)
    # Remove existing handlers to avoid duplication on re-init
    for h in root.handlers[:]:
        root.removeHandler(h)
        h.flush()
        h.close()

    # An explicit fmt beats env toggles.
    if fmt != DEFAULT_FORMAT:
        console_fmt = fmt
    elif is_truthy_env('ENVYOINK_VERBOSE_CONSOLE'):
        console_fmt = DEFAULT_FORMAT
    else:
        console_fmt = MINIMAL_CONSOLE_FORMAT

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(log_level)
    if is_truthy_env('ENVYOINK_JSON_LOGS'):
        console.setFormatter(JsonFormatter())
    else:
        console.setFormatter(logging.Formatter(console_fmt))
    root.addHandler(console)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        fh = logging.FileHandler(log_file, encoding='utf-8')
        fh.setLevel(log_level)
        # Always keep detailed format in file for post-mortem analysis
        fh.setFormatter(logging.Formatter(DEFAULT_FORMAT))
        root.addHandler(fh)

    return root


__all__ = ['DEFAULT_FORMAT', 'MINIMAL_CONSOLE_FORMAT', 'JsonFormatter', 'setup_logging']
