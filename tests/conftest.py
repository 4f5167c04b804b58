"""Pytest fixtures for envyoink.

Responsibilities:
1. ``make_tree`` builds a workspace under tmp_path from a {relpath: content} map
   (str content is written as UTF-8, bytes verbatim).
2. Root logging is restored after every test; the CLI reconfigures it.
"""
from __future__ import annotations

import logging
from pathlib import Path

import pytest


@pytest.fixture()
def make_tree(tmp_path):
    def _make(files: dict[str, str | bytes], root_name: str = 'ws') -> Path:
        root = tmp_path / root_name
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            p = root / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                p.write_bytes(content)
            else:
                p.write_text(content, encoding='utf-8')
        return root
    return _make


@pytest.fixture(autouse=True)
def _restore_root_logging(monkeypatch):
    for name in ('ENVYOINK_CONFIG', 'ENVYOINK_ON_ERROR', 'ENVYOINK_LOG_LEVEL',
                 'ENVYOINK_JSON_LOGS', 'ENVYOINK_VERBOSE_CONSOLE', 'ENVYOINK_VERSION'):
        monkeypatch.delenv(name, raising=False)
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for h in root.handlers[:]:
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    for h in handlers:
        if h not in root.handlers:
            root.addHandler(h)
    root.setLevel(level)
