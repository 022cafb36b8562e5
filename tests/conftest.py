"""Shared pytest fixtures."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture
def restore_root_logging():
    """Undo any dictConfig applied by the test."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


@pytest.fixture
def write_file(tmp_path):
    def _write(name: str, text: str):
        p = tmp_path / name
        p.write_text(text, encoding="utf-8")
        return p
    return _write
