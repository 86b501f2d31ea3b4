"""Pytest configuration shared by the unit and end-to-end suites.

What:
  Establish project import paths and define a fixture that applies a canned
  configuration file to every test.

Why:
  The CLI tests execute the real ``mailhdr`` package as a module. To make
  imports resolve to the source tree rather than an installed wheel, the
  ``mailhdr/src`` directory is prepended to ``sys.path``. Encoding and parser
  defaults come from a process-wide cached configuration, so the autouse
  fixture keeps that state deterministic between tests.

How:
  Compute the project root relative to this file, inject the source directory
  into ``sys.path`` when present, and define :func:`mailhdr_config` to manage
  the ``MAILHDR_CONFIG_PATH`` environment variable while resetting the cache
  before and after each test.

Interfaces:
  :func:`mailhdr_config` (pytest fixture), ``CONFIG_PATH``.
"""

import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "mailhdr" / "src"
if SRC_DIR.exists():
    sys.path.insert(0, str(SRC_DIR))

import pytest

from mailhdr.config.loader import reset_config

CONFIG_PATH = Path(__file__).resolve().parent / "data" / "config.yaml"


@pytest.fixture(autouse=True)
def mailhdr_config(monkeypatch: pytest.MonkeyPatch):
    """Point the loader at ``tests/data/config.yaml`` for every test.

    Args:
      monkeypatch: Pytest helper injected automatically for environment control.
    """

    monkeypatch.setenv("MAILHDR_CONFIG_PATH", str(CONFIG_PATH))
    reset_config()
    try:
        yield
    finally:
        reset_config()
