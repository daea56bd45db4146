"""Test configuration ensuring the project source tree is importable."""

from __future__ import annotations

import importlib
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent

root_str = str(ROOT)
if root_str not in sys.path:
    sys.path.insert(0, root_str)
else:
    idx = sys.path.index(root_str)
    if idx != 0:
        sys.path.insert(0, sys.path.pop(idx))

# Import the project package eagerly so subsequent imports reuse it
importlib.import_module("ailscript")

from tests.fixtures.sample_script import sample_bytes as _sample_bytes  # noqa: E402


@pytest.fixture
def sample_data() -> bytes:
    return _sample_bytes()


@pytest.fixture
def sample_path(tmp_path: Path, sample_data: bytes) -> Path:
    path = tmp_path / "sample.bin"
    path.write_bytes(sample_data)
    return path
