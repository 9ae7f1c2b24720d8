"""Shared test fixtures for the histconvert test suite."""

from pathlib import Path

import pytest


@pytest.fixture
def write_history(tmp_path):
    """Write raw bytes to a history file under tmp_path and return its path."""

    def _write(data: bytes, name: str = ".zsh_history") -> Path:
        path = tmp_path / name
        path.write_bytes(data)
        return path

    return _write
