"""Shared pytest fixtures for the mendparse test suite."""

from __future__ import annotations

import pytest

from mendparse import RepairConfig


@pytest.fixture
def no_repair() -> RepairConfig:
    """Config that reports failures without repairing input."""
    return RepairConfig(repair=False)


@pytest.fixture
def write_config(tmp_path):
    """Write a mendparse.toml into a temporary directory and return its path."""

    def _write(body: str):
        path = tmp_path / "mendparse.toml"
        path.write_text(body)
        return path

    return _write
