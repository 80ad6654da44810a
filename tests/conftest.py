"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import os
from pathlib import Path

import pytest
from vaultunit.core.vault import TransferEnvironment


def _real_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return Path(os.path.realpath(path))


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Empty canonical home directory."""
    return _real_dir(tmp_path / "home")


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """Empty vault directory for the 'data' type."""
    return _real_dir(tmp_path / "vault" / "data")


@pytest.fixture
def bin_vault(tmp_path: Path) -> Path:
    """Empty vault directory for the 'bin' type."""
    return _real_dir(tmp_path / "vault" / "bin")


@pytest.fixture
def env(home: Path, vault: Path, bin_vault: Path) -> TransferEnvironment:
    """Transfer environment with both data types registered."""
    return TransferEnvironment(
        home=str(home),
        vault_dirs={"data": str(vault), "bin": str(bin_vault)},
    )


@pytest.fixture
def marker_prefix() -> str:
    """Hidden marker prefix used by default settings."""
    return ".f8b52b7481393a3e6ade051ecfb549fa"
