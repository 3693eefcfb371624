"""Pytest fixtures for LockProvider contract tests.

- **provider**: a fresh provider per test over a temporary lock directory,
  parametrized by implementation (`"file"`: `FileLockProvider`).
"""

from __future__ import annotations

from pathlib import Path

import pytest

from datastash.adapters.locks import FileLockProvider
from datastash.interfaces.locks import LockProvider


@pytest.fixture(params=["file"])
def provider(request: pytest.FixtureRequest, tmp_path: Path) -> LockProvider:
    """Return a fresh lock provider for the requested implementation."""
    lock_dir = tmp_path / "locks"
    match request.param:
        case "file":
            return FileLockProvider(lock_dir)
        case _:
            raise ValueError(f"unknown provider type: {request.param}")
