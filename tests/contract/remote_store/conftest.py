"""Pytest fixtures for RemoteStore contract tests.

Provided fixtures
-----------------
- **store**: Parametrized backend factory returning a **fresh** `RemoteStore`
  per test: `"memory"` (`MemoryRemoteStore`) and `"local"`
  (`LocalRemoteStore` over a temporary directory). The S3 adapter is covered
  separately against a stubbed client.
- **payload**: Small deterministic byte sample.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from datastash.adapters.remote import LocalRemoteStore, MemoryRemoteStore
from datastash.interfaces.remote_store import RemoteStore


@pytest.fixture(params=["memory", "local"])
def store(request: pytest.FixtureRequest, tmp_path: Path) -> RemoteStore:
    """Return a fresh remote store for the requested backend."""
    match request.param:
        case "memory":
            return MemoryRemoteStore()
        case "local":
            return LocalRemoteStore(tmp_path / "bucket")
        case _:
            raise ValueError(f"unknown store type: {request.param}")


@pytest.fixture
def payload() -> bytes:
    """Deterministic sample payload."""
    return b"The quick brown fox jumps over the lazy dog"
