"""Global pytest fixtures and default marks for DATASTASH."""

from __future__ import annotations

from pathlib import Path

import pytest

from datastash.adapters.remote import MemoryRemoteStore
from datastash.service_layer.datastore import Datastore

# pylint: disable=unused-argument, redefined-outer-name

TESTS_ROOT = Path(__file__).parent.resolve()
DEFAULT_MARKERS = {
    "unit": pytest.mark.unit,
    "contract": pytest.mark.contract,
    "integration": pytest.mark.integration,
    "e2e": pytest.mark.e2e,
}


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Mark each item after the top-level test folder it lives in."""
    for item in items:
        try:
            relative = item.path.resolve().relative_to(TESTS_ROOT)
        except ValueError:
            continue
        marker = DEFAULT_MARKERS.get(relative.parts[0])
        if marker is None:
            continue
        if not any(m.name == marker.name for m in item.iter_markers()):
            item.add_marker(marker)


@pytest.fixture
def remote() -> MemoryRemoteStore:
    """Fresh in-memory remote store."""
    return MemoryRemoteStore()


@pytest.fixture
def cache_root(tmp_path: Path) -> Path:
    """Cache root that does not exist yet (created lazily by the datastore)."""
    return tmp_path / "cache"


@pytest.fixture
def datastore(remote: MemoryRemoteStore, cache_root: Path) -> Datastore:
    """Datastore over the in-memory remote and a per-test cache root."""
    return Datastore(remote, cache_root)


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Small directory tree with nested files and an empty directory."""
    root = tmp_path / "tree"
    (root / "nested" / "deeper").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "a.txt").write_bytes(b"alpha\n")
    (root / "nested" / "b.bin").write_bytes(bytes(range(256)))
    (root / "nested" / "deeper" / "c.txt").write_text("gamma", encoding="utf-8")
    return root
