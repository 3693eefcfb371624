"""Unit tests for wiring a Datastore from configuration."""

from pathlib import Path

import pytest

from datastash.adapters.cache_dir import CacheDirectory
from datastash.adapters.locks import FileLockProvider
from datastash.adapters.remote import (
    LocalRemoteStore,
    MemoryRemoteStore,
    S3RemoteStore,
)
from datastash.bootstrap import build_cache, build_datastore, build_remote_store
from datastash.config import CACHE_DIR_ENV, REMOTE_ENV, DatastashConfig


def test_file_remote(tmp_path: Path) -> None:
    """file:// URLs build a directory-backed store rooted at the path."""
    cfg = DatastashConfig(f"file://{tmp_path}/bucket", tmp_path / "cache")
    store = build_remote_store(cfg)
    assert isinstance(store, LocalRemoteStore)
    assert store.root == tmp_path / "bucket"


def test_memory_remote(tmp_path: Path) -> None:
    """memory:// builds a fresh in-memory store."""
    assert isinstance(
        build_remote_store(DatastashConfig("memory://", tmp_path)), MemoryRemoteStore
    )


def test_s3_remote(tmp_path: Path) -> None:
    """s3:// builds an S3 store with bucket and prefix from the URL."""
    cfg = DatastashConfig(
        "s3://bucket/team/artifacts",
        tmp_path,
        endpoint_url="http://localhost:9000",
        region="us-east-1",
    )
    store = build_remote_store(cfg)
    assert isinstance(store, S3RemoteStore)
    assert store.bucket == "bucket"
    assert store.prefix == "team/artifacts"
    assert store.client.meta.endpoint_url == "http://localhost:9000"


def test_build_datastore(tmp_path: Path) -> None:
    """The datastore gets the cache root, a file lock provider and the lock timeout."""
    cfg = DatastashConfig("memory://", tmp_path / "cache", lock_timeout=3.0)
    store = build_datastore(cfg)
    assert store.cache_root == tmp_path / "cache"
    assert store.lock_timeout == 3.0
    assert isinstance(store.locks, FileLockProvider)
    assert store.locks.lock_dir == tmp_path / "cache" / ".locks"


def test_build_datastore_from_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Without a config, DATASTASH_* variables are read."""
    monkeypatch.setenv(REMOTE_ENV, "memory://")
    monkeypatch.setenv(CACHE_DIR_ENV, str(tmp_path / "env-cache"))
    store = build_datastore()
    assert isinstance(store.remote, MemoryRemoteStore)
    assert store.cache_root == tmp_path / "env-cache"


def test_build_cache(tmp_path: Path) -> None:
    """build_cache needs no remote at all."""
    cache = build_cache(tmp_path / "c")
    assert isinstance(cache, CacheDirectory)
    assert cache.root == tmp_path / "c"
