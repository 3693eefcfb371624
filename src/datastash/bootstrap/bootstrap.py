"""Build a `Datastore` from configuration."""

from __future__ import annotations

import logging
from pathlib import Path

from datastash.adapters.cache_dir import CacheDirectory
from datastash.adapters.remote import (
    LocalRemoteStore,
    MemoryRemoteStore,
    S3RemoteStore,
)
from datastash.config import DatastashConfig, resolve_cache_dir
from datastash.interfaces.remote_store import RemoteStore
from datastash.service_layer.datastore import Datastore

logger = logging.getLogger(__name__)


def build_remote_store(config: DatastashConfig) -> RemoteStore:
    """Instantiate the remote store backend named by `config.remote_url`.

    Raises:
        InvalidRemoteUrlError: If the URL scheme is unsupported.
    """
    remote = config.remote
    match remote.scheme:
        case "s3":
            return S3RemoteStore(
                remote.location,
                prefix=remote.prefix,
                endpoint_url=config.endpoint_url,
                region=config.region,
                profile=config.profile,
            )
        case "file":
            return LocalRemoteStore(remote.location)
        case _:
            return MemoryRemoteStore()


def build_datastore(config: DatastashConfig | None = None) -> Datastore:
    """Wire a `Datastore` from `config` (read from the environment if omitted)."""
    if config is None:
        config = DatastashConfig.from_env()
    store = Datastore(
        build_remote_store(config),
        config.cache_dir,
        lock_timeout=config.lock_timeout,
    )
    logger.debug("Built %r", store)
    return store


def build_cache(cache_dir: Path | None = None) -> CacheDirectory:
    """The local cache root alone, for maintenance that never needs a remote."""
    return CacheDirectory(resolve_cache_dir(cache_dir))
