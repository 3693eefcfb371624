"""Configuration utilities for DATASTASH.

This module centralizes the environment variables and defaults that decide
which remote store and which cache root a process uses.

Environment variables:
    DATASTASH_REMOTE:           Remote store URL. ``s3://bucket[/prefix]``,
                                ``file:///path/to/dir`` or ``memory://``.
    DATASTASH_CACHE_DIR:        Local cache root. Defaults to the user cache
                                directory (``platformdirs.user_cache_dir``).
    DATASTASH_S3_ENDPOINT_URL:  Endpoint of an S3-compatible service.
    DATASTASH_S3_REGION:        AWS region for the S3 client.
    DATASTASH_S3_PROFILE:       AWS shared-credentials profile.
    DATASTASH_LOCK_TIMEOUT:     Seconds to wait for another resolver of the
                                same coordinate. Unset waits indefinitely.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import urlparse

from platformdirs import user_cache_dir

REMOTE_ENV = "DATASTASH_REMOTE"  # pragma: no mutate
CACHE_DIR_ENV = "DATASTASH_CACHE_DIR"  # pragma: no mutate
ENDPOINT_URL_ENV = "DATASTASH_S3_ENDPOINT_URL"  # pragma: no mutate
REGION_ENV = "DATASTASH_S3_REGION"  # pragma: no mutate
PROFILE_ENV = "DATASTASH_S3_PROFILE"  # pragma: no mutate
LOCK_TIMEOUT_ENV = "DATASTASH_LOCK_TIMEOUT"  # pragma: no mutate

SUPPORTED_SCHEMES = ("s3", "file", "memory")


class ConfigError(Exception):
    """Base class for configuration errors."""


class RemoteUrlNotSetError(ConfigError):
    """Raised when the DATASTASH_REMOTE environment variable is not set."""


class InvalidRemoteUrlError(ConfigError):
    """Raised when a remote URL has an unsupported scheme or is incomplete."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Invalid remote URL {url!r}: {reason}")
        self.url = url


def default_cache_dir() -> Path:
    """Per-user cache root used when DATASTASH_CACHE_DIR is not set."""
    return Path(user_cache_dir("datastash", appauthor=False))


def resolve_cache_dir(
    cache_dir: Path | None = None, environ: Mapping[str, str] | None = None
) -> Path:
    """Cache root from an explicit value, DATASTASH_CACHE_DIR, or the default."""
    if cache_dir is not None:
        return Path(cache_dir)
    env = os.environ if environ is None else environ
    raw_dir = env.get(CACHE_DIR_ENV)
    return Path(raw_dir) if raw_dir else default_cache_dir()


@dataclass(frozen=True)
class RemoteLocation:
    """A parsed remote store URL."""

    scheme: str
    location: str = ""
    prefix: str = ""

    @classmethod
    def parse(cls, url: str) -> RemoteLocation:
        """Parse ``s3://bucket/prefix``, ``file:///dir`` or ``memory://``.

        Raises:
            InvalidRemoteUrlError: If the scheme is unsupported or the URL is
                missing its bucket/path.
        """
        parsed = urlparse(url)
        match parsed.scheme:
            case "s3":
                if not parsed.netloc:
                    raise InvalidRemoteUrlError(url, "missing bucket name")
                return cls("s3", parsed.netloc, parsed.path.strip("/"))
            case "file":
                path = parsed.netloc + parsed.path
                if not path:
                    raise InvalidRemoteUrlError(url, "missing directory path")
                return cls("file", path)
            case "memory":
                return cls("memory")
            case _:
                raise InvalidRemoteUrlError(
                    url, f"scheme must be one of {', '.join(SUPPORTED_SCHEMES)}"
                )


@dataclass(frozen=True)
class DatastashConfig:
    """All DATASTASH settings for one process in one place."""

    remote_url: str
    cache_dir: Path = field(default_factory=default_cache_dir)
    endpoint_url: str | None = field(default=None, repr=False)
    region: str | None = None
    profile: str | None = None
    lock_timeout: float | None = None

    @property
    def remote(self) -> RemoteLocation:
        """The parsed remote URL."""
        return RemoteLocation.parse(self.remote_url)

    @classmethod
    def from_env(
        cls,
        *,
        remote_url: str | None = None,
        cache_dir: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> DatastashConfig:
        """Build config from environment variables plus explicit overrides.

        Raises:
            RemoteUrlNotSetError: If no remote URL is given or configured.
            ConfigError: If DATASTASH_LOCK_TIMEOUT is not a number.
        """
        env = os.environ if environ is None else environ
        if remote_url is None and not (remote_url := env.get(REMOTE_ENV)):
            raise RemoteUrlNotSetError

        lock_timeout = None
        if raw_timeout := env.get(LOCK_TIMEOUT_ENV):
            try:
                lock_timeout = float(raw_timeout)
            except ValueError as e:
                raise ConfigError(
                    f"{LOCK_TIMEOUT_ENV} must be a number of seconds, got {raw_timeout!r}"
                ) from e
            if lock_timeout < 0:
                raise ConfigError(
                    f"{LOCK_TIMEOUT_ENV} must not be negative, got {raw_timeout!r}"
                )

        return cls(
            remote_url=remote_url,
            cache_dir=resolve_cache_dir(cache_dir, env),
            endpoint_url=env.get(ENDPOINT_URL_ENV) or None,
            region=env.get(REGION_ENV) or None,
            profile=env.get(PROFILE_ENV) or None,
            lock_timeout=lock_timeout,
        )
