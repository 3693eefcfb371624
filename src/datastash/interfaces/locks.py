"""Named mutual-exclusion locks shared by threads and processes.

A `LockProvider` hands out one exclusive lock per *name*. DATASTASH uses the
coordinate's lock name, so resolvers of the same coordinate serialize while
resolvers of different coordinates never contend.

Implementations must exclude both other threads of the calling process and
other processes on the same machine that share the provider's lock area.
Cross-machine exclusion is not required.

Release is idempotent: `LockGuard.release()` may be called any number of
times, and `LockProvider.hold()` releases on every exit path.
"""

from __future__ import annotations

import abc
from collections.abc import Iterator
from contextlib import contextmanager


class LockError(Exception):
    """Base class for lock errors (e.g., the lock primitive is unusable)."""

    def __init__(self, name: str, message: str | None = None) -> None:
        super().__init__(message or f"Lock {name!r} could not be acquired")
        self.name = name


class LockTimeoutError(LockError):
    """Raised when a lock is not acquired within the requested timeout."""

    def __init__(self, name: str, timeout: float) -> None:
        super().__init__(name, f"Timed out after {timeout:g}s waiting for lock {name!r}")
        self.timeout = timeout


class LockGuard(abc.ABC):
    """Ownership token for an acquired lock."""

    @property
    @abc.abstractmethod
    def locked(self) -> bool:
        """True until the lock has been released."""

    @abc.abstractmethod
    def release(self) -> None:
        """Release the lock. Calling again after release is a no-op."""

    def __enter__(self) -> LockGuard:
        return self

    def __exit__(self, *exc: object) -> None:
        self.release()


class LockProvider(abc.ABC):
    """Hands out exclusive locks keyed by name."""

    @abc.abstractmethod
    def acquire(self, name: str, timeout: float | None = None) -> LockGuard:
        """Block until the lock `name` is free, then take it.

        Args:
            name: Lock name (a relative, `/`-separated path-like string).
            timeout: Seconds to wait before giving up. `None` waits forever.

        Returns:
            LockGuard: Guard whose `release()` frees the lock.

        Raises:
            LockTimeoutError: If `timeout` elapsed first.
            LockError: If the underlying primitive cannot be used.
        """

    @contextmanager
    def hold(self, name: str, timeout: float | None = None) -> Iterator[LockGuard]:
        """Context manager holding the lock `name` for the body of a `with`."""
        guard = self.acquire(name, timeout=timeout)
        try:
            yield guard
        finally:
            guard.release()
