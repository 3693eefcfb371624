"""Lock-file provider built on `fasteners.InterProcessLock`.

Each lock name maps to a lock file under the provider's lock directory, and a
held lock is an exclusive inter-process lock on that file (fasteners picks the
platform primitive).

OS-level file locks belong to the process, not the thread, so a
`threading.Lock` per lock file is taken first. It is shared by every provider
in the process, so threads queue in memory and at most one of them at a time
touches a given lock file. The in-process locks are dropped again as soon as
no thread holds or waits on them.

Lock files are never deleted while the provider is in use: unlinking a lock
file that another process has open would let two holders lock two different
inodes.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from pathlib import Path

import fasteners

from datastash.interfaces.locks import (
    LockError,
    LockGuard,
    LockProvider,
    LockTimeoutError,
)
from datastash.utils.paths import PathLike

logger = logging.getLogger(__name__)

POLL_DELAY = 0.01  # first retry delay while another process holds the file
MAX_POLL_DELAY = 0.1


@dataclass
class _Slot:
    lock: threading.Lock = field(default_factory=threading.Lock)
    users: int = 0


class _NamedThreadLocks:
    """In-process locks keyed by name, kept only while someone uses them."""

    def __init__(self) -> None:
        self._mutex = threading.Lock()
        self._slots: dict[str, _Slot] = {}

    def __len__(self) -> int:
        with self._mutex:
            return len(self._slots)

    def acquire(self, name: str, timeout: float | None) -> bool:
        with self._mutex:
            slot = self._slots.setdefault(name, _Slot())
            slot.users += 1
        if slot.lock.acquire(timeout=-1 if timeout is None else timeout):
            return True
        with self._mutex:
            self._leave(name, slot)
        return False

    def release(self, name: str) -> None:
        with self._mutex:
            slot = self._slots[name]
            slot.lock.release()
            self._leave(name, slot)

    def _leave(self, name: str, slot: _Slot) -> None:
        slot.users -= 1
        if slot.users == 0:
            del self._slots[name]


# keyed by absolute lock-file path, shared by all providers of the process
_THREAD_LOCKS = _NamedThreadLocks()


class _FileLockGuard(LockGuard):
    """Guard owning both the in-process lock and the lock on the file."""

    def __init__(
        self,
        name: str,
        key: str,
        file_lock: fasteners.InterProcessLock,
        thread_locks: _NamedThreadLocks,
    ) -> None:
        self._name = name
        self._key = key
        self._file_lock: fasteners.InterProcessLock | None = file_lock
        self._thread_locks = thread_locks

    @property
    def locked(self) -> bool:
        return self._file_lock is not None

    def release(self) -> None:
        if self._file_lock is None:
            return
        file_lock, self._file_lock = self._file_lock, None
        try:
            file_lock.release()
        finally:
            self._thread_locks.release(self._key)
            logger.debug("Released lock %s", self._name)


class FileLockProvider(LockProvider):
    """Exclusive locks backed by inter-process locks on per-name lock files."""

    def __init__(self, lock_dir: PathLike) -> None:
        self._lock_dir = Path(lock_dir)
        self._thread_locks = _THREAD_LOCKS

    @property
    def lock_dir(self) -> Path:
        """Directory holding the lock files."""
        return self._lock_dir

    def lock_path(self, name: str) -> Path:
        """Path of the lock file backing `name`."""
        return self._lock_dir / name

    def acquire(self, name: str, timeout: float | None = None) -> LockGuard:
        deadline = None if timeout is None else time.monotonic() + timeout
        key = str(self.lock_path(name).absolute())

        if not self._thread_locks.acquire(key, timeout):
            raise LockTimeoutError(name, timeout)  # type: ignore[arg-type]

        try:
            file_lock = self._lock_file(name, timeout, deadline)
        except BaseException:
            self._thread_locks.release(key)
            raise

        logger.debug("Acquired lock %s", name)
        return _FileLockGuard(name, key, file_lock, self._thread_locks)

    # --- Internal Helpers ---

    def _lock_file(
        self, name: str, timeout: float | None, deadline: float | None
    ) -> fasteners.InterProcessLock:
        path = self.lock_path(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LockError(name, f"Cannot create lock directory: {e}") from e

        file_lock = fasteners.InterProcessLock(str(path))
        remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
        try:
            acquired = file_lock.acquire(
                blocking=remaining is None or remaining > 0,
                delay=POLL_DELAY,
                max_delay=MAX_POLL_DELAY,
                timeout=remaining or None,
            )
        except (OSError, threading.ThreadError) as e:
            raise LockError(name, f"Cannot lock {path}: {e}") from e
        if not acquired:
            raise LockTimeoutError(name, timeout)  # type: ignore[arg-type]
        return file_lock
