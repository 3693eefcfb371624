"""Backend-specific tests for the directory-backed remote store."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from datastash.adapters.remote import LocalRemoteStore
from datastash.interfaces.remote_store import NotFound


@pytest.fixture
def local(tmp_path: Path) -> LocalRemoteStore:
    """Store over a fresh bucket directory."""
    return LocalRemoteStore(tmp_path / "bucket")


def test_objects_live_at_their_key(local: LocalRemoteStore) -> None:
    """Key ``g/n-v1`` is the file ``<root>/g/n-v1``."""
    local.put("g/n-v1", io.BytesIO(b"x"))
    assert (local.root / "g" / "n-v1").read_bytes() == b"x"


def test_staging_area_is_hidden(local: LocalRemoteStore) -> None:
    """Staged uploads never show up in listings and leave nothing behind."""
    local.put("g/n-v1", io.BytesIO(b"x"))
    assert list(local.list_keys()) == ["g/n-v1"]
    assert not any((local.root / ".staging").iterdir())


def test_failed_upload_leaves_no_object(local: LocalRemoteStore) -> None:
    """A stream that fails mid-read leaves neither object nor temp file."""

    class Exploding(io.RawIOBase):
        def readable(self) -> bool:
            return True

        def readinto(self, buffer) -> int:  # type: ignore[override]
            raise OSError("disk on fire")

    with pytest.raises(OSError, match="disk on fire"):
        local.put("g/n-v1", io.BufferedReader(Exploding()))
    assert not local.exists("g/n-v1")
    assert not any((local.root / ".staging").iterdir())


@pytest.mark.parametrize(
    "key", ["", "/abs/key", "g/", "../escape", "g/../../escape", "g\\n", ".staging/x"]
)
def test_unsafe_keys_are_rejected(local: LocalRemoteStore, key: str) -> None:
    """Keys that would leave the root or hit the staging area raise ValueError."""
    with pytest.raises(ValueError):
        local.put(key, io.BytesIO(b"x"))


def test_key_under_a_file_is_missing(local: LocalRemoteStore) -> None:
    """Reading 'g/n-v1/x' when 'g/n-v1' is a file is a plain NotFound."""
    local.put("g/n-v1", io.BytesIO(b"x"))
    assert not local.exists("g/n-v1/x")
    with pytest.raises(NotFound):
        local.open_read("g/n-v1/x")
