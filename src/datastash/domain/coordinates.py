"""Coordinate value object and the addressing scheme built on it.

A coordinate `(group, name, version, kind)` identifies one published artifact.
This module owns the pure, I/O-free mappings from a coordinate to:

- its **remote key** in the object store,
- its **local path** under a cache root,
- its **lock name** in the cache root's lock area.

Layout
------
    FILE       remote  "<group>/<name>-v<version>"
               local   "<cache_root>/<group>/<name>-v<version>"
    DIRECTORY  remote  "<group>/<name>-d<version>.zip"
               local   "<cache_root>/<group>/<name>-d<version>"

Every FILE key ends in ``-v<digits>`` and every DIRECTORY key in
``-d<digits>.zip``, so splitting on the last suffix recovers the coordinate and
no two coordinates alias each other. The same holds for the local paths.
Group and name may not start with ``.`` so the cache root's ``.locks`` and
``.tmp`` areas never collide with an artifact.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from datastash.domain.errors import InvalidCoordinateError

ARCHIVE_SUFFIX = ".zip"
LOCK_SUFFIX = ".lock"

_FORBIDDEN_CHARS = ("/", "\\", "\x00")
_REMOTE_KEY_RE = re.compile(
    r"^(?P<group>[^/]+)/(?P<name>[^/]+)-(?P<marker>[vd])(?P<version>[1-9][0-9]*)"
    r"(?P<suffix>\.zip)?$"
)


class Kind(Enum):
    """Whether a coordinate addresses a single file or a directory tree."""

    FILE = "file"
    DIRECTORY = "directory"

    @property
    def marker(self) -> str:
        """Single-letter tag encoding the kind in keys and paths."""
        return "v" if self is Kind.FILE else "d"


@dataclass(frozen=True)
class Coordinate:
    """Immutable address of one published artifact.

    Attributes:
        group: Namespace of the artifact, e.g. ``"org.example.models"``.
        name: Artifact name inside the group.
        version: Positive integer version.
        kind: `Kind.FILE` or `Kind.DIRECTORY`.

    Raises:
        InvalidCoordinateError: On construction, if any field is malformed.
    """

    group: str
    name: str
    version: int
    kind: Kind = Kind.FILE

    def __post_init__(self) -> None:
        _validate_segment("group", self.group)
        _validate_segment("name", self.name)
        # bool is an int subclass; True must not pass as version 1
        if isinstance(self.version, bool) or not isinstance(self.version, int):
            raise InvalidCoordinateError(
                "version", self.version, "must be an integer"
            )
        if self.version < 1:
            raise InvalidCoordinateError("version", self.version, "must be >= 1")
        if not isinstance(self.kind, Kind):
            raise InvalidCoordinateError("kind", self.kind, "must be a Kind")

    @classmethod
    def file(cls, group: str, name: str, version: int) -> Coordinate:
        """Coordinate of a published file."""
        return cls(group, name, version, Kind.FILE)

    @classmethod
    def directory(cls, group: str, name: str, version: int) -> Coordinate:
        """Coordinate of a published directory."""
        return cls(group, name, version, Kind.DIRECTORY)

    def __str__(self) -> str:
        return f"{self.group}/{self.name}-{self.kind.marker}{self.version}"


def _validate_segment(field: str, value: object) -> None:
    if not isinstance(value, str):
        raise InvalidCoordinateError(field, value, "must be a string")
    if not value:
        raise InvalidCoordinateError(field, value, "must not be empty")
    if any(char in value for char in _FORBIDDEN_CHARS):
        raise InvalidCoordinateError(
            field, value, "must not contain path separators or NUL"
        )
    if value.startswith("."):
        raise InvalidCoordinateError(field, value, "must not start with '.'")


# ============================================================================
#                           Key and path mappings
# ============================================================================


def _leaf(coordinate: Coordinate) -> str:
    return f"{coordinate.name}-{coordinate.kind.marker}{coordinate.version}"


def remote_key(coordinate: Coordinate) -> str:
    """Return the object-store key of `coordinate`."""
    key = f"{coordinate.group}/{_leaf(coordinate)}"
    if coordinate.kind is Kind.DIRECTORY:
        key += ARCHIVE_SUFFIX
    return key


def local_path(coordinate: Coordinate, cache_root: str | Path) -> Path:
    """Return the canonical path of `coordinate` under `cache_root`."""
    return Path(cache_root) / coordinate.group / _leaf(coordinate)


def lock_name(coordinate: Coordinate) -> str:
    """Return the lock-file name of `coordinate`, relative to the lock area."""
    return f"{coordinate.group}/{_leaf(coordinate)}{LOCK_SUFFIX}"


def parse_remote_key(key: str) -> Coordinate:
    """Recover the coordinate that `remote_key` mapped to `key`.

    Raises:
        InvalidCoordinateError: If `key` is not a key produced by `remote_key`.
    """
    match = _REMOTE_KEY_RE.match(key)
    if match is None:
        raise InvalidCoordinateError("key", key, "not a datastash remote key")

    kind = Kind.FILE if match["marker"] == "v" else Kind.DIRECTORY
    has_suffix = match["suffix"] is not None
    if has_suffix != (kind is Kind.DIRECTORY):
        raise InvalidCoordinateError(
            "key", key, "archive suffix does not match the kind marker"
        )
    return Coordinate(match["group"], match["name"], int(match["version"]), kind)
