"""Domain-layer error definitions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from datastash.domain.coordinates import Coordinate, Kind

# ============================================================================
#                           General domain errors
# ============================================================================


class DatastashError(Exception):
    """Base class for all DATASTASH errors."""


class InvalidCoordinateError(DatastashError, ValueError):
    """Raised when a coordinate (or a remote key) is malformed."""

    def __init__(self, field: str, value: object, reason: str) -> None:
        super().__init__(f"Invalid coordinate {field} {value!r}: {reason}")
        self.field = field
        self.value = value
        self.reason = reason


# ============================================================================
#                           Resolution errors
# ============================================================================


class DoesNotExistError(DatastashError):
    """Raised when no artifact is published at the requested coordinate.

    The same error is raised whether the group, the name, the version or the
    kind is wrong. The identifying fields are kept on the exception so callers
    can tell which coordinate failed.
    """

    def __init__(
        self, group: str, name: str, version: int | None, kind: Kind
    ) -> None:
        version_label = "*" if version is None else str(version)
        super().__init__(
            f"{kind.value} {group}/{name} version {version_label} does not exist"
        )
        self.group = group
        self.name = name
        self.version = version
        self.kind = kind

    @classmethod
    def for_coordinate(cls, coordinate: Coordinate) -> DoesNotExistError:
        """Build the error from a coordinate."""
        return cls(
            coordinate.group, coordinate.name, coordinate.version, coordinate.kind
        )
