"""Custom exception hierarchy for carcircle.

Each error carries a ``kind`` string taken from the failure taxonomy
shared by the vehicle repository and the circle accessor.  The UI
channel reports ``str(exc)`` and never lets these escape.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class FieldIssue:
    """A single violated field constraint."""

    field: str
    message: str

    def __str__(self) -> str:
        if not self.field:
            return self.message
        return f"{self.field}: {self.message}"


class CarCircleError(Exception):
    """Base exception for all carcircle errors."""

    kind: str = "error"


class CarCircleConfigError(CarCircleError):
    """Invalid or missing configuration."""

    kind = "config-error"


class CarCircleValidationError(CarCircleError):
    """Input failed schema validation.

    ``issues`` lists every violated constraint, not only the first one.
    """

    kind = "validation-error"

    def __init__(self, message: str, *, issues: Sequence[FieldIssue] = ()) -> None:
        self.issues = list(issues)
        super().__init__(message)


class VehicleValidationError(CarCircleValidationError):
    """Vehicle payload or id rejected before touching storage."""


class NotFoundError(CarCircleError):
    """No record matches the requested id."""

    kind = "not-found"


class VehicleNotFoundError(NotFoundError):
    """No vehicle row with the requested id."""

    def __init__(self, vehicle_id: int) -> None:
        self.vehicle_id = vehicle_id
        super().__init__(f"Vehicle with ID {vehicle_id} not found")


class CircleNotFoundError(NotFoundError):
    """Neither the remote nor the local cache knows the circle."""

    def __init__(self, circle_id: str) -> None:
        self.circle_id = circle_id
        super().__init__(f"Circle with ID {circle_id} not found")


class ConflictError(CarCircleError):
    """Unique constraint violated (e.g. duplicate VIN)."""

    kind = "conflict"


class DuplicateMemberError(ConflictError):
    """The user is already a member of the circle (HTTP 409)."""


class StorageUnavailableError(CarCircleError):
    """The local store could not execute the operation.

    Fatal to the calling operation; never retried.
    """

    kind = "storage-unavailable"


class RemoteError(CarCircleError):
    """Failure talking to the remote circle backend."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class RemoteUnreachableError(RemoteError):
    """Network-level failure: connection refused or timeout."""

    kind = "remote-unreachable"


class RemoteRejectedError(RemoteError):
    """The remote answered with a non-success status or an unusable body."""

    kind = "remote-rejected"
