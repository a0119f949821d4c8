"""carcircle - local vehicle store and remote-first circle access for desktop apps."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("carcircle")
except PackageNotFoundError:
    __version__ = "0+local"
from carcircle._transport import HttpTransport, Transport
from carcircle.accessor import CachedResult, CircleAccessor, RemoteResult
from carcircle.app import CarCircleApp
from carcircle.cache import CircleCache
from carcircle.config import CarCircleConfig
from carcircle.envelope import Envelope
from carcircle.exceptions import (
    CarCircleConfigError,
    CarCircleError,
    CarCircleValidationError,
    CircleNotFoundError,
    ConflictError,
    DuplicateMemberError,
    FieldIssue,
    NotFoundError,
    RemoteError,
    RemoteRejectedError,
    RemoteUnreachableError,
    StorageUnavailableError,
    VehicleNotFoundError,
    VehicleValidationError,
)
from carcircle.ipc import Channel, register_circle_handlers, register_vehicle_handlers
from carcircle.models import (
    Circle,
    CircleCreate,
    CirclePrivacy,
    CircleType,
    Member,
    MemberRole,
    Vehicle,
    VehicleCreate,
    VehicleUpdate,
)
from carcircle.repository import VehicleRepository
from carcircle.validation import ValidationResult

__all__ = [
    "__version__",
    "CachedResult",
    "CarCircleApp",
    "CarCircleConfig",
    "CarCircleConfigError",
    "CarCircleError",
    "CarCircleValidationError",
    "Channel",
    "Circle",
    "CircleAccessor",
    "CircleCache",
    "CircleCreate",
    "CircleNotFoundError",
    "CirclePrivacy",
    "CircleType",
    "ConflictError",
    "DuplicateMemberError",
    "Envelope",
    "FieldIssue",
    "HttpTransport",
    "Member",
    "MemberRole",
    "NotFoundError",
    "RemoteError",
    "RemoteRejectedError",
    "RemoteResult",
    "RemoteUnreachableError",
    "StorageUnavailableError",
    "Transport",
    "ValidationResult",
    "Vehicle",
    "VehicleCreate",
    "VehicleNotFoundError",
    "VehicleRepository",
    "VehicleUpdate",
    "VehicleValidationError",
    "register_circle_handlers",
    "register_vehicle_handlers",
]
