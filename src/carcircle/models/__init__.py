"""Data models for vehicles and circles."""

from carcircle.models._base import CircleBaseModel, OpenStrEnum
from carcircle.models.circle import (
    Circle,
    CircleCreate,
    CirclePrivacy,
    CircleType,
    Member,
    MemberRole,
)
from carcircle.models.vehicle import (
    MIN_YEAR,
    UPDATABLE_FIELDS,
    VIN_PATTERN,
    Vehicle,
    VehicleCreate,
    VehicleUpdate,
    max_vehicle_year,
)

__all__ = [
    "Circle",
    "CircleBaseModel",
    "CircleCreate",
    "CirclePrivacy",
    "CircleType",
    "MIN_YEAR",
    "Member",
    "MemberRole",
    "OpenStrEnum",
    "UPDATABLE_FIELDS",
    "VIN_PATTERN",
    "Vehicle",
    "VehicleCreate",
    "VehicleUpdate",
    "max_vehicle_year",
]
