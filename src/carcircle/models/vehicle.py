"""Vehicle models.

``VehicleCreate`` and ``VehicleUpdate`` describe caller input and are
strict: integers must arrive as integers, not strings or booleans.
``Vehicle`` mirrors a row of the ``vehicles`` table as storage returns it.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_YEAR = 1900

VIN_PATTERN = re.compile(r"^[A-HJ-NPR-Z0-9]{17}$")
"""17 characters, digits and capitals excluding ``I``, ``O`` and ``Q``."""

UPDATABLE_FIELDS: tuple[str, ...] = ("make", "model", "year", "color", "vin", "mileage")
"""Columns a partial update may touch."""


def max_vehicle_year() -> int:
    """Latest accepted model year: next calendar year."""
    return date.today().year + 1


def _check_year(value: int) -> int:
    if value < MIN_YEAR:
        raise ValueError(f"Year must be {MIN_YEAR} or later")
    if value > max_vehicle_year():
        raise ValueError("Year cannot be in the future")
    return value


def _normalize_vin(value: str | None) -> str | None:
    # Empty VINs are stored as NULL so UNIQUE only binds real VINs.
    if value is None or value == "":
        return None
    if not VIN_PATTERN.match(value):
        raise ValueError("VIN must be 17 alphanumeric characters (no I, O or Q)")
    return value


class VehicleCreate(BaseModel):
    """Input for creating a vehicle; id and created_at are assigned by storage."""

    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)

    make: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=100)
    year: int
    color: str | None = Field(default=None, max_length=50)
    vin: str | None = None
    mileage: int | None = Field(default=None, ge=0)

    @field_validator("year")
    @classmethod
    def _year_in_range(cls, value: int) -> int:
        return _check_year(value)

    @field_validator("vin")
    @classmethod
    def _vin_format(cls, value: str | None) -> str | None:
        return _normalize_vin(value)

    def to_row(self) -> dict[str, Any]:
        """Column values for INSERT; omitted values fall back to column defaults."""
        return self.model_dump(exclude_none=True)


class VehicleUpdate(BaseModel):
    """Partial input for updating a vehicle.

    Only fields present in ``model_fields_set`` are written.  ``make``,
    ``model`` and ``year`` cannot be cleared; ``color``, ``vin`` and
    ``mileage`` can be set to ``None``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", strict=True)

    make: str | None = Field(default=None, min_length=1, max_length=100)
    model: str | None = Field(default=None, min_length=1, max_length=100)
    year: int | None = None
    color: str | None = Field(default=None, max_length=50)
    vin: str | None = None
    mileage: int | None = Field(default=None, ge=0)

    @field_validator("make", "model", "year", mode="before")
    @classmethod
    def _not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("cannot be null")
        return value

    @field_validator("year")
    @classmethod
    def _year_in_range(cls, value: int | None) -> int | None:
        if value is None:
            return value
        return _check_year(value)

    @field_validator("vin")
    @classmethod
    def _vin_format(cls, value: str | None) -> str | None:
        return _normalize_vin(value)

    def to_row(self) -> dict[str, Any]:
        """Column values for UPDATE, restricted to the supplied fields."""
        supplied = [name for name in UPDATABLE_FIELDS if name in self.model_fields_set]
        return self.model_dump(include=set(supplied))


class Vehicle(BaseModel):
    """A persisted vehicle, as read back from storage."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int = Field(gt=0)
    make: str
    model: str
    year: int
    color: str | None = None
    vin: str | None = None
    mileage: int | None = None
    created_at: str | None = None
    """SQLite ``CURRENT_TIMESTAMP`` text (UTC, ``YYYY-MM-DD HH:MM:SS``)."""

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
