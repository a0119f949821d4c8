"""Vehicle repository.

CRUD operations against the ``vehicles`` table.  Every write re-reads
the affected row inside the same transaction, so the returned
:class:`Vehicle` is always storage's own view (defaults, NULLs, ids).
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import Connection, Engine, delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from carcircle.db import vehicles
from carcircle.exceptions import (
    ConflictError,
    StorageUnavailableError,
    VehicleNotFoundError,
    VehicleValidationError,
)
from carcircle.models.vehicle import Vehicle
from carcircle.validation import validate_vehicle_create, validate_vehicle_id, validate_vehicle_update

_logger = logging.getLogger(__name__)


def _conflict_message(exc: IntegrityError) -> str:
    detail = str(exc.orig) if exc.orig is not None else str(exc)
    if "vehicles.vin" in detail:
        return "A vehicle with this VIN already exists"
    return f"Constraint violation: {detail}"


class VehicleRepository:
    """Repository for the locally owned vehicle records."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @contextmanager
    def _transaction(self, action: str) -> Iterator[Connection]:
        """Run a block in one transaction and map storage failures."""
        try:
            with self._engine.begin() as conn:
                yield conn
        except IntegrityError as exc:
            _logger.warning("Vehicle %s violated a constraint: %s", action, exc.orig)
            raise ConflictError(_conflict_message(exc)) from exc
        except SQLAlchemyError as exc:
            _logger.error("Vehicle %s failed: %s", action, exc)
            raise StorageUnavailableError(f"Storage unavailable during {action}: {exc}") from exc

    @staticmethod
    def _fetch(conn: Connection, vehicle_id: int) -> Vehicle | None:
        row = conn.execute(select(vehicles).where(vehicles.c.id == vehicle_id)).mappings().first()
        if row is None:
            return None
        return Vehicle.model_validate(dict(row))

    def list(self) -> list[Vehicle]:
        """All vehicles, most recently created first."""
        query = select(vehicles).order_by(vehicles.c.created_at.desc(), vehicles.c.id.desc())
        with self._transaction("list") as conn:
            rows = conn.execute(query).mappings().all()
        return [Vehicle.model_validate(dict(row)) for row in rows]

    def get_by_id(self, vehicle_id: Any) -> Vehicle:
        checked = validate_vehicle_id(vehicle_id).unwrap(VehicleValidationError, "Invalid vehicle ID")
        with self._transaction("get") as conn:
            vehicle = self._fetch(conn, checked)
        if vehicle is None:
            raise VehicleNotFoundError(checked)
        return vehicle

    def create(self, payload: Any) -> Vehicle:
        data = validate_vehicle_create(payload).unwrap(VehicleValidationError, "Invalid vehicle data")
        with self._transaction("create") as conn:
            result = conn.execute(insert(vehicles).values(**data.to_row()))
            new_id = result.inserted_primary_key[0]
            vehicle = self._fetch(conn, new_id)
        if vehicle is None:
            raise StorageUnavailableError(f"Vehicle {new_id} vanished after insert")
        _logger.debug("Created vehicle %s", vehicle.id)
        return vehicle

    def update(self, vehicle_id: Any, payload: Any) -> Vehicle:
        """Apply a partial update; only supplied fields change."""
        checked = validate_vehicle_id(vehicle_id).unwrap(VehicleValidationError, "Invalid vehicle ID")
        data = validate_vehicle_update(payload).unwrap(VehicleValidationError, "Invalid vehicle data")
        values = data.to_row()
        with self._transaction("update") as conn:
            conn.execute(update(vehicles).where(vehicles.c.id == checked).values(**values))
            vehicle = self._fetch(conn, checked)
        if vehicle is None:
            raise VehicleNotFoundError(checked)
        _logger.debug("Updated vehicle %s fields %s", checked, sorted(values))
        return vehicle

    def delete(self, vehicle_id: Any) -> None:
        checked = validate_vehicle_id(vehicle_id).unwrap(VehicleValidationError, "Invalid vehicle ID")
        with self._transaction("delete") as conn:
            exists = conn.execute(select(vehicles.c.id).where(vehicles.c.id == checked)).first()
            if exists is not None:
                conn.execute(delete(vehicles).where(vehicles.c.id == checked))
        if exists is None:
            raise VehicleNotFoundError(checked)
        _logger.debug("Deleted vehicle %s", checked)
