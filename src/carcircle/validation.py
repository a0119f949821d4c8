"""Validation layer.

Pure functions that check input shape and field constraints before any
storage or network call.  They never raise for business-invalid input:
every outcome is a :class:`ValidationResult`, and a failed result lists
every violated field constraint.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from carcircle._ids import is_valid_invite_code
from carcircle.exceptions import CarCircleValidationError, FieldIssue
from carcircle.models.circle import CircleCreate, Member
from carcircle.models.vehicle import UPDATABLE_FIELDS, VehicleCreate, VehicleUpdate

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

NO_FIELDS_TO_UPDATE = "No fields to update"


@dataclass(frozen=True)
class ValidationResult(Generic[T]):
    """Either a normalized value or the list of violated constraints."""

    value: T | None = None
    issues: tuple[FieldIssue, ...] = ()

    @classmethod
    def success(cls, value: T) -> ValidationResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, issues: list[FieldIssue] | tuple[FieldIssue, ...]) -> ValidationResult[T]:
        return cls(issues=tuple(issues))

    @property
    def ok(self) -> bool:
        return not self.issues

    @property
    def message(self) -> str:
        return ", ".join(str(issue) for issue in self.issues)

    def unwrap(
        self,
        error_cls: type[CarCircleValidationError] = CarCircleValidationError,
        prefix: str = "Invalid input",
    ) -> T:
        """Return the value, or raise *error_cls* carrying every issue."""
        if self.issues:
            raise error_cls(f"{prefix}: {self.message}", issues=self.issues)
        assert self.value is not None  # noqa: S101
        return self.value


def _clean_message(message: str) -> str:
    # pydantic prefixes messages raised from validators.
    for prefix in ("Value error, ", "Assertion failed, "):
        if message.startswith(prefix):
            return message[len(prefix) :]
    return message


def issues_from_pydantic(exc: PydanticValidationError) -> list[FieldIssue]:
    """Flatten a pydantic error into one :class:`FieldIssue` per violation."""
    issues: list[FieldIssue] = []
    for error in exc.errors(include_url=False):
        field = ".".join(str(part) for part in error.get("loc", ()))
        issues.append(FieldIssue(field=field, message=_clean_message(str(error.get("msg", "")))))
    return issues


def _validate_model(model_cls: type[M], payload: Any) -> ValidationResult[M]:
    if not isinstance(payload, Mapping):
        return ValidationResult.failure([FieldIssue("", "payload must be an object")])
    try:
        return ValidationResult.success(model_cls.model_validate(dict(payload)))
    except PydanticValidationError as exc:
        return ValidationResult.failure(issues_from_pydantic(exc))


def validate_vehicle_id(value: Any) -> ValidationResult[int]:
    # bool is an int subclass; True must not pass as id 1.
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        return ValidationResult.failure([FieldIssue("id", "must be a positive integer")])
    return ValidationResult.success(value)


def validate_vehicle_create(payload: Any) -> ValidationResult[VehicleCreate]:
    return _validate_model(VehicleCreate, payload)


def validate_vehicle_update(payload: Any) -> ValidationResult[VehicleUpdate]:
    """Validate a partial update.

    Keys outside :data:`UPDATABLE_FIELDS` are dropped first; if nothing
    is left the update is rejected before any field is checked.
    """
    if not isinstance(payload, Mapping):
        return ValidationResult.failure([FieldIssue("", "payload must be an object")])
    supplied = {name: payload[name] for name in UPDATABLE_FIELDS if name in payload}
    if not supplied:
        return ValidationResult.failure([FieldIssue("", NO_FIELDS_TO_UPDATE)])
    return _validate_model(VehicleUpdate, supplied)


def validate_circle_create(payload: Any) -> ValidationResult[CircleCreate]:
    if isinstance(payload, CircleCreate):
        return ValidationResult.success(payload)
    return _validate_model(CircleCreate, payload)


def validate_circle_id(value: Any) -> ValidationResult[str]:
    if not isinstance(value, str) or not value.strip():
        return ValidationResult.failure([FieldIssue("id", "must be a non-empty string")])
    return ValidationResult.success(value)


def validate_member(payload: Any) -> ValidationResult[Member]:
    if isinstance(payload, Member):
        return ValidationResult.success(payload)
    return _validate_model(Member, payload)


CIRCLE_FILTER_KEYS: tuple[str, ...] = ("name", "circleType", "privacy")


def validate_circle_filters(payload: Any) -> ValidationResult[dict[str, str]]:
    """Check ``circle:list`` filters: an optional object of string values.

    Keys outside :data:`CIRCLE_FILTER_KEYS` are dropped, as are null and
    empty values.
    """
    if payload is None:
        return ValidationResult.success({})
    if not isinstance(payload, Mapping):
        return ValidationResult.failure([FieldIssue("", "filters must be an object")])
    issues: list[FieldIssue] = []
    filters: dict[str, str] = {}
    for key in CIRCLE_FILTER_KEYS:
        value = payload.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            issues.append(FieldIssue(key, "must be a string"))
        elif value:
            filters[key] = value
    if issues:
        return ValidationResult.failure(issues)
    return ValidationResult.success(filters)


def validate_seed_overrides(payload: Any) -> ValidationResult[dict[str, Any]]:
    """Check seed overrides: an optional object using wire keys.

    ``inviteCode`` is not a create field, so its format is checked here
    and returned with dashes stripped.  The remaining keys are checked
    later as part of the circle create payload.
    """
    if payload is None:
        return ValidationResult.success({})
    if not isinstance(payload, Mapping):
        return ValidationResult.failure([FieldIssue("", "overrides must be an object")])
    overrides = dict(payload)
    code = overrides.get("inviteCode")
    if code is not None:
        if not isinstance(code, str) or not is_valid_invite_code(code):
            return ValidationResult.failure([FieldIssue("inviteCode", "must be 8 characters of A-Z and 0-9")])
        overrides["inviteCode"] = code.replace("-", "")
    return ValidationResult.success(overrides)
