"""Base model and open enum for circle backend payloads.

Every circle payload model inherits from :class:`CircleBaseModel` which
provides:

* ``alias_generator=to_camel`` so camelCase wire keys map
  automatically to snake_case fields.
* ``to_wire()`` which dumps back to camelCase JSON-ready dicts.

String enumerations the backend owns inherit from :class:`OpenStrEnum`.
Fields typed ``SomeEnum | str`` with ``union_mode="left_to_right"``
resolve known values to members and keep unknown values as the plain
string the backend sent, so new values neither crash the client nor get
normalised away.
"""

from __future__ import annotations

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, HttpUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

_HTTP_URL: TypeAdapter[HttpUrl] = TypeAdapter(HttpUrl)


def check_optional_url(value: str | None) -> str | None:
    """Accept ``None``, ``""`` or an absolute http(s) URL.

    The input string is returned untouched; pydantic's ``HttpUrl``
    would otherwise append a trailing slash.
    """
    if value is None or value == "":
        return value
    try:
        _HTTP_URL.validate_python(value)
    except PydanticValidationError as exc:
        raise ValueError("must be a valid URL or empty") from exc
    return value


class OpenStrEnum(enum.StrEnum):
    """Base for backend-owned string enums that may grow new values."""

    @classmethod
    def parse(cls, value: str) -> OpenStrEnum | str:
        """Return the matching member, or *value* unchanged if unknown."""
        try:
            return cls(value)
        except ValueError:
            return value

    @classmethod
    def is_known(cls, value: Any) -> bool:
        return isinstance(value, cls) or value in cls._value2member_map_


class CircleBaseModel(BaseModel):
    """Base for circle and member payloads exchanged with the backend."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump to a camelCase, JSON-ready dict without unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
