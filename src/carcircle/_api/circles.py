"""Circle backend endpoints.

Thin wrappers around :class:`~carcircle._transport.Transport` that map
each backend route to a typed model.  No caching or fallback happens
here; that is the accessor's job.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from carcircle._transport import Transport
from carcircle.exceptions import RemoteRejectedError
from carcircle.models.circle import Circle, CircleCreate, Member

CIRCLES_ENDPOINT = "/circles"


def circle_endpoint(circle_id: str) -> str:
    return f"{CIRCLES_ENDPOINT}/{quote(circle_id, safe='')}"


def _parse(model_cls: type[BaseModel], data: Any, endpoint: str) -> Any:
    try:
        return model_cls.model_validate(data)
    except PydanticValidationError as exc:
        raise RemoteRejectedError(
            f"{endpoint} returned a payload that is not a valid {model_cls.__name__}: {exc.error_count()} error(s)",
            endpoint=endpoint,
        ) from exc


async def create_circle(transport: Transport, payload: CircleCreate) -> Circle:
    """``POST /circles``."""
    data = await transport.request_json("POST", CIRCLES_ENDPOINT, payload=payload.to_wire())
    circle: Circle = _parse(Circle, data, CIRCLES_ENDPOINT)
    return circle


async def fetch_circle(transport: Transport, circle_id: str) -> Circle:
    """``GET /circles/{id}``."""
    endpoint = circle_endpoint(circle_id)
    data = await transport.request_json("GET", endpoint)
    circle: Circle = _parse(Circle, data, endpoint)
    return circle


async def fetch_circle_list(
    transport: Transport,
    *,
    name: str | None = None,
    circle_type: str | None = None,
    privacy: str | None = None,
) -> list[Circle]:
    """``GET /circles`` with the backend's optional search filters."""
    params: dict[str, str] = {}
    if name:
        params["name"] = name
    if circle_type:
        params["circleType"] = str(circle_type)
    if privacy:
        params["privacy"] = str(privacy)
    data = await transport.request_json("GET", CIRCLES_ENDPOINT, params=params or None)
    if not isinstance(data, list):
        raise RemoteRejectedError(f"{CIRCLES_ENDPOINT} did not return a list", endpoint=CIRCLES_ENDPOINT)
    return [_parse(Circle, item, CIRCLES_ENDPOINT) for item in data]


async def add_member(transport: Transport, circle_id: str, member: Member) -> Member:
    """``POST /circles/{id}/members``; the backend answers 409 for duplicates."""
    endpoint = f"{circle_endpoint(circle_id)}/members"
    data = await transport.request_json("POST", endpoint, payload=member.to_wire())
    added: Member = _parse(Member, data, endpoint)
    return added


async def join_by_invite_code(transport: Transport, code: str, member: Member) -> Circle:
    """``POST /circles/join/{code}``."""
    endpoint = f"{CIRCLES_ENDPOINT}/join/{quote(code, safe='')}"
    data = await transport.request_json("POST", endpoint, payload=member.to_wire())
    circle: Circle = _parse(Circle, data, endpoint)
    return circle
