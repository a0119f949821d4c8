"""Request/response channel handlers for the UI process.

Operations are addressed by name with positional arguments (``id`` first,
then the record) and always answer with an envelope dict.  Typed
carcircle errors become ``{"success": false, "error": ...}``; nothing
crosses this boundary as an exception.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from carcircle.accessor import CircleAccessor
from carcircle.envelope import Envelope
from carcircle.exceptions import CarCircleError, CarCircleValidationError
from carcircle.repository import VehicleRepository
from carcircle.validation import validate_circle_filters

_logger = logging.getLogger(__name__)

Handler = Callable[..., Envelope | Awaitable[Envelope]]


class Channel:
    """Registry of named operations answering with :class:`Envelope`."""

    def __init__(self) -> None:
        self._handlers: dict[str, Handler] = {}

    def register(self, operation: str, handler: Handler) -> None:
        if operation in self._handlers:
            raise ValueError(f"Handler already registered for {operation!r}")
        self._handlers[operation] = handler

    @property
    def operations(self) -> list[str]:
        return sorted(self._handlers)

    async def dispatch(self, operation: str, *args: Any) -> dict[str, Any]:
        """Invoke *operation* and return the envelope as a plain dict."""
        handler = self._handlers.get(operation)
        if handler is None:
            return Envelope.fail(f"Unknown operation: {operation}").to_wire()
        try:
            inspect.signature(handler).bind(*args)
        except TypeError as exc:
            _logger.warning("%s called with bad arguments: %s", operation, exc)
            return Envelope.fail(f"Invalid arguments for {operation}: {exc}").to_wire()
        try:
            result = handler(*args)
            if inspect.isawaitable(result):
                result = await result
        except CarCircleError as exc:
            _logger.warning("%s failed (%s): %s", operation, exc.kind, exc)
            return Envelope.fail(str(exc)).to_wire()
        return result.to_wire()


def register_vehicle_handlers(channel: Channel, repository: VehicleRepository) -> None:
    """Expose the vehicle repository as ``vehicle:*`` operations."""

    def get_all() -> Envelope:
        return Envelope.ok(repository.list())

    def get_by_id(vehicle_id: Any) -> Envelope:
        return Envelope.ok(repository.get_by_id(vehicle_id))

    def create(payload: Any) -> Envelope:
        return Envelope.ok(repository.create(payload))

    def update(vehicle_id: Any, payload: Any) -> Envelope:
        return Envelope.ok(repository.update(vehicle_id, payload))

    def delete(vehicle_id: Any) -> Envelope:
        repository.delete(vehicle_id)
        return Envelope.ok_void()

    channel.register("vehicle:getAll", get_all)
    channel.register("vehicle:getById", get_by_id)
    channel.register("vehicle:create", create)
    channel.register("vehicle:update", update)
    channel.register("vehicle:delete", delete)
    _logger.debug("Vehicle handlers registered")


def register_circle_handlers(channel: Channel, accessor: CircleAccessor) -> None:
    """Expose the circle accessor as ``circle:*`` operations.

    Provenance (remote vs cached) is dropped at this boundary; callers
    that care use the accessor directly.
    """

    async def create(payload: Any) -> Envelope:
        result = await accessor.create(payload)
        return Envelope.ok(result.value)

    async def get(circle_id: Any) -> Envelope:
        result = await accessor.get(circle_id)
        return Envelope.ok(result.value)

    async def list_circles(filters: Any = None) -> Envelope:
        filters = validate_circle_filters(filters).unwrap(CarCircleValidationError, "Invalid circle filters")
        result = await accessor.list(
            name=filters.get("name"),
            circle_type=filters.get("circleType"),
            privacy=filters.get("privacy"),
        )
        return Envelope.ok(result.value)

    def seed(overrides: Any = None) -> Envelope:
        return Envelope.ok(accessor.seed_one(overrides))

    async def add_member(circle_id: Any, member: Any) -> Envelope:
        return Envelope.ok(await accessor.add_member(circle_id, member))

    async def join(code: Any, member: Any) -> Envelope:
        return Envelope.ok(await accessor.join_by_invite_code(code, member))

    channel.register("circle:create", create)
    channel.register("circle:get", get)
    channel.register("circle:list", list_circles)
    channel.register("circle:seed", seed)
    channel.register("circle:addMember", add_member)
    channel.register("circle:join", join)
    _logger.debug("Circle handlers registered")
