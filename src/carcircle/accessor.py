"""Dual-source accessor for circles.

The remote backend is the system of record.  Every call tries it first;
successful answers refresh the local :class:`CircleCache`, and failed
calls fall back to that cache (or, for ``create``, to a locally
synthesized record).  Results say which branch produced them.

Usage::

    async with aiohttp.ClientSession() as http:
        accessor = CircleAccessor(HttpTransport(config, http))
        result = await accessor.create({"name": "Book club"})
        if result.from_cache:
            ...  # only the local shadow exists for now
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from carcircle._api import circles as _circles_api
from carcircle._ids import generate_invite_code, is_valid_invite_code, new_circle_id, random_circle_name, random_member
from carcircle._transport import Transport
from carcircle.cache import CircleCache
from carcircle.exceptions import (
    CarCircleError,
    CarCircleValidationError,
    CircleNotFoundError,
    DuplicateMemberError,
    FieldIssue,
    RemoteError,
    RemoteRejectedError,
    RemoteUnreachableError,
)
from carcircle.models.circle import Circle, CircleCreate, CirclePrivacy, CircleType, Member
from carcircle.validation import (
    validate_circle_create,
    validate_circle_filters,
    validate_circle_id,
    validate_member,
    validate_seed_overrides,
)

_logger = logging.getLogger(__name__)

T = TypeVar("T")

_HTTP_NOT_FOUND = 404
_HTTP_CONFLICT = 409


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class RemoteResult(Generic[T]):
    """Value answered by the remote authority."""

    value: T

    @property
    def from_cache(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class CachedResult(Generic[T]):
    """Best-effort local value used because the remote call failed.

    ``synthesized`` is ``True`` when the record was created locally and
    the remote has never seen it.
    """

    value: T
    reason: RemoteError
    synthesized: bool = False

    @property
    def from_cache(self) -> bool:
        return True


def _matches(circle: Circle, name: str | None, circle_type: str | None, privacy: str | None) -> bool:
    if name and name.lower() not in circle.name.lower():
        return False
    if circle_type and circle.circle_type != circle_type:
        return False
    return not (privacy and circle.privacy != privacy)


class CircleAccessor:
    """Remote-first circle operations with a local fallback cache.

    Each call is independent.  The cache is owned by this instance (or
    injected), so two accessors never share hidden state.
    """

    def __init__(
        self,
        transport: Transport,
        cache: CircleCache | None = None,
        *,
        fallback_on_rejection: bool = False,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._transport = transport
        self._cache = cache if cache is not None else CircleCache()
        self._fallback_on_rejection = fallback_on_rejection
        self._clock = clock
        self._background: set[asyncio.Task[Any]] = set()

    @property
    def cache(self) -> CircleCache:
        return self._cache

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _should_fall_back(self, exc: RemoteError) -> bool:
        if isinstance(exc, RemoteUnreachableError):
            return True
        return self._fallback_on_rejection

    def _synthesize(self, data: CircleCreate, *, invite_code: str | None = None) -> Circle:
        """Build a complete circle locally, defaulting every unset field."""
        return Circle(
            id=new_circle_id(),
            name=data.name,
            description=data.description,
            circle_type=data.circle_type or CircleType.OTHER,
            privacy=data.privacy or CirclePrivacy.PUBLIC,
            avatar_url=data.avatar_url if data.avatar_url is not None else "",
            settings=dict(data.settings) if data.settings is not None else {"color": "blue"},
            invite_code=invite_code or generate_invite_code(),
            members=list(data.members) if data.members is not None else [random_member()],
            created_at=self._clock().isoformat(),
        )

    # ------------------------------------------------------------------
    # Circles
    # ------------------------------------------------------------------

    async def create(self, payload: Mapping[str, Any] | CircleCreate) -> RemoteResult[Circle] | CachedResult[Circle]:
        """Create a circle remotely, or synthesize it locally if the remote fails."""
        data = validate_circle_create(payload).unwrap(CarCircleValidationError, "Invalid circle data")
        try:
            created = await _circles_api.create_circle(self._transport, data)
        except RemoteError as exc:
            if not self._should_fall_back(exc):
                raise
            _logger.warning("Circle create failed remotely, creating local shadow: %s", exc)
            local = self._cache.put(self._synthesize(data))
            return CachedResult(local, reason=exc, synthesized=True)
        return RemoteResult(self._cache.put(created))

    async def get(self, circle_id: str) -> RemoteResult[Circle] | CachedResult[Circle]:
        """Fetch a circle, falling back to the cached shadow.

        A 404 from the remote always consults the cache: circles made on
        the fallback path are unknown to the backend.
        """
        checked = validate_circle_id(circle_id).unwrap(CarCircleValidationError, "Invalid circle ID")
        try:
            circle = await _circles_api.fetch_circle(self._transport, checked)
        except RemoteError as exc:
            if not (self._should_fall_back(exc) or exc.status_code == _HTTP_NOT_FOUND):
                raise
            cached = self._cache.get(checked)
            if cached is None:
                raise CircleNotFoundError(checked) from exc
            _logger.warning("Circle %s fetch failed remotely, serving cached copy: %s", checked, exc)
            return CachedResult(cached, reason=exc)
        return RemoteResult(self._cache.put(circle))

    async def list(
        self,
        *,
        name: str | None = None,
        circle_type: str | None = None,
        privacy: str | None = None,
    ) -> RemoteResult[list[Circle]] | CachedResult[list[Circle]]:
        """List circles, refreshing the cache with every returned record.

        On fallback the cached snapshot is filtered locally with the same
        criteria; its order is not meaningful.
        """
        validate_circle_filters({"name": name, "circleType": circle_type, "privacy": privacy}).unwrap(
            CarCircleValidationError, "Invalid circle filters"
        )
        try:
            circles = await _circles_api.fetch_circle_list(
                self._transport,
                name=name,
                circle_type=circle_type,
                privacy=privacy,
            )
        except RemoteError as exc:
            if not self._should_fall_back(exc):
                raise
            _logger.warning("Circle list failed remotely, serving cached snapshot: %s", exc)
            snapshot = [c for c in self._cache.snapshot() if _matches(c, name, circle_type, privacy)]
            return CachedResult(snapshot, reason=exc)
        self._cache.put_many(circles)
        return RemoteResult(circles)

    def seed_one(self, overrides: Mapping[str, Any] | None = None) -> Circle:
        """Cache a demo circle immediately and try to create it remotely.

        The remote create is fire-and-forget on the running event loop;
        when it succeeds the backend's record is cached under its own id
        next to the local seed.  *overrides* use wire (camelCase) keys.
        """
        overrides = validate_seed_overrides(overrides).unwrap(CarCircleValidationError, "Invalid seed overrides")
        invite_code = overrides.pop("inviteCode", None)
        defaults: dict[str, Any] = {
            "name": random_circle_name(),
            "description": "Seeded dummy circle",
            "circleType": CircleType.HOBBY.value,
            "privacy": CirclePrivacy.PRIVATE.value,
            "avatarUrl": "",
            "settings": {"color": "purple"},
            "members": [random_member().to_wire(), random_member().to_wire()],
        }
        data = validate_circle_create({**defaults, **overrides}).unwrap(CarCircleValidationError, "Invalid circle data")
        local = self._cache.put(self._synthesize(data, invite_code=invite_code))

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _logger.debug("No running event loop; seeded circle %s stays local", local.id)
            return local
        task = loop.create_task(self._seed_remote(data))
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return local

    async def _seed_remote(self, data: CircleCreate) -> None:
        try:
            created = await _circles_api.create_circle(self._transport, data)
        except CarCircleError as exc:
            _logger.warning("Seeded circle could not be created remotely: %s", exc)
            return
        except Exception:
            _logger.warning("Seeded circle remote create failed unexpectedly", exc_info=True)
            return
        self._cache.put(created)

    async def wait_background(self) -> None:
        """Wait for pending fire-and-forget remote calls."""
        if self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # ------------------------------------------------------------------
    # Membership (remote only)
    # ------------------------------------------------------------------

    async def add_member(self, circle_id: str, member: Mapping[str, Any] | Member) -> Member:
        """Add a member remotely and append it to the cached shadow."""
        checked = validate_circle_id(circle_id).unwrap(CarCircleValidationError, "Invalid circle ID")
        data = validate_member(member).unwrap(CarCircleValidationError, "Invalid member data")
        try:
            added = await _circles_api.add_member(self._transport, checked, data)
        except RemoteRejectedError as exc:
            if exc.status_code == _HTTP_CONFLICT:
                raise DuplicateMemberError(f"User {data.user_id} is already a member of circle {checked}") from exc
            if exc.status_code == _HTTP_NOT_FOUND:
                raise CircleNotFoundError(checked) from exc
            raise
        cached = self._cache.get(checked)
        if cached is not None:
            self._cache.put(cached.with_member(added))
        return added

    async def join_by_invite_code(self, code: str, member: Mapping[str, Any] | Member) -> Circle:
        """Join a circle through its invite code; caches the returned circle."""
        if not is_valid_invite_code(code):
            raise CarCircleValidationError(
                "Invalid invite code",
                issues=[FieldIssue("inviteCode", "must be 8 characters of A-Z and 0-9")],
            )
        data = validate_member(member).unwrap(CarCircleValidationError, "Invalid member data")
        try:
            circle = await _circles_api.join_by_invite_code(self._transport, code.replace("-", ""), data)
        except RemoteRejectedError as exc:
            if exc.status_code == _HTTP_CONFLICT:
                raise DuplicateMemberError(f"User {data.user_id} is already a member of this circle") from exc
            raise
        return self._cache.put(circle)
