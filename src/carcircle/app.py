"""Wiring of the data-access layer for a desktop host process."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp
from sqlalchemy import Engine

from carcircle._transport import HttpTransport
from carcircle.accessor import CircleAccessor
from carcircle.cache import CircleCache
from carcircle.config import CarCircleConfig
from carcircle.db import open_database
from carcircle.exceptions import CarCircleError
from carcircle.ipc import Channel, register_circle_handlers, register_vehicle_handlers
from carcircle.repository import VehicleRepository

_logger = logging.getLogger(__name__)


class CarCircleApp:
    """Owns the SQLite engine, the HTTP session and the UI channel.

    Usage::

        async with CarCircleApp(CarCircleConfig.from_env()) as app:
            reply = await app.channel.dispatch("vehicle:getAll")
    """

    def __init__(
        self,
        config: CarCircleConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        engine: Engine | None = None,
        cache: CircleCache | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._external_engine = engine is not None
        self._engine = engine
        self._cache = cache if cache is not None else CircleCache()
        self._vehicles: VehicleRepository | None = None
        self._circles: CircleAccessor | None = None
        self._channel: Channel | None = None

    async def __aenter__(self) -> CarCircleApp:
        if self._engine is None:
            self._engine = open_database(self._config)
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession()

        self._vehicles = VehicleRepository(self._engine)
        self._circles = CircleAccessor(
            HttpTransport(self._config, self._http_session),
            self._cache,
            fallback_on_rejection=self._config.fallback_on_rejection,
        )
        channel = Channel()
        register_vehicle_handlers(channel, self._vehicles)
        register_circle_handlers(channel, self._circles)
        self._channel = channel
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._circles is not None:
            await self._circles.wait_background()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        if not self._external_engine and self._engine is not None:
            self._engine.dispose()
            _logger.debug("Database connection closed")
            self._engine = None
        self._vehicles = None
        self._circles = None
        self._channel = None

    def _require(self, value: Any) -> Any:
        if value is None:
            raise CarCircleError("App not initialized. Use 'async with CarCircleApp(...) as app:'")
        return value

    @property
    def vehicles(self) -> VehicleRepository:
        repository: VehicleRepository = self._require(self._vehicles)
        return repository

    @property
    def circles(self) -> CircleAccessor:
        accessor: CircleAccessor = self._require(self._circles)
        return accessor

    @property
    def channel(self) -> Channel:
        channel: Channel = self._require(self._channel)
        return channel
