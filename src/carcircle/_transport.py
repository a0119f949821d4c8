"""HTTP JSON transport for the circle backend."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from carcircle.config import CarCircleConfig
from carcircle.exceptions import RemoteRejectedError, RemoteUnreachableError

_logger = logging.getLogger(__name__)

USER_AGENT = "carcircle/1"


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while
    keeping the production implementation (`HttpTransport`) concrete.
    """

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Mapping[str, Any] | None = None,
        params: Mapping[str, str] | None = None,
    ) -> Any:
        ...


class HttpTransport:
    """aiohttp transport that speaks plain JSON to the backend.

    Raises :class:`RemoteUnreachableError` for connection failures and
    timeouts, and :class:`RemoteRejectedError` for any non-2xx status or
    a 2xx body that is not JSON.
    """

    def __init__(self, config: CarCircleConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    async def request_json(
        self,
        method: str,
        endpoint: str,
        *,
        payload: Mapping[str, Any] | None = None,
        params: Mapping[str, str] | None = None,
    ) -> Any:
        url = f"{self._config.api_base_url.rstrip('/')}{endpoint}"
        headers = {
            "accept": "application/json",
            "content-type": "application/json",
            "user-agent": USER_AGENT,
        }
        body = json.dumps(dict(payload), separators=(",", ":")) if payload is not None else None

        _logger.debug("%s %s", method, url)

        try:
            async with self._http.request(
                method,
                url,
                data=body,
                params=dict(params) if params else None,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                text = await resp.text()
                status = resp.status
        except TimeoutError as exc:
            raise RemoteUnreachableError(f"Request to {endpoint} timed out", endpoint=endpoint) from exc
        except aiohttp.ClientError as exc:
            raise RemoteUnreachableError(f"Request to {endpoint} failed: {exc}", endpoint=endpoint) from exc

        if not 200 <= status < 300:
            raise RemoteRejectedError(
                f"HTTP {status} from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            )

        if not text.strip():
            return None

        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise RemoteRejectedError(
                f"Invalid JSON from {endpoint}: {text[:200]}",
                status_code=status,
                endpoint=endpoint,
            ) from exc
