"""Configuration for carcircle."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from carcircle.exceptions import CarCircleConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class CarCircleConfig:
    """Application configuration.

    Parameters
    ----------
    database_path : str
        SQLite file holding the vehicle table. ``":memory:"`` keeps the
        store in memory for the lifetime of the engine.
    api_base_url : str
        Base URL of the remote circle backend, without trailing slash.
    request_timeout : float
        Total timeout in seconds for a single remote call.
    fallback_on_rejection : bool
        When ``True``, a 4xx/5xx answer from the remote takes the same
        cache fallback path as an unreachable remote. When ``False``
        (default) rejections are raised as
        :class:`~carcircle.exceptions.RemoteRejectedError`.
    seed_sample_data : bool
        Insert the demo vehicles when the table is empty.
    sql_echo : bool
        Echo SQL statements through the ``sqlalchemy.engine`` logger.
    """

    database_path: str = "carcircle.db"
    api_base_url: str = "http://localhost:8080/api"
    request_timeout: float = 10.0
    fallback_on_rejection: bool = False
    seed_sample_data: bool = False
    sql_echo: bool = False

    def __post_init__(self) -> None:
        if not self.database_path:
            raise CarCircleConfigError("database_path must not be empty")
        if self.request_timeout <= 0:
            raise CarCircleConfigError("request_timeout must be positive")

    @property
    def database_url(self) -> str:
        if self.database_path == ":memory:":
            return "sqlite://"
        return f"sqlite:///{self.database_path}"

    @classmethod
    def from_env(cls, **overrides: Any) -> CarCircleConfig:
        """Create configuration from ``CARCIRCLE_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "CARCIRCLE_DATABASE_PATH": "database_path",
            "CARCIRCLE_API_BASE_URL": "api_base_url",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("CARCIRCLE_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise CarCircleConfigError(f"CARCIRCLE_REQUEST_TIMEOUT is not a number: {timeout_env!r}") from exc

        if "fallback_on_rejection" not in overrides:
            config_kwargs["fallback_on_rejection"] = _env_bool(env.get("CARCIRCLE_FALLBACK_ON_REJECTION"), False)
        if "seed_sample_data" not in overrides:
            config_kwargs["seed_sample_data"] = _env_bool(env.get("CARCIRCLE_SEED_SAMPLE_DATA"), False)
        if "sql_echo" not in overrides:
            config_kwargs["sql_echo"] = _env_bool(env.get("CARCIRCLE_SQL_ECHO"), False)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
