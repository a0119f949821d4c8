from __future__ import annotations

import pytest

from carcircle.config import CarCircleConfig
from carcircle.exceptions import CarCircleConfigError


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "CARCIRCLE_DATABASE_PATH",
        "CARCIRCLE_API_BASE_URL",
        "CARCIRCLE_REQUEST_TIMEOUT",
        "CARCIRCLE_FALLBACK_ON_REJECTION",
        "CARCIRCLE_SEED_SAMPLE_DATA",
        "CARCIRCLE_SQL_ECHO",
    ):
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = CarCircleConfig.from_env()
    assert config.database_path == "carcircle.db"
    assert config.api_base_url == "http://localhost:8080/api"
    assert config.fallback_on_rejection is False
    assert config.database_url == "sqlite:///carcircle.db"


def test_environment_is_read(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARCIRCLE_DATABASE_PATH", ":memory:")
    monkeypatch.setenv("CARCIRCLE_API_BASE_URL", "https://circles.example.com/api")
    monkeypatch.setenv("CARCIRCLE_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("CARCIRCLE_FALLBACK_ON_REJECTION", "yes")
    monkeypatch.setenv("CARCIRCLE_SEED_SAMPLE_DATA", "1")

    config = CarCircleConfig.from_env()

    assert config.database_url == "sqlite://"
    assert config.api_base_url == "https://circles.example.com/api"
    assert config.request_timeout == 2.5
    assert config.fallback_on_rejection is True
    assert config.seed_sample_data is True
    assert config.sql_echo is False


def test_overrides_beat_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARCIRCLE_REQUEST_TIMEOUT", "not-a-number")
    monkeypatch.setenv("CARCIRCLE_SQL_ECHO", "true")

    config = CarCircleConfig.from_env(request_timeout=1.0, sql_echo=False)

    assert config.request_timeout == 1.0
    assert config.sql_echo is False


def test_bad_timeout_in_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CARCIRCLE_REQUEST_TIMEOUT", "soon")
    with pytest.raises(CarCircleConfigError, match="CARCIRCLE_REQUEST_TIMEOUT"):
        CarCircleConfig.from_env()


@pytest.mark.parametrize("kwargs", [{"database_path": ""}, {"request_timeout": 0}, {"request_timeout": -1.0}])
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(CarCircleConfigError):
        CarCircleConfig(**kwargs)
