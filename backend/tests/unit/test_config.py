"""Unit tests for configuration helpers and token settings."""

from datetime import timedelta

import pytest
from taskmanager.core.config import (
    AuthSettings,
    DevelopmentConfig,
    ProductionConfig,
    TestingConfig,
    env_bool,
    env_int,
    get_config,
    parse_duration,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("15m", timedelta(minutes=15)),
        ("7d", timedelta(days=7)),
        ("2h", timedelta(hours=2)),
        ("1w", timedelta(weeks=1)),
        ("3600", timedelta(seconds=3600)),
        (" 30 S ", timedelta(seconds=30)),
        (90, timedelta(seconds=90)),
        (timedelta(minutes=5), timedelta(minutes=5)),
    ],
)
def test_parse_duration(raw, expected):
    assert parse_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "soon", "7y", "-5m", "0", 0])
def test_parse_duration_rejects_garbage_and_non_positive(raw):
    with pytest.raises(ValueError):
        parse_duration(raw)


def test_env_helpers(monkeypatch):
    monkeypatch.setenv("TM_FLAG", "Yes")
    monkeypatch.setenv("TM_NUM", "not-a-number")
    monkeypatch.delenv("TM_MISSING", raising=False)

    assert env_bool("TM_FLAG") is True
    assert env_bool("TM_MISSING", default=True) is True
    assert env_int("TM_NUM", 7) == 7
    assert env_int("TM_MISSING", 3) == 3


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("testing", TestingConfig),
        ("PRODUCTION", ProductionConfig),
        ("unknown", DevelopmentConfig),
    ],
)
def test_get_config_selects_by_app_env(monkeypatch, value, expected):
    monkeypatch.setenv("APP_ENV", value)
    assert get_config() is expected


class TestAuthSettings:
    def test_from_mapping_parses_durations(self):
        settings = AuthSettings.from_mapping(
            {
                "JWT_ACCESS_SECRET": "a",
                "JWT_REFRESH_SECRET": "b",
                "JWT_ACCESS_EXPIRES": "15m",
                "JWT_REFRESH_EXPIRES": "30d",
            }
        )

        assert settings.access_expires == timedelta(minutes=15)
        assert settings.refresh_expires == timedelta(days=30)
        assert settings.algorithm == "HS256"

    def test_secrets_must_differ(self):
        with pytest.raises(ValueError, match="different"):
            AuthSettings("same", "same", timedelta(minutes=1), timedelta(days=1))

    def test_secrets_are_required(self):
        with pytest.raises(ValueError):
            AuthSettings("", "b", timedelta(minutes=1), timedelta(days=1))

    def test_is_frozen(self):
        settings = AuthSettings("a", "b", timedelta(minutes=1), timedelta(days=1))
        with pytest.raises(AttributeError):
            settings.access_secret = "c"  # type: ignore[misc]

    def test_stored_on_app(self, app):
        stored = app.extensions["auth_settings"]
        assert stored.access_expires == timedelta(minutes=15)
        assert stored.access_secret != stored.refresh_secret
