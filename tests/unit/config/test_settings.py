# tests/unit/config/test_settings.py
# Copyright (c) Maritime Reporting API contributors.
# SPDX-License-Identifier: MIT
from __future__ import annotations

from collections.abc import Iterator

import pytest
from pydantic import ValidationError

from maritime_reporting_api.config.settings import (
    TEST_MODE_ENV,
    Environment,
    Settings,
    get_settings,
    is_test_mode,
)


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_reporting_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "ALLOWED_ORIGINS",
        "REPORT_TYPE_CACHE_TTL_S",
        "REPORT_PAGE_SIZE_MAX",
        "REPORT_NUMBER_RETRY_ATTEMPTS",
        "DB_SCHEMA",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings()

    assert settings.environment is Environment.TEST
    assert settings.db_schema == "public"
    assert settings.report_type_cache_ttl_s == 86400
    assert settings.report_number_retry_attempts == 5
    assert settings.report_page_size_max == 100
    assert settings.report_future_tolerance_s == 3600
    assert settings.cors_allow_origins == []


def test_env_overrides_are_typed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REPORT_TYPE_CACHE_TTL_S", "600")
    monkeypatch.setenv("REPORT_PAGE_SIZE_MAX", "50")
    monkeypatch.setenv("ALLOWED_ORIGINS", "https://ops.example.com, https://bridge.example.com")

    settings = Settings()

    assert settings.report_type_cache_ttl_s == 600
    assert settings.report_page_size_max == 50
    assert settings.cors_allow_origins == [
        "https://ops.example.com",
        "https://bridge.example.com",
    ]


def test_out_of_range_values_are_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("REPORT_PAGE_SIZE_MAX", "0")
    with pytest.raises(ValidationError):
        Settings()


def test_wildcard_cors_only_outside_production(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ALLOWED_ORIGINS", "*")
    assert Settings().cors_allow_origins == ["*"]

    monkeypatch.setenv("ENVIRONMENT", "production")
    with pytest.raises(ValidationError):
        Settings()
    with pytest.raises(RuntimeError, match="Invalid configuration"):
        get_settings()


def test_test_environment_enables_test_mode(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(TEST_MODE_ENV, raising=False)
    assert is_test_mode() is False

    Settings()

    assert is_test_mode() is True


def test_get_settings_is_cached() -> None:
    assert get_settings() is get_settings()
