"""Tests for Settings validation and parsing."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from kmb_eta.core.config import SUPPORTED_LANGUAGES, Settings, get_settings
from kmb_eta.services.kmb_dto import Language


def test_defaults_target_public_endpoint(monkeypatch):
    for name in ("KMB_ETA_URL", "KMB_PROXY_URL", "KMB_LANGUAGE", "KMB_ETA_ATTEMPTS"):
        monkeypatch.delenv(name, raising=False)

    settings = Settings(_env_file=None)

    assert settings.eta_url == "https://etav3.kmb.hk/"
    assert settings.proxy_url is None
    assert settings.language == "en"
    assert settings.eta_attempts == 5
    assert settings.tzinfo.key == "Asia/Hong_Kong"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("KMB_PROXY_URL", "https://example.com/")
    monkeypatch.setenv("KMB_LANGUAGE", "zh-hant")
    monkeypatch.setenv("KMB_ETA_ATTEMPTS", "2")
    monkeypatch.setenv("KMB_API_CTR", "1043206738")

    settings = Settings(_env_file=None)

    assert settings.proxy_url == "https://example.com/"
    assert settings.language == "zh-hant"
    assert settings.eta_attempts == 2
    assert settings.api_ctr == 1043206738


def test_blank_proxy_is_none():
    assert Settings(KMB_PROXY_URL="  ").proxy_url is None


def test_unknown_language_rejected():
    with pytest.raises(ValidationError):
        Settings(KMB_LANGUAGE="fr")


def test_unknown_timezone_rejected():
    with pytest.raises(ValidationError):
        Settings(KMB_TIMEZONE="Mars/Olympus_Mons")


@pytest.mark.parametrize(
    ("field", "value"),
    [("KMB_ETA_ATTEMPTS", -1), ("KMB_HTTP_TIMEOUT_SECONDS", 0)],
)
def test_bounds_enforced(field, value):
    with pytest.raises(ValidationError):
        Settings(**{field: value})


def test_get_settings_is_cached():
    get_settings.cache_clear()
    try:
        assert get_settings() is get_settings()
    finally:
        get_settings.cache_clear()


def test_supported_languages_follow_language_enum():
    assert SUPPORTED_LANGUAGES == tuple(language.value for language in Language)
    assert SUPPORTED_LANGUAGES == ("en", "zh-hans", "zh-hant")
