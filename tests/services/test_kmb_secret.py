"""Tests for the bundled secret provider."""

from __future__ import annotations

import pytest

from kmb_eta.core.config import Settings
from kmb_eta.services.kmb_dto import Secret
from kmb_eta.services.kmb_errors import KMBServiceError
from kmb_eta.services.kmb_secret import StaticSecretProvider


def test_static_provider_ignores_query():
    provider = StaticSecretProvider("KEY", 12, vendor_id="V")

    assert provider.get_secret() == Secret("KEY", 12)
    assert provider.get_secret("?lang=en") == Secret("KEY", 12)
    assert provider.vendor_id == "V"


def test_from_settings():
    settings = Settings(
        _env_file=None, KMB_API_KEY="KEY", KMB_API_CTR=34, KMB_VENDOR_ID="V"
    )

    provider = StaticSecretProvider.from_settings(settings)

    assert provider.get_secret() == Secret("KEY", 34)
    assert provider.vendor_id == "V"


def test_from_settings_requires_credentials(monkeypatch):
    monkeypatch.delenv("KMB_API_KEY", raising=False)
    monkeypatch.delenv("KMB_API_CTR", raising=False)

    with pytest.raises(KMBServiceError):
        StaticSecretProvider.from_settings(Settings(_env_file=None))
