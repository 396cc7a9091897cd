"""Secret providers used to sign ETA requests.

The signing algorithm belongs to the provider. The client only calls
``get_secret()`` for query signing and ``get_secret(query_string)`` for the
request-bound body credential of POST requests, forwarding the results as-is.
"""

from __future__ import annotations

from typing import Protocol

from kmb_eta.core.config import Settings, get_settings
from kmb_eta.services.kmb_dto import Secret
from kmb_eta.services.kmb_errors import KMBServiceError


class SecretProvider(Protocol):
    """Supplies signing credentials for ETA requests."""

    vendor_id: str

    def get_secret(self, query: str | None = None) -> Secret:
        ...


class StaticSecretProvider:
    """Hands out a fixed credential regardless of the query."""

    def __init__(self, api_key: str, ctr: int, vendor_id: str = "") -> None:
        self.vendor_id = vendor_id
        self._secret = Secret(api_key=api_key, ctr=ctr)

    def get_secret(self, query: str | None = None) -> Secret:
        return self._secret

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> StaticSecretProvider:
        """Build a provider from KMB_API_KEY, KMB_API_CTR and KMB_VENDOR_ID."""
        settings = settings or get_settings()
        if not settings.api_key or settings.api_ctr is None:
            raise KMBServiceError(
                "KMB_API_KEY and KMB_API_CTR must be set to sign ETA requests."
            )
        return cls(settings.api_key, settings.api_ctr, vendor_id=settings.vendor_id)


__all__ = ["SecretProvider", "StaticSecretProvider"]
