from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from kmb_eta.core.config import Settings
from kmb_eta.services.kmb_client import KMBClient
from kmb_eta.services.kmb_dto import Route, Stop, StopRoute, Variant
from kmb_eta.services.kmb_transport import EtaTransport
from tests.fixtures.kmb_payloads import ETA_URL, VENDOR_ID, FakeSecretProvider

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture()
def settings() -> Settings:
    return Settings(KMB_ETA_URL=ETA_URL, KMB_VENDOR_ID=VENDOR_ID)


@pytest.fixture()
def secret_provider() -> FakeSecretProvider:
    return FakeSecretProvider()


@pytest.fixture()
def make_client(
    settings: Settings, secret_provider: FakeSecretProvider
) -> Callable[..., KMBClient]:
    """Build a KMBClient whose HTTP traffic is served by ``handler``."""

    def _make(
        handler: Handler,
        *,
        proxy_url: str | None = None,
        **kwargs: Any,
    ) -> KMBClient:
        kwargs.setdefault("secret_provider", secret_provider)
        transport = EtaTransport(
            proxy_url,
            client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        return KMBClient(transport=transport, settings=settings, **kwargs)

    return _make


@pytest.fixture()
def stop_route() -> StopRoute:
    """Unbound stop route for Western Harbour Crossing on route 960."""
    return StopRoute(
        Stop("WE01-N-1250-0", "Western Harbour Crossing", "B", 10),
        Variant(Route("960", 2), 1, "Wan Chai North", "Tuen Mun (Kin Sang Estate)", ""),
        10,
    )
