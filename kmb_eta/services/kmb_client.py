from __future__ import annotations

import logging
import time
from datetime import datetime
from zoneinfo import ZoneInfo

from kmb_eta.core.config import Settings, get_settings
from kmb_eta.core.metrics import observe_eta_request, record_eta_retry
from kmb_eta.core.telemetry import get_tracer
from kmb_eta.services.kmb_dto import Eta, Language, Stop, StopRoute, Variant
from kmb_eta.services.kmb_errors import (
    EtaPayloadError,
    KMBServiceError,
    TransportError,
    UnsupportedLanguageError,
)
from kmb_eta.services.kmb_mapping import extract_eta_entries, normalize_etas
from kmb_eta.services.kmb_request import (
    SUPPORTED_METHODS,
    build_request,
    resolve_language,
)
from kmb_eta.services.kmb_secret import SecretProvider, StaticSecretProvider
from kmb_eta.services.kmb_transport import EtaTransport
from kmb_eta.services.retry import execute_with_retries

logger = logging.getLogger(__name__)

__all__ = [
    "KMBClient",
    # DTOs
    "Eta",
    "Language",
    "Stop",
    "StopRoute",
    "Variant",
    # Exceptions
    "KMBServiceError",
    "TransportError",
    "UnsupportedLanguageError",
    "EtaPayloadError",
]


class KMBClient:
    """Async client for the KMB real-time ETA endpoint."""

    def __init__(
        self,
        language: Language | str | None = None,
        attempts: int | None = None,
        proxy_url: str | None = None,
        secret_provider: SecretProvider | None = None,
        transport: EtaTransport | None = None,
        settings: Settings | None = None,
        timezone: ZoneInfo | None = None,
    ):
        """
        Initialize the client. Unset arguments fall back to Settings.

        Args:
            language: One of ``en``, ``zh-hans`` or ``zh-hant``
            attempts: Default number of retries after the first try
            proxy_url: Prefix prepended to every request URL
            secret_provider: Signing credential supplier
            transport: Pre-built transport, mostly for tests
            settings: Settings instance to read defaults from
            timezone: Zone used to resolve ``HH:MM`` arrival times
        """
        self.settings = settings or get_settings()
        self.language = language if language is not None else self.settings.language
        resolve_language(self.language)
        self.attempts = self.settings.eta_attempts if attempts is None else attempts
        if self.attempts < 0:
            raise ValueError("attempts must be zero or greater.")
        self.eta_url = self.settings.eta_url
        self.tzinfo = timezone or self.settings.tzinfo
        self.secret_provider = secret_provider or StaticSecretProvider.from_settings(
            self.settings
        )
        self.transport = transport or EtaTransport(
            proxy_url if proxy_url is not None else self.settings.proxy_url,
            timeout=self.settings.http_timeout_seconds,
            user_agent=self.settings.user_agent,
        )

    async def __aenter__(self) -> KMBClient:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.transport.aclose()

    def stop_route(self, stop: Stop, variant: Variant, sequence: int) -> StopRoute:
        """Create a StopRoute bound to this client."""
        return StopRoute(stop=stop, variant=variant, sequence=sequence, client=self)

    async def get_etas(
        self,
        stop_route: StopRoute,
        attempts: int | None = None,
        method: str = "GET",
        now: datetime | None = None,
    ) -> list[Eta]:
        """Fetch and normalize the ETAs for ``stop_route``."""
        attempts = self.attempts if attempts is None else attempts
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method '{method}'.")

        request = build_request(
            stop_route, self.language, self.secret_provider, self.eta_url
        )

        async def attempt():
            url, params = request.prepare(method)
            return await self.transport.send(method, url, params)

        route = stop_route.variant.route
        with get_tracer().start_as_current_span("kmb.get_etas") as span:
            span.set_attribute("kmb.route", route.number)
            span.set_attribute("kmb.bound", route.bound)
            span.set_attribute("kmb.stop_seq", stop_route.sequence)
            span.set_attribute("http.method", method)

            start = time.perf_counter()
            try:
                body = await execute_with_retries(
                    attempts,
                    attempt,
                    on_retry=lambda exc, _: record_eta_retry(method),
                )
                entries = extract_eta_entries(body)
            except TransportError:
                observe_eta_request(method, "error", time.perf_counter() - start)
                raise
            except EtaPayloadError:
                observe_eta_request(
                    method, "payload_error", time.perf_counter() - start
                )
                raise

            observe_eta_request(method, "success", time.perf_counter() - start)

        current = now.astimezone(self.tzinfo) if now else datetime.now(self.tzinfo)
        etas = normalize_etas(stop_route, entries, current)
        logger.info(
            "Fetched %d ETA(s) for route %s bound %s at stop %s",
            len(etas),
            route.number,
            route.bound,
            stop_route.stop.id,
        )
        return etas
