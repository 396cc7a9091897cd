"""HTTP transport for the KMB ETA endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from kmb_eta.services.kmb_errors import TransportError

logger = logging.getLogger(__name__)


class EtaTransport:
    """Sends signed ETA requests, optionally through a URL-prefix proxy.

    The proxy is itself an HTTP endpoint that fetches whatever URL is appended
    to it, so proxying is a plain string concatenation of ``proxy_url`` and
    the target URL rather than a socket-level proxy.
    """

    def __init__(
        self,
        proxy_url: str | None = None,
        *,
        timeout: float = 10.0,
        user_agent: str = "kmb-eta/0.1.0",
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.proxy_url = proxy_url
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=timeout,
            headers={"User-Agent": user_agent},
        )

    async def __aenter__(self) -> EtaTransport:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def effective_url(self, url: str) -> str:
        """Return ``url`` rewritten behind the proxy prefix, if configured."""
        if self.proxy_url:
            return f"{self.proxy_url}{url}"
        return url

    async def send(self, method: str, url: str, params: dict[str, Any]) -> Any:
        """Issue the request and return the decoded JSON body."""
        target = self.effective_url(url)
        method = method.upper()
        try:
            if method == "GET":
                response = await self.client.get(target, params=params)
            elif method == "POST":
                response = await self.client.post(target, json=params)
            else:
                raise ValueError(f"Unsupported HTTP method '{method}'.")
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.debug("ETA endpoint %s answered HTTP %s", target, status)
            raise TransportError(
                f"ETA endpoint returned HTTP {status}.",
                status_code=status,
                url=target,
            ) from exc
        except httpx.HTTPError as exc:
            logger.debug("ETA request to %s failed: %s", target, exc)
            raise TransportError(
                f"ETA request failed: {exc}", url=target
            ) from exc

        if not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                "ETA endpoint returned a body that is not valid JSON.",
                status_code=response.status_code,
                url=target,
            ) from exc


__all__ = ["EtaTransport"]
