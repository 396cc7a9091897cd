"""Data transfer objects used by the KMB client."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from kmb_eta.services.kmb_client import KMBClient


class Language(str, Enum):
    """Languages accepted by the client."""

    EN = "en"
    ZH_HANS = "zh-hans"
    ZH_HANT = "zh-hant"


@dataclass(frozen=True)
class Stop:
    """Bus stop reference data."""

    id: str
    name: str
    direction: str
    sequence: int


@dataclass(frozen=True)
class Route:
    """Route number together with its bound."""

    number: str
    bound: int


@dataclass(frozen=True)
class Variant:
    """One operating pattern of a route."""

    route: Route
    service_type: int
    origin: str
    destination: str
    description: str


@dataclass(frozen=True)
class Secret:
    """Signing credential handed out by a secret provider."""

    api_key: str
    ctr: int


@dataclass(frozen=True)
class StopRoute:
    """A stop served by one route variant at a given sequence."""

    stop: Stop
    variant: Variant
    sequence: int
    client: KMBClient | None = field(
        default=None, compare=False, hash=False, repr=False
    )

    async def get_etas(
        self, attempts: int | None = None, method: str = "GET"
    ) -> List[Eta]:
        """Fetch the ETAs for this stop through the bound client."""
        if self.client is None:
            raise RuntimeError("StopRoute is not bound to a KMBClient.")
        return await self.client.get_etas(self, attempts=attempts, method=method)


@dataclass(frozen=True)
class Eta:
    """Normalized arrival estimate."""

    stop_route: StopRoute
    time: datetime
    distance: int | None
    remark: str
    realtime: bool

    def minutes_until(self, now: datetime) -> int:
        """Whole minutes from ``now`` until the bus is due, never negative."""
        seconds = (self.time - now).total_seconds()
        return max(int(seconds // 60), 0)


__all__ = [
    "Language",
    "Stop",
    "Route",
    "Variant",
    "Secret",
    "StopRoute",
    "Eta",
]
