"""Pure mapping utilities for KMB ETA payloads."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from datetime import datetime, time, timedelta
from typing import TYPE_CHECKING, Any

from kmb_eta.core.metrics import record_dropped_entry
from kmb_eta.services.kmb_dto import Eta, Route, Stop, StopRoute, Variant
from kmb_eta.services.kmb_errors import EtaPayloadError

if TYPE_CHECKING:
    from kmb_eta.services.kmb_client import KMBClient

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"^(\d{2}):(\d{2})")


def parse_time_field(value: Any) -> tuple[time, str] | None:
    """Split an ETA ``t`` field into its ``HH:MM`` time and trailing remark.

    Returns ``None`` for placeholder rows such as
    "No scheduled departure at this moment".
    """
    if not isinstance(value, str):
        return None
    match = TIME_PATTERN.match(value)
    if match is None:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute), value[match.end():].strip()


def resolve_day(clock: time, now: datetime) -> datetime:
    """Attach ``clock`` to yesterday, today or tomorrow, whichever is nearest ``now``.

    The calendar dates are taken in ``now``'s time zone, so buses due just
    after midnight resolve to the next day when ``now`` is late in the
    evening, and the other way round.
    """
    if now.tzinfo is None:
        raise ValueError("now must be timezone-aware.")
    today = now.date()
    candidates = [
        datetime.combine(today + timedelta(days=offset), clock, tzinfo=now.tzinfo)
        for offset in (-1, 0, 1)
    ]
    reference = now.timestamp()
    return min(candidates, key=lambda c: abs(c.timestamp() - reference))


def map_eta(stop_route: StopRoute, entry: dict[str, Any], now: datetime) -> Eta | None:
    """Map one raw ETA entry, or return ``None`` when it carries no arrival."""
    parsed = parse_time_field(entry.get("t"))
    if parsed is None:
        return None
    clock, remark = parsed
    distance = entry.get("dis")
    return Eta(
        stop_route=stop_route,
        time=resolve_day(clock, now),
        distance=distance,
        remark=remark,
        # Distance is only reported for GPS-tracked buses.
        realtime=distance is not None,
    )


def normalize_etas(
    stop_route: StopRoute, raw_entries: Iterable[Any], now: datetime
) -> list[Eta]:
    """Map raw entries to ETAs, keeping order and dropping non-arrival rows."""
    etas: list[Eta] = []
    for entry in raw_entries:
        if not isinstance(entry, dict):
            logger.debug("Dropping ETA entry that is not an object: %r", entry)
            record_dropped_entry("malformed")
            continue
        eta = map_eta(stop_route, entry, now)
        if eta is None:
            logger.debug("Dropping ETA entry without arrival time: %r", entry.get("t"))
            record_dropped_entry("no_time")
            continue
        etas.append(eta)
    return etas


def extract_eta_entries(body: Any) -> list[Any]:
    """Return the ``eta`` array of the single route block in ``body``.

    Non-zero ``responsecode`` values are logged and otherwise ignored; no
    observed behaviour of the endpoint depends on them.
    """
    if body is None:
        return []
    if not isinstance(body, list):
        raise EtaPayloadError(
            f"Expected a list of route blocks, got {type(body).__name__}."
        )
    if not body:
        return []

    block = body[0]
    if not isinstance(block, dict):
        raise EtaPayloadError(
            f"Expected a route block object, got {type(block).__name__}."
        )

    response_code = block.get("responsecode")
    if response_code not in (None, 0, "0"):
        logger.warning(
            "ETA response for route %s carries responsecode %s",
            block.get("routeNo"),
            response_code,
        )

    entries = block.get("eta")
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise EtaPayloadError(
            f"Expected 'eta' to be a list, got {type(entries).__name__}."
        )
    return entries


def map_stopping(record: dict[str, Any], client: KMBClient | None = None) -> StopRoute:
    """Map a cached stopping record to a StopRoute bound to ``client``."""
    variant_data = record["variant"]
    route_data = variant_data["route"]
    stop_id = record["stop"]["id"]
    return StopRoute(
        stop=Stop(
            id=stop_id,
            name=record["stop"].get("name", stop_id),
            direction=record["direction"],
            sequence=int(record["sequence"]),
        ),
        variant=Variant(
            route=Route(number=str(route_data["number"]), bound=int(route_data["bound"])),
            service_type=int(variant_data["serviceType"]),
            origin=variant_data["origin"],
            destination=variant_data["destination"],
            description=variant_data.get("description", ""),
        ),
        sequence=int(record["sequence"]),
        client=client,
    )


__all__ = [
    "TIME_PATTERN",
    "parse_time_field",
    "resolve_day",
    "map_eta",
    "normalize_etas",
    "extract_eta_entries",
    "map_stopping",
]
