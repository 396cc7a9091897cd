"""
Print the current ETAs for one stop of a KMB route.

Usage:
    kmb-eta ROUTE BOUND SERVICE_TYPE STOP_ID SEQUENCE [options]

Examples:
    kmb-eta 960 2 1 WE01-N-1250-0 10
    kmb-eta 960 2 1 WE01-N-1250-0 10 --language zh-hant --method POST

Credentials are read from KMB_API_KEY, KMB_API_CTR and KMB_VENDOR_ID.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from kmb_eta.core.config import SUPPORTED_LANGUAGES, get_settings
from kmb_eta.core.telemetry import configure_opentelemetry, instrument_httpx
from kmb_eta.services.kmb_client import KMBClient
from kmb_eta.services.kmb_dto import Eta, Route, Stop, Variant
from kmb_eta.services.kmb_errors import KMBServiceError
from kmb_eta.services.kmb_secret import StaticSecretProvider

logger = logging.getLogger(__name__)


def non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"expected zero or more, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kmb-eta", description="Show real-time KMB bus arrival estimates."
    )
    parser.add_argument("route", help="Route number, e.g. 960")
    parser.add_argument("bound", type=int, help="Route bound (1 or 2)")
    parser.add_argument("service_type", type=int, help="Variant service type")
    parser.add_argument("stop_id", help="Stop identifier")
    parser.add_argument("sequence", type=int, help="Sequence of the stop on the route")
    parser.add_argument("--language", choices=SUPPORTED_LANGUAGES, default=None)
    parser.add_argument("--method", choices=("GET", "POST"), default="GET")
    parser.add_argument("--attempts", type=non_negative_int, default=None)
    parser.add_argument("--proxy-url", default=None)
    return parser


def format_eta(eta: Eta) -> str:
    distance = "-" if eta.distance is None else str(eta.distance)
    line = f"{eta.time:%H:%M}  {distance:>6}  {eta.remark}".rstrip()
    return f"{line}  [live]" if eta.realtime else line


async def run(args: argparse.Namespace) -> list[Eta]:
    settings = get_settings()
    configure_opentelemetry(
        service_name=settings.otel_service_name,
        otlp_endpoint=settings.otel_exporter_otlp_endpoint,
        enabled=settings.otel_enabled,
    )
    instrument_httpx(enabled=settings.otel_enabled)

    async with KMBClient(
        language=args.language,
        attempts=args.attempts,
        proxy_url=args.proxy_url,
        secret_provider=StaticSecretProvider.from_settings(settings),
        settings=settings,
    ) as client:
        stop_route = client.stop_route(
            Stop(args.stop_id, args.stop_id, "", args.sequence),
            Variant(Route(args.route, args.bound), args.service_type, "", "", ""),
            args.sequence,
        )
        return await stop_route.get_etas(method=args.method)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    args = build_parser().parse_args(argv)

    try:
        etas = asyncio.run(run(args))
    except KMBServiceError as exc:
        logger.error("Failed to fetch ETAs: %s", exc)
        return 1

    if not etas:
        print("No buses currently predicted.")
    for eta in etas:
        print(format_eta(eta))
    return 0


if __name__ == "__main__":
    sys.exit(main())
