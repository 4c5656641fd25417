"""Command-line entry point: export one wallet's transfer history to CSV.

Usage:
    ALCHEMY_API_KEY=... ethhistory --address 0x... [--out history.csv]
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import re

from dependency_injector import providers
from pydantic import ValidationError

from ethhistory.config import Settings
from ethhistory.container import Container
from ethhistory.domain.models import ExportSummary
from ethhistory.exceptions import ConfigurationError

logger = logging.getLogger("ethhistory")

ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


def normalize_address(value: str) -> str:
    address = value.strip().lower()
    if not ADDRESS_RE.match(address):
        raise ConfigurationError(f"Not a valid address: {value!r}")
    return address


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ethhistory", description="Export a wallet's transfer history to CSV")
    parser.add_argument("--address", required=True, help="Wallet address (0x...)")
    parser.add_argument("--out", help="Output CSV path (default: <address>_transaction_history.csv)")
    parser.add_argument(
        "--include-fee-status",
        action="store_true",
        help="Add a column telling resolved gas fees apart from lookups that failed",
    )
    return parser


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


async def run_export(container: Container, address: str, out: str | None) -> ExportSummary:
    http_client = container.http_client()
    try:
        driver = container.driver()
        return await driver.run(address, out)
    finally:
        await http_client.close()


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = settings or Settings()
    except ValidationError as e:
        configure_logging("INFO")
        logger.error("Invalid configuration: %s", e)
        return 1
    configure_logging(settings.log_level)

    try:
        address = normalize_address(args.address)
        if not settings.alchemy_api_key:
            raise ConfigurationError("Missing env ALCHEMY_API_KEY")
    except ConfigurationError as e:
        logger.error("%s", e)
        return 1

    if args.include_fee_status:
        settings = settings.model_copy(update={"include_fee_status": True})

    container = Container()
    container.settings.override(providers.Object(settings))

    try:
        summary = asyncio.run(run_export(container, address, args.out))
    except Exception:
        logger.exception("Fatal error while exporting %s", address)
        return 1

    logger.info("CSV saved to: %s", summary.output_path)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
