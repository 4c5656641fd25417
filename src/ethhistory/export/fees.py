"""Gas fee enrichment from transaction receipts."""

import asyncio
import logging
from collections.abc import Iterable

from ethhistory.domain.enums import FeeStatus
from ethhistory.domain.models import ResolvedFee
from ethhistory.exceptions import ServiceError
from ethhistory.export.units import parse_quantity, wei_to_eth
from ethhistory.infra.blockchain.evm.alchemy_client import AlchemyClient
from ethhistory.infra.http.backoff import BackoffExecutor

logger = logging.getLogger(__name__)

MAX_FEE_CONCURRENCY = 1000


def receipt_fee_wei(receipt: dict | None) -> int | None:
    """effectiveGasPrice × gasUsed, or None if either field is unusable."""
    if not receipt:
        return None
    price = parse_quantity(receipt.get("effectiveGasPrice"))
    used = parse_quantity(receipt.get("gasUsed"))
    if price is None or used is None:
        return None
    return price * used


class FeeResolver:
    """Resolves gas fees for a batch of transaction hashes concurrently.

    At most `concurrency` receipt lookups are in flight at once. A lookup
    that fails never fails the batch: the hash gets fee "0" with status
    FAILED (or MISSING when the receipt lacks gas fields).
    """

    def __init__(self, client: AlchemyClient, backoff: BackoffExecutor, concurrency: int = 200) -> None:
        if not 1 <= concurrency <= MAX_FEE_CONCURRENCY:
            raise ValueError(f"concurrency must be between 1 and {MAX_FEE_CONCURRENCY}")
        self._client = client
        self._backoff = backoff
        self._concurrency = concurrency

    @property
    def concurrency(self) -> int:
        return self._concurrency

    async def resolve(self, hashes: Iterable[str]) -> dict[str, ResolvedFee]:
        unique = list(dict.fromkeys(hashes))
        if not unique:
            return {}

        semaphore = asyncio.Semaphore(self._concurrency)

        async def _bounded(tx_hash: str) -> tuple[str, ResolvedFee]:
            async with semaphore:
                return tx_hash, await self.resolve_one(tx_hash)

        results = await asyncio.gather(*(_bounded(h) for h in unique))
        return dict(results)

    async def resolve_one(self, tx_hash: str) -> ResolvedFee:
        try:
            receipt = await self._backoff.run(
                lambda: self._client.get_transaction_receipt(tx_hash),
                label=f"getTransactionReceipt[{tx_hash}]",
            )
        except ServiceError as e:
            logger.warning("Receipt lookup failed for %s, writing fee 0: %s", tx_hash, e)
            return ResolvedFee(fee="0", status=FeeStatus.FAILED)

        fee_wei = receipt_fee_wei(receipt)
        if fee_wei is None:
            logger.warning("No usable gas fields in receipt for %s, writing fee 0", tx_hash)
            return ResolvedFee(fee="0", status=FeeStatus.MISSING)
        return ResolvedFee(fee=wei_to_eth(fee_wei), status=FeeStatus.RESOLVED)
