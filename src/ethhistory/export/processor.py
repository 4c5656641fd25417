"""Per-direction export loop: fetch page, de-dup and normalize, resolve fees, write."""

import logging

from ethhistory.domain.enums import Direction, FeeStatus
from ethhistory.domain.models import DirectionStats, OutputRow, ResolvedFee, TransferRecord, TransferRow
from ethhistory.export.dedup import RollingDedupSet, dedup_key
from ethhistory.export.fees import FeeResolver
from ethhistory.export.normalizer import expand_rows
from ethhistory.infra.blockchain.evm.alchemy_client import AlchemyClient
from ethhistory.infra.blockchain.evm.transfer_source import TransferPageSource
from ethhistory.infra.http.backoff import BackoffExecutor
from ethhistory.report.csv_writer import CsvHistoryWriter

logger = logging.getLogger(__name__)

_UNRESOLVED = ResolvedFee(fee="0", status=FeeStatus.MISSING)


class DirectionProcessor:
    def __init__(
        self,
        client: AlchemyClient,
        backoff: BackoffExecutor,
        fee_resolver: FeeResolver,
        from_block: str = "0x0",
        to_block: str = "latest",
        page_size: int = 1000,
        page_delay: float = 0.12,
    ) -> None:
        self._client = client
        self._backoff = backoff
        self._fees = fee_resolver
        self._from_block = from_block
        self._to_block = to_block
        self._page_size = page_size
        self._page_delay = page_delay

    def make_source(self, address: str, direction: Direction) -> TransferPageSource:
        return TransferPageSource(
            client=self._client,
            backoff=self._backoff,
            address=address,
            direction=direction,
            from_block=self._from_block,
            to_block=self._to_block,
            page_size=self._page_size,
            page_delay=self._page_delay,
        )

    async def run(
        self,
        address: str,
        direction: Direction,
        dedup: RollingDedupSet,
        sink: CsvHistoryWriter,
    ) -> DirectionStats:
        """Export every transfer of `address` in one direction.

        `dedup` is shared with the other direction's pass, so a transfer
        already written there is skipped here.
        """
        stats = DirectionStats(direction=direction)
        source = self.make_source(address, direction)

        async for page in source.pages():
            stats.pages += 1
            stats.records += len(page.transfers)

            rows, hashes = self._classify(page.transfers, dedup, stats)
            fees = await self._fees.resolve(hashes)
            stats.degraded_fees += sum(1 for f in fees.values() if f.status is not FeeStatus.RESOLVED)

            output = [OutputRow.from_row(row, fees.get(row.hash, _UNRESOLVED)) for row in rows]
            stats.rows += sink.write_rows(output)

            logger.debug(
                "%s page %d: %d records, %d rows, %d distinct txs",
                direction.value, stats.pages, len(page.transfers), len(output), len(hashes),
            )

        logger.info(
            "Finished %s transfers for %s: %d pages, %d rows, %d duplicates skipped",
            direction.value, address, stats.pages, stats.rows, stats.duplicates,
        )
        return stats

    @staticmethod
    def _classify(
        transfers: list[TransferRecord],
        dedup: RollingDedupSet,
        stats: DirectionStats,
    ) -> tuple[list[TransferRow], list[str]]:
        rows: list[TransferRow] = []
        hashes: dict[str, None] = {}
        for record in transfers:
            if not dedup.add(dedup_key(record)):
                stats.duplicates += 1
                continue
            rows.extend(expand_rows(record))
            hashes[record.hash] = None
        return rows, list(hashes)
