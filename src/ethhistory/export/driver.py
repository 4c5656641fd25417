"""Runs the sent and received passes into a single CSV file."""

import logging
from pathlib import Path

from ethhistory.domain.enums import Direction
from ethhistory.domain.models import ExportSummary
from ethhistory.export.dedup import RollingDedupSet
from ethhistory.export.processor import DirectionProcessor
from ethhistory.report.csv_writer import CsvHistoryWriter

logger = logging.getLogger(__name__)

DIRECTIONS: tuple[Direction, ...] = (Direction.SENT, Direction.RECEIVED)


def default_output_path(address: str, directory: str | Path = ".") -> Path:
    return Path(directory).resolve() / f"{address.lower()}_transaction_history.csv"


class ExportDriver:
    def __init__(
        self,
        processor: DirectionProcessor,
        dedup_capacity: int = 250_000,
        include_fee_status: bool = False,
    ) -> None:
        self._processor = processor
        self._dedup_capacity = dedup_capacity
        self._include_fee_status = include_fee_status

    async def run(self, address: str, output_path: str | Path | None = None) -> ExportSummary:
        """Export the full history of `address`.

        Any exception from a direction pass aborts the run; rows from pages
        that completed before the failure stay in the file.
        """
        address = address.lower()
        path = Path(output_path) if output_path is not None else default_output_path(address)
        summary = ExportSummary(address=address, output_path=str(path))
        dedup = RollingDedupSet(self._dedup_capacity)

        with CsvHistoryWriter(path, include_fee_status=self._include_fee_status) as sink:
            for direction in DIRECTIONS:
                logger.info("Processing %s transfers for %s", direction.value, address)
                stats = await self._processor.run(address, direction, dedup, sink)
                summary.directions.append(stats)

        if summary.degraded_fees:
            logger.warning("%d transactions were written with an unresolved gas fee of 0", summary.degraded_fees)
        logger.info("Done. %d rows saved to %s", summary.rows, path)
        return summary
