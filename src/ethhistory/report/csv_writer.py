"""CsvHistoryWriter — streams export rows to a CSV file."""

import csv
from pathlib import Path
from typing import IO

from ethhistory.domain.models import OutputRow

HEADERS: list[str] = [
    "Transaction Hash",
    "Date & Time",
    "From Address",
    "To Address",
    "Transaction Type",
    "Asset Contract Address",
    "Asset Symbol / Name",
    "Token ID",
    "Value / Amount",
    "Gas Fee (ETH)",
]
FEE_STATUS_HEADER = "Gas Fee Status"


class CsvHistoryWriter:
    """Append-only CSV sink.

    open() truncates the file and writes the header; each write_rows() call
    is flushed so a crash leaves every completed page on disk.
    """

    def __init__(self, path: str | Path, include_fee_status: bool = False) -> None:
        self._path = Path(path)
        self._include_fee_status = include_fee_status
        self._file: IO[str] | None = None
        self._writer = None
        self.rows_written = 0

    @property
    def path(self) -> Path:
        return self._path

    @property
    def headers(self) -> list[str]:
        return HEADERS + [FEE_STATUS_HEADER] if self._include_fee_status else list(HEADERS)

    def open(self) -> "CsvHistoryWriter":
        self._file = self._path.open("w", encoding="utf-8", newline="")
        self._writer = csv.writer(self._file, lineterminator="\n")
        self._writer.writerow(self.headers)
        self._file.flush()
        return self

    def _fields(self, row: OutputRow) -> list[str]:
        fields = [
            row.hash,
            row.timestamp,
            row.from_address,
            row.to_address,
            row.type,
            row.contract,
            row.asset,
            row.token_id,
            row.amount,
            row.fee,
        ]
        if self._include_fee_status:
            fields.append(row.fee_status.value)
        return fields

    def write_rows(self, rows: list[OutputRow]) -> int:
        if self._file is None or self._writer is None:
            raise RuntimeError("CsvHistoryWriter is not open")
        for row in rows:
            self._writer.writerow(self._fields(row))
        self._file.flush()
        self.rows_written += len(rows)
        return len(rows)

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None
            self._writer = None

    def __enter__(self) -> "CsvHistoryWriter":
        return self.open()

    def __exit__(self, *args: object) -> None:
        self.close()
