"""Rows and run statistics produced by the export pipeline."""

from pydantic import BaseModel, ConfigDict

from ethhistory.domain.enums import Direction, FeeStatus


class TransferRow(BaseModel):
    """A normalized transfer row, before its gas fee is known."""

    model_config = ConfigDict(frozen=True)

    hash: str
    timestamp: str = ""
    from_address: str = ""
    to_address: str = ""
    type: str
    contract: str = ""
    asset: str = ""
    token_id: str = ""
    amount: str = "0"


class ResolvedFee(BaseModel):
    model_config = ConfigDict(frozen=True)

    fee: str = "0"
    status: FeeStatus


class OutputRow(TransferRow):
    """A row as written to the CSV file."""

    fee: str = "0"
    fee_status: FeeStatus = FeeStatus.MISSING

    @classmethod
    def from_row(cls, row: TransferRow, fee: ResolvedFee) -> "OutputRow":
        return cls(**row.model_dump(), fee=fee.fee, fee_status=fee.status)


class DirectionStats(BaseModel):
    direction: Direction
    pages: int = 0
    records: int = 0
    duplicates: int = 0
    rows: int = 0
    degraded_fees: int = 0


class ExportSummary(BaseModel):
    address: str
    output_path: str
    directions: list[DirectionStats] = []

    @property
    def rows(self) -> int:
        return sum(d.rows for d in self.directions)

    @property
    def degraded_fees(self) -> int:
        return sum(d.degraded_fees for d in self.directions)
