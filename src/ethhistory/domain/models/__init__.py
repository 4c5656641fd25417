from ethhistory.domain.models.export import (
    DirectionStats,
    ExportSummary,
    OutputRow,
    ResolvedFee,
    TransferRow,
)
from ethhistory.domain.models.transfer import (
    Erc1155Entry,
    RawContract,
    TransferMetadata,
    TransferPage,
    TransferRecord,
)

__all__ = [
    "DirectionStats",
    "Erc1155Entry",
    "ExportSummary",
    "OutputRow",
    "RawContract",
    "ResolvedFee",
    "TransferMetadata",
    "TransferPage",
    "TransferRecord",
    "TransferRow",
]
