from ethhistory.domain.enums.category import ALL_CATEGORIES, TransferCategory
from ethhistory.domain.enums.direction import Direction
from ethhistory.domain.enums.fee_status import FeeStatus

__all__ = [
    "ALL_CATEGORIES",
    "Direction",
    "FeeStatus",
    "TransferCategory",
]
