"""Map raw transfer records to output rows."""

from decimal import Decimal, InvalidOperation

from ethhistory.domain.enums import TransferCategory
from ethhistory.domain.models import TransferRecord, TransferRow
from ethhistory.export.units import NATIVE_DECIMALS, ZERO_ADDRESS, format_units, parse_quantity

TYPE_LABELS: dict[TransferCategory, str] = {
    TransferCategory.ERC20: "ERC-20",
    TransferCategory.ERC721: "ERC-721",
    TransferCategory.ERC1155: "ERC-1155",
}
CONTRACT_INTERACTION = "contract interaction"
ETH_TRANSFER = "ETH transfer"

_NATIVE_CATEGORIES = (TransferCategory.EXTERNAL, TransferCategory.INTERNAL)


def _decimals(record: TransferRecord) -> int | None:
    decimals = parse_quantity(record.raw_contract.decimal)
    if decimals is None and record.category in _NATIVE_CATEGORIES:
        return NATIVE_DECIMALS
    return decimals


def _provider_value(value: float | str | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value
    try:
        return format(Decimal(str(value)).normalize(), "f")
    except InvalidOperation:
        return None


def transfer_amount(record: TransferRecord) -> str:
    """Human-readable amount of a fungible transfer."""
    raw = parse_quantity(record.raw_contract.value)
    decimals = _decimals(record)
    if raw is not None and decimals is not None:
        return format_units(raw, decimals)
    return _provider_value(record.value) or "0"


def _is_zero_value(record: TransferRecord) -> bool:
    raw = parse_quantity(record.raw_contract.value)
    if raw is not None:
        return raw == 0
    if record.value is None:
        return True
    try:
        return Decimal(str(record.value)) == 0
    except InvalidOperation:
        return False


def infer_type(record: TransferRecord) -> str:
    label = TYPE_LABELS.get(record.category)
    if label is not None:
        return label
    if record.category is TransferCategory.EXTERNAL:
        to_addr = (record.to_address or "").lower()
        if _is_zero_value(record) or to_addr == ZERO_ADDRESS:
            return CONTRACT_INTERACTION
    return ETH_TRANSFER


def _entry_amount(raw: str | None) -> str:
    if raw is None:
        return "0"
    value = parse_quantity(raw)
    return str(value) if value is not None else raw


def expand_rows(record: TransferRecord) -> list[TransferRow]:
    """Normalize one record into one row, or one row per ERC-1155 batch entry."""
    base = {
        "hash": record.hash,
        "timestamp": record.metadata.block_timestamp or "",
        "from_address": record.from_address or "",
        "to_address": record.to_address or "",
        "type": infer_type(record),
        "contract": record.raw_contract.address or "",
        "asset": record.asset or "",
    }

    if record.category is TransferCategory.ERC1155 and record.erc1155_metadata:
        return [
            TransferRow(**base, token_id=entry.token_id, amount=_entry_amount(entry.value))
            for entry in record.erc1155_metadata
        ]

    token_id = record.token_id or record.erc721_token_id or ""
    amount = "1" if record.category is TransferCategory.ERC721 else transfer_amount(record)
    return [TransferRow(**base, token_id=token_id, amount=amount)]
