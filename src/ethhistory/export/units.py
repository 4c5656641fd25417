"""Quantity parsing and base-unit formatting.

Alchemy returns quantities as 0x-prefixed hex strings; callers and tests may
also pass plain decimal strings or ints.
"""

from __future__ import annotations

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
NATIVE_DECIMALS = 18


def parse_quantity(raw: str | int | None) -> int | None:
    """Parse a hex or decimal quantity. Returns None if absent, malformed or negative."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw if raw >= 0 else None
    s = raw.strip()
    if not s:
        return None
    try:
        value = int(s, 16) if s.lower().startswith("0x") else int(s)
    except ValueError:
        return None
    return value if value >= 0 else None


def format_units(raw: int, decimals: int) -> str:
    """Render an integer amount of base units as a plain decimal string.

    Trailing fractional zeros are stripped; the dot is only emitted when a
    fractional part remains.
    """
    if decimals <= 0:
        return str(raw)
    scale = 10**decimals
    whole, frac = divmod(raw, scale)
    frac_str = str(frac).zfill(decimals).rstrip("0")
    return f"{whole}.{frac_str}" if frac_str else str(whole)


def wei_to_eth(wei: int) -> str:
    return format_units(wei, NATIVE_DECIMALS)


def to_hex_block(block: str | int) -> str:
    """Normalize a block bound to the hex form alchemy_getAssetTransfers expects."""
    if isinstance(block, int):
        if block < 0:
            raise ValueError(f"Negative block number: {block}")
        return hex(block)
    s = block.strip().lower()
    if s == "latest":
        return s
    value = parse_quantity(s)
    if value is None:
        raise ValueError(f"Invalid block number: {block!r}")
    return hex(value)
