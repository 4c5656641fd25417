from enum import Enum


class Direction(str, Enum):
    """Which side of a transfer the exported address is on."""

    SENT = "sent"
    RECEIVED = "received"

    @property
    def address_param(self) -> str:
        """alchemy_getAssetTransfers filter key for this direction."""
        return "fromAddress" if self is Direction.SENT else "toAddress"
