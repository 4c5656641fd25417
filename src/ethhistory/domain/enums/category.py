from enum import Enum


class TransferCategory(str, Enum):
    """Transfer categories reported by alchemy_getAssetTransfers."""

    EXTERNAL = "external"
    INTERNAL = "internal"
    ERC20 = "erc20"
    ERC721 = "erc721"
    ERC1155 = "erc1155"


ALL_CATEGORIES: tuple[TransferCategory, ...] = tuple(TransferCategory)
