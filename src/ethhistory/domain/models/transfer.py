"""Transfer records as returned by alchemy_getAssetTransfers."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ethhistory.domain.enums import TransferCategory
from ethhistory.export.units import parse_quantity


class _AlchemyModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RawContract(_AlchemyModel):
    value: str | None = None  # raw base units, hex
    address: str | None = None
    decimal: str | None = None  # token decimals, hex


class Erc1155Entry(_AlchemyModel):
    token_id: str = Field(alias="tokenId")
    value: str | None = None  # raw quantity, hex


class TransferMetadata(_AlchemyModel):
    block_timestamp: str = Field(default="", alias="blockTimestamp")


class TransferRecord(_AlchemyModel):
    """One upstream-reported movement of ETH or a token."""

    hash: str
    category: TransferCategory
    from_address: str = Field(default="", alias="from")
    to_address: str | None = Field(default=None, alias="to")
    value: float | str | None = None  # decimal-adjusted by the provider
    token_id: str | None = Field(default=None, alias="tokenId")
    erc721_token_id: str | None = Field(default=None, alias="erc721TokenId")
    erc1155_metadata: list[Erc1155Entry] | None = Field(default=None, alias="erc1155Metadata")
    asset: str | None = None
    raw_contract: RawContract = Field(default_factory=RawContract, alias="rawContract")
    metadata: TransferMetadata = Field(default_factory=TransferMetadata)
    log_index: int | None = Field(default=None, alias="logIndex")
    unique_id: str | None = Field(default=None, alias="uniqueId")
    block_num: str | None = Field(default=None, alias="blockNum")

    @field_validator("log_index", mode="before")
    @classmethod
    def _parse_log_index(cls, v: int | str | None) -> int | None:
        # hex ("0x3") or decimal; anything unparseable is dropped from the dedup key
        if v is None or isinstance(v, int):
            return v
        return parse_quantity(v)


class TransferPage(BaseModel):
    """One page of transfers plus the key needed to fetch the next one."""

    transfers: list[TransferRecord] = []
    page_key: str | None = Field(default=None, alias="pageKey")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")
