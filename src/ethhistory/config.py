from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ethhistory.export.units import to_hex_block

# alchemy_getAssetTransfers refuses maxCount above this
MAX_PAGE_SIZE = 1000


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    alchemy_api_key: str = ""
    alchemy_network: str = "eth-mainnet"
    from_block: str = "0x0"
    to_block: str = "latest"
    page_size: int = Field(default=MAX_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
    fee_concurrency: int = Field(default=200, ge=1, le=1000)  # in-flight receipt lookups per page
    dedup_capacity: int = Field(default=250_000, ge=1)
    page_delay: float = Field(default=0.12, ge=0)  # seconds between page fetches
    retry_max_attempts: int = Field(default=6, ge=1)
    retry_base_delay: float = Field(default=1.0, ge=0)
    retry_max_delay: float = Field(default=10.0, ge=0)
    retry_jitter: float = Field(default=0.25, ge=0)
    rate_per_second: float | None = Field(default=None, gt=0)  # None = unthrottled
    http_timeout: float = 30.0
    include_fee_status: bool = False
    log_level: str = "INFO"

    @field_validator("from_block", "to_block")
    @classmethod
    def _normalize_block(cls, v: str) -> str:
        return to_hex_block(v)

    @property
    def alchemy_url(self) -> str:
        return f"https://{self.alchemy_network}.g.alchemy.com/v2/{self.alchemy_api_key}"
