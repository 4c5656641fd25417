"""Cursor-paged transfer listing for one address and direction."""

import asyncio
import logging
from collections.abc import AsyncIterator

from ethhistory.config import MAX_PAGE_SIZE
from ethhistory.domain.enums import ALL_CATEGORIES, Direction
from ethhistory.domain.models import TransferPage
from ethhistory.infra.blockchain.evm.alchemy_client import AlchemyClient
from ethhistory.infra.http.backoff import BackoffExecutor

logger = logging.getLogger(__name__)


class TransferPageSource:
    def __init__(
        self,
        client: AlchemyClient,
        backoff: BackoffExecutor,
        address: str,
        direction: Direction,
        from_block: str = "0x0",
        to_block: str = "latest",
        page_size: int = MAX_PAGE_SIZE,
        page_delay: float = 0.12,
    ) -> None:
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")
        self._client = client
        self._backoff = backoff
        self._address = address
        self._direction = direction
        self._from_block = from_block
        self._to_block = to_block
        self._page_size = page_size
        self._page_delay = page_delay

    def build_params(self, page_key: str | None = None) -> dict:
        params: dict = {
            "fromBlock": self._from_block,
            "toBlock": self._to_block,
            "category": [c.value for c in ALL_CATEGORIES],
            "withMetadata": True,
            "excludeZeroValue": False,
            "maxCount": hex(self._page_size),
            self._direction.address_param: self._address,
        }
        if page_key is not None:
            params["pageKey"] = page_key
        return params

    async def fetch_page(self, page_key: str | None = None) -> TransferPage:
        params = self.build_params(page_key)
        raw = await self._backoff.run(
            lambda: self._client.get_asset_transfers(params),
            label=f"getAssetTransfers[{self._direction.value}]",
        )
        return TransferPage.model_validate(raw)

    async def pages(self) -> AsyncIterator[TransferPage]:
        """Yield pages in cursor order.

        A page without a pageKey is the last one, even if it is empty. An
        empty page that still carries a key does not end the stream.
        """
        page_key: str | None = None
        first = True
        while True:
            if not first and self._page_delay:
                await asyncio.sleep(self._page_delay)
            first = False

            page = await self.fetch_page(page_key)
            logger.debug(
                "Fetched %d %s transfers for %s (more=%s)",
                len(page.transfers), self._direction.value, self._address, page.page_key is not None,
            )
            yield page

            if not page.page_key:
                return
            page_key = page.page_key
