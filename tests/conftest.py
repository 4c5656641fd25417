import pytest

from ethhistory.infra.http.backoff import BackoffExecutor, BackoffPolicy

WALLET = "0x1111111111111111111111111111111111111111"
OTHER = "0x2222222222222222222222222222222222222222"


@pytest.fixture()
def sleeps() -> list[float]:
    return []


@pytest.fixture()
def backoff(sleeps) -> BackoffExecutor:
    """Three attempts, delays recorded instead of slept."""

    async def _fake_sleep(delay: float) -> None:
        sleeps.append(delay)

    return BackoffExecutor(BackoffPolicy(max_attempts=3, base_delay=0, max_delay=0, jitter=0), sleep=_fake_sleep)


@pytest.fixture()
def make_transfer():
    """Build an alchemy_getAssetTransfers transfer dict with sensible defaults."""

    def _make(**overrides) -> dict:
        transfer = {
            "blockNum": "0x10",
            "hash": "0xaaa",
            "from": WALLET,
            "to": OTHER,
            "value": 1.0,
            "asset": "ETH",
            "category": "external",
            "rawContract": {"value": "0xde0b6b3a7640000", "address": None, "decimal": "0x12"},
            "metadata": {"blockTimestamp": "2024-01-01T00:00:00.000Z"},
        }
        transfer.update(overrides)
        return transfer

    return _make


class FakeAlchemy:
    """In-memory stand-in for AlchemyClient.

    `pages[(direction_param, page_key)]` holds the raw result for that query;
    `receipts[hash]` holds a receipt dict, None, or an exception to raise.
    """

    def __init__(self) -> None:
        self.pages: dict[tuple[str, str | None], dict] = {}
        self.receipts: dict[str, object] = {}
        self.transfer_calls: list[dict] = []
        self.receipt_calls: list[str] = []

    async def get_asset_transfers(self, params: dict) -> dict:
        self.transfer_calls.append(params)
        direction = "fromAddress" if "fromAddress" in params else "toAddress"
        return self.pages.get((direction, params.get("pageKey")), {"transfers": []})

    async def get_transaction_receipt(self, tx_hash: str) -> dict | None:
        self.receipt_calls.append(tx_hash)
        receipt = self.receipts.get(tx_hash)
        if isinstance(receipt, Exception):
            raise receipt
        return receipt  # type: ignore[return-value]


@pytest.fixture()
def fake_alchemy() -> FakeAlchemy:
    return FakeAlchemy()
