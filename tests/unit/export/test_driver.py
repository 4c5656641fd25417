"""End-to-end export over an in-memory Alchemy stand-in."""

import pytest

from ethhistory.domain.enums import Direction
from ethhistory.exceptions import ExternalServiceError
from ethhistory.export.driver import ExportDriver, default_output_path
from ethhistory.export.fees import FeeResolver
from ethhistory.export.processor import DirectionProcessor
from ethhistory.report.csv_writer import HEADERS

WALLET = "0x1111111111111111111111111111111111111111"
OTHER = "0x2222222222222222222222222222222222222222"


def _driver(client, backoff, **kwargs) -> ExportDriver:
    processor = DirectionProcessor(client, backoff, FeeResolver(client, backoff, concurrency=10), page_delay=0)
    return ExportDriver(processor, **kwargs)


class TestExportDriver:
    async def test_sent_then_received_with_shared_dedup(self, fake_alchemy, backoff, make_transfer, tmp_path):
        transfer = make_transfer(
            hash="0xfeed",
            value=1.0,
            rawContract={"value": "1000000000000000000", "address": None, "decimal": "0x12"},
        )
        fake_alchemy.pages[("fromAddress", None)] = {"transfers": [transfer]}
        # the received query re-lists the identical transfer
        fake_alchemy.pages[("toAddress", None)] = {"transfers": [transfer]}
        fake_alchemy.receipts["0xfeed"] = {"effectiveGasPrice": hex(10**9), "gasUsed": hex(21000)}

        path = tmp_path / "history.csv"
        summary = await _driver(fake_alchemy, backoff).run(WALLET, path)

        lines = path.read_text(encoding="utf-8").splitlines()
        assert lines[0] == ",".join(HEADERS)
        assert len(lines) == 2
        fields = lines[1].split(",")
        assert fields[0] == "0xfeed"
        assert fields[4] == "ETH transfer"
        assert fields[8] == "1"
        assert fields[9] == "0.000021"

        sent, received = summary.directions
        assert sent.direction is Direction.SENT
        assert sent.rows == 1
        assert received.direction is Direction.RECEIVED
        assert received.rows == 0
        assert received.duplicates == 1
        assert summary.rows == 1

    async def test_sent_pass_runs_before_received(self, fake_alchemy, backoff, make_transfer, tmp_path):
        fake_alchemy.pages[("fromAddress", None)] = {"transfers": [make_transfer(hash="0x1")]}
        fake_alchemy.pages[("toAddress", None)] = {
            "transfers": [make_transfer(hash="0x2", **{"from": OTHER, "to": WALLET})]
        }

        path = tmp_path / "history.csv"
        await _driver(fake_alchemy, backoff).run(WALLET, path)

        assert "fromAddress" in fake_alchemy.transfer_calls[0]
        assert "toAddress" in fake_alchemy.transfer_calls[1]
        hashes = [line.split(",")[0] for line in path.read_text(encoding="utf-8").splitlines()[1:]]
        assert hashes == ["0x1", "0x2"]

    async def test_address_lowercased(self, fake_alchemy, backoff, tmp_path):
        mixed = "0xAbCdEf" + "0" * 34
        summary = await _driver(fake_alchemy, backoff).run(mixed, tmp_path / "h.csv")
        assert summary.address == mixed.lower()
        assert fake_alchemy.transfer_calls[0]["fromAddress"] == mixed.lower()

    async def test_listing_failure_aborts_run(self, backoff, make_transfer, tmp_path):
        class ReceivedSideDown:
            async def get_asset_transfers(self, params):
                if "toAddress" in params:
                    raise ExternalServiceError("listing unavailable")
                return {"transfers": [make_transfer(hash="0x1")]}

            async def get_transaction_receipt(self, tx_hash):
                return {"effectiveGasPrice": "0x1", "gasUsed": "0x1"}

        path = tmp_path / "history.csv"
        with pytest.raises(ExternalServiceError):
            await _driver(ReceivedSideDown(), backoff).run(WALLET, path)

        # rows from the completed sent pass stay on disk
        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert lines[1].startswith("0x1,")

    async def test_small_dedup_capacity_readmits_evicted(self, fake_alchemy, backoff, make_transfer, tmp_path):
        a = make_transfer(hash="0xa", uniqueId="a")
        b = make_transfer(hash="0xb", uniqueId="b")
        fake_alchemy.pages[("fromAddress", None)] = {"transfers": [a, b]}
        fake_alchemy.pages[("toAddress", None)] = {"transfers": [a]}

        path = tmp_path / "history.csv"
        summary = await _driver(fake_alchemy, backoff, dedup_capacity=1).run(WALLET, path)

        # "a" was evicted by "b", so the received pass writes it again
        assert summary.rows == 3


def test_default_output_path(tmp_path):
    path = default_output_path("0xABC", tmp_path)
    assert path == tmp_path.resolve() / "0xabc_transaction_history.csv"
