"""Ledger Clients — tests for InMemoryLedger and HttpLedgerClient.

Tests cover:
    - InMemoryLedger: unlimited vs funded balances, height advances per transfer
    - HttpLedgerClient: request shape, non-2xx / timeout / transport errors
      mapped to LedgerTransferFailedError, height lookup
"""

import json

import httpx
import pytest

from transcript_registry.core.errors import LedgerTransferFailedError
from transcript_registry.core.records import FeeTransfer
from transcript_registry.infrastructure.ledger_client import (
    HttpLedgerClient, InMemoryLedger,
)

FEE = FeeTransfer(amount=500, sender="ST1ISSUER", recipient="ST2VERIFIER")


# ─── InMemoryLedger ──────────────────────────────────────────────

async def test_unlimited_ledger_records_transfer():
    ledger = InMemoryLedger()
    await ledger.transfer(FEE)
    assert ledger.transfers == [FEE]
    assert await ledger.current_height() == 1


async def test_funded_ledger_moves_balance():
    ledger = InMemoryLedger(balances={"ST1ISSUER": 800})
    await ledger.transfer(FEE)
    assert ledger.balances == {"ST1ISSUER": 300, "ST2VERIFIER": 500}


async def test_insufficient_balance_changes_nothing():
    ledger = InMemoryLedger(balances={"ST1ISSUER": 499}, height=7)
    with pytest.raises(LedgerTransferFailedError) as exc_info:
        await ledger.transfer(FEE)
    assert "insufficient balance" in exc_info.value.message
    assert ledger.balances == {"ST1ISSUER": 499}
    assert ledger.transfers == []
    assert await ledger.current_height() == 7


async def test_zero_fee_transfer_succeeds():
    ledger = InMemoryLedger(balances={})
    await ledger.transfer(FeeTransfer(amount=0, sender="A", recipient="B"))
    assert len(ledger.transfers) == 1


async def test_negative_amount_rejected():
    with pytest.raises(LedgerTransferFailedError):
        await InMemoryLedger().transfer(
            FeeTransfer(amount=-1, sender="A", recipient="B"),
        )


# ─── HttpLedgerClient ────────────────────────────────────────────

def _client(handler) -> HttpLedgerClient:
    return HttpLedgerClient(
        "http://ledger.test", transport=httpx.MockTransport(handler),
    )


async def test_http_transfer_posts_fee():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"ok": True})

    client = _client(handler)
    await client.transfer(FEE)
    await client.close()

    assert seen[0].method == "POST"
    assert seen[0].url.path == "/transfers"
    assert json.loads(seen[0].content) == {
        "amount": 500, "sender": "ST1ISSUER", "recipient": "ST2VERIFIER",
    }


async def test_http_transfer_rejected():
    client = _client(lambda request: httpx.Response(402))
    with pytest.raises(LedgerTransferFailedError) as exc_info:
        await client.transfer(FEE)
    assert "HTTP 402" in exc_info.value.message
    assert exc_info.value.http_status == 502


async def test_http_transfer_timeout():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(LedgerTransferFailedError) as exc_info:
        await _client(handler).transfer(FEE)
    assert "timeout" in exc_info.value.message


async def test_http_transfer_unreachable():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(LedgerTransferFailedError) as exc_info:
        await _client(handler).transfer(FEE)
    assert "unreachable" in exc_info.value.message


async def test_http_current_height():
    def handler(request):
        assert request.url.path == "/height"
        return httpx.Response(200, json={"height": 12345})

    assert await _client(handler).current_height() == 12345


async def test_http_height_unavailable():
    client = _client(lambda request: httpx.Response(503))
    with pytest.raises(LedgerTransferFailedError):
        await client.current_height()


async def test_http_height_malformed():
    client = _client(lambda request: httpx.Response(200, json={"tip": 1}))
    with pytest.raises(LedgerTransferFailedError):
        await client.current_height()
