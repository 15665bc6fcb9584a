"""Ledger Clients — implementations of the LedgerTransfer / HeightSource boundaries.

Invariants:
    - transfer() is all-or-nothing: on any failure no balance changes and
      LedgerTransferFailedError is raised
    - No retries: a failed transfer fails the issuance; the caller decides to retry
    - current_height() is read once per registry call (the call's 'now')

Design Decisions:
    - InMemoryLedger for development and tests: records every applied transfer,
      balances optional (None = unlimited funds), height advances one per applied transfer
    - HttpLedgerClient wraps httpx.AsyncClient against a ledger gateway; every
      transport/status failure mapped to LedgerTransferFailedError (core/errors.py)
"""

import logging

import httpx

from transcript_registry.core.domain_types import BlockHeight, Identity
from transcript_registry.core.errors import LedgerTransferFailedError
from transcript_registry.core.records import FeeTransfer

logger = logging.getLogger(__name__)


class InMemoryLedger:
    """Process-local ledger. Satisfies LedgerTransfer and HeightSource."""

    def __init__(
        self,
        balances: dict[Identity, int] | None = None,
        height: int = 0,
    ):
        self.balances = balances
        self.height = height
        self.transfers: list[FeeTransfer] = []

    async def transfer(self, fee: FeeTransfer) -> None:
        if fee.amount < 0:
            raise LedgerTransferFailedError(f"negative amount {fee.amount}")
        if self.balances is not None:
            available = self.balances.get(fee.sender, 0)
            if available < fee.amount:
                raise LedgerTransferFailedError(
                    f"insufficient balance for {fee.sender} "
                    f"({available} < {fee.amount})",
                )
            self.balances[fee.sender] = available - fee.amount
            self.balances[fee.recipient] = (
                self.balances.get(fee.recipient, 0) + fee.amount
            )
        self.transfers.append(fee)
        self.height += 1

    async def current_height(self) -> BlockHeight:
        return BlockHeight(self.height)


class HttpLedgerClient:
    """Ledger gateway over HTTP. Satisfies LedgerTransfer and HeightSource."""

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
        )

    async def transfer(self, fee: FeeTransfer) -> None:
        payload = {
            "amount": fee.amount,
            "sender": fee.sender,
            "recipient": fee.recipient,
        }
        try:
            response = await self.client.post("/transfers", json=payload)
        except httpx.TimeoutException:
            raise LedgerTransferFailedError("ledger timeout")
        except httpx.HTTPError as e:
            logger.error(f"Ledger transport error: {e}")
            raise LedgerTransferFailedError("ledger unreachable")
        if not response.is_success:
            logger.warning(
                "Ledger rejected transfer (status=%s)", response.status_code,
                extra={"caller": fee.sender, "amount": fee.amount},
            )
            raise LedgerTransferFailedError(
                f"ledger rejected transfer (HTTP {response.status_code})",
            )

    async def current_height(self) -> BlockHeight:
        try:
            response = await self.client.get("/height")
            response.raise_for_status()
            return BlockHeight(int(response.json()["height"]))
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error(f"Ledger height lookup failed: {e}")
            raise LedgerTransferFailedError("ledger height unavailable")

    async def close(self) -> None:
        await self.client.aclose()
