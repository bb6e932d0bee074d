"""Deposit orchestration against the Aggregator contract."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from .catalog import ComparisonBoard
from .core import STAKE_WEI, DepositState, DepositTicket
from .errors import (
    DepositError,
    DepositInProgress,
    NotConnected,
    TransactionRejected,
    TransactionReverted,
    describe_failure,
)
from .wallet import WalletConnection, WalletSession

logger = logging.getLogger(__name__)

DEFAULT_CONFIRMATION_TIMEOUT = 120.0


class DepositOrchestrator:
    """Submit one deposit at a time and follow it to confirmation.

    Precondition failures (:class:`NotConnected`, :class:`DepositInProgress`,
    :class:`~yield_router.errors.UnknownProtocol`) are raised before anything
    is sent. Once submitted, the ticket is returned in its terminal state and
    carries the failure reason, if any.
    """

    def __init__(
        self,
        wallet: WalletSession,
        *,
        board: ComparisonBoard | None = None,
        stake_wei: int = STAKE_WEI,
        confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
    ) -> None:
        self._wallet = wallet
        self.board = board
        self.stake_wei = stake_wei
        self.confirmation_timeout = confirmation_timeout
        self._active: DepositTicket | None = None

    @property
    def active(self) -> DepositTicket | None:
        return self._active

    @property
    def busy(self) -> bool:
        return self._active is not None

    async def deposit_to(self, index: int, amount_wei: int | None = None) -> DepositTicket:
        if index < 0:
            raise ValueError("index must be non-negative")
        name = None
        if self.board is not None and index < len(self.board.names):
            name = self.board.names[index]
        ticket = DepositTicket(
            target=index,
            amount_wei=self.stake_wei if amount_wei is None else amount_wei,
            target_name=name,
        )
        return await self._execute(ticket, lambda contract: contract.functions.depositTo(index))

    async def deposit_to_protocol(self, name: str, amount_wei: int | None = None) -> DepositTicket:
        """Deposit to ``name``, resolving its Aggregator index at call time."""

        if self.board is None:
            raise RuntimeError("deposit_to_protocol requires a comparison board")
        return await self.deposit_to(self.board.index_of(name), amount_wei)

    async def deposit_highest(self, amount_wei: int | None = None) -> DepositTicket:
        ticket = DepositTicket(
            target=None,
            amount_wei=self.stake_wei if amount_wei is None else amount_wei,
        )
        return await self._execute(ticket, lambda contract: contract.functions.depositHighest())

    async def _execute(
        self,
        ticket: DepositTicket,
        build_call: Callable[[Any], Any],
    ) -> DepositTicket:
        connection = self._wallet.connection
        if connection is None:
            raise NotConnected()
        if self._active is not None:
            raise DepositInProgress()
        self._active = ticket
        try:
            await self._submit_and_confirm(connection, ticket, build_call)
        except DepositError as exc:
            ticket.fail(exc.message)
            logger.warning("Deposit to %s failed: %s", _describe_target(ticket), exc)
        except asyncio.CancelledError:
            # the transaction may still land; the ticket only stops tracking it
            ticket.fail("Deposit cancelled")
            logger.warning("Deposit to %s cancelled (tx %s)", _describe_target(ticket), ticket.tx_hash)
            raise
        finally:
            self._active = None
        return ticket

    async def _submit_and_confirm(
        self,
        connection: WalletConnection,
        ticket: DepositTicket,
        build_call: Callable[[Any], Any],
    ) -> None:
        ticket.advance(DepositState.SUBMITTING)
        tx = {"from": connection.address, "value": ticket.amount_wei}
        try:
            call = build_call(connection.contract)
            tx_hash = await asyncio.to_thread(call.transact, tx)
        except Exception as exc:
            raise TransactionRejected(describe_failure(exc)) from exc
        ticket.tx_hash = tx_hash.hex() if hasattr(tx_hash, "hex") else str(tx_hash)

        ticket.advance(DepositState.AWAITING_CONFIRMATION)
        try:
            receipt = await asyncio.to_thread(
                connection.web3.eth.wait_for_transaction_receipt,
                tx_hash,
                timeout=self.confirmation_timeout,
            )
        except Exception as exc:
            raise TransactionReverted(describe_failure(exc)) from exc
        if receipt["status"] != 1:
            raise TransactionReverted(detail=ticket.tx_hash)

        ticket.advance(DepositState.CONFIRMED)
        logger.info(
            "Deposited %d wei to %s in %s", ticket.amount_wei, _describe_target(ticket), ticket.tx_hash
        )


def _describe_target(ticket: DepositTicket) -> str:
    if ticket.target is None:
        return "highest-yield protocol"
    return ticket.target_name or f"index {ticket.target}"


__all__ = ["DEFAULT_CONFIRMATION_TIMEOUT", "DepositOrchestrator"]
