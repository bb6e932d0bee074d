"""Wallet connection state machine bound to the Aggregator contract."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from web3 import Web3

from .core import AGGREGATOR_ABI, AGGREGATOR_ADDRESS, LOCALHOST_CHAIN_ID, WalletState
from .core.constants import DEFAULT_RPC_URL, DEFAULT_TIMEOUT_SECONDS
from .errors import (
    ConnectionInProgress,
    ConnectionRejected,
    SessionNotReady,
    WalletError,
    WalletUnavailable,
    describe_failure,
)

logger = logging.getLogger(__name__)

LOCALHOST_ADVISORY = "ENS unavailable on localhost; functionality still works."

ProviderFactory = Callable[[], Any]


class IdentityGate(Protocol):
    """Session collaborator supplied by the identity provider."""

    session: object | None
    loading: bool


def http_provider_factory(
    rpc_url: str = DEFAULT_RPC_URL,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> ProviderFactory:
    """Factory for a web3 client talking JSON-RPC to a node-managed wallet."""

    def factory() -> Web3:
        return Web3(Web3.HTTPProvider(rpc_url, request_kwargs={"timeout": timeout}))

    return factory


@dataclass(frozen=True)
class WalletConnection:
    address: str
    chain_id: int
    web3: Any
    contract: Any


class WalletSession:
    """Owns the provider handshake and the signer-bound contract handle.

    ``DISCONNECTED -> CONNECTING -> CONNECTED | FAILED``; ``FAILED`` may be
    retried with another :meth:`connect`. Only one handshake runs at a time.
    """

    def __init__(
        self,
        provider_factory: ProviderFactory | None = None,
        *,
        contract_address: str = AGGREGATOR_ADDRESS,
        abi: list[dict[str, object]] = AGGREGATOR_ABI,
        account_index: int = 0,
        gate: IdentityGate | None = None,
    ) -> None:
        self._provider_factory = provider_factory or http_provider_factory()
        self.contract_address = contract_address
        self.abi = abi
        self.account_index = account_index
        self.gate = gate
        self._state = WalletState.DISCONNECTED
        self._connection: WalletConnection | None = None
        self.reason: str | None = None
        self.advisory: str | None = None

    @property
    def state(self) -> WalletState:
        return self._state

    @property
    def connection(self) -> WalletConnection | None:
        return self._connection if self._state is WalletState.CONNECTED else None

    @property
    def address(self) -> str | None:
        conn = self.connection
        return conn.address if conn else None

    async def connect(self) -> WalletConnection:
        if self.gate is not None and (self.gate.loading or self.gate.session is None):
            raise SessionNotReady()
        if self._state is WalletState.CONNECTING:
            raise ConnectionInProgress()
        if self._state is WalletState.CONNECTED and self._connection is not None:
            return self._connection

        self._state = WalletState.CONNECTING
        self.reason = None
        self.advisory = None
        try:
            connection = await asyncio.to_thread(self._handshake)
        except WalletError as exc:
            self._fail(exc)
            raise
        except Exception as exc:
            err = ConnectionRejected(describe_failure(exc))
            self._fail(err)
            raise err from exc

        if connection.chain_id == LOCALHOST_CHAIN_ID:
            self.advisory = LOCALHOST_ADVISORY
        self._connection = connection
        self._state = WalletState.CONNECTED
        logger.info("Wallet %s connected on chain %d", connection.address, connection.chain_id)
        return connection

    def handle_provider_disconnect(self) -> None:
        """Hook for the wallet provider's disconnect event."""

        self._connection = None
        self._state = WalletState.DISCONNECTED
        self.reason = None
        self.advisory = None

    def _fail(self, exc: WalletError) -> None:
        self._connection = None
        self._state = WalletState.FAILED
        self.reason = exc.message
        logger.warning("Wallet connection failed: %s", exc)

    def _handshake(self) -> WalletConnection:
        try:
            w3 = self._provider_factory()
        except Exception as exc:
            raise WalletUnavailable(describe_failure(exc)) from exc
        if not w3.is_connected():
            raise WalletUnavailable()
        chain_id = int(w3.eth.chain_id)
        accounts = list(w3.eth.accounts)
        if len(accounts) <= self.account_index:
            raise ConnectionRejected("Wallet exposed no usable account")
        address = Web3.to_checksum_address(accounts[self.account_index])
        contract = w3.eth.contract(
            address=Web3.to_checksum_address(self.contract_address),
            abi=self.abi,
        )
        return WalletConnection(address=address, chain_id=chain_id, web3=w3, contract=contract)


__all__ = [
    "IdentityGate",
    "LOCALHOST_ADVISORY",
    "WalletConnection",
    "WalletSession",
    "http_provider_factory",
]
