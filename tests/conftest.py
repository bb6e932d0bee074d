import sys
import threading
import time
from pathlib import Path
from typing import Any

import pytest

# Ensure the package is importable without installation when running tests locally
pkg_src = Path(__file__).resolve().parents[1] / "src"
if str(pkg_src) not in sys.path:
    sys.path.insert(0, str(pkg_src))

from yield_router.core import ProtocolQuote  # noqa: E402
from yield_router.errors import SourceUnavailable  # noqa: E402

ACCOUNT = "0x" + "ab" * 20


class FakeQuoteSource:
    """In-memory quote source recording every fetch (called from worker threads)."""

    def __init__(self) -> None:
        self.top: list[ProtocolQuote] = []
        self.results: dict[str, list[ProtocolQuote]] = {}
        self.named: dict[str, float] = {}
        self.delays: dict[str | None, float] = {}
        self.fail = False
        self.calls: list[str | None] = []
        self.named_calls = 0

    def fetch_quotes(self, search: str | None = None) -> list[ProtocolQuote]:
        self.calls.append(search)
        if search in self.delays:
            time.sleep(self.delays[search])
        if self.fail:
            raise SourceUnavailable("GET /protocols failed", detail="connection refused")
        if search is None:
            return list(self.top)
        return list(self.results.get(search, []))

    def fetch_named_quotes(self) -> dict[str, float]:
        self.named_calls += 1
        if self.fail:
            raise SourceUnavailable("GET /apy failed", detail="connection refused")
        return dict(self.named)


class FakeCall:
    def __init__(self, contract: "FakeContract", fn: str, args: tuple[Any, ...]) -> None:
        self._contract = contract
        self.fn = fn
        self.args = args

    def transact(self, tx: dict[str, Any]) -> bytes:
        contract = self._contract
        contract.transactions.append((self.fn, self.args, dict(tx)))
        if contract.release is not None:
            contract.release.wait(timeout=5)
        if contract.transact_error is not None:
            raise contract.transact_error
        return bytes.fromhex("12" * 32)


class FakeFunctions:
    def __init__(self, contract: "FakeContract") -> None:
        self._contract = contract

    def depositTo(self, index: int) -> FakeCall:  # noqa: N802 - contract ABI name
        return FakeCall(self._contract, "depositTo", (index,))

    def depositHighest(self) -> FakeCall:  # noqa: N802 - contract ABI name
        return FakeCall(self._contract, "depositHighest", ())


class FakeContract:
    def __init__(self, address: str, abi: list[dict[str, object]]) -> None:
        self.address = address
        self.abi = abi
        self.functions = FakeFunctions(self)
        self.transactions: list[tuple[str, tuple[Any, ...], dict[str, Any]]] = []
        self.transact_error: Exception | None = None
        self.release: threading.Event | None = None


class FakeEth:
    def __init__(self) -> None:
        self.chain_id = 31337
        self.accounts_value: list[str] | Exception = [ACCOUNT]
        self.receipt_status = 1
        self.receipt_error: Exception | None = None
        self.receipts_requested: list[tuple[Any, float]] = []
        self.contracts: list[FakeContract] = []

    @property
    def accounts(self) -> list[str]:
        if isinstance(self.accounts_value, Exception):
            raise self.accounts_value
        return self.accounts_value

    def contract(self, address: str, abi: list[dict[str, object]]) -> FakeContract:
        contract = FakeContract(address, abi)
        self.contracts.append(contract)
        return contract

    def wait_for_transaction_receipt(self, tx_hash: Any, timeout: float = 120) -> dict[str, Any]:
        self.receipts_requested.append((tx_hash, timeout))
        if self.receipt_error is not None:
            raise self.receipt_error
        return {"status": self.receipt_status, "transactionHash": tx_hash}


class FakeWeb3:
    def __init__(self) -> None:
        self.eth = FakeEth()
        self.connected = True

    def is_connected(self) -> bool:
        return self.connected


class FakeProviderFactory:
    """Callable standing in for the wallet provider; counts handshakes."""

    def __init__(self, web3: FakeWeb3) -> None:
        self.web3 = web3
        self.calls = 0
        self.error: Exception | None = None
        self.release: threading.Event | None = None

    def __call__(self) -> FakeWeb3:
        self.calls += 1
        if self.release is not None:
            self.release.wait(timeout=5)
        if self.error is not None:
            raise self.error
        return self.web3


@pytest.fixture()
def quote_source() -> FakeQuoteSource:
    return FakeQuoteSource()


@pytest.fixture()
def fake_web3() -> FakeWeb3:
    return FakeWeb3()


@pytest.fixture()
def provider_factory(fake_web3: FakeWeb3) -> FakeProviderFactory:
    return FakeProviderFactory(fake_web3)
