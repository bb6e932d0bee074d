"""
YieldRouter: compare protocol APYs and route a fixed stake to one of them.

Design goals:
- Pluggable quote sources (aggregator backend, DefiLlama, CSV)
- Immutable quotes + small in-memory collections (catalog view, selection, history)
- Explicit state machines for the wallet session and each deposit attempt
- asyncio polling with start/stop lifecycles; stale responses never overwrite newer ones
- Matplotlib charts for the comparison and the dashboard history
"""

from __future__ import annotations

from .catalog import ComparisonBoard, ProtocolCatalog
from .core import (
    AGGREGATOR_ABI,
    AGGREGATOR_ADDRESS,
    STAKE_WEI,
    DepositState,
    DepositTicket,
    HistoryBuffer,
    HistorySample,
    ProtocolQuote,
    QuoteRepository,
    SelectionSet,
    WalletState,
    dedupe,
)
from .dashboard import Dashboard
from .deposit import DepositOrchestrator
from .errors import (
    ConnectionInProgress,
    ConnectionRejected,
    DepositError,
    DepositInProgress,
    NotConnected,
    SessionNotReady,
    SourceUnavailable,
    TransactionRejected,
    TransactionReverted,
    UnknownProtocol,
    WalletError,
    WalletUnavailable,
    YieldRouterError,
)
from .navigation import compare_path, decode_compare_list, encode_compare_list
from .polling import Poller, RequestSequencer
from .sources import ApySourceClient, CSVQuoteSource, DefiLlamaQuoteSource, QuoteSource
from .visualization import Visualizer
from .wallet import IdentityGate, WalletConnection, WalletSession, http_provider_factory

__all__ = [
    "AGGREGATOR_ABI",
    "AGGREGATOR_ADDRESS",
    "ApySourceClient",
    "CSVQuoteSource",
    "ComparisonBoard",
    "ConnectionInProgress",
    "ConnectionRejected",
    "Dashboard",
    "DefiLlamaQuoteSource",
    "DepositError",
    "DepositInProgress",
    "DepositOrchestrator",
    "DepositState",
    "DepositTicket",
    "HistoryBuffer",
    "HistorySample",
    "IdentityGate",
    "NotConnected",
    "Poller",
    "ProtocolCatalog",
    "ProtocolQuote",
    "QuoteRepository",
    "QuoteSource",
    "RequestSequencer",
    "STAKE_WEI",
    "SelectionSet",
    "SessionNotReady",
    "SourceUnavailable",
    "TransactionRejected",
    "TransactionReverted",
    "UnknownProtocol",
    "Visualizer",
    "WalletConnection",
    "WalletError",
    "WalletSession",
    "WalletState",
    "WalletUnavailable",
    "YieldRouterError",
    "compare_path",
    "decode_compare_list",
    "dedupe",
    "encode_compare_list",
    "http_provider_factory",
]
