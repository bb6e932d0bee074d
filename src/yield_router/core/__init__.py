"""Core data structures for :mod:`yield_router`.

This subpackage groups the models, constants and in-memory collections shared
by the catalog, dashboard, wallet and deposit layers so they can be imported
without pulling in web3 or the HTTP sources.
"""

from __future__ import annotations

from .constants import (
    AGGREGATOR_ABI,
    AGGREGATOR_ADDRESS,
    DASHBOARD_LABELS,
    LOCALHOST_CHAIN_ID,
    STAKE_WEI,
)
from .models import DepositState, DepositTicket, HistorySample, ProtocolQuote, WalletState
from .repositories import HistoryBuffer, QuoteRepository, SelectionSet, dedupe

__all__ = [
    "AGGREGATOR_ABI",
    "AGGREGATOR_ADDRESS",
    "DASHBOARD_LABELS",
    "DepositState",
    "DepositTicket",
    "HistoryBuffer",
    "HistorySample",
    "LOCALHOST_CHAIN_ID",
    "ProtocolQuote",
    "QuoteRepository",
    "STAKE_WEI",
    "SelectionSet",
    "WalletState",
    "dedupe",
]
