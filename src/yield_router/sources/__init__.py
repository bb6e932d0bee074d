"""Quote source adapters used by :mod:`yield_router`."""

from __future__ import annotations

from typing import Protocol

from ..core import ProtocolQuote
from .csv import CSVQuoteSource
from .defillama import DefiLlamaQuoteSource
from .http import ApySourceClient


class QuoteSource(Protocol):
    """Adapter protocol shared by the backend client and the local sources.

    Implementations raise :class:`~yield_router.errors.SourceUnavailable` when
    the data cannot be fetched.
    """

    def fetch_quotes(self, search: str | None = None) -> list[ProtocolQuote]: ...

    def fetch_named_quotes(self) -> dict[str, float]: ...


__all__ = [
    "ApySourceClient",
    "CSVQuoteSource",
    "DefiLlamaQuoteSource",
    "QuoteSource",
]
