"""Browsable protocol catalog and the comparison board built from a selection."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

import pandas as pd

from .core import ProtocolQuote, QuoteRepository
from .core.constants import INITIAL_CATALOG_SIZE, SEARCH_DEBOUNCE_SECONDS
from .errors import SourceUnavailable, UnknownProtocol
from .polling import RequestSequencer
from .sources import QuoteSource

logger = logging.getLogger(__name__)


class ProtocolCatalog:
    """Deduplicated protocol view with a debounced search filter.

    ``all`` is the baseline loaded without a search term; ``shown`` is what
    the user currently sees. Failed fetches keep the previous view and set
    ``warning``.
    """

    def __init__(
        self,
        source: QuoteSource,
        *,
        initial_size: int = INITIAL_CATALOG_SIZE,
        debounce: float = SEARCH_DEBOUNCE_SECONDS,
    ) -> None:
        self._source = source
        self.initial_size = initial_size
        self.debounce = debounce
        self._all = QuoteRepository()
        self._shown = QuoteRepository()
        self._query = ""
        self._pending: asyncio.Task[None] | None = None
        self._baseline_seq = RequestSequencer()
        self._search_seq = RequestSequencer()
        self.loading = False
        self.warning: str | None = None

    @property
    def all(self) -> QuoteRepository:
        return self._all

    @property
    def shown(self) -> QuoteRepository:
        return self._shown

    @property
    def query(self) -> str:
        return self._query

    async def load_initial(self) -> QuoteRepository:
        return await self.refresh()

    async def refresh(self) -> QuoteRepository:
        """Reload the baseline; the shown view follows unless a search is active."""

        request_id = self._baseline_seq.issue()
        try:
            quotes = await asyncio.to_thread(self._source.fetch_quotes, None)
        except SourceUnavailable as exc:
            logger.warning("Loading top protocols failed: %s", exc)
            if not self._baseline_seq.stale(request_id):
                self.warning = f"Failed to load top protocols: {exc}"
            return self._shown
        if not self._baseline_seq.accept(request_id):
            logger.debug("Discarding stale baseline response %d", request_id)
            return self._shown
        self._all = QuoteRepository(quotes).limit(self.initial_size)
        if not self._query.strip():
            self._shown = self._all
        self.warning = None
        return self._shown

    def search(self, term: str) -> None:
        """Schedule a search; only the last call in a quiet period hits the network."""

        self._query = term
        request_id = self._search_seq.issue()
        self._cancel_pending()
        if not term.strip():
            self._shown = self._all
            return
        loop = asyncio.get_running_loop()
        self._pending = loop.create_task(self._debounced_search(term, request_id))

    def clear_search(self) -> None:
        self.search("")

    async def wait_idle(self) -> None:
        """Wait for the pending search, if any, to finish or be superseded."""

        while self._pending is not None and not self._pending.done():
            await asyncio.wait({self._pending})

    def close(self) -> None:
        self._cancel_pending()
        self._search_seq.invalidate()
        self._baseline_seq.invalidate()

    def _cancel_pending(self) -> None:
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None
        self.loading = False

    async def _debounced_search(self, term: str, request_id: int) -> None:
        await asyncio.sleep(self.debounce)
        self.loading = True
        try:
            quotes = await asyncio.to_thread(self._source.fetch_quotes, term)
        except SourceUnavailable as exc:
            logger.warning("Search for %r failed: %s", term, exc)
            if self._search_seq.is_current(request_id):
                self.warning = f"Search failed: {exc}"
            return
        finally:
            if self._search_seq.is_current(request_id):
                self.loading = False
        if not self._search_seq.is_current(request_id):
            logger.debug("Discarding stale results for %r", term)
            return
        self._shown = QuoteRepository(quotes)
        self.warning = None


class ComparisonBoard:
    """Live APY series for the protocols a user chose to compare.

    The order of ``names`` is the order the Aggregator contract indexes them
    by, so it never changes after construction.
    """

    def __init__(self, source: QuoteSource, names: Sequence[str]) -> None:
        self._source = source
        self.names: tuple[str, ...] = tuple(names)
        self._series: tuple[ProtocolQuote, ...] = ()
        self._seq = RequestSequencer()
        self.warning: str | None = None

    @property
    def series(self) -> tuple[ProtocolQuote, ...]:
        return self._series

    def _lookup(self, name: str) -> ProtocolQuote:
        hits = self._source.fetch_quotes(name)
        for hit in hits:
            if hit.name == name:
                return hit
        # fall back to the closest server-side match, keeping the requested name
        apy = hits[0].apy if hits else 0.0
        return ProtocolQuote(name=name, apy=apy)

    async def refresh(self) -> tuple[ProtocolQuote, ...]:
        request_id = self._seq.issue()
        try:
            series = await asyncio.gather(
                *(asyncio.to_thread(self._lookup, name) for name in self.names)
            )
        except SourceUnavailable as exc:
            logger.warning("Failed to fetch APYs for %s: %s", ", ".join(self.names), exc)
            if not self._seq.stale(request_id):
                self.warning = f"Failed to fetch APYs: {exc}"
            return self._series
        if not self._seq.accept(request_id):
            logger.debug("Discarding stale comparison response %d", request_id)
            return self._series
        self._series = tuple(series)
        self.warning = None
        return self._series

    def index_of(self, name: str) -> int:
        try:
            return self.names.index(name)
        except ValueError:
            raise UnknownProtocol(detail=name) from None

    def close(self) -> None:
        self._seq.invalidate()

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([q.to_dict() for q in self._series], columns=["name", "apy"])


__all__ = ["ComparisonBoard", "ProtocolCatalog"]
