"""Two-series dashboard feeding the history chart and the best-yield pick."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from .core import HistoryBuffer, HistorySample
from .core.constants import DASHBOARD_LABELS
from .errors import SourceUnavailable
from .polling import RequestSequencer
from .sources import QuoteSource

logger = logging.getLogger(__name__)


class Dashboard:
    def __init__(
        self,
        source: QuoteSource,
        *,
        labels: tuple[str, str] = DASHBOARD_LABELS,
        history: HistoryBuffer | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._source = source
        self.labels = labels
        self.history = history if history is not None else HistoryBuffer(labels=labels)
        self._clock = clock
        self._seq = RequestSequencer()
        self.current: dict[str, float] = {label: 0.0 for label in labels}
        self.warning: str | None = None

    async def refresh(self) -> dict[str, float]:
        request_id = self._seq.issue()
        try:
            named = await asyncio.to_thread(self._source.fetch_named_quotes)
        except SourceUnavailable as exc:
            logger.warning("Failed to load APYs: %s", exc)
            if not self._seq.stale(request_id):
                self.warning = f"Failed to load APYs: {exc}"
            return self.current
        if not self._seq.accept(request_id):
            logger.debug("Discarding stale dashboard response %d", request_id)
            return self.current
        label_a, label_b = self.labels
        a = float(named.get(label_a, 0.0))
        b = float(named.get(label_b, 0.0))
        self.current = {label_a: a, label_b: b}
        self.history.append(HistorySample(timestamp=self._clock(), series_a=a, series_b=b))
        self.warning = None
        return self.current

    def best(self) -> tuple[str, float]:
        """Label and APY of the higher series; ties go to the first label."""

        label_a, label_b = self.labels
        a, b = self.current[label_a], self.current[label_b]
        return (label_a, a) if a >= b else (label_b, b)

    def close(self) -> None:
        self._seq.invalidate()


__all__ = ["Dashboard"]
