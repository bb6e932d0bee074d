"""DefiLlama adapter computing protocol quotes without the backend service."""

from __future__ import annotations

import json
import logging
import urllib.request
from pathlib import Path
from typing import Any

from ..core import ProtocolQuote
from ..core.constants import DASHBOARD_LABELS, DEFAULT_TIMEOUT_SECONDS, INITIAL_CATALOG_SIZE
from ..errors import SourceUnavailable
from .base import best_by_label, rank_quotes

logger = logging.getLogger(__name__)


class DefiLlamaQuoteSource:
    """HTTP client for https://yields.llama.fi/pools.

    A protocol's APY is ``apyBase + apyReward`` of each pool, so the same
    project appears once per pool; callers dedupe by name.
    """

    URL = "https://yields.llama.fi/pools"

    def __init__(
        self,
        cache_path: str | None = None,
        *,
        count: int = INITIAL_CATALOG_SIZE,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        labels: tuple[str, str] = DASHBOARD_LABELS,
    ) -> None:
        self.cache_path = Path(cache_path) if cache_path else None
        self.count = count
        self.timeout = timeout
        self.labels = labels

    def _load(self) -> Any:
        if self.cache_path and self.cache_path.exists():
            with self.cache_path.open() as f:
                return json.load(f)
        with urllib.request.urlopen(self.URL, timeout=self.timeout) as resp:  # pragma: no cover - network path
            data = json.load(resp)
        if self.cache_path:
            self.cache_path.parent.mkdir(parents=True, exist_ok=True)
            with self.cache_path.open("w") as f:
                json.dump(data, f)
        return data

    def _quotes(self) -> list[ProtocolQuote]:
        try:
            raw = self._load()
        except Exception as exc:
            raise SourceUnavailable("DefiLlama request failed", detail=str(exc)) from exc
        quotes: list[ProtocolQuote] = []
        pools = raw.get("data", []) if isinstance(raw, dict) else raw
        for item in pools:
            project = item.get("project")
            if not project:
                continue
            apy = float(item.get("apyBase") or 0.0) + float(item.get("apyReward") or 0.0)
            if apy < 0:
                logger.debug("Skipping %s pool with negative APY %.4f", project, apy)
                continue
            quotes.append(ProtocolQuote(name=str(project), apy=apy))
        return quotes

    def fetch_quotes(self, search: str | None = None) -> list[ProtocolQuote]:
        return rank_quotes(self._quotes(), search, self.count)

    def fetch_named_quotes(self) -> dict[str, float]:
        return best_by_label(self._quotes(), self.labels)


__all__ = ["DefiLlamaQuoteSource"]
