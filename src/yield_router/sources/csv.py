"""CSV-backed quote source for offline runs."""

from __future__ import annotations

import pandas as pd

from ..core import ProtocolQuote
from ..core.constants import DASHBOARD_LABELS, INITIAL_CATALOG_SIZE
from ..errors import SourceUnavailable
from .base import best_by_label, rank_quotes


class CSVQuoteSource:
    """Load quotes from a CSV with ``name`` and ``apy`` columns."""

    def __init__(
        self,
        path: str,
        *,
        count: int = INITIAL_CATALOG_SIZE,
        labels: tuple[str, str] = DASHBOARD_LABELS,
    ) -> None:
        self.path = path
        self.count = count
        self.labels = labels

    def _quotes(self) -> list[ProtocolQuote]:
        try:
            df = pd.read_csv(self.path)
        except (OSError, ValueError) as exc:
            raise SourceUnavailable(f"Cannot read {self.path}", detail=str(exc)) from exc
        missing = {"name", "apy"}.difference(df.columns)
        if missing:
            raise SourceUnavailable(f"CSV missing columns: {sorted(missing)}")
        df["apy"] = pd.to_numeric(df["apy"], errors="coerce").fillna(0.0)
        df = df[df["apy"] >= 0]
        return [
            ProtocolQuote(name=str(r["name"]), apy=float(r["apy"]))
            for _, r in df.iterrows()
        ]

    def fetch_quotes(self, search: str | None = None) -> list[ProtocolQuote]:
        return rank_quotes(self._quotes(), search, self.count)

    def fetch_named_quotes(self) -> dict[str, float]:
        return best_by_label(self._quotes(), self.labels)


__all__ = ["CSVQuoteSource"]
