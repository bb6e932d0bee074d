"""In-memory collections for YieldRouter data models."""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Iterator

import pandas as pd

from .constants import DASHBOARD_LABELS, HISTORY_CAPACITY, MAX_SELECTION
from .models import HistorySample, ProtocolQuote


def dedupe(quotes: Iterable[ProtocolQuote]) -> list[ProtocolQuote]:
    """Drop quotes whose name was already seen, keeping the first occurrence."""

    seen: set[str] = set()
    res: list[ProtocolQuote] = []
    for quote in quotes:
        if quote.name in seen:
            continue
        seen.add(quote.name)
        res.append(quote)
    return res


class QuoteRepository:
    """Ordered, name-unique view over a set of quotes with pandas export."""

    def __init__(self, quotes: Iterable[ProtocolQuote] | None = None) -> None:
        self._quotes: list[ProtocolQuote] = dedupe(quotes) if quotes else []

    def limit(self, n: int) -> "QuoteRepository":
        return QuoteRepository(self._quotes[:n])

    def names(self) -> list[str]:
        return [quote.name for quote in self._quotes]

    def get(self, name: str) -> ProtocolQuote | None:
        for quote in self._quotes:
            if quote.name == name:
                return quote
        return None

    def index_of(self, name: str) -> int:
        for idx, quote in enumerate(self._quotes):
            if quote.name == name:
                return idx
        raise KeyError(name)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([quote.to_dict() for quote in self._quotes], columns=["name", "apy"])

    def __len__(self) -> int:
        return len(self._quotes)

    def __iter__(self) -> Iterator[ProtocolQuote]:
        return iter(self._quotes)

    def __getitem__(self, idx: int) -> ProtocolQuote:
        return self._quotes[idx]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuoteRepository):
            return NotImplemented
        return self._quotes == other._quotes


class SelectionSet:
    """Protocols picked for comparison, oldest first.

    Holds at most ``capacity`` quotes; adding one more evicts the oldest.
    """

    def __init__(self, capacity: int = MAX_SELECTION) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self.capacity = capacity
        self._members: list[ProtocolQuote] = []

    def toggle(self, quote: ProtocolQuote) -> None:
        if quote.name in self:
            self._members = [m for m in self._members if m.name != quote.name]
            return
        self._members.append(quote)
        while len(self._members) > self.capacity:
            self._members.pop(0)

    def clear(self) -> None:
        self._members = []

    @property
    def members(self) -> tuple[ProtocolQuote, ...]:
        return tuple(self._members)

    def names(self) -> list[str]:
        return [m.name for m in self._members]

    def __contains__(self, name: object) -> bool:
        return any(m.name == name for m in self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __iter__(self) -> Iterator[ProtocolQuote]:
        return iter(self._members)


class HistoryBuffer:
    """Sliding window of dashboard samples used for charting."""

    def __init__(
        self,
        capacity: int = HISTORY_CAPACITY,
        labels: tuple[str, str] = DASHBOARD_LABELS,
    ) -> None:
        self.capacity = capacity
        self.labels = labels
        self._samples: list[HistorySample] = []

    def append(self, sample: HistorySample) -> None:
        # wall clocks can step backwards; keep the window ordered
        if self._samples and sample.timestamp < self._samples[-1].timestamp:
            sample = dataclasses.replace(sample, timestamp=self._samples[-1].timestamp)
        self._samples.append(sample)
        if len(self._samples) > self.capacity:
            del self._samples[: len(self._samples) - self.capacity]

    def snapshot(self) -> tuple[HistorySample, ...]:
        return tuple(self._samples)

    def to_dataframe(self) -> pd.DataFrame:
        """Return the window indexed by UTC timestamp, one column per label."""

        label_a, label_b = self.labels
        if not self._samples:
            return pd.DataFrame(columns=[label_a, label_b])
        df = pd.DataFrame(
            {
                "timestamp": [s.timestamp for s in self._samples],
                label_a: [s.series_a for s in self._samples],
                label_b: [s.series_b for s in self._samples],
            }
        )
        df["timestamp"] = pd.to_datetime(df["timestamp"], unit="s", utc=True)
        return df.set_index("timestamp")

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[HistorySample]:
        return iter(self._samples)


__all__ = ["HistoryBuffer", "QuoteRepository", "SelectionSet", "dedupe"]
