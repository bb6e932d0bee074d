"""Ranking helpers shared by the locally computed quote sources."""

from __future__ import annotations

from collections.abc import Iterable

from ..core import ProtocolQuote
from ..core.constants import INITIAL_CATALOG_SIZE


def label_key(label: str) -> str:
    """Normalise a display label to a project slug (``Aave V3`` -> ``aave-v3``)."""

    return "-".join(label.casefold().split())


def rank_quotes(
    quotes: Iterable[ProtocolQuote],
    search: str | None = None,
    count: int = INITIAL_CATALOG_SIZE,
) -> list[ProtocolQuote]:
    """Sort by APY descending; top ``count`` without a term, all matches with one."""

    ranked = sorted(quotes, key=lambda q: q.apy, reverse=True)
    if search and search.strip():
        needle = search.casefold()
        return [q for q in ranked if needle in q.name.casefold()]
    return ranked[:count]


def best_by_label(quotes: Iterable[ProtocolQuote], labels: Iterable[str]) -> dict[str, float]:
    """Highest APY per label among quotes whose name matches it; 0.0 when absent."""

    best: dict[str, float] = {}
    for quote in quotes:
        key = label_key(quote.name)
        if quote.apy > best.get(key, 0.0):
            best[key] = quote.apy
    return {label: best.get(label_key(label), 0.0) for label in labels}


__all__ = ["best_by_label", "label_key", "rank_quotes"]
