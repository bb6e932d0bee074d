from __future__ import annotations

import asyncio
import itertools
import threading
import time
from typing import TYPE_CHECKING

from yield_router.dashboard import Dashboard
from yield_router.errors import SourceUnavailable
from yield_router.polling import Poller

if TYPE_CHECKING:
    from conftest import FakeQuoteSource


def test_refresh_updates_current_and_history(quote_source: FakeQuoteSource) -> None:
    quote_source.named = {"Aave-V3": 4.7, "Binance Staked ETH": 2.9}
    clock = itertools.count(1_700_000_000)
    dashboard = Dashboard(quote_source, clock=lambda: float(next(clock)))

    asyncio.run(dashboard.refresh())

    assert dashboard.current == {"Aave-V3": 4.7, "Binance Staked ETH": 2.9}
    sample = dashboard.history.snapshot()[-1]
    assert (sample.timestamp, sample.series_a, sample.series_b) == (1_700_000_000.0, 4.7, 2.9)


def test_best_prefers_first_label_on_tie(quote_source: FakeQuoteSource) -> None:
    dashboard = Dashboard(quote_source)
    assert dashboard.best() == ("Aave-V3", 0.0)

    quote_source.named = {"Aave-V3": 0.047, "Binance Staked ETH": 242.725}
    asyncio.run(dashboard.refresh())

    assert dashboard.best() == ("Binance Staked ETH", 242.725)


def test_failed_refresh_keeps_values_and_skips_history(quote_source: FakeQuoteSource) -> None:
    quote_source.named = {"Aave-V3": 4.7, "Binance Staked ETH": 2.9}
    dashboard = Dashboard(quote_source)

    async def scenario() -> None:
        await dashboard.refresh()
        quote_source.fail = True
        await dashboard.refresh()

    asyncio.run(scenario())

    assert dashboard.current["Aave-V3"] == 4.7
    assert len(dashboard.history) == 1
    assert dashboard.warning is not None


class ScriptedNamedSource:
    """Serves named quotes in order, each after its own delay."""

    def __init__(self, script: list[tuple[float, dict[str, float] | Exception]]) -> None:
        self._script = list(script)
        self._lock = threading.Lock()

    def fetch_quotes(self, search: str | None = None) -> list:
        return []

    def fetch_named_quotes(self) -> dict[str, float]:
        with self._lock:
            delay, values = self._script.pop(0)
        time.sleep(delay)
        if isinstance(values, Exception):
            raise values
        return values


def test_overlapping_ticks_keep_the_newest_response() -> None:
    source = ScriptedNamedSource(
        [
            (0.3, {"Aave-V3": 1.0, "Binance Staked ETH": 1.0}),
            (0.0, {"Aave-V3": 2.0, "Binance Staked ETH": 2.0}),
        ]
    )
    dashboard = Dashboard(source)

    async def scenario() -> None:
        slow = asyncio.create_task(dashboard.refresh())
        await asyncio.sleep(0.05)
        await dashboard.refresh()
        await slow

    asyncio.run(scenario())

    assert dashboard.current == {"Aave-V3": 2.0, "Binance Staked ETH": 2.0}
    assert len(dashboard.history) == 1


def test_stale_failed_tick_leaves_no_warning() -> None:
    source = ScriptedNamedSource(
        [
            (0.3, SourceUnavailable("GET /apy failed")),
            (0.0, {"Aave-V3": 2.0, "Binance Staked ETH": 2.0}),
        ]
    )
    dashboard = Dashboard(source)

    async def scenario() -> None:
        slow = asyncio.create_task(dashboard.refresh())
        await asyncio.sleep(0.05)
        await dashboard.refresh()
        await slow

    asyncio.run(scenario())

    assert dashboard.current["Aave-V3"] == 2.0
    assert dashboard.warning is None


def test_dashboard_polls_until_stopped(quote_source: FakeQuoteSource) -> None:
    quote_source.named = {"Aave-V3": 4.7}
    dashboard = Dashboard(quote_source)

    async def scenario() -> None:
        poller = Poller(dashboard.refresh, 0.05, name="dashboard")
        poller.start()
        await asyncio.sleep(0.13)
        poller.stop()
        dashboard.close()

    asyncio.run(scenario())

    assert quote_source.named_calls >= 2
    assert 1 <= len(dashboard.history) <= quote_source.named_calls
    assert dashboard.current["Binance Staked ETH"] == 0.0
