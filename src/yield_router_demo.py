from __future__ import annotations

import asyncio
import logging
import os
import sys
import tomllib
from pathlib import Path
from typing import Any

from yield_router import (
    ApySourceClient,
    ComparisonBoard,
    CSVQuoteSource,
    Dashboard,
    DefiLlamaQuoteSource,
    DepositError,
    DepositOrchestrator,
    Poller,
    ProtocolCatalog,
    QuoteSource,
    SelectionSet,
    Visualizer,
    WalletError,
    WalletSession,
    compare_path,
    decode_compare_list,
    http_provider_factory,
)

logger = logging.getLogger(__name__)


def load_config(path: str | Path | None) -> dict[str, Any]:
    """Built-in settings with each table of the TOML file at ``path`` laid over them.

    A missing file only logs a warning, so the demo still runs offline.
    """

    default: dict[str, Any] = {
        "source": {
            "kind": "csv",
            "csv_path": str(Path(__file__).with_name("sample_quotes.csv")),
            "cache_path": None,
        },
        "api": {"url": "http://localhost:8080/api", "timeout": 10.0},
        "wallet": {
            "rpc_url": "http://localhost:8545",
            "aggregator": "0x9fE46736679d2D9a65F0992F2272dE9f3c7fa6e0",
            "account_index": 0,
        },
        "polling": {"dashboard_seconds": 5.0, "compare_seconds": 30.0, "duration": 0.0},
        "search": {"term": "", "debounce": 0.3},
        "deposit": {"enabled": False, "target": None, "amount_wei": 10**16},
        "output": {"outdir": None, "show": True, "charts": ["compare", "history"]},
    }

    if not path:
        return default
    cfg_path = Path(path)
    if not cfg_path.is_file():
        logger.warning("No config at %s; running with built-in settings", cfg_path)
        return default
    with cfg_path.open("rb") as f:
        overrides = tomllib.load(f)
    for section, values in overrides.items():
        base = default.get(section)
        if isinstance(base, dict) and isinstance(values, dict):
            base.update(values)
        else:
            default[section] = values
    return default


def apply_env_overrides(cfg: dict[str, Any]) -> dict[str, Any]:
    if api_env := os.getenv("YIELD_ROUTER_API_URL"):
        cfg.setdefault("api", {})["url"] = api_env
        cfg.setdefault("source", {})["kind"] = "backend"
    if rpc_env := os.getenv("YIELD_ROUTER_RPC_URL"):
        cfg.setdefault("wallet", {})["rpc_url"] = rpc_env
    if agg_env := os.getenv("YIELD_ROUTER_AGGREGATOR"):
        cfg.setdefault("wallet", {})["aggregator"] = agg_env
    if outdir_env := os.getenv("YIELD_ROUTER_OUTDIR"):
        cfg.setdefault("output", {})["outdir"] = outdir_env
    return cfg


def build_source(cfg: dict[str, Any]) -> QuoteSource:
    src_cfg = cfg.get("source", {})
    kind = str(src_cfg.get("kind", "csv"))
    timeout = float(cfg.get("api", {}).get("timeout", 10.0))
    if kind == "backend":
        return ApySourceClient(str(cfg["api"]["url"]), timeout=timeout)
    if kind == "defillama":
        return DefiLlamaQuoteSource(cache_path=src_cfg.get("cache_path"), timeout=timeout)
    if kind == "csv":
        return CSVQuoteSource(str(src_cfg["csv_path"]))
    raise ValueError(f"Unknown source kind: {kind}")


async def run(cfg: dict[str, Any]) -> None:
    source = build_source(cfg)

    # Catalog & selection
    catalog = ProtocolCatalog(source, debounce=float(cfg["search"].get("debounce", 0.3)))
    await catalog.load_initial()
    term = str(cfg["search"].get("term") or "")
    if term:
        catalog.search(term)
        await catalog.wait_idle()
    if catalog.warning:
        print(f"[WARN] {catalog.warning}")
    print(f"Protocols shown: {len(catalog.shown)}")
    print(catalog.shown.to_dataframe().to_string(index=False))

    selection = SelectionSet()
    for quote in catalog.shown:
        selection.toggle(quote)
    catalog.close()

    board: ComparisonBoard | None = None
    if len(selection) >= 2:
        route = compare_path(selection)
        print(f"Compare route: {route}")
        board = ComparisonBoard(source, decode_compare_list(route.split("list=", 1)[1]))

    # Polling views
    dashboard = Dashboard(source)
    poll = cfg.get("polling", {})
    pollers = [Poller(dashboard.refresh, float(poll.get("dashboard_seconds", 5.0)), name="dashboard")]
    if board is not None:
        pollers.append(
            Poller(board.refresh, float(poll.get("compare_seconds", 30.0)), name="compare")
        )
    for poller in pollers:
        poller.start()
    await asyncio.sleep(max(float(poll.get("duration", 0.0)), 0.1))
    for poller in pollers:
        poller.stop()
    dashboard.close()

    label, apy = dashboard.best()
    print(f"Best yield: {label} at {apy:.2f}%")

    # Outputs
    out = cfg.get("output", {})
    outdir = Path(out["outdir"]) if out.get("outdir") else None
    show = bool(out.get("show", True)) if not outdir else False
    charts = out.get("charts", [])
    if outdir:
        outdir.mkdir(parents=True, exist_ok=True)
    if "compare" in charts and board is not None:
        Visualizer.bar_apy(
            board.to_dataframe(),
            save_path=str(outdir / "compare_apy.png") if outdir else None,
            show=show,
        )
    if "history" in charts:
        Visualizer.history_lines(
            dashboard.history.to_dataframe(),
            save_path=str(outdir / "apy_history.png") if outdir else None,
            show=show,
        )

    # Deposit
    dep = cfg.get("deposit", {})
    if not dep.get("enabled"):
        return
    wallet_cfg = cfg.get("wallet", {})
    wallet = WalletSession(
        http_provider_factory(str(wallet_cfg["rpc_url"])),
        contract_address=str(wallet_cfg["aggregator"]),
        account_index=int(wallet_cfg.get("account_index", 0)),
    )
    try:
        await wallet.connect()
    except WalletError as exc:
        print(f"[ERROR] {exc}")
        return
    if wallet.advisory:
        print(f"[WARN] {wallet.advisory}")
    orchestrator = DepositOrchestrator(wallet, board=board, stake_wei=int(dep["amount_wei"]))
    target = dep.get("target")
    try:
        if target and board is not None:
            ticket = await orchestrator.deposit_to_protocol(str(target))
        else:
            ticket = await orchestrator.deposit_highest()
    except DepositError as exc:
        print(f"[ERROR] {exc}")
        return
    if ticket.confirmed:
        print(f"Deposited {ticket.amount_wei} wei (tx {ticket.tx_hash})")
    else:
        print(f"[ERROR] Deposit failed: {ticket.reason}")


def main() -> None:
    """Run the demo using configuration from file or environment variables."""

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    cfg_file = os.getenv("YIELD_ROUTER_CONFIG") or (sys.argv[1] if len(sys.argv) > 1 else None)
    cfg = apply_env_overrides(load_config(cfg_file))
    asyncio.run(run(cfg))


if __name__ == "__main__":
    main()
