"""Core constants shared across YieldRouter modules."""

from __future__ import annotations

# Aggregator deployed by the local Hardhat script; routes deposits to the
# registered protocols in registration order.
AGGREGATOR_ADDRESS = "0x9fE46736679d2D9a65F0992F2272dE9f3c7fa6e0"

AGGREGATOR_ABI: list[dict[str, object]] = [
    {
        "type": "function",
        "name": "depositTo",
        "stateMutability": "payable",
        "inputs": [{"name": "index", "type": "uint256"}],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "depositHighest",
        "stateMutability": "payable",
        "inputs": [],
        "outputs": [],
    },
]

STAKE_WEI = 10**16  # 0.01 ether

LOCALHOST_CHAIN_ID = 31337
DEFAULT_RPC_URL = "http://localhost:8545"
DEFAULT_API_URL = "http://localhost:8080/api"
DEFAULT_TIMEOUT_SECONDS = 10.0

INITIAL_CATALOG_SIZE = 5
MAX_SELECTION = 3
HISTORY_CAPACITY = 21

SEARCH_DEBOUNCE_SECONDS = 0.3
COMPARE_POLL_SECONDS = 30.0
DASHBOARD_POLL_SECONDS = 5.0

DASHBOARD_LABELS: tuple[str, str] = ("Aave-V3", "Binance Staked ETH")

COMPARE_DELIMITER = ","

__all__ = [
    "AGGREGATOR_ABI",
    "AGGREGATOR_ADDRESS",
    "COMPARE_DELIMITER",
    "COMPARE_POLL_SECONDS",
    "DASHBOARD_LABELS",
    "DASHBOARD_POLL_SECONDS",
    "DEFAULT_API_URL",
    "DEFAULT_RPC_URL",
    "DEFAULT_TIMEOUT_SECONDS",
    "HISTORY_CAPACITY",
    "INITIAL_CATALOG_SIZE",
    "LOCALHOST_CHAIN_ID",
    "MAX_SELECTION",
    "SEARCH_DEBOUNCE_SECONDS",
    "STAKE_WEI",
]
