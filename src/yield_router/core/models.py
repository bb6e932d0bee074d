"""Data models used throughout YieldRouter."""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Mapping


@dataclass(frozen=True)
class ProtocolQuote:
    """Named APY data point returned by a quote source."""

    name: str
    apy: float  # percentage, e.g. 5.0 for 5%

    def __post_init__(self) -> None:
        if math.isnan(self.apy) or self.apy < 0:
            raise ValueError(f"apy must be a non-negative number, got {self.apy!r}")

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "ProtocolQuote":
        """Build a quote from a ``{"name": ..., "apy": ...}`` record."""

        name = raw.get("name")
        if not name:
            raise ValueError(f"quote record without a name: {raw!r}")
        apy = raw.get("apy")
        return cls(name=str(name), apy=float(apy) if apy is not None else 0.0)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class HistorySample:
    """One dashboard observation of the two tracked series."""

    timestamp: float  # unix epoch seconds
    series_a: float
    series_b: float

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["timestamp_iso"] = datetime.fromtimestamp(self.timestamp, tz=UTC).isoformat()
        return data


class WalletState(str, Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    FAILED = "failed"


class DepositState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    AWAITING_CONFIRMATION = "awaiting_confirmation"
    CONFIRMED = "confirmed"
    FAILED = "failed"

    @property
    def terminal(self) -> bool:
        return self in (DepositState.CONFIRMED, DepositState.FAILED)


@dataclass
class DepositTicket:
    """Tracked lifecycle of a single deposit attempt.

    ``target`` is the Aggregator index for ``depositTo`` or ``None`` when the
    contract picks the highest-yield protocol itself.
    """

    target: int | None
    amount_wei: int
    target_name: str | None = None
    state: DepositState = DepositState.IDLE
    reason: str | None = None
    tx_hash: str | None = None
    transitions: list[DepositState] = field(default_factory=lambda: [DepositState.IDLE])

    def advance(self, state: DepositState) -> None:
        if self.state.terminal:
            raise RuntimeError(f"ticket already {self.state.value}")
        self.state = state
        self.transitions.append(state)

    def fail(self, reason: str) -> None:
        self.reason = reason
        self.advance(DepositState.FAILED)

    @property
    def confirmed(self) -> bool:
        return self.state is DepositState.CONFIRMED


__all__ = [
    "DepositState",
    "DepositTicket",
    "HistorySample",
    "ProtocolQuote",
    "WalletState",
]
