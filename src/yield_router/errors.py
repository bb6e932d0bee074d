"""Exception hierarchy for YieldRouter.

Data-fetch failures (:class:`SourceUnavailable`) are absorbed by the views,
which keep their last good state. Wallet and deposit failures are surfaced to
the user verbatim and leave the owning state machine in ``FAILED``.
"""

from __future__ import annotations


class YieldRouterError(Exception):
    """Base error carrying a user-facing message and an optional detail."""

    default_message = "YieldRouter operation failed"

    def __init__(self, message: str | None = None, *, detail: str | None = None) -> None:
        self.message = message or self.default_message
        self.detail = detail
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.detail:
            return f"{self.message}: {self.detail}"
        return self.message


class SourceUnavailable(YieldRouterError):
    default_message = "APY source unavailable"


class SessionNotReady(YieldRouterError):
    default_message = "Identity session not ready"


class WalletError(YieldRouterError):
    default_message = "Wallet connection failed"


class WalletUnavailable(WalletError):
    default_message = "No wallet provider available"


class ConnectionRejected(WalletError):
    default_message = "Wallet connection rejected"


class ConnectionInProgress(WalletError):
    default_message = "Wallet connection already in progress"


class DepositError(YieldRouterError):
    default_message = "Deposit failed"


class NotConnected(DepositError):
    default_message = "Wallet not connected"


class DepositInProgress(DepositError):
    default_message = "A deposit is already in flight"


class TransactionRejected(DepositError):
    default_message = "Transaction rejected"


class TransactionReverted(DepositError):
    default_message = "Transaction reverted"


class UnknownProtocol(DepositError):
    default_message = "Protocol not in comparison list"


def describe_failure(exc: BaseException) -> str:
    """Best-effort human-readable reason for a provider or library failure."""

    reason = getattr(exc, "reason", None)
    if isinstance(reason, str) and reason:
        return reason
    # web3's ContractLogicError and friends expose ``message``
    message = getattr(exc, "message", None)
    if isinstance(message, str) and message:
        return message
    text = str(exc)
    return text or exc.__class__.__name__


__all__ = [
    "ConnectionInProgress",
    "ConnectionRejected",
    "DepositError",
    "DepositInProgress",
    "NotConnected",
    "SessionNotReady",
    "SourceUnavailable",
    "TransactionRejected",
    "TransactionReverted",
    "UnknownProtocol",
    "WalletError",
    "WalletUnavailable",
    "YieldRouterError",
    "describe_failure",
]
