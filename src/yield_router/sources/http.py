"""HTTP client for the yield aggregator backend."""

from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.parse
import urllib.request
from typing import Any

from ..core import ProtocolQuote
from ..core.constants import DASHBOARD_LABELS, DEFAULT_API_URL, DEFAULT_TIMEOUT_SECONDS
from ..errors import SourceUnavailable

logger = logging.getLogger(__name__)


class ApySourceClient:
    """Client for ``GET /protocols`` and ``GET /apy``.

    Every call is a single round trip; retries are left to the pollers.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_URL,
        *,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        labels: tuple[str, str] = DASHBOARD_LABELS,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.labels = labels

    def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        url = f"{self.base_url}{path}"
        if params:
            url = f"{url}?{urllib.parse.urlencode(params)}"
        try:
            with urllib.request.urlopen(url, timeout=self.timeout) as resp:
                return json.load(resp)
        except (
            urllib.error.URLError,
            http.client.HTTPException,
            TimeoutError,
            OSError,
            ValueError,
        ) as exc:
            raise SourceUnavailable(f"GET {path} failed", detail=str(exc)) from exc

    def fetch_quotes(self, search: str | None = None) -> list[ProtocolQuote]:
        params = {"search": search} if search else None
        raw = self._get_json("/protocols", params)
        if not isinstance(raw, list):
            raise SourceUnavailable("GET /protocols failed", detail="expected a JSON array")
        quotes: list[ProtocolQuote] = []
        for item in raw:
            try:
                quotes.append(ProtocolQuote.from_dict(item))
            except (AttributeError, TypeError, ValueError) as exc:
                logger.debug("Skipping malformed quote %r: %s", item, exc)
        return quotes

    def fetch_named_quotes(self) -> dict[str, float]:
        raw = self._get_json("/apy")
        if not isinstance(raw, dict):
            raise SourceUnavailable("GET /apy failed", detail="expected a JSON object")
        res: dict[str, float] = {}
        for label in self.labels:
            entry = raw.get(label)
            if isinstance(entry, dict):
                entry = entry.get("value")
            try:
                res[label] = float(entry) if entry is not None else 0.0
            except (TypeError, ValueError):
                logger.debug("Non-numeric APY for %s: %r", label, entry)
                res[label] = 0.0
        return res


__all__ = ["ApySourceClient"]
