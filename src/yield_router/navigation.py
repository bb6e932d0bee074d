"""Compare-list encoding handed to the external page router."""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import quote, unquote

from .core import SelectionSet
from .core.constants import COMPARE_DELIMITER

MIN_COMPARE = 2


def encode_compare_list(names: Iterable[str]) -> str:
    return COMPARE_DELIMITER.join(quote(name, safe="") for name in names)


def decode_compare_list(raw: str) -> list[str]:
    return [unquote(part) for part in raw.split(COMPARE_DELIMITER) if part]


def compare_path(selection: SelectionSet, path: str = "/compare") -> str:
    """Route for comparing the current selection, e.g. ``/compare?list=A,B``."""

    if len(selection) < MIN_COMPARE:
        raise ValueError(f"select at least {MIN_COMPARE} protocols to compare")
    return f"{path}?list={encode_compare_list(selection.names())}"


__all__ = ["compare_path", "decode_compare_list", "encode_compare_list"]
