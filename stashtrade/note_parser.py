"""Parsing of price notes such as ``~b/o 12/19 chaos``."""

from __future__ import annotations

import re
from dataclasses import dataclass

PRICE_PATTERN = r"^(~b/o|~price) ([0-9]+[\./]?[0-9]*) ([a-zA-Z-]*)"


@dataclass(frozen=True)
class Price:
    """A parsed price: ``ratio`` units of ``item`` per sold unit."""

    ratio: float
    item: str


class PriceParser:
    """Recognises and parses price notes."""

    def __init__(self) -> None:
        self._regex = re.compile(PRICE_PATTERN)

    def parse_price(self, note: str) -> Price | None:
        """Return the price a note states, or None if it states none."""
        match = self._regex.match(note)
        if match is None:
            return None
        ratio = _extract_ratio(match.group(2))
        if ratio is None:
            return None
        return Price(ratio=ratio, item=match.group(3))

    def is_price(self, note: str) -> bool:
        """Return True if the note has the syntax of a price."""
        return self._regex.match(note) is not None


def _parse_number(text: str) -> float | None:
    try:
        return float(text)
    except ValueError:
        return None


def _extract_ratio(text: str) -> float | None:
    if "/" not in text:
        return _parse_number(text)

    parts = text.split("/")[:2]
    numerator = _parse_number(parts[0])
    denominator = _parse_number(parts[1]) if len(parts) > 1 else None

    if numerator == 0.0 or denominator == 0.0:
        return None
    if numerator is None or denominator is None:
        return None
    return numerator / denominator