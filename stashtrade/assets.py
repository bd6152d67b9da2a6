"""Index of short asset ids and their long names from the trade API."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import requests

ASSET_URL = "https://www.pathofexile.com/api/trade/data/static"
USER_AGENT = "Mozilla/5.0 (X11; Linux x86_64)"
_TIMEOUT = 30


class AssetFormatError(ValueError):
    """Raised when the asset response does not have the expected shape."""


@dataclass
class AssetIndex:
    """Two-way mapping between asset ids and their display names."""

    long_short_idx: dict[str, str] = field(default_factory=dict)
    short_long_idx: dict[str, str] = field(default_factory=dict)

    def init(self) -> None:
        """Fetch the static trade data and fill the index."""
        response = requests.get(
            ASSET_URL, headers={"User-Agent": USER_AGENT}, timeout=_TIMEOUT
        )
        try:
            data = response.json()
        except ValueError as exc:
            raise AssetFormatError(f"invalid asset response: {exc}") from exc
        self.load(data)

    def load(self, response: Any) -> None:
        """Fill the index from a decoded static trade data response."""
        try:
            entries = [
                (entry["id"], entry["text"])
                for category in response["result"]
                for entry in category["entries"]
            ]
        except (KeyError, TypeError) as exc:
            raise AssetFormatError(f"malformed asset response: {exc}") from exc

        for asset_id, text in entries:
            if not isinstance(asset_id, str) or not isinstance(text, str):
                raise AssetFormatError("asset id and text must be strings")
            self.long_short_idx[text] = asset_id
            self.short_long_idx[asset_id] = text

    def get_name(self, asset_id: str) -> str | None:
        """Return the long name for a short asset id, if known."""
        return self.short_long_idx.get(asset_id)