"""Lookup of the newest change id from the poe.ninja statistics endpoint."""

from __future__ import annotations

import requests

from stashtrade.change_id import ChangeId

STATS_URL = "https://poe.ninja/api/Data/GetStats"
_TIMEOUT = 30


def fetch_latest_change_id() -> ChangeId:
    """Fetch the most recent change id of the public stash stream."""
    response = requests.get(STATS_URL, timeout=_TIMEOUT)
    response.raise_for_status()
    data = response.json()
    try:
        next_change_id = data["next_change_id"]
    except (KeyError, TypeError) as exc:
        raise ValueError("stats response holds no next_change_id") from exc
    if not isinstance(next_change_id, str):
        raise ValueError("next_change_id must be a string")
    return ChangeId(next_change_id)