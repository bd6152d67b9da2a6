"""In-memory store of the latest snapshot of each public stash."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime

from stashtrade.differ import DiffEvent, diff_stash
from stashtrade.stash import Item, Stash

logger = logging.getLogger(__name__)


@dataclass
class SearchableStash:
    """A stash snapshot with its items keyed by item id."""

    account_name: str | None
    id: str
    stash_type: str
    items: dict[str, Item]
    league: str | None
    timestamp: datetime
    change_id: str

    @classmethod
    def from_stash(
        cls, stash: Stash, change_id: str, timestamp: datetime
    ) -> SearchableStash | None:
        """Build a snapshot from a public stash; private stashes give None."""
        if not stash.public:
            return None
        return cls(
            account_name=stash.account_name,
            id=stash.id,
            stash_type=stash.stash_type,
            items={item.id: item for item in stash.items},
            league=stash.league,
            timestamp=timestamp,
            change_id=change_id,
        )


class StashStore:
    """Keeps the last seen snapshot per stash and reports item changes."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self.inner: dict[str, SearchableStash] = {}
        self._clock = clock

    def ingest(self, incoming: Iterable[Stash], next_change_id: str) -> list[DiffEvent]:
        """Record a batch of stashes and return the events they cause."""
        events: list[DiffEvent] = []
        now = self._clock()
        logger.info("Store: %d stashes", len(self.inner))

        for stash in incoming:
            if not stash.public:
                self.inner.pop(stash.id, None)
                continue
            snapshot = SearchableStash.from_stash(stash, next_change_id, now)
            if snapshot is None:
                continue
            previous = self.inner.get(snapshot.id)
            if previous is not None:
                events.extend(diff_stash(previous, snapshot))
            self.inner[snapshot.id] = snapshot

        return events