"""Item-level differences between two snapshots of a stash tab."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any, Union

from stashtrade.stash import Item, _format_timestamp

if TYPE_CHECKING:
    from stashtrade.diffstore import SearchableStash

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiffMeta:
    """Context shared by all events of one stash comparison."""

    league: str
    account_name: str
    stash_type: str
    old_change_id: str
    new_change_id: str
    old_timestamp: datetime
    new_timestamp: datetime

    def to_json(self) -> dict[str, Any]:
        return {
            "league": self.league,
            "account_name": self.account_name,
            "stash_type": self.stash_type,
            "old_change_id": self.old_change_id,
            "new_change_id": self.new_change_id,
            "old_timestamp": _format_timestamp(self.old_timestamp),
            "new_timestamp": _format_timestamp(self.new_timestamp),
        }


class _EventMeta:
    meta: DiffMeta

    @property
    def timestamp(self) -> datetime:
        """When the newer snapshot was taken."""
        return self.meta.new_timestamp

    @property
    def league(self) -> str:
        return self.meta.league


@dataclass(frozen=True)
class Added(_EventMeta):
    """An item that appeared in the stash."""

    item: Item
    meta: DiffMeta

    def to_json(self) -> dict[str, Any]:
        return {"type": "Added", "item": self.item.to_json(), "meta": self.meta.to_json()}


@dataclass(frozen=True)
class Removed(_EventMeta):
    """An item that left the stash."""

    item: Item
    meta: DiffMeta

    def to_json(self) -> dict[str, Any]:
        return {
            "type": "Removed",
            "item": self.item.to_json(),
            "meta": self.meta.to_json(),
        }


@dataclass(frozen=True)
class Changed(_EventMeta):
    """An item whose note or stack size changed."""

    old: Item
    new: Item
    note_changed: bool
    stack_size_changed: bool
    meta: DiffMeta

    def to_json(self) -> dict[str, Any]:
        return {
            "type": "Changed",
            "old": self.old.to_json(),
            "new": self.new.to_json(),
            "note_changed": self.note_changed,
            "stack_size_changed": self.stack_size_changed,
            "meta": self.meta.to_json(),
        }


DiffEvent = Union[Added, Removed, Changed]


def _build_meta(before: SearchableStash, after: SearchableStash) -> DiffMeta:
    if before.league is None or before.account_name is None:
        raise ValueError(f"stash {before.id} has no league or account name")
    return DiffMeta(
        league=before.league,
        account_name=before.account_name,
        stash_type=before.stash_type,
        old_change_id=before.change_id,
        new_change_id=after.change_id,
        old_timestamp=before.timestamp,
        new_timestamp=after.timestamp,
    )


def diff_stash(before: SearchableStash, after: SearchableStash) -> list[DiffEvent]:
    """Return the events that lead from one snapshot of a stash to the next."""
    logger.info("Diffing stash %s", before.id)
    events: list[DiffEvent] = []
    meta: DiffMeta | None = None

    def current_meta() -> DiffMeta:
        nonlocal meta
        if meta is None:
            meta = _build_meta(before, after)
        return meta

    for item_id, before_item in before.items.items():
        after_item = after.items.get(item_id)
        if after_item is None:
            events.append(Removed(item=before_item, meta=current_meta()))
            continue
        stack_size_changed = before_item.stack_size != after_item.stack_size
        note_changed = before_item.note != after_item.note
        if note_changed or stack_size_changed:
            events.append(
                Changed(
                    old=before_item,
                    new=after_item,
                    note_changed=note_changed,
                    stack_size_changed=stack_size_changed,
                    meta=current_meta(),
                )
            )

    for item_id, after_item in after.items.items():
        if item_id not in before.items:
            events.append(Added(item=after_item, meta=current_meta()))

    return events