"""Stash and item records of the public stash API."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

_U32_MAX = 2**32 - 1


class StashFormatError(ValueError):
    """Raised when API data does not have the expected shape."""


def _check(key: str, value: Any, kind: type) -> Any:
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise StashFormatError(f"field {key!r} has the wrong type")
    return value


def _required(data: Mapping, key: str, kind: type) -> Any:
    if key not in data:
        raise StashFormatError(f"missing field {key!r}")
    return _check(key, data[key], kind)


def _optional(data: Mapping, key: str, kind: type) -> Any:
    value = data.get(key)
    if value is None:
        return None
    return _check(key, value, kind)


def _mapping(data: Any) -> Mapping:
    if not isinstance(data, Mapping):
        raise StashFormatError("expected a JSON object")
    return data


def _format_timestamp(moment: datetime) -> str:
    """Format a naive timestamp with 0, 3 or 6 fractional digits."""
    base = moment.strftime("%Y-%m-%dT%H:%M:%S")
    micros = moment.microsecond
    if micros == 0:
        return base
    if micros % 1000 == 0:
        return f"{base}.{micros // 1000:03d}"
    return f"{base}.{micros:06d}"


@dataclass(frozen=True)
class Item:
    """An item inside a stash tab."""

    name: str
    id: str
    note: str | None
    type_line: str
    stack_size: int | None = None

    @classmethod
    def from_json(cls, data: Any) -> Item:
        data = _mapping(data)
        stack_size = _optional(data, "stackSize", int)
        if stack_size is not None and not 0 <= stack_size <= _U32_MAX:
            raise StashFormatError("field 'stackSize' is out of range")
        return cls(
            name=_required(data, "name", str),
            id=_required(data, "id", str),
            note=_optional(data, "note", str),
            type_line=_required(data, "typeLine", str),
            stack_size=stack_size,
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "id": self.id,
            "note": self.note,
            "type_line": self.type_line,
            "stack_size": self.stack_size,
        }


def _items(data: Mapping) -> list[Item]:
    return [Item.from_json(entry) for entry in _required(data, "items", list)]


@dataclass
class StashInternal:
    """A stash tab change exactly as the API reports it."""

    account_name: str | None
    last_character_name: str | None
    id: str
    stash: str | None
    stash_type: str
    items: list[Item]
    public: bool
    league: str | None

    @classmethod
    def from_json(cls, data: Any) -> StashInternal:
        data = _mapping(data)
        return cls(
            account_name=_optional(data, "accountName", str),
            last_character_name=_optional(data, "lastCharacterName", str),
            id=_required(data, "id", str),
            stash=_optional(data, "stash", str),
            stash_type=_required(data, "stashType", str),
            items=_items(data),
            public=_required(data, "public", bool),
            league=_optional(data, "league", str),
        )


@dataclass
class StashTabResponse:
    """One page of the public stash stream."""

    next_change_id: str
    stashes: list[StashInternal]

    @classmethod
    def from_json(cls, data: Any) -> StashTabResponse:
        data = _mapping(data)
        return cls(
            next_change_id=_required(data, "next_change_id", str),
            stashes=[
                StashInternal.from_json(entry)
                for entry in _required(data, "stashes", list)
            ],
        )


@dataclass
class Stash:
    """A stash tab change enriched with the page it was read from."""

    account_name: str | None
    last_character_name: str | None
    id: str
    stash: str | None
    stash_type: str
    items: list[Item]
    public: bool
    league: str | None
    created_at: datetime
    change_id: str
    next_change_id: str
    extra: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def to_json(self) -> dict[str, Any]:
        return {
            "account_name": self.account_name,
            "last_character_name": self.last_character_name,
            "id": self.id,
            "stash": self.stash,
            "stash_type": self.stash_type,
            "items": [item.to_json() for item in self.items],
            "public": self.public,
            "league": self.league,
            "created_at": _format_timestamp(self.created_at),
            "change_id": self.change_id,
            "next_change_id": self.next_change_id,
        }


def parse_stash_tab_response(raw: bytes | str) -> StashTabResponse:
    """Decode a raw stash API response body."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise StashFormatError(f"invalid JSON: {exc}") from exc
    return StashTabResponse.from_json(data)