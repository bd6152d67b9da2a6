"""Change ids that page through the public stash stream."""

from __future__ import annotations

import re
from dataclasses import dataclass

_PART = re.compile(r"\+?[0-9]+")
_U32_MAX = 2**32 - 1


class InvalidChangeIdError(ValueError):
    """Raised when a string is not a valid change id."""


def _is_valid(text: str) -> bool:
    return all(
        _PART.fullmatch(part) is not None and int(part) <= _U32_MAX
        for part in text.split("-")
    )


@dataclass(frozen=True)
class ChangeId:
    """A dash-separated list of unsigned 32-bit numbers."""

    value: str

    def __post_init__(self) -> None:
        if not _is_valid(self.value):
            raise InvalidChangeIdError(f"Failed parsing ChangeId {self.value}")

    def __str__(self) -> str:
        return self.value


def parse_change_id(text: str) -> ChangeId:
    """Parse a change id from text."""
    return ChangeId(text)


def parse_change_id_from_bytes(data: bytes) -> ChangeId:
    """Read the next change id from the start of a stash API response body.

    The id is the fourth quote-delimited field of the body.
    """
    parts = bytes(data).split(b'"')
    if len(parts) < 4:
        raise ValueError("response prefix holds no change id")
    return ChangeId(parts[3].decode("utf-8"))