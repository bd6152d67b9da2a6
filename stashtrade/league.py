"""Leagues as they appear in the public stash API."""

from __future__ import annotations

from dataclasses import dataclass

CHALLENGE_LEAGUE = "Mercenaries"
CHALLENGE_LEAGUE_HC = "Hardcore Mercenaries"


@dataclass(frozen=True)
class League:
    """A league name as delivered by the stash API."""

    name: str

    def is_hc(self) -> bool:
        """Return True if this is a hardcore league."""
        return "HC" in self.name or "Hardcore" in self.name

    def __str__(self) -> str:
        return self.name