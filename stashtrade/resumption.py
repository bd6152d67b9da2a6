"""Persisted position in the stash stream for resuming after a restart."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any


class ResumptionError(ValueError):
    """Raised when a saved resumption state cannot be read."""


@dataclass
class State:
    """The last processed change id and the one to continue from."""

    change_id: str
    next_change_id: str

    @classmethod
    def _from_json(cls, data: Any) -> State:
        if not isinstance(data, dict):
            raise ResumptionError("resumption state must be a JSON object or null")
        try:
            change_id = data["change_id"]
            next_change_id = data["next_change_id"]
        except KeyError as exc:
            raise ResumptionError(f"resumption state lacks {exc}") from exc
        if not isinstance(change_id, str) or not isinstance(next_change_id, str):
            raise ResumptionError("change ids must be strings")
        return cls(change_id=change_id, next_change_id=next_change_id)


@dataclass
class StateWrapper:
    """An optional state tied to the file it is loaded from and saved to."""

    inner: State | None
    path: Path

    @classmethod
    def load_from_file(cls, path: str | os.PathLike[str]) -> StateWrapper:
        """Load the state from ``path``; a missing file gives no state."""
        path = Path(path)
        if not path.exists():
            return cls(inner=None, path=path)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ResumptionError(f"invalid resumption file {path}: {exc}") from exc
        inner = None if data is None else State._from_json(data)
        return cls(inner=inner, path=path)

    def save(self) -> None:
        """Write the state to the file as pretty-printed JSON."""
        payload = None if self.inner is None else asdict(self.inner)
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    def update(self, state: State) -> None:
        """Replace the held state."""
        self.inner = state