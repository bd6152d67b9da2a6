"""Common interface of the destinations that indexed stashes are sent to."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from types import TracebackType

from stashtrade.stash import Stash


class Sink(ABC):
    """A destination for batches of stashes.

    Sinks may buffer data and must be flushed on graceful shutdown. Used as a
    context manager, a sink is flushed when the block is left.
    """

    @abstractmethod
    def handle(self, payload: Sequence[Stash]) -> int:
        """Process a batch of stashes and return how many were handled."""

    @abstractmethod
    def flush(self) -> None:
        """Write out anything the sink still holds."""

    def __enter__(self) -> Sink:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.flush()