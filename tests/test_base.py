from collections.abc import Sequence

import pytest

from stashtrade.sinks.base import Sink
from stashtrade.stash import Stash


class RecordingSink(Sink):
    def __init__(self) -> None:
        self.flushes = 0

    def handle(self, payload: Sequence[Stash]) -> int:
        return len(payload)

    def flush(self) -> None:
        self.flushes += 1


def test_sink_is_abstract():
    with pytest.raises(TypeError):
        Sink()
    assert Sink.__abstractmethods__ == frozenset({"handle", "flush"})


def test_context_manager_returns_sink_and_flushes_on_exit():
    sink = RecordingSink()
    entered = Sink.__enter__(sink)
    assert entered is sink
    assert sink.flushes == 0
    Sink.__exit__(sink, None, None, None)
    assert sink.flushes == 1


def test_context_manager_flushes_and_propagates_errors():
    sink = RecordingSink()
    error = RuntimeError("boom")
    Sink.__enter__(sink)
    suppressed = Sink.__exit__(sink, RuntimeError, error, None)
    assert not suppressed
    assert sink.flushes == 1