import urllib.error
import urllib.request

import pytest

from stashtrade.tradeapi.metrics import ApiMetricStore


def test_counter_starts_at_zero_and_counts():
    metrics = ApiMetricStore()
    assert metrics.search_requests == 0
    metrics.inc_search_requests()
    metrics.inc_search_requests()
    assert metrics.search_requests == 2


def test_render_contains_counter_line():
    metrics = ApiMetricStore()
    metrics.inc_search_requests()
    lines = metrics.render().splitlines()
    assert "# TYPE search_requests counter" in lines
    assert "search_requests 1" in lines


def test_separate_stores_count_independently():
    first, second = ApiMetricStore(), ApiMetricStore()
    first.inc_search_requests()
    assert (first.search_requests, second.search_requests) == (1, 0)


@pytest.fixture
def served():
    metrics = ApiMetricStore()
    server = metrics.serve(0, host="127.0.0.1")
    yield metrics, server.server_address[1]
    server.shutdown()
    server.server_close()


def test_serve_exposes_metrics(served):
    metrics, port = served
    metrics.inc_search_requests()
    with urllib.request.urlopen(f"http://127.0.0.1:{port}/metrics", timeout=5) as response:
        body = response.read().decode("utf-8")
    assert body == metrics.render()


def test_serve_rejects_other_paths(served):
    _, port = served
    with pytest.raises(urllib.error.HTTPError) as info:
        urllib.request.urlopen(f"http://127.0.0.1:{port}/other", timeout=5)
    assert info.value.code == 404