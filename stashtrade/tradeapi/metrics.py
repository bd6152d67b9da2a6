"""Request counters of the trade API in the Prometheus text format."""

from __future__ import annotations

import logging
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

CONTENT_TYPE = "text/plain; version=0.0.4; charset=utf-8"

_log = logging.getLogger(__name__)


class ApiMetricStore:
    """Counts handled search requests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._search_requests = 0

    @property
    def search_requests(self) -> int:
        """Number of handled search requests."""
        with self._lock:
            return self._search_requests

    def inc_search_requests(self) -> None:
        """Count one more search request."""
        with self._lock:
            self._search_requests += 1

    def render(self) -> str:
        """Return the counters in the Prometheus text exposition format."""
        return (
            "# HELP search_requests The number of handled search requests\n"
            "# TYPE search_requests counter\n"
            f"search_requests {self.search_requests}\n"
        )

    def serve(self, port: int, host: str = "0.0.0.0") -> ThreadingHTTPServer:
        """Serve the counters at ``/metrics`` from a background thread."""
        store = self

        class _Handler(BaseHTTPRequestHandler):
            def do_GET(self) -> None:
                if self.path.split("?", 1)[0] != "/metrics":
                    self.send_error(404)
                    return
                body = store.render().encode("utf-8")
                self.send_response(200)
                self.send_header("Content-Type", CONTENT_TYPE)
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def log_message(self, format: str, *args: object) -> None:
                _log.debug("%s - %s", self.address_string(), format % args)

        server = ThreadingHTTPServer((host, port), _Handler)
        thread = threading.Thread(target=server.serve_forever, daemon=True)
        thread.start()
        return server