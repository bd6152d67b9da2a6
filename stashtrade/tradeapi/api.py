"""HTTP interface of the trade API."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Protocol

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

from stashtrade.league import League
from stashtrade.tradeapi.store import Offer, Store, StoreQuery

logger = logging.getLogger(__name__)

_U32_MAX = 2**32 - 1
_STRING_FIELDS = ("sell", "buy", "seller_account", "stash_id", "league")


class _Metrics(Protocol):
    def inc_search_requests(self) -> None: ...


class _InvalidBody(ValueError):
    pass


@dataclass(frozen=True)
class QueryResponse:
    """The offers found by a search."""

    offers: list[Offer]

    @property
    def count(self) -> int:
        return len(self.offers)

    def to_json(self) -> dict[str, Any]:
        return {"count": self.count, "offers": [offer.to_json() for offer in self.offers]}


def _is_json(content_type: str) -> bool:
    mime = content_type.split(";", 1)[0].strip().lower()
    return mime == "application/json" or (
        mime.startswith("application/") and mime.endswith("+json")
    )


def _parse_request(data: Any) -> tuple[str | None, StoreQuery]:
    if not isinstance(data, dict):
        raise _InvalidBody("request body must be a JSON object")
    fields: dict[str, Any] = {}
    for name in _STRING_FIELDS:
        value = data.get(name)
        if value is not None and not isinstance(value, str):
            raise _InvalidBody(f"field {name!r} must be a string")
        fields[name] = value
    limit = data.get("limit")
    if limit is not None and (
        not isinstance(limit, int) or isinstance(limit, bool) or not 0 <= limit <= _U32_MAX
    ):
        raise _InvalidBody("field 'limit' must be an unsigned 32-bit integer")
    league = fields.pop("league")
    return league, StoreQuery(limit=limit, **fields)


def create_app(store: Store, metrics: _Metrics) -> Starlette:
    """Build the application serving ``/healthcheck`` and ``/trade``."""

    async def health(request: Request) -> Response:
        return PlainTextResponse("Ok")

    async def search(request: Request) -> Response:
        if not _is_json(request.headers.get("content-type", "")):
            return PlainTextResponse("Expected a JSON request body", status_code=415)
        try:
            data = json.loads(await request.body())
        except ValueError as exc:
            return PlainTextResponse(f"Invalid JSON: {exc}", status_code=400)
        try:
            league_name, query = _parse_request(data)
        except _InvalidBody as exc:
            return PlainTextResponse(str(exc), status_code=422)

        metrics.inc_search_requests()

        if league_name is None:
            return Response(status_code=404)
        try:
            offers = await run_in_threadpool(store.query, League(league_name), query)
        except Exception:
            logger.exception("Search failed")
            return Response(status_code=404)
        return JSONResponse(QueryResponse(offers).to_json())

    return Starlette(
        routes=[
            Route("/healthcheck", health, methods=["GET"]),
            Route("/trade", search, methods=["POST"]),
        ]
    )