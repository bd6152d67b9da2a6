"""Stores priced items of stashes as trade offers in a PostgreSQL table."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from contextlib import closing
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

from stashtrade.assets import AssetIndex
from stashtrade.league import League
from stashtrade.note_parser import PriceParser
from stashtrade.sinks.base import Sink
from stashtrade.stash import Stash

logger = logging.getLogger(__name__)

COLUMNS = (
    "item_id",
    "stash_id",
    "seller_account",
    "stock",
    "sell",
    "buy",
    "conversion_rate",
    "created_at",
)

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_PRICE_PARSER = PriceParser()


@dataclass(frozen=True)
class Offer:
    """An offer from the view of the seller."""

    item_id: str
    stash_id: str
    sell: str
    """Item that is sold."""
    buy: str
    """Item that the seller receives."""
    seller_account: str
    stock: int
    conversion_rate: float
    created_at: int
    """Milliseconds since the Unix epoch."""


def map_stash_to_offers(stash: Stash, now: int | None = None) -> list[Offer]:
    """Turn the priced items of a stash into offers stamped ``now`` (ms)."""
    if now is None:
        now = int(time.time() * 1000)
    seller_account = stash.account_name if stash.account_name is not None else ""
    offers = []
    for item in stash.items:
        if item.note is None:
            continue
        price = _PRICE_PARSER.parse_price(item.note)
        if price is None:
            continue
        offers.append(
            Offer(
                item_id=item.id,
                stash_id=stash.id,
                sell=item.type_line if item.name == "" else item.name,
                buy=price.item,
                seller_account=seller_account,
                stock=1 if item.stack_size is None else item.stack_size,
                conversion_rate=price.ratio,
                created_at=now,
            )
        )
    return offers


class PostgresSink(Sink):
    """Replaces the offers of each incoming stash in a league table.

    ``connection`` is a DB-API connection using the ``%s`` parameter style.
    """

    def __init__(self, connection: Any, asset_index: AssetIndex | None = None) -> None:
        self.connection = connection
        self.asset_index = asset_index if asset_index is not None else AssetIndex()

    def handle(self, payload: Sequence[Stash]) -> int:
        """Store the offers of a batch of stashes and return its size."""
        self.ingest(League("challenge"), payload)
        return len(payload)

    def flush(self) -> None:
        """Every batch is written at once, so there is nothing to flush."""

    def ingest(self, league: League, stash_records: Sequence[Stash]) -> None:
        """Invalidate the given stashes and insert their current offers."""
        table = str(league)
        stash_ids = ",".join(f"'{stash.id}'" for stash in stash_records)
        offers = [offer for stash in stash_records for offer in map_stash_to_offers(stash)]

        with closing(self.connection.cursor()) as cursor:
            cursor.execute(f"DELETE FROM {table} WHERE stash_id in (%s)", (stash_ids,))
            logger.debug("Invalidated %d stashes", len(stash_records))

            if offers:
                sql, params = self._insert_statement(table, offers)
                try:
                    cursor.execute(sql, params)
                except Exception:
                    logger.exception("%s", sql)
                    self.connection.rollback()
                    raise

        self.connection.commit()
        logger.debug(
            "Invalidate %d stashes, Insert %d offers", len(stash_records), len(offers)
        )

    def _insert_statement(self, table: str, offers: Sequence[Offer]) -> tuple[str, list[Any]]:
        row = "(" + ", ".join("%s" for _ in COLUMNS) + ")"
        sql = (
            f"INSERT INTO {table} ({', '.join(COLUMNS)}) VALUES "
            + ", ".join(row for _ in offers)
        )
        params: list[Any] = []
        for offer in offers:
            params.extend(
                (
                    offer.item_id,
                    offer.stash_id,
                    offer.seller_account,
                    offer.stock,
                    self.asset_index.get_name(offer.sell) or offer.sell,
                    self.asset_index.get_name(offer.buy) or offer.buy,
                    offer.conversion_rate,
                    _EPOCH + timedelta(milliseconds=offer.created_at),
                )
            )
        return sql, params