"""Queries of stored trade offers."""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from contextlib import closing
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from stashtrade.assets import AssetIndex
from stashtrade.league import League
from stashtrade.stash import _format_timestamp

DEFAULT_LIMIT = 50
MAX_LIMIT = 200


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
    """Units of ``buy`` the seller gets for one unit of ``sell``."""
    created_at: datetime

    @classmethod
    def _from_row(cls, row: Mapping[str, Any]) -> Offer:
        created_at = row["created_at"]
        if isinstance(created_at, str):
            created_at = datetime.fromisoformat(created_at)
        return cls(
            item_id=row["item_id"],
            stash_id=row["stash_id"],
            sell=row["sell"],
            buy=row["buy"],
            seller_account=row["seller_account"],
            stock=int(row["stock"]),
            conversion_rate=float(row["conversion_rate"]),
            created_at=created_at,
        )

    def to_json(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "stash_id": self.stash_id,
            "sell": self.sell,
            "buy": self.buy,
            "seller_account": self.seller_account,
            "stock": self.stock,
            "conversion_rate": self.conversion_rate,
            "created_at": _format_timestamp(self.created_at),
        }


@dataclass(frozen=True)
class StoreQuery:
    """Filters of an offer search; unset filters match everything."""

    sell: str | None = None
    buy: str | None = None
    seller_account: str | None = None
    stash_id: str | None = None
    limit: int | None = None


class Store:
    """Searches the offer table of a league.

    ``connection`` is a DB-API connection; ``placeholder`` is its parameter
    marker.
    """

    def __init__(
        self,
        connection: Any,
        asset_index: AssetIndex | None = None,
        *,
        placeholder: str = "%s",
    ) -> None:
        self.connection = connection
        self.asset_index = asset_index if asset_index is not None else AssetIndex()
        self.placeholder = placeholder

    def _resolve(self, name: str | None) -> str | None:
        if name is None:
            return None
        return self.asset_index.get_name(name) or name

    def build_query(self, league: League, query: StoreQuery) -> tuple[str, list[Any]]:
        """Return the SQL statement and parameters for a search."""
        query = dataclasses.replace(
            query, sell=self._resolve(query.sell), buy=self._resolve(query.buy)
        )
        sql = f"SELECT * FROM {league} WHERE 1=1 "
        params: list[Any] = []
        filters = (
            ("sell", query.sell),
            ("buy", query.buy),
            ("seller_account", query.seller_account),
            ("stash_id", query.stash_id),
        )
        for column, value in filters:
            if value is not None:
                sql += f"AND {column} = {self.placeholder} "
                params.append(value)

        limit = DEFAULT_LIMIT if query.limit is None else min(query.limit, MAX_LIMIT)
        sql += f"ORDER BY created_at DESC LIMIT {self.placeholder}"
        params.append(limit)
        return sql, params

    def query(self, league: League, query: StoreQuery) -> list[Offer]:
        """Return the newest offers of a league that match the query."""
        sql, params = self.build_query(league, query)
        with closing(self.connection.cursor()) as cursor:
            cursor.execute(sql, params)
            names = [column[0] for column in cursor.description]
            rows = cursor.fetchall()
        return [Offer._from_row(dict(zip(names, row))) for row in rows]