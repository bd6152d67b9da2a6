"""Compressed JSON-lines archives for object storage."""

from __future__ import annotations

import gzip
import json
from collections.abc import Iterable
from datetime import datetime
from typing import Any, Protocol

TIME_BUCKET = "%Y/%m/%d/%H/%M"


class Uploader(Protocol):
    """Stores objects in a bucket of an object store."""

    def put_object(
        self,
        *,
        bucket: str,
        key: str,
        body: bytes,
        storage_class: str | None = None,
    ) -> None:
        """Store ``body`` under ``key`` in ``bucket``; raise on failure."""
        ...


def time_bucket(timestamp: datetime) -> str:
    """Return the minute-granular path fragment for a timestamp."""
    return timestamp.strftime(TIME_BUCKET)


def compress_jsonl(records: Iterable[Any]) -> bytes:
    """Serialise records as compact JSON lines and gzip them."""
    text = "".join(
        json.dumps(record, separators=(",", ":"), ensure_ascii=False) + "\n"
        for record in records
    )
    return gzip.compress(text.encode("utf-8"), compresslevel=9, mtime=0)