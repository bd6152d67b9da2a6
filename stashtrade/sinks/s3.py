"""Archives raw stashes to object storage, batched per league and minute."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from stashtrade.archive import Uploader, compress_jsonl, time_bucket
from stashtrade.sinks.base import Sink
from stashtrade.stash import Stash

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class S3Sink(Sink):
    """Buffers stashes per league and uploads them when a new minute begins."""

    def __init__(
        self,
        uploader: Uploader,
        bucket: str,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.uploader = uploader
        self.bucket = bucket
        self.buffer: dict[str, list[Stash]] = {}
        self.last_sync: datetime | None = None
        self._clock = clock

    def handle(self, payload: Sequence[Stash]) -> int:
        """Buffer a batch of stashes, syncing first if a new minute began."""
        if not payload:
            return 0

        if self.last_sync is None:
            self.last_sync = self._clock()
            should_sync = False
        else:
            batch_timestamp = payload[0].created_at
            should_sync = time_bucket(batch_timestamp) > time_bucket(self.last_sync)
            if should_sync:
                self.last_sync = batch_timestamp

        if should_sync:
            self._sync()

        for stash in payload:
            if stash.league is not None:
                self.buffer.setdefault(stash.league, []).append(stash)

        return len(payload)

    def flush(self) -> None:
        """Upload everything still buffered."""
        self._sync()

    def _sync(self) -> None:
        logger.info("Syncing S3 sink")
        for league, stashes in list(self.buffer.items()):
            if not stashes:
                continue
            key = f"{league}/{time_bucket(stashes[-1].created_at)}.json.gz"
            body = compress_jsonl(stash.to_json() for stash in stashes)
            try:
                self.uploader.put_object(bucket=self.bucket, key=key, body=body)
            except Exception:
                logger.exception(
                    "Error when flushing S3 sink with league %s"
                    " - will re-attempt sync next interval",
                    league,
                )
                continue
            stashes.clear()