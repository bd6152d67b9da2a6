"""Archives diff events to object storage, batched per league and minute."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from stashtrade.archive import Uploader, compress_jsonl, time_bucket
from stashtrade.differ import DiffEvent

logger = logging.getLogger(__name__)

STORAGE_CLASS = "ONEZONE_IA"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class DiffS3Sink:
    """Buffers diff events per league and uploads them when a minute rolls over."""

    def __init__(
        self,
        uploader: Uploader,
        bucket: str,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.uploader = uploader
        self.bucket = bucket
        self.buffer: dict[str, list[DiffEvent]] = {}
        self.last_sync: datetime | None = None
        self._clock = clock

    def handle(self, events: Iterable[DiffEvent]) -> int:
        """Buffer a batch of events, syncing first if a new minute began."""
        events = list(events)
        if not events:
            return 0

        if self.last_sync is None:
            self.last_sync = self._clock()
            should_sync = False
        else:
            batch_timestamp = events[0].timestamp
            should_sync = time_bucket(batch_timestamp) > time_bucket(self.last_sync)
            if should_sync:
                self.last_sync = batch_timestamp

        if should_sync:
            self._sync()

        for event in events:
            self.buffer.setdefault(event.league, []).append(event)
        return len(events)

    def flush(self) -> None:
        """Upload everything still buffered."""
        self._sync()

    def _sync(self) -> None:
        logger.info("Syncing S3 sink")
        for league, events in list(self.buffer.items()):
            if not events:
                continue
            key = f"{league}/{time_bucket(events[-1].timestamp)}.json.gz"
            body = compress_jsonl(event.to_json() for event in events)
            try:
                self.uploader.put_object(
                    bucket=self.bucket,
                    key=key,
                    body=body,
                    storage_class=STORAGE_CLASS,
                )
            except Exception:
                logger.exception(
                    "Error when flushing S3 sink with league %s"
                    " - will re-attempt sync next interval",
                    league,
                )
                continue
            del self.buffer[league]