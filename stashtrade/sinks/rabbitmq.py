"""Publishes batches of stashes to a RabbitMQ fanout exchange."""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import pika

from stashtrade.sinks.base import Sink
from stashtrade.stash import Stash

EXCHANGE = "amq.fanout"
DEFAULT_ROUTING_KEY = "poe-stash-indexer"


@dataclass(frozen=True)
class RabbitMqConfig:
    """Where to connect and which routing key to publish with."""

    connection_url: str
    producer_routing_key: str = DEFAULT_ROUTING_KEY


class RabbitMqSink(Sink):
    """Sends each batch of stashes as one JSON message."""

    def __init__(self, channel: Any, config: RabbitMqConfig, connection: Any = None) -> None:
        self.channel = channel
        self.config = config
        self.connection = connection

    @classmethod
    def connect(cls, config: RabbitMqConfig) -> RabbitMqSink:
        """Open a connection and a channel to the configured broker."""
        connection = pika.BlockingConnection(pika.URLParameters(config.connection_url))
        channel = connection.channel()
        return cls(channel=channel, config=config, connection=connection)

    def handle(self, payload: Sequence[Stash]) -> int:
        """Publish the batch and return its size."""
        body = json.dumps(
            [stash.to_json() for stash in payload],
            separators=(",", ":"),
            ensure_ascii=False,
        ).encode("utf-8")
        self.channel.basic_publish(
            exchange=EXCHANGE,
            routing_key=self.config.producer_routing_key,
            body=body,
            properties=pika.BasicProperties(),
        )
        return len(payload)

    def flush(self) -> None:
        """Nothing is buffered, so there is nothing to flush."""