"""Key-value / pub-sub sink that receives schedule and phase updates."""

from __future__ import annotations

import logging
from typing import Mapping, Protocol

import redis

from .errors import SinkError

log = logging.getLogger(__name__)


class Sink(Protocol):
    def set_fields(self, collection: str, fields: Mapping[str, str]) -> None: ...

    def set_field(self, collection: str, field: str, value: str) -> None: ...

    def broadcast(self, channel: str, message: str) -> None: ...


class RedisSink:
    """Store fields in a Redis hash and broadcast on Redis pub/sub channels.

    One client is created at startup and reused for every write. A lost
    connection is not retried: the failing call raises SinkError.
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def connect(cls, url: str) -> RedisSink:
        """Open the client for ``url`` and verify the server answers PING."""
        try:
            client = redis.Redis.from_url(url, decode_responses=True)
            client.ping()
        except (redis.RedisError, ValueError) as exc:
            raise SinkError(f"Cannot connect to redis at {url}: {exc}", "connect", url) from exc
        log.info("sink_connected", extra={"url": url})
        return cls(client)

    def set_fields(self, collection: str, fields: Mapping[str, str]) -> None:
        try:
            self._client.hset(collection, mapping=dict(fields))
        except redis.RedisError as exc:
            raise SinkError(f"HSET {collection} failed: {exc}", "set_fields", collection) from exc

    def set_field(self, collection: str, field: str, value: str) -> None:
        try:
            self._client.hset(collection, field, value)
        except redis.RedisError as exc:
            raise SinkError(f"HSET {collection} {field} failed: {exc}", "set_field", collection) from exc

    def broadcast(self, channel: str, message: str) -> None:
        try:
            self._client.publish(channel, message)
        except redis.RedisError as exc:
            raise SinkError(f"PUBLISH {channel} failed: {exc}", "broadcast", channel) from exc

    def close(self) -> None:
        self._client.close()
