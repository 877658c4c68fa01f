# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Redis-backed cache adapter."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import Any, cast

import redis
from redis.exceptions import RedisError

from flycache.cache.adapters.base import (
    BaseCacheAdapter,
    from_record,
    is_expired,
    is_valid_record,
    to_record,
    ttl_seconds,
)
from flycache.cache.item import CacheItem

_logger = logging.getLogger(__name__)

_BACKEND_ERRORS = (RedisError, OSError)


class RedisCacheAdapter(BaseCacheAdapter):
    """Cache adapter that delegates to a ``redis.Redis``-like client.

    Records are JSON-serialized before storage so that any JSON-compatible
    Python object can be cached transparently. Expiring items are also
    given a Redis TTL so the server drops them on its own; single-key
    atomicity is whatever Redis guarantees.
    """

    def __init__(self, client: Any) -> None:
        super().__init__()
        self._client = client

    @classmethod
    def from_url(cls, url: str = "redis://localhost:6379/0") -> RedisCacheAdapter:
        return cls(redis.Redis.from_url(url))

    @classmethod
    def from_host(cls, host: str = "127.0.0.1", port: int = 6379, db: int = 0) -> RedisCacheAdapter:
        return cls(redis.Redis(host=host, port=port, db=db))

    def get_item(self, key: str) -> CacheItem:
        """Retrieve and deserialize a cached record."""
        try:
            raw = self._client.get(key)
        except _BACKEND_ERRORS as exc:
            _logger.warning("Redis GET failed for key '%s': %s", key, exc)
            return CacheItem(key)
        if raw is None:
            return CacheItem(key)

        try:
            record = json.loads(raw)
        except (ValueError, TypeError, RecursionError):
            _logger.warning("Failed to deserialize cached value for key '%s'", key)
            return CacheItem(key)

        if not is_valid_record(record):
            _logger.warning("Malformed cached record for key '%s'", key)
            return CacheItem(key)

        if is_expired(record["expiration"]):
            self.delete_item(key)
            return CacheItem(key)

        return from_record(key, record)

    def save(self, item: CacheItem) -> bool:
        """Serialize and store an item; a future expiration becomes the TTL."""
        record = to_record(item)
        try:
            raw = json.dumps(record)
        except (TypeError, ValueError) as exc:
            _logger.warning("Cannot serialize value for key '%s': %s", item.get_key(), exc)
            return False

        ttl = ttl_seconds(record["expiration"])
        try:
            if ttl is not None:
                result = self._client.set(item.get_key(), raw.encode(), ex=ttl)
            else:
                result = self._client.set(item.get_key(), raw.encode())
        except _BACKEND_ERRORS as exc:
            _logger.warning("Redis SET failed for key '%s': %s", item.get_key(), exc)
            return False
        return bool(result)

    def delete_item(self, key: str) -> bool:
        """Remove a key. Returns True if the key existed."""
        try:
            count = self._client.delete(key)
        except _BACKEND_ERRORS as exc:
            _logger.warning("Redis DEL failed for key '%s': %s", key, exc)
            return False
        return cast(bool, count > 0)

    def delete_items(self, keys: Iterable[str]) -> bool:
        """Remove several keys in one DEL. True if at least one existed."""
        key_list = list(keys)
        if not key_list:
            return False
        try:
            count = self._client.delete(*key_list)
        except _BACKEND_ERRORS as exc:
            _logger.warning("Redis DEL failed for %d key(s): %s", len(key_list), exc)
            return False
        return cast(bool, count > 0)

    def clear(self) -> bool:
        """Flush the entire database."""
        try:
            return bool(self._client.flushdb())
        except _BACKEND_ERRORS as exc:
            _logger.warning("Redis FLUSHDB failed: %s", exc)
            return False

    def get_cache_size(self) -> int:
        """Memory used by the Redis server, in bytes."""
        try:
            info = self._client.info("memory")
        except _BACKEND_ERRORS as exc:
            _logger.warning("Redis INFO failed: %s", exc)
            return 0
        return int(info.get("used_memory", 0))

    def get_item_count(self) -> int:
        try:
            return int(self._client.dbsize())
        except _BACKEND_ERRORS as exc:
            _logger.warning("Redis DBSIZE failed: %s", exc)
            return 0

    def ping(self) -> bool:
        """Validate connectivity by pinging Redis."""
        return bool(self._client.ping())

    def close(self) -> None:
        """Close the underlying Redis connection."""
        self._client.close()

