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
"""Memcached-backed cache adapter."""

from __future__ import annotations

import json
import logging
from typing import Any

from pymemcache.client.base import Client
from pymemcache.exceptions import MemcacheError

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

_BACKEND_ERRORS = (MemcacheError, OSError)


class MemcachedCacheAdapter(BaseCacheAdapter):
    """Cache adapter that delegates to a ``pymemcache`` client.

    Records are stored as JSON bytes. Memcached keys are limited to 250
    bytes without whitespace or control characters; an illegal key makes
    the operation fail like any other backend error.
    """

    def __init__(self, client: Any) -> None:
        super().__init__()
        self._client = client

    @classmethod
    def from_host(cls, host: str = "127.0.0.1", port: int = 11211) -> MemcachedCacheAdapter:
        return cls(Client((host, port)))

    def get_item(self, key: str) -> CacheItem:
        try:
            raw = self._client.get(key)
        except _BACKEND_ERRORS as exc:
            _logger.warning("Memcached get failed for key '%s': %s", key, exc)
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
        record = to_record(item)
        try:
            raw = json.dumps(record).encode()
        except (TypeError, ValueError) as exc:
            _logger.warning("Cannot serialize value for key '%s': %s", item.get_key(), exc)
            return False

        expire = ttl_seconds(record["expiration"]) or 0
        try:
            return bool(self._client.set(item.get_key(), raw, expire=expire, noreply=False))
        except _BACKEND_ERRORS as exc:
            _logger.warning("Memcached set failed for key '%s': %s", item.get_key(), exc)
            return False

    def delete_item(self, key: str) -> bool:
        """Remove a key. Returns True if the key existed."""
        try:
            return bool(self._client.delete(key, noreply=False))
        except _BACKEND_ERRORS as exc:
            _logger.warning("Memcached delete failed for key '%s': %s", key, exc)
            return False

    def clear(self) -> bool:
        try:
            return bool(self._client.flush_all(noreply=False))
        except _BACKEND_ERRORS as exc:
            _logger.warning("Memcached flush_all failed: %s", exc)
            return False

    def get_cache_size(self) -> int:
        """Bytes used by stored items, as reported by the server."""
        return self._stat("bytes")

    def get_item_count(self) -> int:
        return self._stat("curr_items")

    def close(self) -> None:
        self._client.close()

    def _stat(self, name: str) -> int:
        try:
            stats = self._client.stats()
        except _BACKEND_ERRORS as exc:
            _logger.warning("Memcached stats failed: %s", exc)
            return 0
        value = stats.get(name.encode(), stats.get(name, 0))
        return int(value)
