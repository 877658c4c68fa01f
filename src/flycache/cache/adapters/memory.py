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
"""In-memory cache adapter."""

from __future__ import annotations

import logging

from flycache.cache.adapters.base import BaseCacheAdapter, Record, from_record, is_expired, to_record
from flycache.cache.item import CacheItem

_logger = logging.getLogger(__name__)


class InMemoryCacheAdapter(BaseCacheAdapter):
    """Process-local cache kept in a dict.

    Suitable for development, testing, and single-process applications.
    No locking: concurrent writers from several threads may race.
    """

    def __init__(self) -> None:
        super().__init__()
        self._store: dict[str, Record] = {}

    def get_item(self, key: str) -> CacheItem:
        """Return a hit for a live record; expired records are purged."""
        record = self._store.get(key)
        if record is None:
            return CacheItem(key)

        if is_expired(record["expiration"]):
            del self._store[key]
            _logger.debug("Purged expired key '%s'", key)
            return CacheItem(key)

        return from_record(key, record)

    def save(self, item: CacheItem) -> bool:
        self._store[item.get_key()] = to_record(item)
        return True

    def delete_item(self, key: str) -> bool:
        """Remove a key. Returns True if the key existed."""
        if key in self._store:
            del self._store[key]
            return True
        return False

    def clear(self) -> bool:
        self._store.clear()
        return True

    def get_cache_size(self) -> int:
        """Number of stored records; there is no byte size to report."""
        return len(self._store)

    def get_item_count(self) -> int:
        return len(self._store)
