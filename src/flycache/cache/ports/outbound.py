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
"""Cache adapter protocol."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from flycache.cache.item import CacheItem


@runtime_checkable
class CacheAdapter(Protocol):
    """Storage contract shared by every cache backend.

    All cache backends (memory, single file, per-key files, Redis,
    Memcached) must implement this protocol. Ordinary backend failures
    are reported through return values, never raised.
    """

    def get_item(self, key: str) -> CacheItem: ...

    def get_items(self, keys: Iterable[str] = ()) -> dict[str, CacheItem]: ...

    def has_item(self, key: str) -> bool: ...

    def save(self, item: CacheItem) -> bool: ...

    def save_deferred(self, item: CacheItem) -> bool: ...

    def commit(self) -> bool: ...

    def delete_item(self, key: str) -> bool: ...

    def delete_items(self, keys: Iterable[str]) -> bool: ...

    def clear(self) -> bool: ...

    def get_cache_size(self) -> int: ...

    def get_item_count(self) -> int: ...
