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
"""Deferred-write buffer — per-adapter staging area for batched commits."""

from __future__ import annotations

from collections.abc import Iterator

from flycache.cache.item import CacheItem


class DeferredBuffer:
    """Items staged by ``save_deferred`` until the next ``commit``.

    Keyed by item key: staging the same key twice keeps only the latest
    item. Process-local, never persisted, not thread-safe.
    """

    def __init__(self) -> None:
        self._items: dict[str, CacheItem] = {}

    def stage(self, item: CacheItem) -> None:
        self._items[item.get_key()] = item

    def drain(self) -> list[CacheItem]:
        """Return every staged item and empty the buffer."""
        items = list(self._items.values())
        self._items.clear()
        return items

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __iter__(self) -> Iterator[CacheItem]:
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)
