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
"""Cache manager with a named registry of hot-swappable adapters."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from flycache.cache.item import CacheItem
from flycache.cache.ports.outbound import CacheAdapter
from flycache.kernel.exceptions import InvalidAdapterException

logger = logging.getLogger("flycache.cache")

DEFAULT_ADAPTER = "default"


class CacheManager:
    """Delegates every cache operation to the active adapter.

    The adapter given at construction is registered as ``"default"`` and
    starts out active. Other adapters are registered by name and can be
    switched to at any time; switching only swaps the reference, no data
    moves between adapters.
    """

    def __init__(self, adapter: CacheAdapter) -> None:
        self._adapters: dict[str, CacheAdapter] = {}
        self._adapter = adapter
        self._active_name: str | None = DEFAULT_ADAPTER
        self.add_adapter(DEFAULT_ADAPTER, adapter)

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def add_adapter(self, name: str, adapter: CacheAdapter) -> None:
        """Register *adapter* under *name*; names cannot be reused."""
        if name in self._adapters:
            raise InvalidAdapterException(
                f"Adapter '{name}' already exists.",
                code="ADAPTER_EXISTS",
                context={"name": name},
            )
        self._adapters[name] = adapter
        logger.debug("Registered cache adapter '%s' (%s)", name, type(adapter).__name__)

    def switch_adapter(self, name: str) -> None:
        """Make the adapter registered as *name* the active one."""
        if name not in self._adapters:
            raise InvalidAdapterException(
                f"Adapter '{name}' not found.",
                code="ADAPTER_NOT_FOUND",
                context={"name": name, "registered": sorted(self._adapters)},
            )
        self._adapter = self._adapters[name]
        self._active_name = name
        logger.info("Switched cache adapter to '%s'", name)

    def set_adapter(self, adapter: CacheAdapter) -> None:
        """Make *adapter* active without registering it."""
        self._adapter = adapter
        self._active_name = next((n for n, a in self._adapters.items() if a is adapter), None)

    def get_adapter(self) -> CacheAdapter:
        return self._adapter

    def get_adapters(self) -> dict[str, CacheAdapter]:
        return dict(self._adapters)

    @property
    def active_name(self) -> str | None:
        """Registry name of the active adapter, if it is registered."""
        return self._active_name

    # ------------------------------------------------------------------
    # Delegated cache operations
    # ------------------------------------------------------------------

    def get_item(self, key: str) -> CacheItem:
        return self._adapter.get_item(key)

    def get_items(self, keys: Iterable[str] = ()) -> dict[str, CacheItem]:
        return self._adapter.get_items(keys)

    def has_item(self, key: str) -> bool:
        return self._adapter.has_item(key)

    def save(self, item: CacheItem) -> bool:
        return self._adapter.save(item)

    def save_deferred(self, item: CacheItem) -> bool:
        return self._adapter.save_deferred(item)

    def commit(self) -> bool:
        return self._adapter.commit()

    def delete_item(self, key: str) -> bool:
        return self._adapter.delete_item(key)

    def delete_items(self, keys: Iterable[str]) -> bool:
        return self._adapter.delete_items(keys)

    def clear(self) -> bool:
        return self._adapter.clear()

    def get_cache_size(self) -> int:
        return self._adapter.get_cache_size()

    def get_item_count(self) -> int:
        return self._adapter.get_item_count()
