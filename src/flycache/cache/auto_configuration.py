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
"""Cache subsystem auto-configuration."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from flycache.cache.adapters.filesystem import FileSystemCacheAdapter
from flycache.cache.adapters.memcached import MemcachedCacheAdapter
from flycache.cache.adapters.memory import InMemoryCacheAdapter
from flycache.cache.adapters.redis import RedisCacheAdapter
from flycache.cache.adapters.single_file import SingleFileCacheAdapter, SingleFileLiteralCacheAdapter
from flycache.cache.item import CacheItem
from flycache.cache.manager import CacheManager
from flycache.cache.ports.outbound import CacheAdapter
from flycache.cache.properties import CacheProperties
from flycache.core.config import Config
from flycache.kernel.exceptions import InvalidAdapterException
from flycache.logging.port import LoggingPort
from flycache.logging.structlog_adapter import StructlogAdapter


class CacheAutoConfiguration:
    """Builds the configured cache adapter and manager from :class:`Config`.

    Construction also configures logging for the ``flycache`` namespace
    through *logging_port*, a :class:`StructlogAdapter` unless given.
    """

    PROVIDERS = ("memory", "single_file", "single_file_literal", "filesystem", "redis", "memcached")

    def __init__(self, config: Config | None = None, logging_port: LoggingPort | None = None) -> None:
        self._config = config if config is not None else Config.defaults()
        self._logging = logging_port if logging_port is not None else StructlogAdapter()
        self._logging.configure(self._config)
        self._logger = self._logging.get_logger("flycache.cache")
        self._properties = self._config.bind(CacheProperties)

    @property
    def logging_port(self) -> LoggingPort:
        return self._logging

    @property
    def properties(self) -> CacheProperties:
        return self._properties

    def cache_adapter(self, provider: str | None = None) -> CacheAdapter:
        """Create the adapter for *provider* (the configured one by default)."""
        name = (provider or self._properties.provider).lower()
        factories: dict[str, Callable[[CacheProperties], CacheAdapter]] = {
            "memory": lambda p: InMemoryCacheAdapter(),
            "single_file": lambda p: SingleFileCacheAdapter(p.file),
            "single_file_literal": lambda p: SingleFileLiteralCacheAdapter(p.file),
            "filesystem": lambda p: FileSystemCacheAdapter(p.directory),
            "redis": lambda p: RedisCacheAdapter.from_url(str(p.redis.get("url", "redis://localhost:6379/0"))),
            "memcached": lambda p: MemcachedCacheAdapter.from_host(
                str(p.memcached.get("host", "127.0.0.1")),
                int(p.memcached.get("port", 11211)),
            ),
        }
        factory = factories.get(name)
        if factory is None:
            raise InvalidAdapterException(
                f"Unknown cache provider '{name}'.",
                code="UNKNOWN_PROVIDER",
                context={"provider": name, "supported": list(self.PROVIDERS)},
            )
        adapter = factory(self._properties)
        self._logger.info("cache_provider_configured", provider=name, adapter=type(adapter).__name__)
        return adapter

    def cache_manager(self) -> CacheManager:
        return CacheManager(self.cache_adapter())

    def new_item(self, key: str, value: Any = None) -> CacheItem:
        """A fresh item expiring after ``default_ttl`` seconds (0 means never)."""
        item = CacheItem(key).set(value)
        if self._properties.default_ttl > 0:
            item.expires_after(self._properties.default_ttl)
        return item
