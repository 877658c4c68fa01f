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
"""FlyCache Cache — cache items over interchangeable storage adapters."""

from flycache.cache.adapters import (
    BaseCacheAdapter,
    FileSystemCacheAdapter,
    InMemoryCacheAdapter,
    MemcachedCacheAdapter,
    RedisCacheAdapter,
    SingleFileCacheAdapter,
    SingleFileLiteralCacheAdapter,
)
from flycache.cache.auto_configuration import CacheAutoConfiguration
from flycache.cache.deferred import DeferredBuffer
from flycache.cache.item import CacheItem
from flycache.cache.manager import CacheManager
from flycache.cache.ports.outbound import CacheAdapter
from flycache.cache.properties import CacheProperties

__all__ = [
    "BaseCacheAdapter",
    "CacheAdapter",
    "CacheAutoConfiguration",
    "CacheItem",
    "CacheManager",
    "CacheProperties",
    "DeferredBuffer",
    "FileSystemCacheAdapter",
    "InMemoryCacheAdapter",
    "MemcachedCacheAdapter",
    "RedisCacheAdapter",
    "SingleFileCacheAdapter",
    "SingleFileLiteralCacheAdapter",
]
