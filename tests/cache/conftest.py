"""Shared fixtures for cache tests: fake network clients and adapter factories."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from flycache.cache.adapters import (
    FileSystemCacheAdapter,
    InMemoryCacheAdapter,
    MemcachedCacheAdapter,
    RedisCacheAdapter,
    SingleFileCacheAdapter,
    SingleFileLiteralCacheAdapter,
)
from flycache.cache.adapters.base import BaseCacheAdapter


class FakeRedis:
    """Minimal in-memory stub matching the redis.Redis interface."""

    def __init__(self) -> None:
        self._store: dict[str, bytes] = {}
        self.ttls: dict[str, int | None] = {}

    def get(self, key: str) -> bytes | None:
        return self._store.get(key)

    def set(self, key: str, value: bytes, ex: int | None = None) -> bool:
        self._store[key] = value
        self.ttls[key] = ex
        return True

    def delete(self, *keys: str) -> int:
        count = 0
        for k in keys:
            if k in self._store:
                del self._store[k]
                count += 1
        return count

    def exists(self, *keys: str) -> int:
        return sum(1 for k in keys if k in self._store)

    def flushdb(self) -> bool:
        self._store.clear()
        return True

    def dbsize(self) -> int:
        return len(self._store)

    def info(self, section: str | None = None) -> dict:
        return {"used_memory": sum(len(v) for v in self._store.values())}

    def ping(self) -> bool:
        return True

    def close(self) -> None:
        pass


class FakeMemcache:
    """Minimal in-memory stub matching the pymemcache Client interface."""

    def __init__(self) -> None:
        self._store: dict[str, bytes] = {}
        self.expires: dict[str, int] = {}

    def get(self, key: str) -> bytes | None:
        return self._store.get(key)

    def set(self, key: str, value: bytes, expire: int = 0, noreply: bool | None = None) -> bool:
        self._store[key] = value
        self.expires[key] = expire
        return True

    def delete(self, key: str, noreply: bool | None = None) -> bool:
        if key in self._store:
            del self._store[key]
            return True
        return False

    def flush_all(self, delay: int = 0, noreply: bool | None = None) -> bool:
        self._store.clear()
        return True

    def stats(self, *args: str) -> dict:
        return {
            b"bytes": sum(len(v) for v in self._store.values()),
            b"curr_items": len(self._store),
        }

    def close(self) -> None:
        pass


AdapterFactory = Callable[[Path], BaseCacheAdapter]

ADAPTER_FACTORIES: dict[str, AdapterFactory] = {
    "memory": lambda tmp: InMemoryCacheAdapter(),
    "single_file": lambda tmp: SingleFileCacheAdapter(tmp / "cache.bin"),
    "single_file_literal": lambda tmp: SingleFileLiteralCacheAdapter(tmp / "cache.py"),
    "filesystem": lambda tmp: FileSystemCacheAdapter(tmp / "cache"),
    "redis": lambda tmp: RedisCacheAdapter(FakeRedis()),
    "memcached": lambda tmp: MemcachedCacheAdapter(FakeMemcache()),
}


@pytest.fixture(params=sorted(ADAPTER_FACTORIES))
def adapter(request: pytest.FixtureRequest, tmp_path: Path) -> BaseCacheAdapter:
    """Every adapter variant, each over a fresh backing store."""
    return ADAPTER_FACTORIES[request.param](tmp_path)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def fake_memcache() -> FakeMemcache:
    return FakeMemcache()
