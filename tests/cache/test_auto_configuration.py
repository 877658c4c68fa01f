"""Tests for CacheProperties binding and CacheAutoConfiguration."""

import logging
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
from flycache.cache.auto_configuration import CacheAutoConfiguration
from flycache.cache.manager import CacheManager
from flycache.cache.properties import CacheProperties
from flycache.core.config import Config
from flycache.kernel.exceptions import InvalidAdapterException
from flycache.logging.structlog_adapter import HANDLER_NAME, StructlogAdapter


class TestCacheProperties:
    def test_defaults(self):
        props = Config.defaults().bind(CacheProperties)
        assert props.provider == "memory"
        assert props.default_ttl == 0
        assert props.redis["url"] == "redis://localhost:6379/0"
        assert props.memcached["port"] == 11211

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("FLYCACHE_CACHE_PROVIDER", "filesystem")
        monkeypatch.setenv("FLYCACHE_CACHE_DEFAULT_TTL", "30")
        props = Config.defaults().bind(CacheProperties)
        assert props.provider == "filesystem"
        assert props.default_ttl == 30


class TestCacheAutoConfiguration:
    def test_memory_by_default(self):
        assert isinstance(CacheAutoConfiguration().cache_adapter(), InMemoryCacheAdapter)

    def test_file_providers(self, tmp_path: Path):
        config = Config(
            {
                "flycache": {
                    "cache": {
                        "file": str(tmp_path / "cache.bin"),
                        "directory": str(tmp_path / "dir"),
                    }
                }
            }
        )
        auto = CacheAutoConfiguration(config)
        assert isinstance(auto.cache_adapter("single_file"), SingleFileCacheAdapter)
        assert isinstance(auto.cache_adapter("single_file_literal"), SingleFileLiteralCacheAdapter)
        assert isinstance(auto.cache_adapter("filesystem"), FileSystemCacheAdapter)
        assert (tmp_path / "dir").is_dir()

    def test_network_providers_are_built_lazily(self):
        auto = CacheAutoConfiguration()
        assert isinstance(auto.cache_adapter("redis"), RedisCacheAdapter)
        assert isinstance(auto.cache_adapter("memcached"), MemcachedCacheAdapter)

    def test_unknown_provider(self):
        with pytest.raises(InvalidAdapterException) as excinfo:
            CacheAutoConfiguration().cache_adapter("floppy")
        assert excinfo.value.code == "UNKNOWN_PROVIDER"

    def test_cache_manager_wraps_configured_adapter(self):
        manager = CacheAutoConfiguration().cache_manager()
        assert isinstance(manager, CacheManager)
        assert isinstance(manager.get_adapter(), InMemoryCacheAdapter)

    def test_new_item_uses_default_ttl(self):
        config = Config({"flycache": {"cache": {"default_ttl": 120}}})
        item = CacheAutoConfiguration(config).new_item("k", "v")
        assert item.is_hit() is True
        remaining = item.get_time_until_expiration()
        assert remaining is not None and 118 <= remaining <= 120

    def test_new_item_persistent_without_default_ttl(self):
        item = CacheAutoConfiguration().new_item("k", "v")
        assert item.is_persistent() is True


class RecordingLogging:
    def __init__(self) -> None:
        self.configured: list[Config] = []
        self.loggers: list[str] = []
        self.events: list[tuple[str, dict]] = []

    def configure(self, config: Config) -> None:
        self.configured.append(config)

    def get_logger(self, name: str):
        self.loggers.append(name)
        events = self.events

        class _Logger:
            def info(self, event: str, **kw) -> None:
                events.append((event, kw))

        return _Logger()

    def set_level(self, name: str, level: str) -> None:
        pass

    def reset(self) -> None:
        pass


class TestCacheAutoConfigurationLogging:
    def test_configures_given_logging_port(self):
        config = Config.defaults()
        port = RecordingLogging()
        auto = CacheAutoConfiguration(config, logging_port=port)
        assert port.configured == [config]
        assert port.loggers == ["flycache.cache"]
        assert auto.logging_port is port

    def test_provider_choice_is_logged(self):
        port = RecordingLogging()
        CacheAutoConfiguration(logging_port=port).cache_adapter()
        assert port.events == [("cache_provider_configured", {"provider": "memory", "adapter": "InMemoryCacheAdapter"})]

    def test_structlog_by_default(self):
        auto = CacheAutoConfiguration()
        assert isinstance(auto.logging_port, StructlogAdapter)
        handlers = [h for h in logging.getLogger("flycache").handlers if h.get_name() == HANDLER_NAME]
        assert len(handlers) == 1
