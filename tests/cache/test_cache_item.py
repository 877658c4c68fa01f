"""Tests for CacheItem state, expiration arithmetic and chaining."""

from datetime import datetime, timedelta, timezone

import pytest

from flycache.cache.item import CacheItem


def _now() -> datetime:
    return datetime.now(timezone.utc)


class TestCacheItemBasics:
    def test_get_key(self):
        assert CacheItem("test_key").get_key() == "test_key"

    def test_get_value(self):
        assert CacheItem("k", "test_value", hit=True).get() == "test_value"

    def test_new_item_is_a_miss(self):
        item = CacheItem("k")
        assert item.is_hit() is False
        assert item.get() is None

    def test_set_marks_hit(self):
        item = CacheItem("k").set("new_value")
        assert item.get() == "new_value"
        assert item.is_hit() is True

    def test_hit_without_expiration(self):
        assert CacheItem("k", "v", hit=True).is_hit() is True

    def test_expired_hit_is_not_a_hit(self):
        item = CacheItem("k", "v", hit=True, expiration=_now() - timedelta(seconds=1))
        assert item.is_hit() is False

    def test_future_expiration_is_still_a_hit(self):
        item = CacheItem("k", "v", hit=True, expiration=_now() + timedelta(minutes=5))
        assert item.is_hit() is True

    def test_mutators_chain(self):
        item = CacheItem("k")
        assert item.set(1).expires_after(10).extend_expiration(5) is item
        assert item.invalidate() is item

    def test_repr(self):
        assert "key='k'" in repr(CacheItem("k"))


class TestCacheItemExpiration:
    def test_expires_at(self):
        future = _now() + timedelta(hours=1)
        item = CacheItem("k").expires_at(future)
        assert item.get_expiration_time() == future

    def test_expires_at_naive_datetime_is_utc(self):
        naive = datetime(2030, 1, 1, 12, 0, 0)
        item = CacheItem("k").expires_at(naive)
        assert item.get_expiration_time() == datetime(2030, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def test_expires_at_none_clears(self):
        item = CacheItem("k").expires_after(10).expires_at(None)
        assert item.get_expiration_time() is None

    def test_expires_after_seconds(self):
        item = CacheItem("k").expires_after(3600)
        expected = _now() + timedelta(seconds=3600)
        assert abs((item.get_expiration_time() - expected).total_seconds()) < 2

    def test_expires_after_timedelta(self):
        item = CacheItem("k").expires_after(timedelta(hours=1))
        expected = _now() + timedelta(hours=1)
        assert abs((item.get_expiration_time() - expected).total_seconds()) < 2

    def test_expires_after_none(self):
        item = CacheItem("k").expires_after(60).expires_after(None)
        assert item.get_expiration_time() is None
        assert item.is_persistent() is True

    def test_expires_after_rejects_other_types(self):
        with pytest.raises(TypeError):
            CacheItem("k").expires_after("10")  # type: ignore[arg-type]
        with pytest.raises(TypeError):
            CacheItem("k").expires_after(True)

    def test_time_until_expiration(self):
        item = CacheItem("k").expires_after(100)
        remaining = item.get_time_until_expiration()
        assert remaining is not None
        assert 98 <= remaining <= 100

    def test_time_until_expiration_none_when_expired(self):
        item = CacheItem("k").expires_at(_now() - timedelta(seconds=5))
        assert item.get_time_until_expiration() is None

    def test_time_until_expiration_none_without_expiration(self):
        item = CacheItem("k")
        assert item.get_expiration_time() is None
        assert item.get_time_until_expiration() is None

    def test_invalidate(self):
        item = CacheItem("k").set("v").expires_after(3600)
        item.invalidate()
        assert item.get_expiration_time() <= _now()
        assert item.has_expired() is True
        assert item.is_hit() is False

    def test_extend_expiration_with_seconds(self):
        start = _now() + timedelta(seconds=100)
        item = CacheItem("k").expires_at(start).extend_expiration(50)
        assert item.get_expiration_time() == start + timedelta(seconds=50)

    def test_extend_expiration_with_timedelta(self):
        start = _now() + timedelta(seconds=100)
        item = CacheItem("k").expires_at(start).extend_expiration(timedelta(minutes=1))
        assert item.get_expiration_time() == start + timedelta(minutes=1)

    def test_extend_expiration_without_initial_expiration(self):
        item = CacheItem("k").extend_expiration(30)
        expected = _now() + timedelta(seconds=30)
        assert abs((item.get_expiration_time() - expected).total_seconds()) < 2

    def test_extend_expiration_multiple_times(self):
        start = _now() + timedelta(seconds=10)
        item = CacheItem("k").expires_at(start).extend_expiration(10).extend_expiration(20)
        assert item.get_expiration_time() == start + timedelta(seconds=30)

    def test_has_expired(self):
        assert CacheItem("k").expires_at(_now() - timedelta(seconds=1)).has_expired() is True
        assert CacheItem("k").expires_after(60).has_expired() is False
        assert CacheItem("k").has_expired() is False

    def test_is_persistent(self):
        assert CacheItem("k").is_persistent() is True
        assert CacheItem("k").expires_after(60).is_persistent() is False
