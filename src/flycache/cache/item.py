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
"""Cache item — a single key/value/expiration record handled as a unit."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Union

Duration = Union[int, float, timedelta]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _to_timedelta(time: Duration) -> timedelta:
    # bool is an int subclass but never a meaningful duration
    if isinstance(time, bool) or not isinstance(time, (int, float, timedelta)):
        raise TypeError(f"Expected seconds or timedelta, got {type(time).__name__}")
    if isinstance(time, timedelta):
        return time
    return timedelta(seconds=time)


class CacheItem:
    """A cache entry as seen by application code.

    Items are created by adapters on lookup (a miss yields ``hit=False``,
    ``value=None``, no expiration) or directly by the caller. Mutators
    work in memory only and return the item itself for chaining::

        item = manager.get_item("user:42")
        if not item.is_hit():
            item.set(load_user(42)).expires_after(300)
            manager.save(item)

    Expiration is kept as an absolute, timezone-aware instant (UTC).
    """

    def __init__(
        self,
        key: str,
        value: Any = None,
        hit: bool = False,
        expiration: datetime | None = None,
    ) -> None:
        self._key = key
        self._value = value
        self._hit = hit
        self._expiration: datetime | None = None
        self.expires_at(expiration)

    def get_key(self) -> str:
        return self._key

    def get(self) -> Any:
        return self._value

    def is_hit(self) -> bool:
        """True if the value came from a lookup and has not expired yet."""
        return self._hit and (self._expiration is None or self._expiration > _now())

    def set(self, value: Any) -> CacheItem:
        """Set the value; the item counts as a hit from now on."""
        self._value = value
        self._hit = True
        return self

    def get_expiration_time(self) -> datetime | None:
        return self._expiration

    def expires_at(self, expiration: datetime | None) -> CacheItem:
        """Set an absolute expiration; ``None`` makes the item persistent.

        Naive datetimes are taken to be UTC.
        """
        if expiration is not None and expiration.tzinfo is None:
            expiration = expiration.replace(tzinfo=timezone.utc)
        self._expiration = expiration
        return self

    def expires_after(self, time: Duration | None) -> CacheItem:
        """Expire *time* (seconds or timedelta) from now; ``None`` clears it."""
        if time is None:
            self._expiration = None
        else:
            self._expiration = _now() + _to_timedelta(time)
        return self

    def get_time_until_expiration(self) -> int | None:
        """Whole seconds left, or ``None`` if persistent or already expired."""
        if self._expiration is None:
            return None
        now = _now()
        if self._expiration <= now:
            return None
        return int(self._expiration.timestamp()) - int(now.timestamp())

    def invalidate(self) -> CacheItem:
        """Expire the item immediately."""
        self._expiration = _now()
        return self

    def has_expired(self) -> bool:
        return self._expiration is not None and self._expiration <= _now()

    def extend_expiration(self, time: Duration) -> CacheItem:
        """Push the expiration back by *time*, starting from now if none is set."""
        base = self._expiration if self._expiration is not None else _now()
        self._expiration = base + _to_timedelta(time)
        return self

    def is_persistent(self) -> bool:
        return self._expiration is None

    def __repr__(self) -> str:
        return f"CacheItem(key={self._key!r}, hit={self._hit}, expiration={self._expiration!r})"
