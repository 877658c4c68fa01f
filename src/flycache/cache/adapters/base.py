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
"""Shared behaviour for cache adapters: records, bulk ops, deferred saves."""

from __future__ import annotations

import logging
import pickle
import time
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any

from flycache.cache.deferred import DeferredBuffer
from flycache.cache.item import CacheItem

_logger = logging.getLogger(__name__)

Record = dict[str, Any]

# pickle.loads on damaged bytes can raise any of these
PICKLE_DECODE_ERRORS: tuple[type[BaseException], ...] = (
    pickle.UnpicklingError,
    EOFError,
    AttributeError,
    ImportError,
    IndexError,
    KeyError,
    TypeError,
    ValueError,
    OverflowError,
    MemoryError,
    RecursionError,
)

PICKLE_ENCODE_ERRORS: tuple[type[BaseException], ...] = (
    pickle.PicklingError,
    AttributeError,
    TypeError,
    RecursionError,
)


def to_record(item: CacheItem) -> Record:
    """Persisted form of *item*: value plus whole-second Unix expiration."""
    expiration = item.get_expiration_time()
    return {
        "value": item.get(),
        "expiration": int(expiration.timestamp()) if expiration is not None else None,
    }


def is_valid_record(record: Any) -> bool:
    """A record must be a mapping holding ``value`` and an ``expiration``.

    The expiration is ``None`` or an int Unix timestamp that ``datetime``
    can represent.
    """
    if not isinstance(record, dict) or "value" not in record or "expiration" not in record:
        return False
    expiration = record["expiration"]
    if expiration is None:
        return True
    if not isinstance(expiration, int) or isinstance(expiration, bool):
        return False
    try:
        datetime.fromtimestamp(expiration, tz=timezone.utc)
    except (OverflowError, ValueError, OSError):
        return False
    return True


def is_expired(expiration: int | None) -> bool:
    return expiration is not None and expiration <= time.time()


def ttl_seconds(expiration: int | None) -> int | None:
    """Seconds left until *expiration*; ``None`` when absent or not positive."""
    if expiration is None:
        return None
    ttl = expiration - int(time.time())
    return ttl if ttl > 0 else None


def from_record(key: str, record: Record) -> CacheItem:
    """Build a hit item from a stored record."""
    expiration = record["expiration"]
    expires = datetime.fromtimestamp(expiration, tz=timezone.utc) if expiration is not None else None
    return CacheItem(key, record["value"], hit=True, expiration=expires)


class BaseCacheAdapter(ABC):
    """Base class for adapters implementing :class:`CacheAdapter`.

    Subclasses provide single-key storage operations; bulk lookups,
    bulk deletes, ``has_item`` and the deferred-save buffer are shared.
    """

    def __init__(self) -> None:
        self._deferred = DeferredBuffer()

    @abstractmethod
    def get_item(self, key: str) -> CacheItem: ...

    @abstractmethod
    def save(self, item: CacheItem) -> bool: ...

    @abstractmethod
    def delete_item(self, key: str) -> bool: ...

    @abstractmethod
    def clear(self) -> bool: ...

    @abstractmethod
    def get_cache_size(self) -> int: ...

    @abstractmethod
    def get_item_count(self) -> int: ...

    def get_items(self, keys: Iterable[str] = ()) -> dict[str, CacheItem]:
        """Resolve each key independently; missing keys map to miss items."""
        return {key: self.get_item(key) for key in keys}

    def has_item(self, key: str) -> bool:
        return self.get_item(key).is_hit()

    def delete_items(self, keys: Iterable[str]) -> bool:
        """Delete every key; True if at least one of them existed and was removed."""
        removed = False
        for key in keys:
            if self.delete_item(key):
                removed = True
        return removed

    def save_deferred(self, item: CacheItem) -> bool:
        """Stage *item* for the next :meth:`commit`; storage is not touched."""
        self._deferred.stage(item)
        return True

    def commit(self) -> bool:
        """Save every staged item and empty the buffer.

        Best effort: a failed save does not undo the others. Returns True
        only if every staged item was saved.
        """
        items = self._deferred.drain()
        failed = [item.get_key() for item in items if not self.save(item)]
        if failed:
            _logger.warning("Deferred commit failed for %d of %d item(s): %s", len(failed), len(items), failed)
            return False
        _logger.debug("Committed %d deferred item(s)", len(items))
        return True
