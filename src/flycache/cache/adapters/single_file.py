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
"""Single-file cache adapters.

Every item of an adapter instance lives in one file holding a serialized
mapping ``key -> {"value": ..., "expiration": int | None}``. Reads load
the file without locking into an in-memory mirror. Every mutation is a
read-modify-write under an exclusive ``flock``: the current file content
is decoded while the lock is held, the change is applied to it and the
whole file is rewritten. Keys written by other instances since the last
read are kept, and a mirror emptied by a racing read never reaches the
disk.

Readers do not lock, so a reader can observe a file that a concurrent
writer has just truncated; such a read decodes as corrupt and that one
lookup sees an empty cache.

Corruption policy is fail-closed: if the file does not decode, is not a
mapping, or holds a single malformed record, the entire content is
discarded rather than partially salvaged.
"""

from __future__ import annotations

import ast
import fcntl
import logging
import os
import pickle
from collections.abc import Callable
from pathlib import Path
from typing import Any

from flycache.cache.adapters.base import (
    PICKLE_DECODE_ERRORS,
    PICKLE_ENCODE_ERRORS,
    BaseCacheAdapter,
    Record,
    from_record,
    is_expired,
    is_valid_record,
    to_record,
)
from flycache.cache.item import CacheItem
from flycache.kernel.exceptions import CacheException

_logger = logging.getLogger(__name__)

# Applied to the on-disk mapping under the lock; returns whether it changed.
_Change = Callable[[dict[str, Record]], bool]


class SingleFileCacheAdapter(BaseCacheAdapter):
    """Cache persisted as one ``pickle`` file.

    The file is created with an empty mapping when missing; failing to
    create it raises :class:`CacheException`. Every save, delete, clear
    and purge rewrites the full file, which suits small to moderate
    item counts.
    """

    _decode_errors: tuple[type[BaseException], ...] = PICKLE_DECODE_ERRORS
    _encode_errors: tuple[type[BaseException], ...] = PICKLE_ENCODE_ERRORS

    def __init__(self, cache_file: str | os.PathLike[str]) -> None:
        super().__init__()
        self._cache_file = Path(cache_file)
        if not self._cache_file.exists():
            try:
                self._cache_file.write_bytes(self._encode({}))
            except OSError as exc:
                raise CacheException(
                    f"Failed to create cache file: {self._cache_file}",
                    code="CACHE_INIT",
                    context={"path": str(self._cache_file)},
                ) from exc
        self._cache: dict[str, Record] = self._load_cache()

    @property
    def cache_file(self) -> Path:
        return self._cache_file

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def _encode(self, data: dict[str, Record]) -> bytes:
        return pickle.dumps(data, protocol=pickle.HIGHEST_PROTOCOL)

    def _decode(self, raw: bytes) -> Any:
        return pickle.loads(raw)

    # ------------------------------------------------------------------
    # CacheAdapter implementation
    # ------------------------------------------------------------------

    def get_item(self, key: str) -> CacheItem:
        """Look *key* up in the refreshed mirror, purging it if expired."""
        self._refresh()
        self._purge_expired_item(key)

        record = self._cache.get(key)
        if record is None:
            _logger.debug("Cache miss for key '%s' in %s", key, self._cache_file)
            return CacheItem(key)
        return from_record(key, record)

    def save(self, item: CacheItem) -> bool:
        """Merge *item* into the file content and rewrite it.

        On any failure, including a value that cannot be serialized, the
        file and the mirror are left as they were.
        """
        key = item.get_key()
        record = to_record(item)

        def put(data: dict[str, Record]) -> bool:
            data[key] = record
            return True

        return self._write_with_lock(put)

    def delete_item(self, key: str) -> bool:
        """Remove *key*; ``False`` when the file does not hold it."""
        removed = False

        def remove(data: dict[str, Record]) -> bool:
            nonlocal removed
            if key in data:
                del data[key]
                removed = True
            return removed

        return self._write_with_lock(remove) and removed

    def clear(self) -> bool:
        def empty(data: dict[str, Record]) -> bool:
            data.clear()
            return True

        return self._write_with_lock(empty)

    def get_cache_size(self) -> int:
        """Size of the cache file in bytes."""
        try:
            return self._cache_file.stat().st_size
        except OSError:
            return 0

    def get_item_count(self) -> int:
        self._refresh()
        return len(self._cache)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _refresh(self) -> None:
        self._cache = self._load_cache()

    def _load_cache(self) -> dict[str, Record]:
        try:
            raw = self._cache_file.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as exc:
            _logger.warning("Cannot read cache file %s: %s", self._cache_file, exc)
            return {}
        return self._parse(raw)

    def _parse(self, raw: bytes) -> dict[str, Record]:
        """Decode and validate file content; any defect yields an empty mapping."""
        if not raw:
            return {}

        try:
            data = self._decode(raw)
        except self._decode_errors as exc:
            _logger.warning("Discarding undecodable cache file %s: %s", self._cache_file, exc)
            return {}

        if not isinstance(data, dict):
            _logger.warning("Discarding cache file %s: top level is %s, not a mapping", self._cache_file, type(data).__name__)
            return {}

        for key, record in data.items():
            if not is_valid_record(record):
                _logger.warning("Discarding cache file %s: malformed record for key '%s'", self._cache_file, key)
                return {}

        return data

    def _write_with_lock(self, change: _Change) -> bool:
        """Apply *change* to the file content while holding an exclusive lock.

        Blocks until the lock is available. The file is only rewritten when
        *change* reports a modification, and the mirror only takes the new
        content once it is on disk. The handle is closed on every path,
        which also drops the lock.
        """
        try:
            fd = os.open(self._cache_file, os.O_RDWR | os.O_CREAT, 0o666)
        except OSError as exc:
            _logger.warning("Cannot open cache file %s for writing: %s", self._cache_file, exc)
            return False

        with os.fdopen(fd, "r+b") as handle:
            try:
                fcntl.flock(handle.fileno(), fcntl.LOCK_EX)
            except OSError as exc:
                _logger.warning("Cannot lock cache file %s: %s", self._cache_file, exc)
                return False

            try:
                current = self._parse(handle.read())
                if change(current):
                    try:
                        payload = self._encode(current)
                    except self._encode_errors as exc:
                        _logger.warning("Cannot serialize cache for %s: %s", self._cache_file, exc)
                        return False
                    handle.seek(0)
                    handle.truncate()
                    handle.write(payload)
                    handle.flush()
                    os.fsync(handle.fileno())
            except OSError as exc:
                _logger.warning("Failed writing cache file %s: %s", self._cache_file, exc)
                return False
            finally:
                fcntl.flock(handle.fileno(), fcntl.LOCK_UN)

        self._cache = current
        return True

    def _purge_expired_item(self, key: str) -> None:
        record = self._cache.get(key)
        if record is None or not is_expired(record["expiration"]):
            return
        del self._cache[key]

        def drop_expired(data: dict[str, Record]) -> bool:
            stored = data.get(key)
            if stored is None or not is_expired(stored["expiration"]):
                return False
            del data[key]
            return True

        if self._write_with_lock(drop_expired):
            _logger.debug("Purged expired key '%s' from %s", key, self._cache_file)


class SingleFileLiteralCacheAdapter(SingleFileCacheAdapter):
    """Single-file cache stored as a human-readable Python literal.

    The file can be inspected and edited by hand. Values are limited to
    what :func:`ast.literal_eval` reads back: strings, bytes, numbers,
    booleans, ``None`` and lists, tuples, dicts and sets of those.
    Saving anything else fails.
    """

    _decode_errors = (ValueError, SyntaxError, TypeError, MemoryError, RecursionError)
    _encode_errors = (ValueError, RecursionError)

    def _encode(self, data: dict[str, Record]) -> bytes:
        return repr(data).encode("utf-8")

    def _decode(self, raw: bytes) -> Any:
        return ast.literal_eval(raw.decode("utf-8"))

    def save(self, item: CacheItem) -> bool:
        if not _is_literal(item.get()):
            _logger.warning(
                "Refusing to save key '%s': %s value is not a Python literal",
                item.get_key(),
                type(item.get()).__name__,
            )
            return False
        return super().save(item)


def _is_literal(value: Any) -> bool:
    try:
        return bool(ast.literal_eval(repr(value)) == value)
    except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError):
        return False
