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
"""Per-key file cache adapter."""

from __future__ import annotations

import hashlib
import logging
import os
import pickle
from pathlib import Path

from flycache.cache.adapters.base import (
    PICKLE_DECODE_ERRORS,
    PICKLE_ENCODE_ERRORS,
    BaseCacheAdapter,
    from_record,
    is_expired,
    is_valid_record,
    to_record,
)
from flycache.cache.item import CacheItem
from flycache.kernel.exceptions import CacheException

_logger = logging.getLogger(__name__)

_SUFFIX = ".cache"


class FileSystemCacheAdapter(BaseCacheAdapter):
    """One ``pickle`` file per key inside a cache directory.

    File names are the SHA-256 hex digest of the key plus ``.cache``, so
    arbitrary keys map to safe, fixed-length names. Files are written
    without locking: concurrent saves of the same key race and the last
    complete write wins. A corrupt file is a miss for its key only.
    """

    def __init__(self, cache_dir: str | os.PathLike[str]) -> None:
        super().__init__()
        self._cache_dir = Path(cache_dir)
        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise CacheException(
                f"Failed to create cache directory: {self._cache_dir}",
                code="CACHE_INIT",
                context={"path": str(self._cache_dir)},
            ) from exc

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def get_file_path(self, key: str) -> Path:
        """Path of the file that stores *key*."""
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self._cache_dir / f"{digest}{_SUFFIX}"

    def get_item(self, key: str) -> CacheItem:
        path = self.get_file_path(key)
        try:
            raw = path.read_bytes()
        except FileNotFoundError:
            return CacheItem(key)
        except OSError as exc:
            _logger.warning("Cannot read cache file %s for key '%s': %s", path, key, exc)
            return CacheItem(key)

        try:
            record = pickle.loads(raw)
        except PICKLE_DECODE_ERRORS as exc:
            _logger.warning("Corrupt cache file %s for key '%s': %s", path, key, exc)
            return CacheItem(key)

        if not is_valid_record(record):
            _logger.warning("Malformed record in %s for key '%s'", path, key)
            return CacheItem(key)

        if is_expired(record["expiration"]):
            self.delete_item(key)
            _logger.debug("Purged expired key '%s'", key)
            return CacheItem(key)

        return from_record(key, record)

    def save(self, item: CacheItem) -> bool:
        path = self.get_file_path(item.get_key())
        try:
            payload = pickle.dumps(to_record(item), protocol=pickle.HIGHEST_PROTOCOL)
        except PICKLE_ENCODE_ERRORS as exc:
            _logger.warning("Cannot serialize value for key '%s': %s", item.get_key(), exc)
            return False
        try:
            path.write_bytes(payload)
        except OSError as exc:
            _logger.warning("Failed writing cache file %s: %s", path, exc)
            return False
        return True

    def delete_item(self, key: str) -> bool:
        path = self.get_file_path(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            _logger.warning("Cannot delete cache file %s: %s", path, exc)
            return False
        return True

    def clear(self) -> bool:
        """Remove every file in the cache directory."""
        cleared = True
        for path in self._iter_files():
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                _logger.warning("Cannot delete cache file %s: %s", path, exc)
                cleared = False
        return cleared

    def get_cache_size(self) -> int:
        """Total size in bytes of the files in the cache directory."""
        size = 0
        for path in self._iter_files():
            try:
                size += path.stat().st_size
            except OSError:
                continue
        return size

    def get_item_count(self) -> int:
        """Number of entries in the cache directory, expired ones included."""
        try:
            return sum(1 for _ in self._cache_dir.iterdir())
        except OSError:
            return 0

    def _iter_files(self) -> list[Path]:
        try:
            return [path for path in self._cache_dir.iterdir() if path.is_file()]
        except OSError as exc:
            _logger.warning("Cannot list cache directory %s: %s", self._cache_dir, exc)
            return []
