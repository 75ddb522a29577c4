"""File-per-entry response cache with mtime-based TTL.

Every successful API response is stored verbatim as one file in the cache
directory. Translation lookups are keyed by :func:`derive_key`, the
SHA-256 of ``word + "_" + dictionary``, so the same pair always maps to the
same ``<hex-digest>.json`` file. The dictionary list lives in the
fixed-name ``dictionaries.json``.

Freshness is the file's modification time compared to the configured TTL;
there is no index and no metadata beside the files themselves. Expired
entries are only removed by :meth:`ResponseCache.sweep`, which the app runs
once at startup.

See Also:
    :class:`~pons_cli.models.AppConfig` -- ``cache_ttl`` controls the TTL.
"""

from __future__ import annotations

import hashlib
import logging
import os
import time
from pathlib import Path
from typing import Optional

from pons_cli.exceptions import CacheWriteError

logger = logging.getLogger(__name__)

DICTIONARIES_FILENAME = "dictionaries.json"


def derive_key(word: str, dictionary: str) -> str:
    """Return the cache key for a (word, dictionary) lookup.

    The key is the hex SHA-256 digest of ``word + "_" + dictionary`` encoded
    as UTF-8: deterministic, fixed length, and safe to use as a file name.
    """
    raw = f"{word}_{dictionary}"
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def is_fresh(path: Path, ttl: float, now: Optional[float] = None) -> bool:
    """Return True if *path* exists and was modified less than *ttl* seconds ago.

    Missing or unreadable files are never fresh, and a TTL of zero or less
    makes every entry stale.

    Args:
        path: The cache file to check.
        ttl: Time-to-live in seconds.
        now: Reference timestamp (defaults to :func:`time.time`).
    """
    if ttl <= 0:
        return False
    try:
        mtime = path.stat().st_mtime
    except OSError:
        return False
    if now is None:
        now = time.time()
    return (now - mtime) < ttl


class ResponseCache:
    """Disk cache of raw API responses.

    Args:
        cache_dir: Directory holding the cache files. Created on first
            write if missing.
        ttl_seconds: Entries older than this are stale.

    Example::

        cache = ResponseCache(get_cache_dir(), ttl_seconds=604800)
        path = cache.translation_path("Haus", "dede")
        if cache.is_fresh(path):
            body = cache.read(path)
    """

    def __init__(self, cache_dir: str | Path, ttl_seconds: float) -> None:
        self._cache_dir = Path(cache_dir)
        self._ttl = ttl_seconds

    @property
    def directory(self) -> Path:
        return self._cache_dir

    @property
    def ttl(self) -> float:
        return self._ttl

    def path_for(self, name: str) -> Path:
        """Return the path of the cache file called *name*."""
        return self._cache_dir / name

    def translation_path(self, word: str, dictionary: str) -> Path:
        """Return the cache file path for a translation lookup."""
        return self.path_for(f"{derive_key(word, dictionary)}.json")

    def dictionaries_path(self) -> Path:
        """Return the cache file path for the dictionary list."""
        return self.path_for(DICTIONARIES_FILENAME)

    def is_fresh(self, path: Path) -> bool:
        """Return True if *path* is younger than this cache's TTL."""
        return is_fresh(path, self._ttl)

    def read(self, path: Path) -> Optional[bytes]:
        """Return the raw content of a cache file, or ``None`` if it cannot be read."""
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            logger.warning("could not read cache file %s: %s", path, exc)
            return None

    def write(self, path: Path, data: bytes) -> None:
        """Store *data* at *path*, replacing any previous entry.

        Raises:
            CacheWriteError: If the file cannot be written.
        """
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as exc:
            raise CacheWriteError(f"could not write cache file {path}: {exc}") from exc

    def sweep(self, now: Optional[float] = None) -> int:
        """Delete every cache file older than the TTL.

        Sub-directories are left alone. A file that cannot be stat'ed or
        removed is logged and skipped; the sweep always visits every entry.

        Returns:
            The number of files removed.
        """
        if now is None:
            now = time.time()
        try:
            entries = list(os.scandir(self._cache_dir))
        except OSError as exc:
            logger.warning("could not read cache directory %s: %s", self._cache_dir, exc)
            return 0

        removed = 0
        for entry in entries:
            try:
                if entry.is_dir():
                    continue
                age = now - entry.stat().st_mtime
            except OSError as exc:
                logger.warning("could not get file info for %s: %s", entry.path, exc)
                continue
            if age > self._ttl:
                try:
                    os.remove(entry.path)
                except OSError as exc:
                    logger.warning("could not remove expired cache file %s: %s", entry.path, exc)
                    continue
                removed += 1

        if removed:
            logger.debug("removed %d expired cache file(s) from %s", removed, self._cache_dir)
        return removed
