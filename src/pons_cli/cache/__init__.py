"""Disk-based response caching for pons-cli.

This package provides :class:`ResponseCache`, which stores the raw bytes
of successful API responses as one file per entry, with freshness decided
by file modification time against the configured TTL.

The cache is consumed by the lookup pipeline in :mod:`pons_cli.pipeline`
and is controlled by ``cache_ttl`` in :class:`~pons_cli.models.AppConfig`.
"""

from pons_cli.cache.cache import ResponseCache, derive_key, is_fresh

__all__ = ["ResponseCache", "derive_key", "is_fresh"]
