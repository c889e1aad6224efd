"""Disk-backed response caching for wanikani.

This package provides :class:`CacheStore`, a file-per-entry cache keyed by
request :func:`fingerprint`, with age-based expiry and explicit pruning.
Entries carry the ``ETag`` / ``Last-Modified`` validators that the clients in
:mod:`wanikani.client` use for conditional revalidation.
"""

from wanikani.cache.fingerprint import fingerprint
from wanikani.cache.store import CacheLookup, CacheStore, LookupStatus

__all__ = ["CacheLookup", "CacheStore", "LookupStatus", "fingerprint"]
