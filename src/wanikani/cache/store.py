"""File-per-entry response cache with age-based expiry.

Each entry lives in ``<directory>/<fingerprint>.json`` as
``{"data": ..., "etag": ..., "lastModified": ...}``.  The file's
modification time is the only freshness signal: no TTL is stored inside
the file, callers pass the maximum acceptable age (in milliseconds) on
every read.

Caching is advisory.  Nothing in this module raises into the request path
except :meth:`CacheStore.write`, whose ``OSError`` the client catches:

* :meth:`CacheStore.lookup` reports *why* an entry is unusable
  (:class:`LookupStatus`) for logging.
* :meth:`CacheStore.read` collapses every non-hit outcome to ``None``.
* :meth:`CacheStore.prune` logs a warning when the directory cannot be
  listed and skips files it cannot stat or delete.
"""

from __future__ import annotations

import enum
import json
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from wanikani.config import atomic_write
from wanikani.models import CacheEntry

logger = logging.getLogger(__name__)

_SUFFIX = ".json"


class LookupStatus(str, enum.Enum):
    """Outcome of a cache lookup."""

    HIT = "hit"
    MISS = "miss"
    EXPIRED = "expired"
    CORRUPT = "corrupt"


@dataclass(frozen=True)
class CacheLookup:
    """Tagged lookup result; :attr:`entry` is set only for :attr:`LookupStatus.HIT`."""

    status: LookupStatus
    entry: Optional[CacheEntry] = None
    reason: str = ""

    @property
    def hit(self) -> bool:
        return self.status is LookupStatus.HIT


class CacheStore:
    """Disk-backed store mapping request fingerprints to :class:`~wanikani.models.CacheEntry`.

    Args:
        directory: Directory holding the entry files.  It does not need to
            exist yet and may be removed externally at any time; it is
            recreated before every write.

    Example::

        store = CacheStore("/tmp/wanikani-cache")
        store.write(key, CacheEntry(data={"level": 3}, etag='W/"abc"'))
        entry = store.read(key, max_age=60_000)
    """

    def __init__(self, directory: str | Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path_for(self, fingerprint: str) -> Path:
        """Return the file path of the entry for *fingerprint*."""
        return self._directory / f"{fingerprint}{_SUFFIX}"

    def lookup(self, fingerprint: str, max_age: float) -> CacheLookup:
        """Look up an entry and report the outcome.

        Args:
            fingerprint: Request fingerprint.
            max_age: Maximum acceptable file age in milliseconds.  An entry
                whose age is greater than or equal to this is expired.
        """
        path = self.path_for(fingerprint)
        try:
            stat = path.stat()
        except FileNotFoundError:
            return CacheLookup(LookupStatus.MISS)
        except OSError as exc:
            return CacheLookup(LookupStatus.CORRUPT, reason=str(exc))

        if _age_ms(stat.st_mtime) >= max_age:
            return CacheLookup(LookupStatus.EXPIRED)

        try:
            raw: Any = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return CacheLookup(LookupStatus.MISS)
        except (OSError, ValueError) as exc:
            return CacheLookup(LookupStatus.CORRUPT, reason=str(exc))

        try:
            entry = CacheEntry.model_validate(raw)
        except ValidationError as exc:
            return CacheLookup(LookupStatus.CORRUPT, reason=f"invalid entry: {exc.error_count()} error(s)")
        return CacheLookup(LookupStatus.HIT, entry=entry)

    def read(self, fingerprint: str, max_age: float) -> Optional[CacheEntry]:
        """Return the entry for *fingerprint* if it is present, fresh, and well-formed.

        Missing, expired, unreadable and malformed entries all yield ``None``.
        """
        result = self.lookup(fingerprint, max_age)
        if result.status is LookupStatus.CORRUPT:
            logger.debug("Ignoring corrupt cache entry %s: %s", fingerprint, result.reason)
        return result.entry

    def write(self, fingerprint: str, entry: CacheEntry) -> None:
        """Persist *entry* under *fingerprint*, replacing any previous entry.

        Raises:
            OSError: If the directory cannot be created or the file written.
        """
        self._directory.mkdir(parents=True, exist_ok=True)
        atomic_write(self.path_for(fingerprint), json.dumps(entry.to_file_dict()))

    def prune(self, max_age: float) -> int:
        """Delete every entry older than *max_age* milliseconds.

        Non-regular files and files that vanish or cannot be deleted are
        skipped.  An unreadable directory is logged and treated as empty.

        Returns:
            The number of files removed.
        """
        removed = 0
        try:
            with os.scandir(self._directory) as it:
                candidates = [e for e in it if e.name.endswith(_SUFFIX)]
        except OSError as exc:
            logger.warning("Failed to clean cache directory %s: %s", self._directory, exc)
            return 0

        for dir_entry in candidates:
            try:
                if not dir_entry.is_file(follow_symlinks=False):
                    continue
                if _age_ms(dir_entry.stat(follow_symlinks=False).st_mtime) > max_age:
                    os.unlink(dir_entry.path)
                    removed += 1
            except OSError:
                # Already gone or not ours to delete.
                continue
        if removed:
            logger.debug("Pruned %d cache entries from %s", removed, self._directory)
        return removed

    def clear(self) -> int:
        """Delete every entry regardless of age.  Returns the number removed."""
        return self.prune(float("-inf"))

    def stats(self) -> dict[str, Any]:
        """Return ``directory``, ``entries`` and ``size_bytes`` for the cache."""
        entries = 0
        size = 0
        try:
            with os.scandir(self._directory) as it:
                for dir_entry in it:
                    if not dir_entry.name.endswith(_SUFFIX):
                        continue
                    try:
                        if dir_entry.is_file(follow_symlinks=False):
                            entries += 1
                            size += dir_entry.stat(follow_symlinks=False).st_size
                    except OSError:
                        continue
        except OSError:
            pass
        return {
            "directory": str(self._directory),
            "entries": entries,
            "size_bytes": size,
        }


def _age_ms(mtime: float) -> float:
    """Milliseconds elapsed since *mtime* (seconds since the epoch)."""
    return (time.time() - mtime) * 1000
