"""Thread-safe in-memory cache of per-provider model lists.

Entries are immutable and replaced whole under a re-entrant lock, so a
concurrent reader sees either the old list or the new one, never a mix.
Staleness is measured against an injectable clock.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from threading import RLock
from typing import Callable, Dict, Iterable, Optional, Tuple
import time

from ..config.defaults import MODEL_CACHE_TTL_SECONDS
from .models import ModelInfo


@dataclass(frozen=True)
class ModelCacheEntry:
    """Snapshot of one provider's live model list."""

    provider_id: str
    models: Tuple[ModelInfo, ...]
    fetched_at: float

    @property
    def fetched_at_iso(self) -> str:
        return datetime.fromtimestamp(self.fetched_at, tz=timezone.utc).isoformat()


class ModelCache:
    """In-memory model list cache with a staleness window."""

    __slots__ = ("_lock", "_entries", "_ttl", "_clock")

    def __init__(
        self,
        ttl_seconds: float = MODEL_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._lock = RLock()
        self._entries: Dict[str, ModelCacheEntry] = {}
        self._ttl = float(ttl_seconds)
        self._clock = clock

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, provider_id: str) -> Optional[ModelCacheEntry]:
        with self._lock:
            return self._entries.get(provider_id)

    def is_stale(self, entry: Optional[ModelCacheEntry]) -> bool:
        if entry is None:
            return True
        return (self._clock() - entry.fetched_at) >= self._ttl

    def get_fresh(self, provider_id: str) -> Optional[ModelCacheEntry]:
        """Return the entry only while it is inside the staleness window."""
        entry = self.get(provider_id)
        return None if self.is_stale(entry) else entry

    def put(self, provider_id: str, models: Iterable[ModelInfo]) -> ModelCacheEntry:
        entry = ModelCacheEntry(provider_id=provider_id, models=tuple(models), fetched_at=self._clock())
        with self._lock:
            self._entries[provider_id] = entry
        return entry

    def invalidate(self, provider_id: str) -> None:
        with self._lock:
            self._entries.pop(provider_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


__all__ = ["ModelCache", "ModelCacheEntry"]
