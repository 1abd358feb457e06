"""Keyed query cache with explicit invalidation."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Hashable

QueryKey = tuple[Hashable, ...]


@dataclass
class CacheEntry:
    value: Any
    stale: bool = False


@dataclass
class _Inflight:
    """Per-key load slot, kept only while some caller is fetching the key."""

    lock: threading.Lock = field(default_factory=threading.Lock)
    waiters: int = 0
    generation: int = 0


class QueryCache:
    """Hold query results keyed by ``(operation, *params)``.

    At most one loader runs per key; concurrent readers of the same key wait
    for it and share its result. Entries invalidated while their loader is
    running are stored stale, so the next read fetches again.
    """

    def __init__(self):
        self._entries: dict[QueryKey, CacheEntry] = {}
        self._inflight: dict[QueryKey, _Inflight] = {}
        self._lock = threading.Lock()

    def fetch(self, key: QueryKey, loader: Callable[[], Any]) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and not entry.stale:
                return entry.value
            slot = self._inflight.setdefault(key, _Inflight())
            slot.waiters += 1

        try:
            with slot.lock:
                with self._lock:
                    entry = self._entries.get(key)
                    if entry is not None and not entry.stale:
                        return entry.value
                    generation = slot.generation
                value = loader()
                with self._lock:
                    stale = slot.generation != generation
                    self._entries[key] = CacheEntry(value=value, stale=stale)
                return value
        finally:
            with self._lock:
                slot.waiters -= 1
                if not slot.waiters:
                    self._inflight.pop(key, None)

    def invalidate(self, prefix: QueryKey = ()) -> int:
        """Mark every entry whose key starts with ``prefix`` stale.

        Returns the number of entries affected.
        """
        size = len(prefix)
        count = 0
        with self._lock:
            for key, entry in self._entries.items():
                if key[:size] == prefix:
                    entry.stale = True
                    count += 1
            for key, slot in self._inflight.items():
                if key[:size] == prefix:
                    slot.generation += 1
        return count

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            for slot in self._inflight.values():
                slot.generation += 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
