"""Keyed storage behind the order ledger."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import Generic, Iterator, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class Store(ABC, Generic[K, V]):
    """Minimal key-value contract the ledger needs from its backing storage.

    Implementations must make each single call atomic. Multi-step
    transactions are serialized by the ledger itself.
    """

    @abstractmethod
    def get(self, key: K) -> V | None:
        """Return the value for key, or None if absent."""
        ...

    @abstractmethod
    def put(self, key: K, value: V) -> None:
        ...

    @abstractmethod
    def delete(self, key: K) -> bool:
        """Remove key. Returns True if it was present."""
        ...

    @abstractmethod
    def values(self) -> list[V]:
        """Snapshot of all stored values."""
        ...

    def __contains__(self, key: object) -> bool:
        return self.get(key) is not None  # type: ignore[arg-type]


class InMemoryStore(Store[K, V]):
    """Dict-backed store guarded by a lock."""

    def __init__(self) -> None:
        self._data: dict[K, V] = {}
        self._lock = threading.Lock()

    def get(self, key: K) -> V | None:
        with self._lock:
            return self._data.get(key)

    def put(self, key: K, value: V) -> None:
        with self._lock:
            self._data[key] = value

    def delete(self, key: K) -> bool:
        with self._lock:
            return self._data.pop(key, None) is not None

    def values(self) -> list[V]:
        with self._lock:
            return list(self._data.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __iter__(self) -> Iterator[K]:
        with self._lock:
            return iter(list(self._data))
