"""Keyed object storage shared between nested test scopes.

A :class:`Context` stores objects under a key, which is either a type
or any other hashable value such as a string. A child context sees
everything its parent holds and can shadow entries without touching
the parent.
"""

from __future__ import annotations

import copy
import sys
import threading
from dataclasses import dataclass
from typing import Any, Hashable


class KeyNotFound(LookupError):
    """Raised when a key is found neither in a storage nor in its parents."""


def _describe(key: Hashable) -> str:
    if isinstance(key, type):
        return f"{key.__module__}.{key.__qualname__}"
    return str(key)


@dataclass
class _Entry:
    key: Hashable
    value: Any


class ContextStorage:
    """Storage of keyed values, falling back to an optional parent storage.

    Entries are kept newest last, so that when the storage is released
    the most recently assigned values are released first.
    """

    def __init__(self, parent: ContextStorage | ThreadSafeContextStorage | None = None) -> None:
        self._parent = parent
        self._entries: list[_Entry] = []

    def _find(self, key: Hashable) -> _Entry | None:
        return next((entry for entry in self._entries if entry.key == key), None)

    def contains(self, key: Hashable) -> bool:
        """Return whether the key is held here or by any parent."""
        if self._find(key) is not None:
            return True
        if self._parent is not None:
            return self._parent.contains(key)
        return False

    def get(self, key: Hashable) -> Any:
        """Return the value for the key, searching the parents when absent."""
        entry = self._find(key)
        if entry is not None:
            return entry.value
        if self._parent is not None:
            return self._parent.get(key)
        description = _describe(key)
        print(f'key not found: "{description}"', file=sys.stderr)
        raise KeyNotFound(description)

    def erase(self, key: Hashable) -> None:
        """Remove the key from this storage; parents are left untouched."""
        self._entries = [entry for entry in self._entries if entry.key != key]

    def assign(self, key: Hashable, value: Any) -> Any:
        """Store the value under the key, replacing an earlier one, and return it."""
        self.erase(key)
        self._entries.append(_Entry(key, value))
        return value


class ThreadSafeContextStorage:
    """Wraps a storage so that every operation runs under one re-entrant lock."""

    def __init__(self, storage: ContextStorage) -> None:
        self._storage = storage
        self._lock = threading.RLock()

    def contains(self, key: Hashable) -> bool:
        with self._lock:
            return self._storage.contains(key)

    def get(self, key: Hashable) -> Any:
        with self._lock:
            return self._storage.get(key)

    def erase(self, key: Hashable) -> None:
        with self._lock:
            self._storage.erase(key)

    def assign(self, key: Hashable, value: Any) -> Any:
        with self._lock:
            return self._storage.assign(key, value)


class ContextStorageFactory:
    """Creates plain storages."""

    def create(self, parent=None):
        """Return a new storage whose lookups fall back to ``parent``."""
        return ContextStorage(parent)


class ThreadSafeContextStorageFactory(ContextStorageFactory):
    """Creates storages that are safe to share between threads."""

    def create(self, parent=None):
        return ThreadSafeContextStorage(super().create(parent))


class Context:
    """Objects shared by steps and hooks, keyed by type or by name."""

    def __init__(
        self,
        factory: ContextStorageFactory | None = None,
        parent: Context | None = None,
    ) -> None:
        if factory is None:
            factory = parent._factory if parent is not None else ContextStorageFactory()
        self._factory = factory
        self._storage = factory.create(parent._storage if parent is not None else None)

    def child(self) -> Context:
        """Return a nested context that sees, and may shadow, this one's entries."""
        return Context(self._factory, parent=self)

    def set_shared(self, value: Any, key: Hashable = None) -> None:
        """Store the object itself, keyed by its type unless a key is given."""
        self._storage.assign(type(value) if key is None else key, value)

    def emplace(self, cls: type, *args: Any, **kwargs: Any) -> Any:
        """Construct ``cls`` and store it under ``cls``."""
        return self.emplace_at(cls, cls, *args, **kwargs)

    def emplace_as(self, key_type: type, cls: type, *args: Any, **kwargs: Any) -> Any:
        """Construct ``cls`` and store it under ``key_type``."""
        return self.emplace_at(key_type, cls, *args, **kwargs)

    def emplace_at(self, key: Hashable, cls: type, *args: Any, **kwargs: Any) -> Any:
        """Construct ``cls`` and store it under ``key``."""
        return self._storage.assign(key, cls(*args, **kwargs))

    def insert_ref(self, value: Any) -> None:
        """Store the object itself under its own type."""
        self.insert_ref_at(type(value), value)

    def insert_ref_as(self, key_type: type, value: Any) -> None:
        """Store the object itself under ``key_type``."""
        self.insert_ref_at(key_type, value)

    def insert_ref_at(self, key: Hashable, value: Any) -> None:
        """Store the object itself under ``key``; the caller keeps ownership."""
        self._storage.assign(key, value)

    def insert(self, value: Any) -> None:
        """Store a copy of the object under its own type."""
        self.insert_at(type(value), value)

    def insert_as(self, key_type: type, value: Any) -> None:
        """Store a copy of the object under ``key_type``."""
        self.insert_at(key_type, value)

    def insert_at(self, key: Hashable, value: Any) -> None:
        """Store a copy of the object under ``key``."""
        self._storage.assign(key, copy.copy(value))

    def contains(self, key: Hashable) -> bool:
        """Return whether the key is held here or by an enclosing context."""
        return self._storage.contains(key)

    def clear(self, key: Hashable) -> None:
        """Remove the key from this context only."""
        self._storage.erase(key)

    def get(self, key: Hashable) -> Any:
        """Return the object stored under the key; raise KeyNotFound if absent."""
        return self._storage.get(key)