"""Editable child-record lists for the recipe form.

Every entry gets a client-side key from a per-list counter. Keys identify an
entry for the lifetime of the list and are never handed out twice, so they
stay stable while other entries are added or removed around them.
"""
from __future__ import annotations
import itertools
from dataclasses import dataclass
from typing import Generic, Iterable, Iterator, Optional, Protocol, TypeVar

T = TypeVar("T")


class HasOrdinal(Protocol):
    ordinal: int


S = TypeVar("S", bound=HasOrdinal)


@dataclass
class Entry(Generic[T]):
    key: int
    value: T


class FieldArray(Generic[T]):
    """Keyed entries shown in insertion order."""

    def __init__(self, values: Iterable[T] = ()):
        self._keys = itertools.count()
        self._entries: list[Entry[T]] = []
        for value in values:
            self._entries.append(self._new_entry(value))

    def _new_entry(self, value: T) -> Entry[T]:
        return Entry(key=next(self._keys), value=value)

    def append(self, value: T) -> Entry[T]:
        entry = self._new_entry(value)
        self._entries.append(entry)
        return entry

    def remove(self, index: int) -> T:
        entries = self.entries()
        if index < 0 or index >= len(entries):
            raise IndexError(f"No entry at position {index} (list has {len(entries)}).")
        target = entries[index]
        self._entries.remove(target)
        return target.value

    def find(self, key: int) -> Optional[Entry[T]]:
        return next((e for e in self._entries if e.key == key), None)

    def entries(self) -> list[Entry[T]]:
        return list(self._entries)

    def values(self) -> list[T]:
        return [e.value for e in self.entries()]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[T]:
        return iter(self.values())


class OrdinalList(FieldArray[S]):
    """Entries shown by ascending ordinal, whatever order they were stored in.

    Loaded values are renumbered to 0..n-1 by their ordinal rank, new values
    take ``ordinal = len(self)``, and removals renumber what is left, so the
    ordinals always form a contiguous zero-based sequence.
    """

    def __init__(self, values: Iterable[S] = ()):
        super().__init__(sorted(values, key=lambda v: v.ordinal))
        self._renumber()

    def append(self, value: S) -> Entry[S]:
        value.ordinal = len(self)
        return super().append(value)

    def remove_at(self, position: int) -> S:
        removed = self.remove(position)
        self._renumber()
        return removed

    def remove_last(self) -> S:
        if not self._entries:
            raise IndexError("Cannot remove from an empty list.")
        return self.remove(len(self) - 1)

    def entries(self) -> list[Entry[S]]:
        return sorted(self._entries, key=lambda e: e.value.ordinal)

    def ordinals(self) -> list[int]:
        return [e.value.ordinal for e in self.entries()]

    def _renumber(self) -> None:
        for ordinal, entry in enumerate(self.entries()):
            entry.value.ordinal = ordinal
