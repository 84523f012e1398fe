"""Insertion-ordered multimap used for commit/tag metadata and ref listings.

Setting a key that is already present does not overwrite it: the stored value
becomes a list holding every value in the order it was set. This is what lets
a merge commit keep several ``parent`` lines.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple


class OrderedMap:
    """String-keyed mapping that remembers insertion order and accumulates duplicates."""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}
        self._keys: List[str] = []

    def set(self, key: str, value: Any) -> None:
        """Insert key at the end, or accumulate onto the existing value."""
        if key not in self._data:
            self._keys.append(key)
            self._data[key] = list(value) if isinstance(value, list) else value
            return
        existing = self._data[key]
        merged = list(existing) if isinstance(existing, list) else [existing]
        # a new list each time; values handed out earlier stay as they were
        merged += value if isinstance(value, list) else [value]
        self._data[key] = merged

    def replace(self, key: str, value: Any) -> None:
        """Overwrite key's value; a new key is appended, an existing one keeps its position."""
        if key not in self._data:
            self._keys.append(key)
        self._data[key] = value

    def get(self, key: str, default: Optional[Any] = None) -> Any:
        return self._data.get(key, default)

    def values_of(self, key: str) -> List[Any]:
        """Every value stored under key, as a list ([] when absent)."""
        if key not in self._data:
            return []
        value = self._data[key]
        return list(value) if isinstance(value, list) else [value]

    def delete(self, key: str) -> None:
        if key in self._data:
            del self._data[key]
            self._keys.remove(key)

    def keys(self) -> List[str]:
        return list(self._keys)

    def items(self) -> Iterator[Tuple[str, Any]]:
        for key in self._keys:
            yield key, self._data[key]

    def for_each(self, fn: Callable[[str, Any], bool]) -> None:
        """Call fn(key, value) in insertion order; stop as soon as fn returns False."""
        for key in self._keys:
            if not fn(key, self._data[key]):
                break

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._keys))

    def __len__(self) -> int:
        return len(self._keys)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OrderedMap):
            return NotImplemented
        return self._keys == other._keys and self._data == other._data

    def __repr__(self) -> str:
        inner = ", ".join(f"{k!r}: {self._data[k]!r}" for k in self._keys)
        return f"OrderedMap({{{inner}}})"
