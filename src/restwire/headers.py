"""Ordered, case-insensitive multi-map of HTTP headers.

HeaderCollection keeps the insertion order of distinct names, remembers
the casing a name was first seen with, and stores one or more values per
name. Merging two collections concatenates values without deduplication.

Example:
    >>> headers = HeaderCollection({"Accept": "text/plain"})
    >>> headers.add("accept", "application/json")
    >>> headers.get_values("ACCEPT")
    ['text/plain', 'application/json']
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any, Union

import httpx

HeaderValues = Union[str, Sequence[str]]
HeaderSource = Union[
    "HeaderCollection",
    Mapping[str, HeaderValues],
    Iterable[tuple[str, HeaderValues]],
    None,
]


def _as_values(value: HeaderValues) -> list[str]:
    if isinstance(value, (str, bytes)):
        return [value.decode("latin-1") if isinstance(value, bytes) else value]
    return [str(item) for item in value]


class HeaderCollection:
    """Ordered multi-map from header name to one or more string values.

    Accepts another HeaderCollection, an ``httpx.Headers`` instance, a
    mapping of name to value(s), or an iterable of ``(name, value)`` pairs.
    Repeated names in the source are accumulated in order.
    """

    __slots__ = ("_names", "_values")

    def __init__(self, source: HeaderSource | Any = None) -> None:
        self._names: dict[str, str] = {}
        self._values: dict[str, list[str]] = {}
        if source is None:
            return
        if isinstance(source, HeaderCollection):
            for name, values in source.items():
                self.extend(name, values)
            return
        if isinstance(source, httpx.Headers):
            # multi_items() lower-cases names; raw keeps the casing seen on the wire
            for raw_name, raw_value in source.raw:
                self.add(raw_name.decode(source.encoding), raw_value.decode(source.encoding))
            return
        pairs = source.items() if isinstance(source, Mapping) else source
        for name, value in pairs:
            self.extend(name, _as_values(value))

    def add(self, name: str, value: str) -> None:
        """Append a single value for ``name``."""
        key = name.lower()
        if key not in self._names:
            self._names[key] = name
            self._values[key] = []
        self._values[key].append(value)

    def extend(self, name: str, values: Iterable[str]) -> None:
        """Append several values for ``name``, keeping their order."""
        for value in values:
            self.add(name, value)

    def set(self, name: str, value: HeaderValues) -> None:
        """Replace every value of ``name``; a new name goes to the end."""
        key = name.lower()
        if key not in self._names:
            self._names[key] = name
        self._values[key] = _as_values(value)

    def remove(self, name: str) -> None:
        """Drop ``name`` and all its values; unknown names are ignored."""
        key = name.lower()
        self._names.pop(key, None)
        self._values.pop(key, None)

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the first value of ``name`` or ``default``."""
        values = self._values.get(name.lower())
        if not values:
            return default
        return values[0]

    def get_values(self, name: str) -> list[str]:
        """Return every value of ``name`` (empty list when absent)."""
        return list(self._values.get(name.lower(), ()))

    def items(self) -> Iterator[tuple[str, list[str]]]:
        """Yield ``(name, values)`` in insertion order of distinct names."""
        for key, name in self._names.items():
            yield name, list(self._values[key])

    def multi_items(self) -> list[tuple[str, str]]:
        """Flatten to ``(name, value)`` pairs, one per value."""
        return [(name, value) for name, values in self.items() for value in values]

    def partition(self, names: Iterable[str]) -> tuple["HeaderCollection", "HeaderCollection"]:
        """Split into ``(selected, remaining)`` by case-insensitive name membership."""
        wanted = {name.lower() for name in names}
        selected = HeaderCollection()
        remaining = HeaderCollection()
        for name, values in self.items():
            target = selected if name.lower() in wanted else remaining
            target.extend(name, values)
        return selected, remaining

    def merge(self, other: HeaderSource | Any) -> "HeaderCollection":
        """Return a new collection holding this one's headers followed by ``other``'s.

        Values of a name present in both are concatenated, this collection's
        first. Nothing is deduplicated and neither operand is modified.
        """
        merged = HeaderCollection(self)
        for name, values in HeaderCollection(other).items():
            merged.extend(name, values)
        return merged

    def __add__(self, other: object) -> "HeaderCollection":
        if other is None:
            return HeaderCollection(self)
        return self.merge(other)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._names

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._names.values()))

    def __len__(self) -> int:
        return len(self._names)

    def __bool__(self) -> bool:
        return bool(self._names)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HeaderCollection):
            return NotImplemented
        return [(n.lower(), v) for n, v in self.items()] == [
            (n.lower(), v) for n, v in other.items()
        ]

    def __repr__(self) -> str:
        return f"HeaderCollection({self.multi_items()!r})"


__all__ = ["HeaderCollection", "HeaderSource", "HeaderValues"]
