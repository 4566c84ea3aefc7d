"""Bencode value model.

The four value kinds form a closed union:

    Integer     — signed 64-bit integer
    ByteString  — raw byte sequence (no implied text encoding)
    List        — ordered sequence of values
    Dictionary  — byte-string keys to values, always iterated in key order

There is no shared base class.  Code that needs per-kind behaviour
(length, encoding, conversion) dispatches with isinstance over
VALUE_TYPES and raises ERR_TYPE for anything else.

Integer and ByteString are immutable and hashable.  List and Dictionary
implement the standard mutable container protocols so that callers can
build trees directly; the codec itself never mutates a tree it did not
create.
"""

from __future__ import annotations

import functools
from collections.abc import Iterable, Mapping, MutableMapping, MutableSequence
from typing import Any, Dict, Iterator, Tuple, Union

from ._constants import INT64_MAX, INT64_MIN
from ._errors import ERR_INTEGER_OVERFLOW, ERR_TYPE, BencodeError


@functools.total_ordering
class Integer:
    """A Bencode integer, range-checked against int64."""

    __slots__ = ("_value",)

    def __init__(self, value: int = 0) -> None:
        # bool is a subclass of int; True would otherwise slip in as 1.
        if isinstance(value, bool) or not isinstance(value, int):
            raise BencodeError(ERR_TYPE, "Integer requires int, got {}".format(type(value).__name__))
        if value < INT64_MIN or value > INT64_MAX:
            raise BencodeError(ERR_INTEGER_OVERFLOW, "integer {} outside int64 range".format(value))
        self._value = value

    @property
    def value(self) -> int:
        return self._value

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Integer):
            return self._value == other._value
        return NotImplemented

    def __lt__(self, other: "Integer") -> bool:
        if isinstance(other, Integer):
            return self._value < other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash((Integer, self._value))

    def __repr__(self) -> str:
        return "Integer({})".format(self._value)

    def __str__(self) -> str:
        return str(self._value)


@functools.total_ordering
class ByteString:
    """A Bencode byte string.

    Accepts bytes-like input, or str which is stored as its UTF-8 encoding.
    Comparison is plain bytes comparison, i.e. unsigned-octet memcmp with
    the shorter string first on a common prefix.
    """

    __slots__ = ("_value",)

    def __init__(self, value: Union[bytes, bytearray, memoryview, str] = b"") -> None:
        if isinstance(value, str):
            value = value.encode("utf-8")
        elif isinstance(value, (bytearray, memoryview)):
            value = bytes(value)
        elif not isinstance(value, bytes):
            raise BencodeError(ERR_TYPE, "ByteString requires bytes or str, got {}".format(type(value).__name__))
        self._value = value

    @property
    def value(self) -> bytes:
        return self._value

    def decode(self, encoding: str = "utf-8", errors: str = "strict") -> str:
        return self._value.decode(encoding, errors)

    def __bytes__(self) -> bytes:
        return self._value

    def __len__(self) -> int:
        return len(self._value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ByteString):
            return self._value == other._value
        return NotImplemented

    def __lt__(self, other: "ByteString") -> bool:
        if isinstance(other, ByteString):
            return self._value < other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash((ByteString, self._value))

    def __repr__(self) -> str:
        return "ByteString({!r})".format(self._value)


class List(MutableSequence):
    """An ordered sequence of Bencode values."""

    __slots__ = ("_items",)

    def __init__(self, items: Iterable = ()) -> None:
        self._items = [require_value(item) for item in items]

    def __getitem__(self, index):
        if isinstance(index, slice):
            return List(self._items[index])
        return self._items[index]

    def __setitem__(self, index, item) -> None:
        if isinstance(index, slice):
            self._items[index] = [require_value(i) for i in item]
        else:
            self._items[index] = require_value(item)

    def __delitem__(self, index) -> None:
        del self._items[index]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(self._items)

    def insert(self, index: int, item: Any) -> None:
        self._items.insert(index, require_value(item))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, List):
            return self._items == other._items
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return "List({!r})".format(self._items)

    def copy(self) -> "List":
        """Deep copy.  Scalars are immutable and shared."""
        return List(deep_copy(item) for item in self._items)


class Dictionary(MutableMapping):
    """Byte-string keyed mapping, iterated in ascending key order.

    Keys are stored as bytes.  Lookups and inserts accept bytes, str
    (UTF-8) or ByteString.  Inserting an existing key replaces its value.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Union[Mapping, Iterable, None] = None) -> None:
        self._entries: Dict[bytes, Any] = {}
        if entries is None:
            return
        pairs = entries.items() if isinstance(entries, Mapping) else entries
        for k, v in pairs:
            self[k] = v

    def __getitem__(self, key) -> Any:
        return self._entries[self._lookup_key(key)]

    def __setitem__(self, key, value) -> None:
        self._entries[key_bytes(key)] = require_value(value)

    def __delitem__(self, key) -> None:
        del self._entries[self._lookup_key(key)]

    @staticmethod
    def _lookup_key(key) -> bytes:
        # Unusable keys are simply absent, so get/pop/setdefault see KeyError.
        try:
            return key_bytes(key)
        except BencodeError:
            raise KeyError(key) from None

    def __contains__(self, key: object) -> bool:
        try:
            return key_bytes(key) in self._entries
        except BencodeError:
            return False

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[bytes]:
        # bytes ordering is unsigned-octet memcmp, which is the canonical order.
        return iter(sorted(self._entries))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Dictionary):
            return self._entries == other._entries
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        inner = ", ".join("{!r}: {!r}".format(k, v) for k, v in self.items())
        return "Dictionary({" + inner + "})"

    def sorted_items(self) -> Iterator[Tuple[bytes, Any]]:
        for k in sorted(self._entries):
            yield k, self._entries[k]

    def copy(self) -> "Dictionary":
        """Deep copy.  Scalars are immutable and shared."""
        return Dictionary((k, deep_copy(v)) for k, v in self.sorted_items())


Value = Union[Integer, ByteString, List, Dictionary]

VALUE_TYPES = (Integer, ByteString, List, Dictionary)


def is_value(obj: object) -> bool:
    return isinstance(obj, VALUE_TYPES)


def require_value(obj: Any) -> Value:
    """Return obj unchanged if it is a Bencode value, else raise ERR_TYPE."""
    if not isinstance(obj, VALUE_TYPES):
        raise BencodeError(ERR_TYPE, "not a Bencode value: {}".format(type(obj).__name__))
    return obj


def key_bytes(key: Any) -> bytes:
    """Normalize a dictionary key to bytes."""
    if isinstance(key, bytes):
        return key
    if isinstance(key, ByteString):
        return key.value
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, (bytearray, memoryview)):
        return bytes(key)
    raise BencodeError(ERR_TYPE, "dictionary key must be a byte string, got {}".format(type(key).__name__))


def deep_copy(val: Value) -> Value:
    if isinstance(val, (List, Dictionary)):
        return val.copy()
    return require_value(val)
