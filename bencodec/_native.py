"""Native Python adapter.

Converts between plain Python objects and the Bencode value model.

Type mapping (to_value):
    int            → Integer      (bool rejected, int64 range-checked)
    bytes / str    → ByteString   (str is encoded as UTF-8)
    list / tuple   → List
    dict           → Dictionary   (keys must be bytes or str)
    Bencode value  → passed through unchanged
    anything else  → ERR_TYPE     (float, None, set, ...)

to_value never guesses.  Floats in particular have no Bencode form; callers
that need them should format to a string themselves first.
"""

from __future__ import annotations

from typing import Any, Dict

from ._errors import ERR_TYPE, BencodeError
from ._values import VALUE_TYPES, ByteString, Dictionary, Integer, List, Value, key_bytes


def to_value(obj: Any) -> Value:
    """Build a Bencode value tree from native Python objects."""
    if isinstance(obj, VALUE_TYPES):
        return obj

    # bool before int: isinstance(True, int) is True.
    if isinstance(obj, bool):
        raise BencodeError(ERR_TYPE, "bool has no Bencode form; use 0/1 explicitly")

    if isinstance(obj, int):
        return Integer(obj)

    if isinstance(obj, (bytes, bytearray, memoryview, str)):
        return ByteString(obj)

    if isinstance(obj, (list, tuple)):
        return List(to_value(item) for item in obj)

    if isinstance(obj, dict):
        out = Dictionary()
        for k, v in obj.items():
            kb = key_bytes(k)
            if kb in out:
                # "a" and b"a" collapse to the same key.
                raise BencodeError(ERR_TYPE, "key {!r} given twice".format(kb))
            out[kb] = to_value(v)
        return out

    raise BencodeError(ERR_TYPE, "unsupported type: {}".format(type(obj).__name__))


def to_native(val: Value) -> Any:
    """Convert a value tree to plain Python: int, bytes, list, dict.

    Dictionaries come back with bytes keys inserted in ascending order, so
    the result re-encodes to the same canonical bytes.
    """
    if isinstance(val, Integer):
        return val.value
    if isinstance(val, ByteString):
        return val.value
    if isinstance(val, List):
        return [to_native(item) for item in val]
    if isinstance(val, Dictionary):
        out: Dict[bytes, Any] = {}
        for k, v in val.sorted_items():
            out[k] = to_native(v)
        return out
    raise BencodeError(ERR_TYPE, "not a Bencode value: {}".format(type(val).__name__))
