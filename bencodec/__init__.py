"""bencodec — canonical Bencode codec.

Decode Bencode bytes (the BitTorrent metainfo format) into a typed value
tree, and encode trees back into canonical bytes.

Quick start:
    >>> from bencodec import decode, encode, to_value, ByteString, Dictionary, Integer
    >>> decode(b"d3:bar4:spam3:fooi42ee")
    Dictionary({b'bar': ByteString(b'spam'), b'foo': Integer(42)})
    >>> encode(Dictionary({"foo": Integer(42), "bar": ByteString("spam")}))
    b'd3:bar4:spam3:fooi42ee'
    >>> encode(to_value({"foo": 42, "bar": "spam"}))
    b'd3:bar4:spam3:fooi42ee'

Dictionary keys are always emitted in ascending byte order, so equal trees
encode to identical bytes regardless of how they were built.
"""

from __future__ import annotations

from ._constants import INT64_MAX, INT64_MIN, MAX_DEPTH
from ._core import (
    byte_length,
    decode,
    decode_at,
    decode_dict,
    decode_int,
    decode_list,
    decode_str,
    encode,
)
from ._errors import (
    ERR_EMPTY_INPUT,
    ERR_INTEGER_OVERFLOW,
    ERR_INVALID_INTEGER_FORMAT,
    ERR_INVALID_KEY_TYPE,
    ERR_MALFORMED_DICTIONARY,
    ERR_MISSING_DELIMITER,
    ERR_NESTING_TOO_DEEP,
    ERR_OUT_OF_RANGE,
    ERR_TRAILING_DATA,
    ERR_TRUNCATED_PAYLOAD,
    ERR_TYPE,
    ERR_UNEXPECTED_CHARACTER,
    ERR_UNTERMINATED_DICTIONARY,
    ERR_UNTERMINATED_INTEGER,
    ERR_UNTERMINATED_LIST,
    BencodeError,
)
from ._loader import decode_file
from ._native import to_native, to_value
from ._values import ByteString, Dictionary, Integer, List, Value, is_value

__version__ = "1.0.0"

__all__ = [
    # Codec
    "decode",
    "decode_at",
    "decode_int",
    "decode_str",
    "decode_list",
    "decode_dict",
    "decode_file",
    "encode",
    "byte_length",
    # Value model
    "Integer",
    "ByteString",
    "List",
    "Dictionary",
    "Value",
    "is_value",
    # Native adapter
    "to_value",
    "to_native",
    # Limits
    "INT64_MIN",
    "INT64_MAX",
    "MAX_DEPTH",
    # Exception
    "BencodeError",
    # Error codes
    "ERR_EMPTY_INPUT",
    "ERR_OUT_OF_RANGE",
    "ERR_UNEXPECTED_CHARACTER",
    "ERR_UNTERMINATED_INTEGER",
    "ERR_INVALID_INTEGER_FORMAT",
    "ERR_INTEGER_OVERFLOW",
    "ERR_MISSING_DELIMITER",
    "ERR_TRUNCATED_PAYLOAD",
    "ERR_UNTERMINATED_LIST",
    "ERR_UNTERMINATED_DICTIONARY",
    "ERR_INVALID_KEY_TYPE",
    "ERR_MALFORMED_DICTIONARY",
    "ERR_NESTING_TOO_DEEP",
    "ERR_TRAILING_DATA",
    "ERR_TYPE",
]
