"""Bencode core: canonical length, encode, and recursive-descent decode.

Wire grammar:

    value   ::= integer | string | list | dict
    integer ::= 'i' ('0' | '-'? [1-9][0-9]*) 'e'
    string  ::= ('0' | [1-9][0-9]*) ':' <that many raw bytes>
    list    ::= 'l' value* 'e'
    dict    ::= 'd' (string value)* 'e'

There are no separators between siblings; each value's own framing tells
the decoder where it ends.  Encoding is canonical: integers in shortest
decimal form, dictionary keys in ascending byte order, so equal trees
always produce identical bytes.

The decoder is a set of plain functions threading a cursor offset.  Each
sub-decoder returns (value, offset just past the value).  Nothing here
logs or keeps state between calls.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Iterator, List as _List, Tuple, Union

from ._constants import (
    DELIMITER,
    DIGITS,
    END,
    INT64_MAX,
    INT64_MIN,
    MAX_DEPTH,
    SIGIL_DICT,
    SIGIL_INTEGER,
    SIGIL_LIST,
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
from ._text import Buffer, as_bytes, ascii_bytes_to_str, describe_byte, find_first_not_of
from ._values import ByteString, Dictionary, Integer, List, Value

_INT_RE = re.compile(rb"0|-?[1-9][0-9]*")
_UINT_RE = re.compile(rb"0|[1-9][0-9]*")

# len(str(INT64_MIN)) without the sign.  Longer digit runs cannot fit.
_INT64_DIGITS = 19


# ── Tree walk ────────────────────────────────────────────────

class _Close:
    """Stack marker: emit the container's closing 'e'."""

    __slots__ = ("ident",)

    def __init__(self, ident: int) -> None:
        self.ident = ident


def _flatten(val: Value) -> Iterator[Union[Integer, ByteString, bytes]]:
    """Yield a tree in wire order: scalars, dict keys as ByteString, framing bytes.

    Uses an explicit stack so arbitrarily deep trees do not hit the
    interpreter's recursion limit.  A container that contains itself
    fails with ERR_TYPE.
    """
    stack: _List[Any] = [val]
    open_ids = set()
    while stack:
        item = stack.pop()
        if isinstance(item, _Close):
            open_ids.discard(item.ident)
            yield b"e"
        elif isinstance(item, (Integer, ByteString)):
            yield item
        elif isinstance(item, (List, Dictionary)):
            ident = id(item)
            if ident in open_ids:
                raise BencodeError(ERR_TYPE, "value tree contains a cycle")
            open_ids.add(ident)
            stack.append(_Close(ident))
            if isinstance(item, List):
                yield b"l"
                stack.extend(reversed(item))
            else:
                yield b"d"
                for k, v in reversed(list(item.sorted_items())):
                    stack.append(v)
                    stack.append(ByteString(k))
        else:
            raise BencodeError(ERR_TYPE, "not a Bencode value: {}".format(type(item).__name__))


# ── Canonical length ─────────────────────────────────────────

def _string_length(n: int) -> int:
    """Encoded length of a byte string whose payload is n bytes."""
    return len(str(n)) + 1 + n


def byte_length(val: Value) -> int:
    """Exact length of encode(val), computed without encoding."""
    total = 0
    for item in _flatten(val):
        if isinstance(item, Integer):
            total += len(str(item.value)) + 2
        elif isinstance(item, ByteString):
            total += _string_length(len(item))
        else:
            total += 1
    return total


# ── Encode ───────────────────────────────────────────────────

def encode(val: Value) -> bytes:
    """Encode a value tree into canonical Bencode bytes.

    Nesting depth is unbounded here; MAX_DEPTH only limits the decoder.
    """
    parts: _List[bytes] = []
    for item in _flatten(val):
        if isinstance(item, Integer):
            parts.append(b"i%de" % item.value)
        elif isinstance(item, ByteString):
            raw = item.value
            parts.append(b"%d:" % len(raw))
            parts.append(raw)
        else:
            parts.append(item)
    return b"".join(parts)


# ── Decode ───────────────────────────────────────────────────

def _prepare(buf: Buffer) -> bytes:
    try:
        return as_bytes(buf)
    except UnicodeEncodeError:
        raise BencodeError(ERR_TYPE, "str input contains characters above U+00FF")


def _check_args(buf: bytes, off: int) -> None:
    if not isinstance(buf, bytes):
        raise BencodeError(ERR_TYPE, "buffer must be bytes-like or str, got {}".format(type(buf).__name__))
    if len(buf) == 0:
        raise BencodeError(ERR_EMPTY_INPUT, "empty input")
    if off < 0 or off >= len(buf):
        raise BencodeError(ERR_OUT_OF_RANGE, "start offset outside buffer of {} bytes".format(len(buf)), off)


def _decode_integer(buf: bytes, off: int) -> Tuple[Integer, int]:
    end = buf.find(b"e", off + 1)
    if end == -1:
        raise BencodeError(ERR_UNTERMINATED_INTEGER, "integer has no closing 'e'", off)
    text = buf[off + 1:end]
    if not _INT_RE.fullmatch(text):
        raise BencodeError(ERR_INVALID_INTEGER_FORMAT, "invalid integer {!r}".format(ascii_bytes_to_str(text)), off + 1)
    # Bound the digit count before int() so a huge run cannot cost quadratic time.
    if len(text.lstrip(b"-")) > _INT64_DIGITS:
        raise BencodeError(ERR_INTEGER_OVERFLOW, "integer outside int64 range", off + 1)
    n = int(text)
    if n < INT64_MIN or n > INT64_MAX:
        raise BencodeError(ERR_INTEGER_OVERFLOW, "integer outside int64 range", off + 1)
    return Integer(n), end + 1


def _decode_string(buf: bytes, off: int) -> Tuple[ByteString, int]:
    split = find_first_not_of(buf, DIGITS, off)
    if split == -1:
        raise BencodeError(ERR_MISSING_DELIMITER, "input ends inside string length", len(buf))
    if buf[split] != DELIMITER:
        raise BencodeError(ERR_MISSING_DELIMITER,
                           "expected ':' after string length, found {}".format(describe_byte(buf[split])),
                           split)
    prefix = buf[off:split]
    if not _UINT_RE.fullmatch(prefix):
        raise BencodeError(ERR_INVALID_INTEGER_FORMAT, "invalid string length {!r}".format(ascii_bytes_to_str(prefix)), off)
    start = split + 1
    # A prefix with more digits than the buffer length has can never fit.
    if len(prefix) > len(str(len(buf))):
        raise BencodeError(ERR_TRUNCATED_PAYLOAD, "string length exceeds input", start)
    n = int(prefix)
    if start + n > len(buf):
        raise BencodeError(ERR_TRUNCATED_PAYLOAD,
                           "string of {} bytes needs {} more".format(n, start + n - len(buf)),
                           start)
    return ByteString(buf[start:start + n]), start + n


def _enter(off: int, depth: int, max_depth: int) -> None:
    if depth + 1 > max_depth:
        raise BencodeError(ERR_NESTING_TOO_DEEP, "nesting exceeds max depth {}".format(max_depth), off)


def _decode_list(buf: bytes, off: int, depth: int, strict: bool, max_depth: int) -> Tuple[List, int]:
    _enter(off, depth, max_depth)
    start = off
    off += 1
    n = len(buf)
    items = []
    while off < n and buf[off] != END:
        item, off = _decode_one(buf, off, depth + 1, strict, max_depth)
        items.append(item)
    if off >= n:
        raise BencodeError(ERR_UNTERMINATED_LIST, "list has no closing 'e'", start)
    return List(items), off + 1


def _decode_dict(buf: bytes, off: int, depth: int, strict: bool, max_depth: int) -> Tuple[Dictionary, int]:
    _enter(off, depth, max_depth)
    start = off
    off += 1
    n = len(buf)
    d = Dictionary()
    prev_key = None
    while off < n and buf[off] != END:
        key_off = off
        key, off = _decode_one(buf, off, depth + 1, strict, max_depth)
        if not isinstance(key, ByteString):
            raise BencodeError(ERR_INVALID_KEY_TYPE,
                               "dictionary key must be a string, got {}".format(type(key).__name__),
                               key_off)
        kb = key.value

        # Permissive mode takes keys in any order, last duplicate wins.
        # Iteration and encoding re-sort regardless.
        if strict and prev_key is not None:
            if kb == prev_key:
                raise BencodeError(ERR_MALFORMED_DICTIONARY, "duplicate key {!r}".format(ascii_bytes_to_str(kb)), key_off)
            if kb < prev_key:
                raise BencodeError(ERR_MALFORMED_DICTIONARY, "key {!r} out of order".format(ascii_bytes_to_str(kb)), key_off)
        prev_key = kb

        if off >= n:
            raise BencodeError(ERR_UNTERMINATED_DICTIONARY, "dictionary ends after key", start)
        val, off = _decode_one(buf, off, depth + 1, strict, max_depth)
        d[kb] = val
    if off >= n:
        raise BencodeError(ERR_UNTERMINATED_DICTIONARY, "dictionary has no closing 'e'", start)
    return d, off + 1


def _decode_one(buf: bytes, off: int, depth: int, strict: bool, max_depth: int) -> Tuple[Value, int]:
    """Decode the value starting at off.  Caller guarantees off < len(buf)."""
    c = buf[off]
    if c == SIGIL_INTEGER:
        return _decode_integer(buf, off)
    if c == SIGIL_LIST:
        return _decode_list(buf, off, depth, strict, max_depth)
    if c == SIGIL_DICT:
        return _decode_dict(buf, off, depth, strict, max_depth)
    if c in DIGITS:
        return _decode_string(buf, off)
    raise BencodeError(ERR_UNEXPECTED_CHARACTER, "unexpected {}".format(describe_byte(c)), off)


# ── Public decode entry points ───────────────────────────────

def decode_at(buf: Buffer, offset: int = 0, *, strict: bool = False,
              max_depth: int = MAX_DEPTH) -> Tuple[Value, int]:
    """Decode one value at offset.  Returns (value, bytes_consumed).

    Bytes after the value are left alone; callers walking a buffer of
    concatenated values advance by bytes_consumed.
    """
    data = _prepare(buf)
    _check_args(data, offset)
    val, end = _decode_one(data, offset, 0, strict, max_depth)
    return val, end - offset


def decode(buf: Buffer, *, strict: bool = False, max_depth: int = MAX_DEPTH) -> Value:
    """Decode a whole buffer into a value tree.

    strict=True additionally rejects trailing bytes after the root value and
    dictionaries whose keys are duplicated or not in ascending order, i.e.
    it accepts only input that encode() would have produced.

    The decoder recurses once per container level.  max_depth values far
    above MAX_DEPTH (roughly 400 under the default recursion limit) can
    raise RecursionError before ERR_NESTING_TOO_DEEP is reached.
    """
    data = _prepare(buf)
    _check_args(data, 0)
    val, end = _decode_one(data, 0, 0, strict, max_depth)
    if strict and end != len(data):
        raise BencodeError(ERR_TRAILING_DATA, "{} bytes after root value".format(len(data) - end), end)
    return val


def _typed(sigil_ok: Callable[[int], bool], kind: str):
    def entry(buf: Buffer, offset: int = 0, *, strict: bool = False,
              max_depth: int = MAX_DEPTH) -> Tuple[Any, int]:
        data = _prepare(buf)
        _check_args(data, offset)
        c = data[offset]
        if not sigil_ok(c):
            raise BencodeError(ERR_UNEXPECTED_CHARACTER,
                               "expected {}, found {}".format(kind, describe_byte(c)), offset)
        val, end = _decode_one(data, offset, 0, strict, max_depth)
        return val, end - offset
    entry.__name__ = "decode_" + kind
    entry.__doc__ = "Decode a {} at offset.  Returns (value, bytes_consumed).".format(kind)
    return entry


decode_int = _typed(lambda c: c == SIGIL_INTEGER, "int")
decode_str = _typed(lambda c: c in DIGITS, "str")
decode_list = _typed(lambda c: c == SIGIL_LIST, "list")
decode_dict = _typed(lambda c: c == SIGIL_DICT, "dict")
