"""Byte/text helpers used by the decoder.

Bencode framing is pure ASCII, but payloads are arbitrary bytes.  The
conversions here map each byte to exactly one character (and back), so
offsets computed on one side are valid on the other.
"""

from __future__ import annotations

from typing import Union

Buffer = Union[bytes, bytearray, memoryview, str]


def ascii_bytes_to_str(b: bytes) -> str:
    """Decode bytes one char per byte.  Never fails."""
    return bytes(b).decode("latin-1")


def str_to_ascii_bytes(s: str) -> bytes:
    """Inverse of ascii_bytes_to_str.

    Raises UnicodeEncodeError for characters above U+00FF, which have no
    single-byte form.
    """
    return s.encode("latin-1")


def as_bytes(buf: Buffer) -> bytes:
    """Normalize any accepted buffer type to immutable bytes."""
    if isinstance(buf, str):
        return str_to_ascii_bytes(buf)
    if isinstance(buf, (bytearray, memoryview)):
        return bytes(buf)
    return buf


def find_first_not_of(buf: bytes, chars: bytes, start: int = 0) -> int:
    """Index of the first byte at or after `start` not in `chars`, or -1."""
    for i in range(start, len(buf)):
        if buf[i] not in chars:
            return i
    return -1


def describe_byte(b: int) -> str:
    """Printable rendering of a single byte for error messages."""
    if 0x20 <= b <= 0x7E:
        return repr(chr(b))
    return "0x{:02x}".format(b)
