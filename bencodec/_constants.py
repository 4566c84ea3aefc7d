"""Bencode constants: sigils, the integer cap, and decoder limits."""

from __future__ import annotations

# ── Sigils (single byte each) ────────────────────────────────
# Byte strings have no sigil of their own; a leading ASCII digit marks
# the start of the length prefix.
SIGIL_INTEGER: int = ord("i")
SIGIL_LIST: int = ord("l")
SIGIL_DICT: int = ord("d")
END: int = ord("e")
DELIMITER: int = ord(":")

DIGITS: bytes = b"0123456789"

# ── Signed 64-bit integer range ──────────────────────────────
# The wire format allows arbitrary-precision decimal text.  We cap at int64
# so that trees we produce stay readable by fixed-width implementations.
INT64_MIN: int = -(2**63)
INT64_MAX: int = 2**63 - 1

# ── Decoder limits ───────────────────────────────────────────
# Each container level costs a few Python frames, so 128 stays well under
# the default recursion limit of 1000.
MAX_DEPTH: int = 128
