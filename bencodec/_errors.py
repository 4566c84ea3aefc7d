"""Bencode error codes and the exception class.

Every failure the codec can report carries one of the ERR_* codes below.
Decoding is fail-fast: the first violation found is the one reported,
together with the buffer offset it was found at.
"""

from __future__ import annotations

from typing import Optional

# ── Error codes ──────────────────────────────────────────────
# Grep-friendly, stable across releases.  Tests compare against these.

ERR_EMPTY_INPUT: str = "ERR_EMPTY_INPUT"                          # zero-length buffer
ERR_OUT_OF_RANGE: str = "ERR_OUT_OF_RANGE"                        # start offset outside buffer
ERR_UNEXPECTED_CHARACTER: str = "ERR_UNEXPECTED_CHARACTER"        # unknown sigil
ERR_UNTERMINATED_INTEGER: str = "ERR_UNTERMINATED_INTEGER"        # 'i' with no closing 'e'
ERR_INVALID_INTEGER_FORMAT: str = "ERR_INVALID_INTEGER_FORMAT"    # leading zero, -0, non-digit
ERR_INTEGER_OVERFLOW: str = "ERR_INTEGER_OVERFLOW"                # outside int64
ERR_MISSING_DELIMITER: str = "ERR_MISSING_DELIMITER"              # length prefix without ':'
ERR_TRUNCATED_PAYLOAD: str = "ERR_TRUNCATED_PAYLOAD"              # string runs past the end
ERR_UNTERMINATED_LIST: str = "ERR_UNTERMINATED_LIST"
ERR_UNTERMINATED_DICTIONARY: str = "ERR_UNTERMINATED_DICTIONARY"
ERR_INVALID_KEY_TYPE: str = "ERR_INVALID_KEY_TYPE"                # dict key is not a string
ERR_MALFORMED_DICTIONARY: str = "ERR_MALFORMED_DICTIONARY"        # strict: dup/unsorted keys
ERR_NESTING_TOO_DEEP: str = "ERR_NESTING_TOO_DEEP"                # exceeds max_depth
ERR_TRAILING_DATA: str = "ERR_TRAILING_DATA"                      # strict: bytes after root
ERR_TYPE: str = "ERR_TYPE"                                        # not a Bencode value


class BencodeError(Exception):
    """Exception for Bencode processing errors.

    The `.code` attribute is one of the ERR_* strings above.  `.offset` is
    the position in the input buffer the error refers to, or None when the
    error did not come from decoding (e.g. encoding an unsupported type).
    """

    def __init__(self, code: str, msg: str = "", offset: Optional[int] = None) -> None:
        text = msg or code
        if offset is not None:
            text = "{} at offset {}".format(text, offset)
        super().__init__(text)
        self.code = code
        self.offset = offset
