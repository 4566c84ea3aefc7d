"""File loading helper: read a whole file, then decode it."""

from __future__ import annotations

import logging
import os
from typing import Union

from ._constants import MAX_DEPTH
from ._core import decode
from ._values import Value

logger = logging.getLogger(__name__)


def read_file(path: Union[str, os.PathLike]) -> bytes:
    """Return the full contents of path.  OSError propagates."""
    with open(path, "rb") as f:
        data = f.read()
    logger.debug("read %d bytes from %s", len(data), path)
    return data


def decode_file(path: Union[str, os.PathLike], *, strict: bool = False,
                max_depth: int = MAX_DEPTH) -> Value:
    """Decode the Bencode value stored in a file (e.g. a .torrent)."""
    return decode(read_file(path), strict=strict, max_depth=max_depth)
