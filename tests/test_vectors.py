"""bencodec golden-vector suite.

Each vector in conformance/vectors.json becomes one test method whose
outcome must match conformance/expected.json.

Usage:
    python -m pytest tests/test_vectors.py -v
    python tests/test_vectors.py
    BENCODEC_VECTORS_DIR=path/to/conformance python tests/test_vectors.py
"""

from __future__ import annotations

import base64
import json
import os
import sys
import unittest
from typing import Any, Dict, List, Tuple

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from bencodec import BencodeError, byte_length, decode, decode_at, encode

VECTORS_DIR = os.environ.get(
    "BENCODEC_VECTORS_DIR",
    os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "conformance"),
)


def _load_data() -> Tuple[List[dict], Dict[str, dict]]:
    """Return (vectors, expected-by-test-id).  OSError propagates."""
    with open(os.path.join(VECTORS_DIR, "vectors.json"), "r", encoding="utf-8") as f:
        vectors = json.load(f)["vectors"]
    with open(os.path.join(VECTORS_DIR, "expected.json"), "r", encoding="utf-8") as f:
        expected = json.load(f)["expected"]
    return vectors, expected


def _run_vector(vec: dict) -> Dict[str, Any]:
    """Execute one vector.  Returns {"consumed", "reencoded_b64"} or {"err"}."""
    mode = vec["mode"]
    raw = base64.b64decode(vec["input_b64"])

    try:
        if mode == "decode":
            val, consumed = decode_at(raw)
        elif mode == "decode_strict":
            val = decode(raw, strict=True)
            consumed = byte_length(val)
        else:
            return {"err": "UNKNOWN_MODE"}
    except BencodeError as e:
        return {"err": e.code}
    return {
        "consumed": consumed,
        "reencoded_b64": base64.b64encode(encode(val)).decode("ascii"),
    }


VECTORS, EXPECTED = _load_data()


class VectorTests(unittest.TestCase):
    """One generated test method per vector, plus a coverage check."""

    def test_every_expectation_has_a_vector(self):
        self.assertTrue(VECTORS)
        self.assertEqual(sorted(v["test_id"] for v in VECTORS), sorted(EXPECTED))


def _attach(vec: dict) -> None:
    tid = vec["test_id"]
    exp = EXPECTED[tid]

    def test_fn(self: unittest.TestCase) -> None:
        self.assertEqual(_run_vector(vec), exp, tid)

    test_fn.__name__ = "test_{}".format(tid)
    setattr(VectorTests, test_fn.__name__, test_fn)


for _vec in VECTORS:
    _attach(_vec)


def main() -> None:
    failures = []
    for vec in VECTORS:
        got = _run_vector(vec)
        if got != EXPECTED[vec["test_id"]]:
            failures.append((vec["test_id"], got))
    print("VECTORS: {}/{} PASS".format(len(VECTORS) - len(failures), len(VECTORS)))
    for tid, got in failures:
        print("  FAIL {}: got={} expected={}".format(tid, got, EXPECTED[tid]))
    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
