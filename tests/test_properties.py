"""Property tests over seeded random value trees.

For every generated tree v:
    decode(encode(v)) == v
    byte_length(v) == len(encode(v))
    decode_at consumes exactly len(encode(v)) bytes
    strict decode accepts encode(v) (it is canonical)
    dictionary keys appear in the output in ascending byte order

The full-size randomized run lives in tools/invariants_runner.py; this
module runs a smaller deterministic slice of it under unittest.
"""

from __future__ import annotations

import os
import random
import sys
import unittest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from bencodec import (
    INT64_MAX,
    INT64_MIN,
    BencodeError,
    ByteString,
    Dictionary,
    Integer,
    List,
    byte_length,
    decode,
    decode_at,
    encode,
)

SEED = int(os.environ.get("BENCODEC_SEED", "1337"))
TRIALS = int(os.environ.get("BENCODEC_TEST_TRIALS", "300"))


def rand_integer(rng: random.Random) -> Integer:
    r = rng.random()
    if r < 0.1:
        return Integer(rng.choice([0, -1, 1, INT64_MIN, INT64_MAX]))
    if r < 0.6:
        return Integer(rng.randint(-1000, 1000))
    return Integer(rng.randint(INT64_MIN, INT64_MAX))


def rand_bytes(rng: random.Random, nmax: int = 24) -> bytes:
    n = rng.randint(0, nmax)
    if rng.random() < 0.5:
        # Framing characters inside payloads must not confuse the decoder.
        return bytes(rng.choice(b"ilde:0123456789-") for _ in range(n))
    return bytes(rng.randint(0, 255) for _ in range(n))


def rand_tree(rng: random.Random, depth: int = 0):
    r = rng.random()
    if depth > 5 or r < 0.35:
        if rng.random() < 0.5:
            return rand_integer(rng)
        return ByteString(rand_bytes(rng))
    if r < 0.65:
        return List(rand_tree(rng, depth + 1) for _ in range(rng.randint(0, 5)))
    d = Dictionary()
    for _ in range(rng.randint(0, 5)):
        d[rand_bytes(rng, 8)] = rand_tree(rng, depth + 1)
    return d


def top_level_keys(raw: bytes):
    """Walk a top-level dictionary's keys in wire order."""
    off = 1
    keys = []
    while raw[off:off + 1] != b"e":
        key, n = decode_at(raw, off)
        keys.append(key.value)
        off += n
        _, n = decode_at(raw, off)
        off += n
    return keys


class TestInvariants(unittest.TestCase):
    def setUp(self):
        self.rng = random.Random(SEED)

    def test_round_trip(self):
        for i in range(TRIALS):
            v = rand_tree(self.rng)
            with self.subTest(trial=i):
                self.assertEqual(decode(encode(v)), v)

    def test_length(self):
        for i in range(TRIALS):
            v = rand_tree(self.rng)
            raw = encode(v)
            with self.subTest(trial=i):
                self.assertEqual(byte_length(v), len(raw))
                self.assertEqual(decode_at(raw)[1], len(raw))

    def test_encoding_is_strictly_canonical(self):
        for i in range(TRIALS):
            raw = encode(rand_tree(self.rng))
            with self.subTest(trial=i):
                self.assertEqual(encode(decode(raw, strict=True)), raw)

    def test_insertion_order_independent(self):
        for i in range(TRIALS // 3):
            items = [(rand_bytes(self.rng, 6), rand_tree(self.rng, 4))
                     for _ in range(self.rng.randint(0, 8))]
            # Duplicate keys resolve last-wins, so dedupe before comparing.
            a = Dictionary(dict(items))
            b = Dictionary(sorted(dict(items).items(), reverse=True))
            raw = encode(a)
            with self.subTest(trial=i):
                self.assertEqual(raw, encode(b))
                keys = top_level_keys(raw)
                self.assertEqual(keys, sorted(keys))
                self.assertEqual(len(keys), len(set(keys)))

    def test_truncation_always_fails(self):
        """Every proper prefix of a container encoding is rejected."""
        for i in range(TRIALS // 10):
            v = List([rand_tree(self.rng) for _ in range(3)])
            raw = encode(v)
            for cut in range(1, len(raw)):
                with self.subTest(trial=i, cut=cut):
                    with self.assertRaises(BencodeError):
                        decode(raw[:cut])


if __name__ == "__main__":
    unittest.main()
