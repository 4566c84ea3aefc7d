#!/usr/bin/env python3
# tools/invariants_runner.py
#
# Determinism invariants (property tests) + differential check against a
# minimal reference encoder written over plain Python objects.
#
# This runner:
# - generates random native trees (dict/list/bytes/int) within limits
# - converts them with bencodec.to_value and checks algebraic invariants
# - compares bencodec.encode against ref_encode below
#
# Exit code:
#   0 -> all checks passed
#   1 -> invariant violation or reference mismatch

import os, sys, base64, random
from typing import Any, Dict

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

import bencodec

SEED = int(os.environ.get("BENCODEC_SEED", "1337"))
TRIALS = int(os.environ.get("BENCODEC_TRIALS", "2000"))
MAX_GEN_DEPTH = int(os.environ.get("BENCODEC_GEN_MAX_DEPTH", "6"))
MAX_KEYS = int(os.environ.get("BENCODEC_GEN_MAX_KEYS", "6"))
MAX_LIST = int(os.environ.get("BENCODEC_GEN_MAX_LIST", "6"))
MAX_BYTES = int(os.environ.get("BENCODEC_GEN_MAX_BYTES", "32"))

random.seed(SEED)

def b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def rand_int() -> int:
    r = random.random()
    if r < 0.10:
        return random.choice([0, -1, 1, bencodec.INT64_MIN, bencodec.INT64_MAX])
    if r < 0.60:
        return random.randint(-999, 999)
    return random.randint(bencodec.INT64_MIN, bencodec.INT64_MAX)

def rand_bytes(nmax: int = MAX_BYTES) -> bytes:
    n = random.randint(0, nmax)
    if random.random() < 0.5:
        # payloads full of framing characters
        return bytes(random.choice(b"ilde:-0123456789") for _ in range(n))
    return bytes(random.getrandbits(8) for _ in range(n))

def gen_value(depth: int) -> Any:
    if depth >= MAX_GEN_DEPTH:
        return rand_int() if random.random() < 0.5 else rand_bytes()
    r = random.random()
    if r < 0.40:
        d: Dict[bytes, Any] = {}
        for _ in range(random.randint(0, MAX_KEYS)):
            d[rand_bytes(10)] = gen_value(depth + 1)
        return d
    if r < 0.70:
        return [gen_value(depth + 1) for _ in range(random.randint(0, MAX_LIST))]
    return rand_int() if random.random() < 0.5 else rand_bytes()

# Reference encoder over native objects.  Deliberately naive: no shared code
# with bencodec so that a bug in one is not mirrored in the other.
def ref_encode(o: Any) -> bytes:
    if isinstance(o, bytes):
        return str(len(o)).encode("ascii") + b":" + o
    if isinstance(o, int):
        return b"i" + str(o).encode("ascii") + b"e"
    if isinstance(o, list):
        return b"l" + b"".join(ref_encode(x) for x in o) + b"e"
    if isinstance(o, dict):
        return b"d" + b"".join(ref_encode(k) + ref_encode(o[k]) for k in sorted(o)) + b"e"
    raise TypeError(type(o).__name__)

def reversed_insertion(o: Any) -> Any:
    if isinstance(o, dict):
        return {k: reversed_insertion(o[k]) for k in sorted(o, reverse=True)}
    if isinstance(o, list):
        return [reversed_insertion(x) for x in o]
    return o

def fail(label: str, native: Any, raw: bytes = b"") -> int:
    print("INVARIANT FAIL:", label)
    print("TREE:", repr(native)[:2000])
    if raw:
        print("BYTES_B64:", b64(raw)[:2000])
    return 1

def main() -> int:
    for t in range(TRIALS):
        native = gen_value(0)
        v = bencodec.to_value(native)

        # (1) encode stability
        raw = bencodec.encode(v)
        if raw != bencodec.encode(v):
            return fail("encode stability", native)

        # (2) reference parity
        if raw != ref_encode(native):
            return fail("reference parity", native, raw)

        # (3) length
        if bencodec.byte_length(v) != len(raw):
            return fail("byte_length != len(encode)", native, raw)

        # (4) round trip, permissive and strict
        back, consumed = bencodec.decode_at(raw)
        if back != v or consumed != len(raw):
            return fail("round trip", native, raw)
        if bencodec.decode(raw, strict=True) != v:
            return fail("strict round trip", native, raw)
        if bencodec.to_native(back) != native:
            return fail("to_native round trip", native, raw)

        # (5) insertion order invariance
        if bencodec.encode(bencodec.to_value(reversed_insertion(native))) != raw:
            return fail("insertion order invariance", native, raw)

        # (6) deep copy independence
        if isinstance(v, (bencodec.List, bencodec.Dictionary)):
            dup = v.copy()
            if dup != v or bencodec.encode(dup) != raw:
                return fail("copy equality", native, raw)

    print(f"OK: invariants passed for TRIALS={TRIALS} seed={SEED}")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
