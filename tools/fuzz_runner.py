#!/usr/bin/env python3
# tools/fuzz_runner.py
#
# Mutational fuzzing of the decoder.
#
# Generates three fuzz categories:
#   A) valid canonical encodings with random byte-level mutations
#   B) valid encodings truncated or extended at random points
#   C) short random byte strings drawn mostly from the framing alphabet
#
# Every input must either decode or raise BencodeError.  When it decodes,
# the result must re-encode canonically and survive a strict round trip.
# Any other outcome prints a minimal repro payload and exits non-zero.

import os, sys, json, base64, random
from typing import Any, Dict

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
sys.path.insert(0, ROOT)

import bencodec

SEED = int(os.environ.get("BENCODEC_SEED", "4242"))
ROUNDS = int(os.environ.get("BENCODEC_FUZZ_ROUNDS", "20000"))

random.seed(SEED)

ALPHABET = b"ilde:-0123456789"

def b64(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")

def problem(label: str, raw: bytes, ctx: Dict[str, Any]) -> None:
    print("PROBLEM:", label)
    print("CTX:", json.dumps(dict(ctx, input_b64=b64(raw)))[:4000])
    raise SystemExit(1)

# --- generators ---

def rand_tree(depth: int = 0) -> Any:
    if depth > 4 or random.random() < 0.35:
        if random.random() < 0.5:
            return random.randint(-10**6, 10**6)
        return bytes(random.choice(ALPHABET) for _ in range(random.randint(0, 12)))
    if random.random() < 0.5:
        return {bytes(random.choice(ALPHABET) for _ in range(random.randint(0, 4))): rand_tree(depth + 1)
                for _ in range(random.randint(0, 4))}
    return [rand_tree(depth + 1) for _ in range(random.randint(0, 4))]

def valid_bytes() -> bytes:
    return bencodec.encode(bencodec.to_value(rand_tree()))

def mutate(raw: bytes) -> bytes:
    b = bytearray(raw)
    for _ in range(random.randint(1, 3)):
        op = random.random()
        pos = random.randint(0, len(b))
        if op < 0.35 and b:
            b[min(pos, len(b) - 1)] = random.choice(ALPHABET + b"\x00\xff")
        elif op < 0.65:
            b.insert(pos, random.choice(ALPHABET))
        elif b:
            del b[min(pos, len(b) - 1)]
    return bytes(b)

def resize(raw: bytes) -> bytes:
    if random.random() < 0.5 and len(raw) > 1:
        return raw[:random.randint(1, len(raw) - 1)]
    return raw + bytes(random.choice(ALPHABET) for _ in range(random.randint(1, 6)))

def rand_small() -> bytes:
    return bytes(random.choice(ALPHABET) for _ in range(random.randint(0, 16)))

# --- oracle ---

def check(raw: bytes, ctx: Dict[str, Any]) -> None:
    try:
        val, consumed = bencodec.decode_at(raw) if raw else (bencodec.decode(raw), 0)
    except bencodec.BencodeError as e:
        if e.offset is not None and not (0 <= e.offset <= len(raw)):
            problem("error offset outside input", raw, dict(ctx, code=e.code, offset=e.offset))
        return
    except Exception as e:  # anything but BencodeError is a decoder bug
        problem("unexpected exception {}: {}".format(type(e).__name__, e), raw, ctx)
        return

    if not 0 < consumed <= len(raw):
        problem("consumed out of bounds", raw, dict(ctx, consumed=consumed))
    canon = bencodec.encode(val)
    if bencodec.byte_length(val) != len(canon):
        problem("byte_length mismatch after decode", raw, ctx)
    if bencodec.decode(canon, strict=True) != val:
        problem("canonical re-encoding failed strict decode", raw, ctx)

def main() -> int:
    for i in range(ROUNDS):
        r = random.random()

        # A) mutated valid encodings
        if r < 0.50:
            check(mutate(valid_bytes()), {"round": i, "cat": "A"})
            continue

        # B) truncated / extended
        if r < 0.80:
            check(resize(valid_bytes()), {"round": i, "cat": "B"})
            continue

        # C) short random framing soup
        check(rand_small(), {"round": i, "cat": "C"})

    print(f"OK: fuzz rounds={ROUNDS} seed={SEED} (no problems)")
    return 0

if __name__ == "__main__":
    raise SystemExit(main())
