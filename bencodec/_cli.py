"""bencodec command-line interface.

Usage:
    python3 -m bencodec decode [--strict] [--input file.torrent]
    echo '{"a": 1}' | python3 -m bencodec encode [--base64]
    python3 -m bencodec check --input file.torrent
    python3 -m bencodec length --input file.torrent
    python3 -m bencodec version
"""

from __future__ import annotations

import argparse
import base64
import json
import logging
import sys
from typing import Any, List, Optional

from . import (
    BencodeError,
    ByteString,
    Dictionary,
    ERR_TYPE,
    Integer,
    __version__,
    byte_length,
    decode,
    encode,
    to_value,
)
from ._loader import read_file

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bencodec",
        description="bencodec: canonical Bencode decoder and encoder",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log debug output to stderr")
    sub = parser.add_subparsers(dest="command")

    # ── decode ──
    dec_p = sub.add_parser("decode", help="Decode Bencode and print it as JSON")
    dec_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read Bencode from FILE instead of stdin")
    dec_p.add_argument("--strict", action="store_true",
                       help="Reject unsorted/duplicate keys and trailing bytes")

    # ── encode ──
    enc_p = sub.add_parser("encode", help="Encode JSON as canonical Bencode")
    enc_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read JSON from FILE instead of stdin")
    enc_p.add_argument("--base64", action="store_true",
                       help="Emit base64 text instead of raw bytes")

    # ── check ──
    chk_p = sub.add_parser("check", help="Exit 0 if the input is canonical Bencode")
    chk_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read Bencode from FILE instead of stdin")

    # ── length ──
    len_p = sub.add_parser("length", help="Print the encoded length of the root value")
    len_p.add_argument("--input", "-i", metavar="FILE",
                       help="Read Bencode from FILE instead of stdin")

    # ── version ──
    sub.add_parser("version", help="Print version and exit")

    return parser


def _read_input(filepath: Optional[str]) -> bytes:
    """Read raw bytes from a file or stdin."""
    if filepath:
        return read_file(filepath)
    if sys.stdin.isatty():
        print("bencodec: reading from stdin (Ctrl-D to end)...", file=sys.stderr)
    return sys.stdin.buffer.read()


def to_json_compatible(val: Any) -> Any:
    """Render a value tree with JSON types.

    Byte strings that are valid UTF-8 become JSON strings; anything else
    becomes {"base64": "..."} so binary payloads (piece hashes) survive.
    Non-UTF-8 dictionary keys are rendered with backslash escapes; if
    that makes two keys collide, ERR_TYPE is raised rather than dropping
    an entry.
    """
    if isinstance(val, Integer):
        return val.value
    if isinstance(val, ByteString):
        try:
            return val.decode("utf-8")
        except UnicodeDecodeError:
            return {"base64": base64.b64encode(val.value).decode("ascii")}
    if isinstance(val, Dictionary):
        out = {}
        for k, v in val.sorted_items():
            name = k.decode("utf-8", "backslashreplace")
            if name in out:
                raise BencodeError(ERR_TYPE, "dictionary keys collide as JSON key {!r}".format(name))
            out[name] = to_json_compatible(v)
        return out
    return [to_json_compatible(item) for item in val]


def _cmd_decode(args: argparse.Namespace) -> None:
    raw = _read_input(args.input)
    val = decode(raw, strict=args.strict)
    print(json.dumps(to_json_compatible(val), indent=2, ensure_ascii=False))


def _cmd_encode(args: argparse.Namespace) -> None:
    raw = _read_input(args.input)
    out = encode(to_value(json.loads(raw)))
    if args.base64:
        print(base64.b64encode(out).decode("ascii"))
    else:
        sys.stdout.buffer.write(out)
        sys.stdout.buffer.flush()


def _cmd_check(args: argparse.Namespace) -> int:
    raw = _read_input(args.input)
    val = decode(raw)
    out = encode(val)
    if out != raw:
        logger.debug("input is %d bytes, canonical form is %d bytes", len(raw), len(out))
        print("bencodec: not canonical", file=sys.stderr)
        return 1
    print("ok")
    return 0


def _cmd_length(args: argparse.Namespace) -> None:
    raw = _read_input(args.input)
    print(byte_length(decode(raw)))


def main(argv: Optional[List[str]] = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    if args.command == "version":
        print(f"bencodec {__version__}")
        return

    try:
        if args.command == "decode":
            _cmd_decode(args)
        elif args.command == "encode":
            _cmd_encode(args)
        elif args.command == "check":
            sys.exit(_cmd_check(args))
        elif args.command == "length":
            _cmd_length(args)
    except BencodeError as e:
        print(f"bencodec: error [{e.code}]: {e}", file=sys.stderr)
        sys.exit(2)
    except json.JSONDecodeError as e:
        print(f"bencodec: JSON parse error: {e}", file=sys.stderr)
        sys.exit(2)
    except OSError as e:
        print(f"bencodec: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
