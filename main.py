from __future__ import annotations
import argparse
import logging
import sys
from getpass import getpass

from hash_mod.config import parse_cost
from hash_mod.errors import HashGenerationError, InvalidOptionError
from hash_mod.pbkdf2 import Pbkdf2Adapter, default_adapter


def build_adapter(cost: int | None) -> Pbkdf2Adapter:
    adapter = default_adapter()
    if cost is not None:
        adapter = adapter.set_options({"iterationCountLog2": cost})
    return adapter


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="securehash",
        description="SecureHash CLI - crypt()-style $p5v2$ password hashes using PBKDF2-HMAC-SHA256.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    hsh = sub.add_parser("hash", help="Hash a password read from the terminal")
    hsh.add_argument("--salt", help="Salt or existing hash to reuse (default: new random salt)")
    hsh.add_argument("--cost", type=parse_cost, help="Iteration count log2, 1-30 (default: 12)")

    ver = sub.add_parser("verify", help="Check a password against a stored hash")
    ver.add_argument("hash", help="Stored $p5v2$ hash")

    gen = sub.add_parser("gensalt", help="Print a new salt string")
    gen.add_argument("--cost", type=parse_cost, help="Iteration count log2, 1-30 (default: 12)")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        adapter = build_adapter(getattr(args, "cost", None))
    except InvalidOptionError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    if args.cmd == "gensalt":
        print(adapter.gen_salt())
        return 0

    if args.cmd == "verify":
        if not adapter.verify_hash(args.hash):
            print("Error: not a valid $p5v2$ hash.", file=sys.stderr)
            return 2
        password = getpass("Password: ")
        if adapter.check_password(password, args.hash):
            print("OK")
            return 0
        print("MISMATCH")
        return 1

    if args.salt and not adapter.verify(args.salt):
        print("Error: not a valid $p5v2$ salt.", file=sys.stderr)
        return 2

    password = getpass("Password: ")
    confirm = getpass("Confirm password: ")
    if password != confirm:
        print("Error: passwords do not match.", file=sys.stderr)
        return 2

    try:
        print(adapter.hash(password, args.salt).unwrap())
        return 0
    except HashGenerationError as e:
        print(f"Error: {e} ({e.sentinel})", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
