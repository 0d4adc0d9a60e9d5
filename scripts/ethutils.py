#!/usr/bin/env python3
"""Convert Ethereum address to checksum address or back."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Iterable

from address_codec import CHECKSUM, FORMATS, ParseError, parse, render
from keccak_primitives import keccak256_hex, run_self_test

logger = logging.getLogger(__name__)


def _build_cli() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ethutils", description=__doc__)
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to stderr"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    addr = sub.add_parser("address", help="Convert an address between formats")
    addr.add_argument(
        "-c",
        "--convert",
        choices=FORMATS,
        default=CHECKSUM,
        help="Output format (default: %(default)s)",
    )
    addr.add_argument(
        "-t",
        "--tolerate",
        action="store_true",
        help="Tolerate invalid address, try to parse it as U256",
    )
    addr.add_argument(
        "--verify-checksum",
        action="store_true",
        help="Reject mixed-case input whose casing is not a valid checksum",
    )
    addr.add_argument("address", help="Address as hex, or decimal with --tolerate")

    sub.add_parser("keccak", help="Read stdin and emit Keccak-256 hex digest")
    sub.add_parser("self-test", help="Check the Keccak-256 backend against known vectors")
    return parser


def _cmd_address(args: argparse.Namespace) -> int:
    try:
        addr = parse(args.address, tolerant=args.tolerate, verify_checksum=args.verify_checksum)
    except ParseError as exc:
        print(f"Invalid address: {exc}", file=sys.stderr)
        return 1
    print(render(addr, args.convert))
    return 0


def _cmd_keccak() -> int:
    data = sys.stdin.buffer.read()
    print(keccak256_hex(data))
    return 0


def _cmd_self_test() -> int:
    try:
        count = run_self_test()
    except RuntimeError as exc:
        print(f"self-test failed: {exc}", file=sys.stderr)
        return 1
    logger.info("%d vectors passed", count)
    print("ok")
    return 0


def main(argv: Iterable[str] | None = None) -> int:
    parser = _build_cli()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
    )
    if args.command == "address":
        return _cmd_address(args)
    if args.command == "keccak":
        return _cmd_keccak()
    if args.command == "self-test":
        return _cmd_self_test()
    parser.error("unknown command")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
