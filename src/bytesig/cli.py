from __future__ import annotations

import argparse
import logging

from rich.console import Console
from rich.table import Table

from bytesig.core.config import ConfigError, ScanConfig, load_config
from bytesig.core.errors import SignatureError
from bytesig.core.log import setup_logging
from bytesig.core.pattern_text import format_ida, parse_code, parse_ida
from bytesig.core.search import find_in_file
from bytesig.core.signature import Signature

EXIT_FOUND = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


def _int_auto(text: str) -> int:
    try:
        value = int(text, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError("must be >= 0")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bytesig", description="Find byte signatures in binary files")
    parser.add_argument("--config", help="Path to YAML config file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    sub = parser.add_subparsers(dest="command", required=True)

    def add_signature_args(p: argparse.ArgumentParser) -> None:
        p.add_argument("signature", help='IDA-style signature ("48 8B ?? 05"), or escaped bytes with --mask')
        p.add_argument("--mask", help='Code-style mask ("xx?x"); SIGNATURE is then an escaped byte string')
        p.add_argument("--unknown", help="Mask character meaning unknown byte (default from config, '?')")

    scan = sub.add_parser("scan", help="Print the offset of the first match in FILE")
    scan.add_argument("path", help="Path to binary file")
    add_signature_args(scan)
    scan.add_argument("--start", type=_int_auto, default=0, help="Offset to start scanning at")

    info = sub.add_parser("info", help="Show how a signature is stored")
    add_signature_args(info)
    return parser


def _signature_from_args(args: argparse.Namespace, config: ScanConfig) -> Signature:
    if args.mask is None:
        return parse_ida(args.signature)
    return parse_code(args.signature, args.mask, args.unknown or config.unknown_marker)


def _cmd_scan(args: argparse.Namespace, config: ScanConfig, out: Console) -> int:
    sig = _signature_from_args(args, config)
    offset = find_in_file(
        args.path, sig, args.start, chunk_size=config.chunk_size, use_mmap=config.use_mmap
    )
    if offset is None:
        out.print(f"{args.path}: no match", highlight=False, markup=False)
        return EXIT_NOT_FOUND
    out.print(f"{args.path}: 0x{offset:X}", highlight=False, markup=False)
    return EXIT_FOUND


def _cmd_info(args: argparse.Namespace, config: ScanConfig, out: Console) -> int:
    sig = _signature_from_args(args, config)
    table = Table(show_header=False, box=None)
    table.add_column("key", style="bold")
    table.add_column("value")
    table.add_row("length", str(len(sig)))
    table.add_row("wildcard", f"0x{sig.wildcard:02X}")
    table.add_row("wildcards", str(len(sig.wildcard_positions())))
    table.add_row("ida", format_ida(sig))
    out.print(table)
    return EXIT_FOUND


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    out = Console(soft_wrap=True)
    err = Console(stderr=True, soft_wrap=True)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        err.print(f"bytesig: {e}", highlight=False, markup=False)
        return EXIT_ERROR
    setup_logging(logging.DEBUG if args.verbose else config.log_level)

    handler = _cmd_scan if args.command == "scan" else _cmd_info
    try:
        return handler(args, config, out)
    except (SignatureError, OSError) as e:
        err.print(f"bytesig: {e}", highlight=False, markup=False)
        return EXIT_ERROR


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
