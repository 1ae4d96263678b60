from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .compiler import DEFAULT_TAPE_SIZE, BrainfuckCompiler
from .reducer import MalformedProgram

logger = logging.getLogger(__name__)


def _read_source(path: str) -> bytes:
    source_path = Path(path)
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")
    return source_path.read_bytes()


def _write_output(path: str, data: str) -> None:
    output_path = Path(path)
    output_path.write_bytes(data.encode("utf-8"))


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Brainfuck to C++ compiler")
    parser.add_argument("source", help="Path to the Brainfuck source file")
    parser.add_argument(
        "output",
        nargs="?",
        help="Destination file for the generated C++ (default: print to stdout)",
    )
    parser.add_argument(
        "--no-optimize",
        action="store_true",
        help="Skip the peephole optimizer",
    )
    parser.add_argument(
        "--permissive",
        action="store_true",
        help="Accept unbalanced loop delimiters instead of reporting them",
    )
    parser.add_argument(
        "--tape-size",
        type=int,
        default=DEFAULT_TAPE_SIZE,
        help=f"Number of tape cells allocated by the generated program (default: {DEFAULT_TAPE_SIZE})",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    try:
        source = _read_source(args.source)
    except OSError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    try:
        compiler = BrainfuckCompiler(
            tape_size=args.tape_size,
            optimize=not args.no_optimize,
            strict=not args.permissive,
        )
    except ValueError as exc:
        print(f"Invalid option: {exc}", file=sys.stderr)
        return 1

    try:
        code = compiler.compile(source)
    except MalformedProgram as exc:
        print(f"Compilation error: {exc}", file=sys.stderr)
        return 1

    if args.output:
        try:
            _write_output(args.output, code)
        except OSError as exc:
            print(f"Cannot write output: {exc}", file=sys.stderr)
            return 1
        logger.info("wrote %d bytes to %s", len(code), args.output)
    else:
        sys.stdout.write(code)
        if not code.endswith("\n"):
            sys.stdout.write("\n")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
