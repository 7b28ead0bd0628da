"""Command-line entry point for the disk scanner."""

from __future__ import annotations

import argparse
import asyncio
import os
import re
import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from diskscan.scanner import ScanError, ScannerConfig, run_scan

_VERSION = "0.1.0"


@dataclass(frozen=True)
class CliArgs:
    """Parsed command-line options."""

    path: Path
    json: bool = False
    quiet: bool = False
    verbose: bool = False
    threads: int | None = None
    no_hidden: bool = False
    follow_symlinks: bool = False
    timeout: int | None = None
    pattern: str | None = None


def _non_negative(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid digit found in string: {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"value must not be negative: {text!r}")
    return value


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the ``diskscan`` command."""
    parser = argparse.ArgumentParser(
        prog="diskscan",
        description="Scan a directory tree and report file and directory totals.",
    )
    parser.add_argument("path", type=Path, help="The path to scan")
    parser.add_argument("-j", "--json", action="store_true", help="Output results as JSON")
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress progress updates and all output except final result",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Show detailed error information"
    )
    parser.add_argument(
        "-t", "--threads", type=_non_negative, metavar="NUM", help="Set concurrent task limit"
    )
    parser.add_argument(
        "--no-hidden", action="store_true", help="Skip hidden files and directories"
    )
    parser.add_argument(
        "--follow-symlinks", action="store_true", help="Follow symbolic links"
    )
    parser.add_argument(
        "--timeout",
        type=_non_negative,
        metavar="SECONDS",
        help="Maximum scan duration in seconds",
    )
    parser.add_argument(
        "-p", "--pattern", metavar="PATTERN", help="Regex pattern to filter files"
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {_VERSION}")
    return parser


def parse_args(argv: Sequence[str] | None = None) -> CliArgs:
    """Parse ``argv`` (or ``sys.argv[1:]``) into a CliArgs."""
    namespace = build_parser().parse_args(argv)
    return CliArgs(**vars(namespace))


def build_config(args: CliArgs) -> ScannerConfig:
    """Turn parsed options into a ScannerConfig.

    An invalid pattern is reported on stderr and scanning proceeds without one.
    """
    threads = args.threads if args.threads is not None else (os.cpu_count() or 1) * 2

    file_pattern: re.Pattern | None = None
    if args.pattern is not None:
        try:
            file_pattern = re.compile(args.pattern)
        except re.error as exc:
            print(
                f"Warning: Invalid regex pattern '{args.pattern}': {exc}. "
                "Proceeding without pattern matching.",
                file=sys.stderr,
            )

    return ScannerConfig(
        target_path=args.path,
        max_concurrent_tasks=threads,
        follow_symlinks=args.follow_symlinks,
        include_hidden=not args.no_hidden,
        progress_updates=not args.quiet and not args.json,
        verbose=args.verbose,
        file_pattern=file_pattern,
    )


def _format_duration(seconds: float) -> str:
    """Render a duration the compact way: ``1.5s``, ``2.25ms``, ``40µs``, ``7ns``."""
    nanos = max(0, round(seconds * 1_000_000_000))
    for divisor, width, unit in (
        (1_000_000_000, 9, "s"),
        (1_000_000, 6, "ms"),
        (1_000, 3, "µs"),
    ):
        if nanos >= divisor:
            whole, frac = divmod(nanos, divisor)
            digits = f"{frac:0{width}d}".rstrip("0")
            return f"{whole}.{digits}{unit}" if digits else f"{whole}{unit}"
    return f"{nanos}ns"


def main(argv: Sequence[str] | None = None) -> int:
    """Run a scan from the command line and print its summary."""
    args = parse_args(argv)
    config = build_config(args)

    print(f"\nInitialized ScannerConfig: {config!r}")

    try:
        result = asyncio.run(run_scan(config))
    except (ScanError, ValueError) as exc:
        print(f"\nAn error occurred during scanning: {exc}", file=sys.stderr)
        return 0

    print(f"\nTotal files: {result.total_files}")
    print(f"Total directories: {result.total_directories}")
    print(f"Scan duration: {_format_duration(result.scan_duration)}")
    if result.matching_files:
        print(f"Matching files ({len(result.matching_files)}):")
        for path in result.matching_files:
            print(f'  "{os.fspath(path)}"')
    if result.errors and args.verbose:
        print(f"Errors encountered ({len(result.errors)}) :")
        for error in result.errors:
            print(f"  - {error}")
    return 0


if __name__ == "__main__":
    sys.exit(main())