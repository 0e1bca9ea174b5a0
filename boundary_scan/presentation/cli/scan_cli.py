#!/usr/bin/env python3
"""
Scan CLI

Command-line interface for naming the colours of a hue sweep.

Every hue degree at a fixed saturation/lightness is an item; TheColorAPI
names them; the scan engine finds where the name changes and prints one
line per distinct name, in hue order, as soon as each is resolved.

Usage:
    # Default sweep (saturation 50, lightness 50)
    python -m boundary_scan

    # Brighter, more saturated sweep, emitted as NDJSON
    python -m boundary_scan --saturation 100 --lightness 60 --json

    # Finer sampling grid and a self-hosted API mirror
    python -m boundary_scan --stride 5 --api-url http://localhost:8000

Exit codes: 0 on success, 1 on classifier failure, 130 when interrupted.
"""

import argparse
import asyncio
import signal
import sys
from contextlib import aclosing

from boundary_scan.config import get_section
from boundary_scan.domain.entities import CancellationToken, RunState
from boundary_scan.domain.exceptions import ClassifierError
from boundary_scan.infrastructure.color import hue_sweep, to_named_color
from boundary_scan.infrastructure.factories import ScanFactory


def build_parser() -> argparse.ArgumentParser:
    palette = get_section("palette")
    parser = argparse.ArgumentParser(
        description="Boundary Scan CLI - Name the colours of a hue sweep",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    # Sweep configuration
    parser.add_argument(
        "--saturation",
        type=float,
        default=palette.get("saturation", 50),
        help="HSL saturation in percent (default: %(default)s)"
    )
    parser.add_argument(
        "--lightness",
        type=float,
        default=palette.get("lightness", 50),
        help="HSL lightness in percent (default: %(default)s)"
    )
    parser.add_argument(
        "--hue-count",
        type=int,
        default=palette.get("hue_count", 360),
        help="Number of hue degrees to scan (default: %(default)s)"
    )

    # Engine tuning
    parser.add_argument(
        "--stride",
        type=int,
        help="Coarse sample stride (default: $SCAN_STRIDE or config)"
    )
    parser.add_argument(
        "--max-concurrency",
        type=int,
        help="In-flight lookup limit (default: $SCAN_MAX_CONCURRENCY or config)"
    )

    # Service
    parser.add_argument(
        "--api-url",
        help="TheColorAPI base URL (default: $COLOR_API_URL or config)"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Request timeout in seconds (default: $COLOR_API_TIMEOUT or config)"
    )

    # Output
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print one NamedColor JSON object per line"
    )
    return parser


async def run_scan(args: argparse.Namespace, token: CancellationToken) -> int:
    """Run one sweep and print its named colours. Returns the exit code."""
    use_case = ScanFactory.create_color_scan_use_case(
        stride=args.stride,
        max_concurrency=args.max_concurrency,
        api_url=args.api_url,
        timeout=args.timeout,
    )
    items = hue_sweep(args.saturation, args.lightness, count=args.hue_count)

    loop = asyncio.get_running_loop()
    try:
        loop.add_signal_handler(signal.SIGINT, token.cancel, "interrupted")
    except (NotImplementedError, RuntimeError):
        pass  # Windows: Ctrl-C falls back to KeyboardInterrupt

    try:
        async with aclosing(use_case.discover_all(items, token)) as segments:
            async for segment in segments:
                named = to_named_color(segment)
                if args.json:
                    print(named.model_dump_json(), flush=True)
                else:
                    print(
                        f"{named.index:>4}  {named.color.hex}  {named.name}",
                        flush=True
                    )
    except ClassifierError as e:
        print(f"Scan failed: {e}", file=sys.stderr)
        return 1
    finally:
        await use_case.classifier.close()

    if use_case.last_state == RunState.CANCELLED:
        print("Scan cancelled", file=sys.stderr)
        return 130
    return 0


def main(argv=None) -> int:
    """Main CLI entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        items_check = hue_sweep(args.saturation, args.lightness, count=args.hue_count)
        ScanFactory.engine_settings(args.stride, args.max_concurrency)
    except ValueError as e:
        parser.error(str(e))

    if not args.json:
        print("=" * 60)
        print(
            f"Hue sweep: {len(items_check)} hues at "
            f"s={args.saturation:g}% l={args.lightness:g}%"
        )
        print("=" * 60)

    token = CancellationToken()
    try:
        return asyncio.run(run_scan(args, token))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
