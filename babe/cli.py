from __future__ import annotations

import argparse
import logging
import os
import sys
import time

from .builder import run
from .errors import BabeError
from .utils import BASE_DIR_ENV, parse_int, resolve_base_dir
from .watcher import POLL_INTERVAL, Watcher


def build_once(args: argparse.Namespace) -> bool:
    start = time.perf_counter()
    try:
        written = run(args.dir, workers=args.workers, clean=args.clean)
    except BabeError as exc:
        print(f"Build failed: {exc}", file=sys.stderr)
        return False
    elapsed = time.perf_counter() - start
    print(f"Build completed in {elapsed:.2f}s.")
    print(f"Wrote {len(written)} files to: {args.dir / 'public'}")
    return True


def main() -> None:
    parser = argparse.ArgumentParser(description="Handlebars and Markdown static site builder.")
    parser.add_argument(
        "--dir",
        default=None,
        help=f"Site base directory (defaults to ${BASE_DIR_ENV} or the current directory).",
    )
    parser.add_argument(
        "--watch",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Rebuild whenever the source tree changes.",
    )
    parser.add_argument(
        "--interval",
        default=POLL_INTERVAL,
        type=float,
        help="Seconds between watch polls.",
    )
    parser.add_argument(
        "--clean",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Remove the public directory before building.",
    )
    parser.add_argument(
        "--workers",
        default=parse_int(os.environ.get("BABE_WORKERS"), 1),
        type=int,
        help="Number of worker threads for reading files (0 = auto).",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every file read and copied.")
    args = parser.parse_args()
    args.dir = resolve_base_dir(args.dir)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.dir.is_dir():
        print(f"Site directory not found: {args.dir}", file=sys.stderr)
        sys.exit(1)

    built = build_once(args)
    if not args.watch:
        if not built:
            sys.exit(1)
        return

    watcher = Watcher(args.dir, lambda: build_once(args), interval=args.interval)
    try:
        watcher.run()
    except KeyboardInterrupt:
        print("\nStopping file watcher...")
