"""Command-line entry point.

Usage:
    python -m plantilla build [ROOT] [--workers N] [--dry-run] [-v]

Exit status is 0 when every page built, 1 otherwise.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from plantilla.config import BuildConfig
from plantilla.errors import BuildError
from plantilla.site import build_site
from plantilla.utils.logger import get_logger

logger = get_logger(__name__)


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="plantilla", description="Static site builder")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Render every page listed in the data file")
    build.add_argument("root", nargs="?", type=Path, default=Path("."), help="Site root")
    build.add_argument("--data", type=Path, default=Path("data.json"), help="Data file")
    build.add_argument(
        "--templates", type=Path, default=Path("templates"), help="Templates directory"
    )
    build.add_argument(
        "--partials", type=Path, default=Path("templates/partials"), help="Partials directory"
    )
    build.add_argument("--workers", type=int, default=1, help="Render pages on N threads")
    build.add_argument("--dry-run", action="store_true", help="Render but write nothing")
    build.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the exit status."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    config = BuildConfig(
        root=args.root,
        templates_dir=args.templates,
        partials_dir=args.partials,
        data_file=args.data,
        workers=max(1, args.workers),
        dry_run=args.dry_run,
    )
    try:
        report = build_site(config)
    except BuildError as e:
        logger.error("ERROR: %s", e)
        return 1
    return 0 if report.ok else 1


if __name__ == "__main__":
    sys.exit(main())
