from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from postmanifest import config
from postmanifest.models.errors import ContentDirectoryError, ManifestBuildError
from postmanifest.services import manifest_builder


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _log_level(value: str) -> str:
    level = value.strip().upper()
    if level not in LOG_LEVELS:
        raise argparse.ArgumentTypeError(
            f"expected one of {', '.join(LOG_LEVELS)}, got {value!r}"
        )
    return level


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ingest",
        description="Validate a directory of markdown posts and write a JSON manifest.",
    )
    parser.add_argument(
        "content_dir",
        type=Path,
        nargs="?",
        default=config.CONTENT_DIR,
        help="Directory of .md posts (default: $POSTMANIFEST_CONTENT_DIR or ./content).",
    )
    parser.add_argument("output", type=Path, nargs="?", help="Where to write the manifest JSON.")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only validate the posts; do not write a manifest.",
    )
    parser.add_argument(
        "--workers",
        type=_positive_int,
        default=config.WORKERS,
        help="Number of files processed in parallel (also $POSTMANIFEST_WORKERS).",
    )
    parser.add_argument(
        "--log-level",
        default=config.LOG_LEVEL,
        type=_log_level,
        help="Logging verbosity on stderr (also $POSTMANIFEST_LOG_LEVEL).",
    )
    args = parser.parse_args(argv)
    if args.output is None and not args.check:
        parser.error("an output manifest path is required unless --check is given")
    return args


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=args.log_level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        manifest = manifest_builder.build_manifest(args.content_dir, workers=args.workers)
    except ContentDirectoryError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_FAILED
    except ManifestBuildError as exc:
        for error in exc.errors:
            print(str(error), file=sys.stderr)
        print(f"ingest failed: {exc}", file=sys.stderr)
        return EXIT_FAILED

    if args.check:
        print(f"{len(manifest.posts)} posts OK", file=sys.stderr)
        return EXIT_OK

    try:
        manifest_builder.write_manifest(manifest, args.output)
    except OSError as exc:
        print(f"error: cannot write manifest to {args.output}: {exc}", file=sys.stderr)
        return EXIT_FAILED
    logger.info("Wrote manifest to %s", args.output)
    return EXIT_OK


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
