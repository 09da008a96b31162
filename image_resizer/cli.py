"""CLI runner for batch image resizing and destination cleanup."""

import argparse
import logging
from typing import List, Optional

from .config import ResizeConfig
from .exceptions import ResizerError
from .pipeline import ImageResizer

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="image-resizer",
        description="Resize every image in a directory tree by a scale factor",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    resize = subparsers.add_parser("resize", help="Resize a directory of images")
    resize.add_argument("source", help="Source directory, scanned recursively")
    resize.add_argument("dest", help="Destination directory (created if missing)")
    resize.add_argument(
        "--scale", type=float, required=True, help="Scale factor, e.g. 0.5"
    )
    resize.add_argument(
        "--async",
        dest="concurrent",
        action="store_true",
        help="Run decode/transform/write as concurrent generations",
    )
    resize.add_argument(
        "--max-workers",
        type=int,
        default=None,
        help="Bound the worker pool (default: one worker per image)",
    )
    resize.add_argument(
        "--quality",
        type=int,
        default=None,
        help="Output quality 1-100 (default: 100)",
    )
    resize.add_argument(
        "--clean",
        action="store_true",
        help="Remove existing files from the destination first",
    )
    resize.add_argument("--report", help="Write a JSON batch report to this path")

    clean = subparsers.add_parser("clean", help="Delete all files under a directory")
    clean.add_argument("dest", help="Directory to clean (created if missing)")

    return parser.parse_args(argv)


def run_resize(args: argparse.Namespace) -> None:
    """Run a resize batch from parsed arguments."""
    config = ResizeConfig.from_env(
        {
            "scale": args.scale,
            "concurrent": args.concurrent,
            "max_workers": args.max_workers,
            "quality": args.quality,
        }
    )
    resizer = ImageResizer(config=config)

    if args.clean:
        resizer.clean(args.dest)

    report = resizer.run(args.source, args.dest)

    if args.report:
        report.save_to_file(args.report)
        logger.info("Report saved to %s", args.report)

    print(
        f"Resized {report.count} image(s) into {report.dest_dir} "
        f"in {report.elapsed_seconds:.2f}s ({report.mode})"
    )


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    try:
        if args.command == "clean":
            removed = ImageResizer().clean(args.dest)
            print(f"Removed {removed} file(s) from {args.dest}")
        else:
            run_resize(args)
    except (ResizerError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    return 0


if __name__ == "__main__":
    exit(main())
