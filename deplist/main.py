"""Main CLI entry point for deplist.

Lists the npm packages used by the source files of every project
(package.json) below a directory.
"""

import argparse
import logging
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler

from deplist import __version__
from deplist.cli.scan import scan_command

logger = logging.getLogger("deplist.cli")

EPILOG = """\
Examples:
  $ deplist
  $ deplist --command
  $ deplist path/to/monorepo --json deps.json
"""


def setup_logging(
    verbose: bool = False,
    console: Optional[Console] = None,
    log_file: Optional[str] = None,
) -> None:
    """Setup logging configuration with Rich integration.

    Args:
        verbose: Enable verbose logging.
        console: Rich Console instance for coordinated output (optional).
        log_file: Also write records to this file (optional).
    """
    level = logging.DEBUG if verbose else logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=verbose,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
        tracebacks_show_locals=verbose,
        log_time_format="[%H:%M:%S]",
    )
    handlers: List[logging.Handler] = [handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(
        level=level,
        format="[%(name)s] %(message)s",
        handlers=handlers,
        force=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deplist",
        description="List npm packages used in project files",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to scan for package.json projects (default: current directory)",
    )
    parser.add_argument(
        "-c",
        "--command",
        action="store_true",
        help="Output as npm install commands",
    )
    parser.add_argument(
        "--json",
        metavar="FILE",
        help="Also write the reports to FILE as JSON",
    )
    parser.add_argument(
        "--config",
        help=(
            "Scan configuration: path to a TOML/JSON file (settings may live "
            "under [tool.deplist]) or an inline TOML/JSON string"
        ),
    )
    parser.add_argument(
        "-w",
        "--workers",
        type=int,
        help="Maximum number of files parsed concurrently (default: 8)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--log-file",
        help="Also write log records to this file",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        int: Exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.workers is not None and args.workers < 1:
        parser.error("--workers must be at least 1")

    setup_logging(args.verbose, log_file=args.log_file)
    return scan_command(args)


if __name__ == "__main__":
    sys.exit(main())
