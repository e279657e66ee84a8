"""
=============================================================================
STATICSERVE CLI ENTRY POINT
=============================================================================

    # Serve the program directory on port 80
    python -m staticserve

    # Custom port
    python -m staticserve --port 8000

    # Serve ./site, but only files under ./site/public and ./site/docs
    python -m staticserve -p 8000 --root ./site -d ./site/public ./site/docs

Settings come from, in order of priority: command-line flags, the
STATICSERVE_* environment variables (see ServerConfig.from_env), defaults.

=============================================================================
"""

import argparse
import dataclasses
import sys
from typing import List, Optional

from . import __version__, create_app
from .config import ServerConfig, parse_timeout


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="staticserve",
        description="Minimal static file HTTP server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  staticserve                                # Program directory, port 80
  staticserve --port 8000                    # Custom port
  staticserve --root ./site                  # Different hosting root
  staticserve -d ./site/public ./site/docs   # Restrict served directories
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=None,
        help="The port that will accept TCP (HTTP) traffic (default: 80)"
    )

    parser.add_argument(
        "--host", "-H",
        default=None,
        help="Address to bind to (default: 0.0.0.0, all interfaces)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--dirs", "-d",
        nargs="+",
        default=None,
        metavar="DIR",
        help="The permitted directories that can be served to HTTP requests "
             "(default: the hosting root)"
    )

    parser.add_argument(
        "--root", "-r",
        default=None,
        help="Hosting root that request paths are resolved against "
             "(default: the program directory)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # PERFORMANCE / LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=None,
        help="Number of worker threads (default: 4, max will be 2x this)"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=parse_timeout,
        default=argparse.SUPPRESS,
        metavar="SECONDS",
        help="Socket read timeout in seconds, or \"none\" to wait forever "
             "(default: 30)"
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--log-format",
        choices=["text", "json"],
        default=None,
        help="Access log format (default: text)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"staticserve {__version__}"
    )

    return parser


def config_from_args(args: argparse.Namespace, base: Optional[ServerConfig] = None) -> ServerConfig:
    """
    Overlay command-line flags on a base configuration.

    Flags left unset keep the base value, so environment settings survive
    unless overridden.
    """
    config = base or ServerConfig.from_env()

    overrides = {}
    if args.port is not None:
        overrides["port"] = args.port
    if args.host is not None:
        overrides["host"] = args.host
    if args.root is not None:
        overrides["hosting_root"] = args.root
    if args.dirs is not None:
        overrides["permitted_dirs"] = tuple(args.dirs)
    if args.workers is not None:
        overrides["min_workers"] = args.workers
        overrides["max_workers"] = args.workers * 2
    if "timeout" in args:
        overrides["timeout"] = args.timeout
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.log_format is not None:
        overrides["log_format"] = args.log_format

    return dataclasses.replace(config, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = config_from_args(args)
        server = create_app(config)
        server.run()
    except (OSError, ValueError) as e:
        print(f"Failed to start! {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
