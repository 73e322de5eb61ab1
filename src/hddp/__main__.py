"""
=============================================================================
CLI ENTRY POINT
=============================================================================

Run the server from the command line:

    python -m hddp
    python -m hddp --port 3000 --pages-dir ./pages
    python -m hddp --route GET /pizza "<h1>Pizza</h1>" --route POST /test "<h1>POST received</h1>"

Routes given with --route are 200 text/html responses. The default page is
served at GET / unless --no-index is passed.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .server import HTTPServer
from .config import ServerConfig, LOG_LEVELS
from .core import BindError
from .http.response import build_response


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hddp",
        description="Minimal HTTP/1.1 server serving canned responses",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m hddp                                   # Run with defaults
  python -m hddp --port 3000                       # Custom port
  python -m hddp --host 0.0.0.0                    # Listen on all interfaces
  python -m hddp --route GET /pizza "<h1>Pizza</h1>"
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1, use 0.0.0.0 for containers)"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8080,
        help="Port to listen on (default: 8080)"
    )

    parser.add_argument(
        "--buffer-size",
        type=int,
        default=1024,
        help="Bytes read per request (default: 1024)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # CONTENT ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--pages-dir", "-d",
        default="pages",
        help="Directory with default/index.html and 404/index.html (default: pages)"
    )

    parser.add_argument(
        "--route", "-r",
        nargs=3,
        action="append",
        default=[],
        metavar=("METHOD", "PATH", "BODY"),
        help="Serve BODY as text/html for METHOD PATH (repeatable)"
    )

    parser.add_argument(
        "--no-index",
        action="store_true",
        help="Don't serve the default page at GET /"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=LOG_LEVELS,
        default="INFO",
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"hddp {__version__}"
    )

    return parser


def build_server(args: argparse.Namespace) -> HTTPServer:
    """Create the server described by parsed CLI arguments."""
    config = ServerConfig(
        host=args.host,
        port=args.port,
        buffer_size=args.buffer_size,
        pages_dir=args.pages_dir,
        log_level=args.log_level,
    )

    server = HTTPServer(config, serve_index=not args.no_index)

    for method, path, body in args.route:
        server.add_route(method, path, build_response(body))

    return server


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        server = build_server(args)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        server.run()
    except BindError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
