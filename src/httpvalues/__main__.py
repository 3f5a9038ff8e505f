"""
=============================================================================
COMMAND LINE: SERVE A DIRECTORY
=============================================================================

    python -m httpvalues ./site
    python -m httpvalues ./site --allow site/public --allow site/assets
    python -m httpvalues ./site --fallback ./site/index.html --port 3000

Serves files under ROOT through Dir, optionally restricted to the
--allow directories, falling back to --fallback and then to 404.
Runs on wsgiref's single-threaded development server.

=============================================================================
"""

import argparse
import logging
import os
from typing import Optional
from wsgiref.simple_server import make_server

from . import __version__
from .config import ResponderConfig, configure, setup_logging
from .handlers import Dir, Dirs, File, NotFound
from .http.request import HTTPRequest
from .http.response import Responder
from .wsgi import WSGIApp


logger = logging.getLogger(__name__)


def build_handler(root: str, allow: Optional[list[str]] = None, fallback: Optional[str] = None):
    """
    Build the request handler the CLI serves.

    Args:
        root: Directory to serve.
        allow: Directories (as joined with root) that may be served.
               None or empty allows everything under root.
        fallback: File served when the request matches nothing.
    """
    static = Dir(root, filter=Dirs(allow) if allow else None)
    last: Responder = File(fallback) if fallback else NotFound()

    def handler(request: HTTPRequest) -> Responder:
        return static.handle_opt(request) or last

    return handler


def main(argv: Optional[list[str]] = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="httpvalues",
        description="Serve files from a directory tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m httpvalues ./site                          # Serve everything under ./site
  python -m httpvalues ./site --allow site/public      # Only files inside site/public
  python -m httpvalues ./site --fallback site/404.html # Custom page for misses
        """,
    )

    parser.add_argument("root", help="Directory to serve")

    parser.add_argument(
        "--allow", "-a",
        action="append",
        default=None,
        metavar="DIR",
        help="Only serve files inside DIR (repeatable; path as joined with ROOT)",
    )

    parser.add_argument(
        "--fallback", "-f",
        default=None,
        help="File to serve when nothing else matches",
    )

    parser.add_argument(
        "--host", "-H",
        default="127.0.0.1",
        help="Host to bind to (default: 127.0.0.1)",
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=8080,
        help="Port to listen on (default: 8080)",
    )

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Logging level (default: HTTPVALUES_LOG_LEVEL or INFO)",
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"httpvalues {__version__}",
    )

    args = parser.parse_args(argv)

    if not os.path.isdir(args.root):
        parser.error(f"not a directory: {args.root}")

    config = ResponderConfig.from_env()
    if args.log_level:
        config.log_level = args.log_level
    configure(config)
    setup_logging(config)

    app = WSGIApp(build_handler(args.root, args.allow, args.fallback))

    with make_server(args.host, args.port, app) as server:
        logger.info(f"Serving {args.root} on http://{args.host}:{args.port}")
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logger.info("Received keyboard interrupt")


if __name__ == "__main__":
    main()
