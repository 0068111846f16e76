from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from .app import create_app
from .config import load_settings


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        stream=sys.stdout,
    )


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Lottery scrape and analysis server")
    parser.add_argument("--env-file", type=str, default=None, help="Path to .env file with settings")
    parser.add_argument("--host", type=str, default=None, help="Bind address (default from HOST).")
    parser.add_argument("--port", type=int, default=None, help="Listen port (default from PORT).")
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging (default INFO)."
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    configure_logging(args.verbose)
    settings = load_settings(args.env_file)
    logger = logging.getLogger("lottoanalysis.server")

    app = create_app()
    host = args.host or settings.server.host
    port = args.port or settings.server.port
    logger.info("Server starting at http://%s:%s", host, port)
    try:
        app.run(host=host, port=port, debug=settings.flask.debug, use_reloader=False, threaded=True)
    except KeyboardInterrupt:
        print("Server stopped by user.")


if __name__ == "__main__":
    main()
