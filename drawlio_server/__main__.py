"""Command-line launcher for the Drawlio server.

Usage: python -m drawlio_server [port]
"""

import argparse
import logging
import sys

from drawlio_server.config import (
    LOG_LEVEL,
    PREFERRED_PORT,
    SERVER_HOST,
    SERVER_PORT_AUTO_FALLBACK,
    WORDS,
    find_available_port,
    parse_port,
)
from drawlio_server.core.state import GameSession
from drawlio_server.server import DrawlioServer


def main(argv=None):
    parser = argparse.ArgumentParser(prog="drawlio-server", description="Run a Drawlio game server.")
    parser.add_argument("port", nargs="?", help=f"UDP port to listen on (default {PREFERRED_PORT})")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    port, error = parse_port(args.port, default=PREFERRED_PORT)
    if error:
        print(error, file=sys.stderr)

    port = find_available_port(port, allow_fallback=SERVER_PORT_AUTO_FALLBACK)
    if port is None:
        logging.getLogger("drawlio_server").error("Could not find an available port")
        return 1

    server = DrawlioServer(GameSession.create(words=WORDS))
    server.bind(SERVER_HOST, port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        server.shutdown()
    return 0


if __name__ == "__main__":
    sys.exit(main())
