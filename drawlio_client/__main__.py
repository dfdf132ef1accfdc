"""Line-based text client for Drawlio.

Usage: python -m drawlio_client [host] [port]

Lines are sent as guesses, except for these commands:

    /draw X Y   draw a point (only the drawer may)
    /canvas     show how many points the current drawing has
    /quit       leave the game
"""

import argparse
import sys
import threading

from drawlio_client.config import DEFAULT_PORT, HOST, SERVER_PORT
from drawlio_client.core import (
    Connection,
    parse_chat,
    parse_game_state,
    parse_scores,
)


def parse_port(value, default=DEFAULT_PORT):
    if value is None:
        return default
    try:
        port = int(value)
    except ValueError:
        print(f"{value} is not a valid port. Using port {default}.", file=sys.stderr)
        return default
    if port < 1 or port > 65535:
        print(f"{value} is out of range (1-65535). Using port {default}.", file=sys.stderr)
        return default
    return port


def describe(message):
    """Render a server message as one line of text, or None to skip it."""
    kind, payload = message.kind, message.payload or ""
    if kind == "CHAT":
        return parse_chat(payload).text
    if kind == "SCORES":
        return "Scores: " + ", ".join(f"Player {pid}: {score}" for pid, score in parse_scores(payload))
    if kind == "DRAWING":
        return f"You are drawing: {payload}"
    if kind == "GUESSING":
        return "New round, start guessing!"
    if kind == "WAITING":
        return "Waiting for more players..."
    if kind == "GAMESTATE":
        state = parse_game_state(payload)
        if state.role == "DRAWING":
            return f"You are drawing: {state.word}"
        if state.role == "CORRECT":
            return "You guessed correctly!"
        return f"State: {state.role.lower()}"
    if kind == "POINT":
        # Collected on the connection canvas instead
        return None
    return f"Unrecognized message: {message.raw!r}"


def handle_line(connection, line):
    """Act on one line of user input. Returns False when the user quits."""
    if line == "/quit":
        return False
    if line == "/canvas":
        print(f"Canvas: {len(connection.canvas)} points")
    elif line.startswith("/draw"):
        try:
            _, x, y = line.split()
            connection.send_point(int(x), int(y))
        except ValueError:
            print("Usage: /draw X Y", file=sys.stderr)
    elif line:
        connection.send_guess(line)
    return True


def main(argv=None):
    parser = argparse.ArgumentParser(prog="drawlio-client", description="Join a Drawlio game.")
    parser.add_argument("host", nargs="?", default=HOST)
    parser.add_argument("port", nargs="?")
    args = parser.parse_args(argv)

    def show(message):
        line = describe(message)
        if line:
            print(line)

    connection = Connection(args.host, parse_port(args.port, SERVER_PORT), listener=show)
    connection.open()
    try:
        player_id = connection.wait_connected()
    except ConnectionError as exc:
        print(exc, file=sys.stderr)
        return 1
    print(f"Connected as: Player {player_id}")

    receiver = threading.Thread(target=connection.run, daemon=True)
    receiver.start()
    try:
        for line in sys.stdin:
            if connection.closed or not handle_line(connection, line.strip()):
                break
    except KeyboardInterrupt:
        pass
    finally:
        connection.stop()
    if connection.exit_message:
        print(connection.exit_message, file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
