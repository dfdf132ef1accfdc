"""Client-side network protocol utilities for Drawlio.

Decodes server datagrams into ServerMessage records and builds the
messages a client sends.
"""

from dataclasses import dataclass
from typing import Optional

DELIMITER = "|"


@dataclass(frozen=True)
class ServerMessage:
    kind: str
    payload: Optional[str] = None
    raw: bytes = b""


@dataclass(frozen=True)
class ChatLine:
    text: str
    colored: bool = False
    bold: bool = False


@dataclass(frozen=True)
class GameState:
    role: str
    word: Optional[str] = None


def parse_server_message(data):
    """Split a datagram into its kind and remaining payload.

    Raises:
        ValueError: If the datagram is not UTF-8
    """
    text = data.decode("utf-8")
    values = text.split(DELIMITER, 1)
    payload = values[1] if len(values) == 2 else None
    return ServerMessage(kind=values[0].upper(), payload=payload, raw=data)


def parse_chat(payload):
    """Parse a CHAT payload of the form COLOR|BOLD|text."""
    values = payload.split(DELIMITER, 2)
    if len(values) != 3:
        return ChatLine(text=payload)
    return ChatLine(text=values[2], colored=values[0] == "COLOR", bold=values[1] == "BOLD")


def parse_points(payload):
    """Parse a comma separated list of x:y points, skipping bad entries."""
    points = []
    for item in payload.split(","):
        xy = item.split(":")
        if len(xy) != 2:
            continue
        try:
            points.append((int(xy[0]), int(xy[1])))
        except ValueError:
            continue
    return points


def parse_scores(payload):
    """Parse a SCORES payload into (player id, score) pairs."""
    return parse_points(payload) if payload else []


def parse_game_state(payload):
    values = payload.split(DELIMITER, 1)
    return GameState(role=values[0], word=values[1] if len(values) == 2 else None)


def build_message(kind, *fields):
    return DELIMITER.join([kind.upper(), *(str(f) for f in fields)]).encode("utf-8")
