"""Server-side wire protocol for Drawlio.

Every datagram is UTF-8 text made of fields joined by "|". The first field
is the message kind, matched case-insensitively on receipt and always sent
in uppercase. Client messages are decoded once, here, into small typed
records so the router never compares raw strings.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from drawlio_server.config import MAX_DATAGRAM_SIZE

DELIMITER = "|"
POINT_SEPARATOR = ","
COORD_SEPARATOR = ":"


class MessageKind(str, Enum):
    # Client -> server
    CONNECT = "CONNECT"
    GUESS = "GUESS"
    POINT = "POINT"
    CHECK = "CHECK"
    DISCONNECT = "DISCONNECT"
    # Server -> client (POINT and CHECK travel both ways)
    CONNECTED = "CONNECTED"
    CHAT = "CHAT"
    SCORES = "SCORES"
    DRAWING = "DRAWING"
    GUESSING = "GUESSING"
    WAITING = "WAITING"
    GAMESTATE = "GAMESTATE"


class ProtocolError(ValueError):
    """Raised when a datagram cannot be decoded into a client message."""


@dataclass(frozen=True)
class Connect:
    kind = MessageKind.CONNECT


@dataclass(frozen=True)
class Guess:
    text: str
    kind = MessageKind.GUESS


@dataclass(frozen=True)
class Point:
    x: int
    y: int
    kind = MessageKind.POINT


@dataclass(frozen=True)
class Check:
    token: str
    kind = MessageKind.CHECK


@dataclass(frozen=True)
class Disconnect:
    kind = MessageKind.DISCONNECT


ClientMessage = Union[Connect, Guess, Point, Check, Disconnect]


def parse_point(text):
    """Parse an "x:y" coordinate pair.

    Raises:
        ProtocolError: If the text is not two integers separated by ":"
    """
    parts = text.split(COORD_SEPARATOR)
    if len(parts) != 2:
        raise ProtocolError(f"malformed point {text!r}")
    try:
        return int(parts[0]), int(parts[1])
    except ValueError:
        raise ProtocolError(f"malformed point {text!r}") from None


def format_point(point):
    return f"{point[0]}{COORD_SEPARATOR}{point[1]}"


def decode_client_message(data):
    """Decode one inbound datagram.

    Args:
        data: Raw datagram payload

    Returns:
        The decoded client message

    Raises:
        ProtocolError: On bad encoding, unknown kind or malformed payload
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        raise ProtocolError("datagram is not valid UTF-8") from None

    # Split the kind from its value, the value itself may contain "|"
    values = text.split(DELIMITER, 1)
    try:
        kind = MessageKind(values[0].strip().upper())
    except ValueError:
        raise ProtocolError(f"unknown message kind {values[0][:20]!r}") from None
    payload = values[1] if len(values) == 2 else None

    if kind is MessageKind.CONNECT:
        return Connect()
    if kind is MessageKind.DISCONNECT:
        return Disconnect()
    if payload is None:
        raise ProtocolError(f"{kind.value} requires a payload")
    if kind is MessageKind.GUESS:
        return Guess(payload)
    if kind is MessageKind.POINT:
        return Point(*parse_point(payload))
    if kind is MessageKind.CHECK:
        return Check(payload)
    raise ProtocolError(f"{kind.value} is not accepted from clients")


def encode_message(kind, *fields):
    """Join a kind and its fields into a datagram payload."""
    return DELIMITER.join([kind.value, *(str(f) for f in fields)]).encode("utf-8")


def chat_fields(text, colored=False, bold=False, max_size=MAX_DATAGRAM_SIZE):
    """Build the fields of a CHAT message.

    The text is cut on a UTF-8 character boundary so the encoded message
    never exceeds max_size bytes.
    """
    fields = ["COLOR" if colored else "", "BOLD" if bold else ""]
    budget = max_size - len(encode_message(MessageKind.CHAT, *fields, ""))
    encoded = text.encode("utf-8")
    if len(encoded) > budget:
        text = encoded[:budget].decode("utf-8", errors="ignore")
    return [*fields, text]


def format_scores(players):
    """Render the scoreboard as "id:score" pairs, highest score first."""
    ranked = sorted(players, key=lambda p: p.score, reverse=True)
    return POINT_SEPARATOR.join(f"{p.id}{COORD_SEPARATOR}{p.score}" for p in ranked)


def chunk_points(points, max_size=MAX_DATAGRAM_SIZE):
    """Split points into POINT payloads that each fit in one datagram.

    Args:
        points: (x, y) coordinates to send
        max_size: Datagram budget in bytes, including the "POINT|" prefix

    Returns:
        Comma-separated payload strings, empty if there are no points
    """
    budget = max_size - len(encode_message(MessageKind.POINT, ""))
    chunks = []
    current = []
    size = 0
    for point in points:
        encoded = format_point(point)
        # A separator is needed in front of every point but the first
        extra = len(encoded.encode("utf-8")) + (1 if current else 0)
        if current and size + extra > budget:
            chunks.append(POINT_SEPARATOR.join(current))
            current = []
            size = 0
            extra = len(encoded.encode("utf-8"))
        current.append(encoded)
        size += extra
    if current:
        chunks.append(POINT_SEPARATOR.join(current))
    return chunks
