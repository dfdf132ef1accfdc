from .connection import Connection
from .protocol import (
    ChatLine,
    GameState,
    ServerMessage,
    build_message,
    parse_chat,
    parse_game_state,
    parse_points,
    parse_scores,
    parse_server_message,
)

__all__ = [
    "Connection",
    "ChatLine",
    "GameState",
    "ServerMessage",
    "build_message",
    "parse_chat",
    "parse_game_state",
    "parse_points",
    "parse_scores",
    "parse_server_message",
]
