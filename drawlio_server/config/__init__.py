from .config import (
    CHECK_DELAY,
    CHECK_INTERVAL,
    CHECK_TOKEN_BYTES,
    DEFAULT_PORT,
    DEFAULT_WORDS,
    LOG_LEVEL,
    MAX_DATAGRAM_SIZE,
    MAX_PLAYERS,
    MAX_UNRESPONDED_CHECKS,
    MIN_PLAYERS,
    PREFERRED_PORT,
    SERVER_HOST,
    SERVER_PORT_AUTO_FALLBACK,
    SOCKET_TIMEOUT,
    WORDS,
)
from .ports import find_available_port, parse_port

__all__ = [
    "CHECK_DELAY",
    "CHECK_INTERVAL",
    "CHECK_TOKEN_BYTES",
    "DEFAULT_PORT",
    "DEFAULT_WORDS",
    "LOG_LEVEL",
    "MAX_DATAGRAM_SIZE",
    "MAX_PLAYERS",
    "MAX_UNRESPONDED_CHECKS",
    "MIN_PLAYERS",
    "PREFERRED_PORT",
    "SERVER_HOST",
    "SERVER_PORT_AUTO_FALLBACK",
    "SOCKET_TIMEOUT",
    "WORDS",
    "find_available_port",
    "parse_port",
]
