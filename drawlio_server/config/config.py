"""Server configuration for Drawlio.

Loads environment variables for the bind address, port, player limits,
liveness timing and the word catalog.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Server connection configuration
SERVER_HOST = os.environ.get("SERVER_HOST", "0.0.0.0")
DEFAULT_PORT = 50505
PREFERRED_PORT = int(os.environ.get("SERVER_PORT", DEFAULT_PORT))
SERVER_PORT_AUTO_FALLBACK = os.environ.get(
    "SERVER_PORT_AUTO_FALLBACK", "false").lower() == "true"

# Receive poll timeout, bounds how late a liveness sweep can run
SOCKET_TIMEOUT = float(os.environ.get("SOCKET_TIMEOUT", 0.1))
MAX_DATAGRAM_SIZE = 512

# Game rules
MAX_PLAYERS = int(os.environ.get("MAX_PLAYERS", 11))
MIN_PLAYERS = int(os.environ.get("MIN_PLAYERS", 2))

# Liveness checks
CHECK_DELAY = float(os.environ.get("CHECK_DELAY", 4))  # seconds before first sweep
CHECK_INTERVAL = float(os.environ.get("CHECK_INTERVAL", 2))  # seconds between sweeps
MAX_UNRESPONDED_CHECKS = int(os.environ.get("MAX_UNRESPONDED_CHECKS", 4))
CHECK_TOKEN_BYTES = 12

DEFAULT_WORDS = (
    "apple", "sweden", "war", "cool", "tree",
    "rain", "angry", "slide", "fast", "ostrich",
)
WORDS = tuple(
    w.strip() for w in os.environ.get("DRAWLIO_WORDS", "").split(",") if w.strip()
) or DEFAULT_WORDS

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
