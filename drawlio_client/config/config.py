"""Client configuration for Drawlio.

Loads environment variables for the server address and receive timing.
"""

import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_PORT = 50505

# Server connection configuration with environment variable overrides
HOST = os.environ.get("HOST", "127.0.0.1")
SERVER_PORT = int(os.environ.get("SERVER_PORT", DEFAULT_PORT))

# The server sends a check roughly every 2 seconds
RECEIVE_TIMEOUT = float(os.environ.get("RECEIVE_TIMEOUT", 3))
RECEIVE_BUFFER = 2048
