"""Port utilities for the Drawlio server.

Validates port numbers given on the command line and finds an available UDP
port for the game socket, with optional fallback behavior.
"""

import socket

from .config import DEFAULT_PORT, SERVER_HOST


def parse_port(value, default=DEFAULT_PORT):
    """Parse a port number given as text.

    Args:
        value: Raw port value, usually a command-line argument
        default: Port returned when value is missing or invalid

    Returns:
        Tuple of (port, error message or None)
    """
    if value is None:
        return default, None
    try:
        port = int(value)
    except (TypeError, ValueError):
        return default, f"{value} is not a valid port. Using port {default}."
    if port < 1 or port > 65535:
        return default, f"{value} is out of range (1-65535). Using port {default}."
    return port, None


def _can_bind(host, port):
    test_socket = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        test_socket.bind((host, port))
        return True
    except OSError:
        return False
    finally:
        test_socket.close()


def find_available_port(start_port, max_attempts=50, allow_fallback=True, host=SERVER_HOST):
    """Find an available UDP port for the game server.

    Attempts to bind a datagram socket starting from start_port and
    incrementing until an available port is found or max_attempts is reached.

    Args:
        start_port: Port number to start search from
        max_attempts: Maximum number of ports to try
        allow_fallback: If True, search multiple ports; if False, try only start_port
        host: Address to probe on

    Returns:
        Available port number, or None if no port found
    """
    if not allow_fallback:
        return start_port if _can_bind(host, start_port) else None
    for port in range(start_port, min(start_port + max_attempts, 65536)):
        if _can_bind(host, port):
            return port
    return None
