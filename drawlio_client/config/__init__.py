from .config import DEFAULT_PORT, HOST, RECEIVE_TIMEOUT, RECEIVE_BUFFER, SERVER_PORT

__all__ = ["DEFAULT_PORT", "HOST", "RECEIVE_TIMEOUT", "RECEIVE_BUFFER", "SERVER_PORT"]
