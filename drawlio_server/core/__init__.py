from .game import GameLogic, GamePhase, GuessLedger, RoundResult, WordPool
from .liveness import LivenessMonitor, SweepResult
from .player import Player
from .protocol import MessageKind, ProtocolError, decode_client_message, encode_message
from .registry import SessionRegistry, TurnQueue
from .state import GameSession

__all__ = [
    "GameLogic",
    "GamePhase",
    "GuessLedger",
    "RoundResult",
    "WordPool",
    "LivenessMonitor",
    "SweepResult",
    "Player",
    "MessageKind",
    "ProtocolError",
    "decode_client_message",
    "encode_message",
    "SessionRegistry",
    "TurnQueue",
    "GameSession",
]
