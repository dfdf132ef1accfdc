"""Session state for one Drawlio game.

Bundles the registry, the round state machine and the liveness monitor so
that a server works on one explicitly constructed session instead of
module-level globals.
"""

from dataclasses import dataclass

from drawlio_server.config import MAX_PLAYERS, MIN_PLAYERS, WORDS

from .game import GameLogic
from .liveness import LivenessMonitor
from .registry import SessionRegistry


@dataclass
class GameSession:
    registry: SessionRegistry
    game: GameLogic
    liveness: LivenessMonitor
    max_players: int = MAX_PLAYERS

    @classmethod
    def create(cls, words=WORDS, max_players=MAX_PLAYERS,
               min_players=MIN_PLAYERS, liveness=None,
               rng=None):
        registry = SessionRegistry()
        game = GameLogic(registry, words, min_players=min_players, rng=rng)
        return cls(
            registry=registry,
            game=game,
            liveness=liveness or LivenessMonitor(),
            max_players=max_players,
        )

    @property
    def is_full(self):
        return len(self.registry) >= self.max_players
