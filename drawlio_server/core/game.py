"""Round state machine for the Drawlio server.

Holds the game-wide state: whether the game is waiting for players, the
current word, who draws and who guesses, the guess order of the current
round and the points drawn so far. It does not touch the network; the
router asks it questions and reports events to it.
"""

import logging
import random
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Tuple

from drawlio_server.config import MIN_PLAYERS

from .player import Player
from .protocol import MessageKind

logger = logging.getLogger(__name__)


class GamePhase(str, Enum):
    WAITING_FOR_PLAYERS = "WAITING_FOR_PLAYERS"
    ROUND_ACTIVE = "ROUND_ACTIVE"


class GuessLedger:
    """Players who guessed correctly this round, most recent first.

    The front entry guessed last and is worth 1 point; each earlier guesser
    is worth one point more than the one who followed them.
    """

    def __init__(self):
        self._players = deque()

    def record(self, player):
        self._players.appendleft(player)

    def awards(self):
        """Yield (player, points) pairs, slowest guesser first."""
        for index, player in enumerate(self._players):
            yield player, index + 1

    def clear(self):
        self._players.clear()

    def __contains__(self, player):
        return player in self._players

    def __len__(self):
        return len(self._players)


class WordPool:
    """Shuffled draw-down pool over a fixed word catalog.

    No word repeats until every catalog word has been drawn once; the pool
    is refilled from the whole catalog and reshuffled when it runs out.
    """

    def __init__(self, words, rng=None):
        if not words:
            raise ValueError("word catalog must not be empty")
        self.words = tuple(words)
        self._rng = rng or random.Random()
        self._pool = []
        self._refill()

    def _refill(self):
        self._pool = list(self.words)
        self._rng.shuffle(self._pool)

    def draw(self):
        if not self._pool:
            self._refill()
        return self._pool.pop(0)

    def __len__(self):
        return len(self._pool)


@dataclass
class RoundResult:
    """Outcome of a finished round."""

    word: str
    awards: List[Tuple[Player, int]] = field(default_factory=list)
    continues: bool = False


class GameLogic:
    """Logic and state of one Drawlio game.

    Handles adding and removing players, starting and finishing rounds,
    distributing score and validating guesses. It is not responsible for the
    receive loop or for talking to clients.
    """

    def __init__(self, registry, words,
                 min_players=MIN_PLAYERS, rng=None):
        self.registry = registry
        self.min_players = min_players
        self.waiting_for_players = True
        self.word_pool = WordPool(words, rng)
        self.guessed_correct = GuessLedger()
        self.current_word = None
        self.drawing_points = set()

    @property
    def players(self):
        return self.registry.players

    @property
    def phase(self):
        if self.waiting_for_players:
            return GamePhase.WAITING_FOR_PLAYERS
        return GamePhase.ROUND_ACTIVE

    def add_player(self, player):
        """Add a player to the game.

        If a round is in progress the newcomer joins as a guesser.

        Returns:
            True if the game was waiting and now has enough players, in
            which case the caller must start a round
        """
        self.registry.add(player)
        if self.waiting_for_players and len(self.players) >= self.min_players:
            self.waiting_for_players = False
            return True
        if not self.waiting_for_players:
            player.guessing = True
        return False

    def remove_player(self, player):
        return self.registry.remove(player)

    def is_action_legal(self, player, action):
        """Check whether a player may perform an action in the current state.

        Args:
            player: The acting player, or None if the sender is unknown
            action: Kind of the message the player sent

        Returns:
            True if the action is allowed
        """
        if action is MessageKind.CONNECT:
            return player is None
        if player is None or self.waiting_for_players:
            return False
        if action is MessageKind.GUESS:
            return player.guessing
        if action is MessageKind.POINT:
            return player.drawing
        return False

    def guess_word(self, player, guess):
        """Evaluate a guess, case-insensitively.

        A correct guesser stops guessing and is recorded in the ledger.
        """
        if self.current_word is None or guess.lower() != self.current_word.lower():
            return False
        player.guessing = False
        self.guessed_correct.record(player)
        return True

    def has_guessed_correct(self, player):
        return player in self.guessed_correct

    def add_point(self, x, y):
        self.drawing_points.add((x, y))

    def is_round_finished(self):
        """Whether the active round can no longer continue.

        That is the case when the drawer is gone, when a two-player game has
        no guesser left, or when a larger game has fewer than two guessers.
        """
        num_guessing = sum(1 for p in self.players if p.guessing)
        drawer_exists = any(p.drawing for p in self.players)
        if not drawer_exists:
            return True
        if len(self.players) <= 2:
            return num_guessing == 0
        return num_guessing < 2

    def finish_round(self):
        """Distribute score, clear roles and decide what happens next.

        Drops back to waiting when fewer than min_players remain.
        """
        awards = list(self.guessed_correct.awards())
        for player, points in awards:
            player.score += points
        for player in self.players:
            player.clear_role()
        self.guessed_correct.clear()

        result = RoundResult(word=self.current_word or "", awards=awards)
        self.current_word = None
        if len(self.players) < self.min_players:
            self.waiting_for_players = True
        else:
            result.continues = True
        logger.info("Round finished. Word: %s", result.word.upper())
        return result

    def new_round(self, is_first):
        """Start a round and return its drawer.

        Turn order rotates by one unless this is a first round, i.e. one
        started by players joining a waiting game.
        """
        if not is_first:
            self.players.rotate()
        for player in self.players:
            player.guessing = True
            player.drawing = False
        drawer = self.players.front
        drawer.guessing = False
        drawer.drawing = True
        self.current_word = self.word_pool.draw()
        self.drawing_points.clear()
        logger.info("New round: %s is drawing %s", drawer, self.current_word)
        return drawer
