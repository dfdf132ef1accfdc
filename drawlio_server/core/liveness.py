"""Liveness checks for Drawlio players.

A background timer only raises a flag. The receive loop drains that flag
and runs the sweep itself, so sweeps never overlap message handling.
"""

import logging
import secrets
import threading
from dataclasses import dataclass, field
from typing import List

from drawlio_server.config import (
    CHECK_DELAY,
    CHECK_INTERVAL,
    CHECK_TOKEN_BYTES,
    MAX_UNRESPONDED_CHECKS,
)

from .player import Player

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    evicted: List[Player] = field(default_factory=list)
    token: str = ""


class LivenessMonitor:
    """Issues check tokens and tracks which players stopped answering.

    Args:
        first_delay: Seconds before the first check is due
        interval: Seconds between following checks
        max_unresponded: Missed checks after which a player is evicted
        token_bytes: Random bytes per token (sent hex encoded)
    """

    def __init__(self, first_delay=CHECK_DELAY, interval=CHECK_INTERVAL,
                 max_unresponded=MAX_UNRESPONDED_CHECKS, token_bytes=CHECK_TOKEN_BYTES):
        self.first_delay = first_delay
        self.interval = interval
        self.max_unresponded = max_unresponded
        self.token_bytes = token_bytes
        self.last_token = None
        self._check_due = threading.Event()
        self._stop = threading.Event()
        self._thread = None

    def start(self):
        """Start the timer thread that marks checks as due."""
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._timer_loop, name="liveness-timer", daemon=True)
        self._thread.start()

    def stop(self):
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1)
            self._thread = None

    def _timer_loop(self):
        delay = self.first_delay
        while not self._stop.wait(delay):
            self._check_due.set()
            delay = self.interval

    def consume_due(self):
        """Return True once per timer firing, clearing the flag."""
        if not self._check_due.is_set():
            return False
        self._check_due.clear()
        return True

    def sweep(self, players):
        """Evaluate the previous check and issue a fresh token.

        Players that reached max_unresponded are returned for eviction; the
        counter of every other player goes up by one. The caller removes the
        evicted players and sends the new token to the rest.
        """
        result = SweepResult()
        for player in list(players):
            if player.unresponded_checks >= self.max_unresponded:
                logger.info("%s failed too many checks, removing", player)
                result.evicted.append(player)
            else:
                player.unresponded_checks += 1
        self.last_token = secrets.token_hex(self.token_bytes)
        result.token = self.last_token
        return result

    def acknowledge(self, player, token):
        """Reset a player's counter if token answers the latest check."""
        if self.last_token is None or token != self.last_token:
            return False
        player.unresponded_checks = 0
        return True
