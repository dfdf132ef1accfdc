"""Session registry for the Drawlio server.

Maps transport addresses to players and owns identity assignment. The
registry keeps players in turn order: the player at the front of the queue
is the drawer of the active round, or the next drawer.
"""

import itertools
from collections import deque

from .player import Player


class TurnQueue:
    """Rotatable ordered sequence of players.

    Index 0 is always the acting (or next) drawer. rotate() moves the front
    player to the back so the following player draws next.
    """

    def __init__(self):
        self._players = deque()

    def append(self, player):
        self._players.append(player)

    def remove(self, player):
        self._players.remove(player)

    def rotate(self):
        self._players.rotate(-1)

    @property
    def front(self):
        return self._players[0] if self._players else None

    def __iter__(self):
        return iter(self._players)

    def __len__(self):
        return len(self._players)

    def __contains__(self, player):
        return player in self._players


class SessionRegistry:
    """Owns the players of one game session.

    Ids start at 1 and increase for the lifetime of the registry; an id is
    never handed out twice, even after its player is removed.
    """

    def __init__(self, first_id=1):
        self._ids = itertools.count(first_id)
        self.players = TurnQueue()

    def find_by_address(self, address):
        """Find the player that sends from the given address.

        Args:
            address: (host, port) tuple of the remote endpoint

        Returns:
            The matching player, or None if the address is unknown
        """
        return next((p for p in self.players if p.address == address), None)

    def create(self, address):
        """Create a player for address with the next identity value.

        The player is not tracked until add() is called.
        """
        return Player(id=next(self._ids), address=address)

    def add(self, player):
        self.players.append(player)

    def remove(self, player):
        """Stop tracking a player. Returns False if it was not tracked."""
        if player not in self.players:
            return False
        self.players.remove(player)
        return True

    def __iter__(self):
        return iter(self.players)

    def __len__(self):
        return len(self.players)
