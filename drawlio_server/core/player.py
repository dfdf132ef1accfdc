"""Player entity for the Drawlio server."""

from dataclasses import dataclass, field
from typing import Tuple

Address = Tuple[str, int]


@dataclass(eq=False)
class Player:
    """One connected participant, identified by its transport address.

    Players compare by identity; two players never share an id or address.
    """

    id: int
    address: Address
    guessing: bool = False
    drawing: bool = False
    score: int = 0
    unresponded_checks: int = field(default=0, repr=False)

    def clear_role(self):
        self.guessing = False
        self.drawing = False

    def __str__(self):
        return f"Player {self.id}"
