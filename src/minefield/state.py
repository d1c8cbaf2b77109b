"""
Life-cycle states of a minefield game.

Status only moves forward, ``DORMANT -> ACTIVE -> {WON, LOST}``, until
a reset brings any state back to ``DORMANT``.
"""
from enum import Enum
from typing import Dict, FrozenSet


class GameStatus(Enum):
    """Possible states of the game."""

    DORMANT = "dormant"
    ACTIVE = "active"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        """Check if the game has ended."""
        return self in (GameStatus.WON, GameStatus.LOST)


_TRANSITIONS: Dict[GameStatus, FrozenSet[GameStatus]] = {
    GameStatus.DORMANT: frozenset({GameStatus.ACTIVE}),
    GameStatus.ACTIVE: frozenset(
        {GameStatus.ACTIVE, GameStatus.WON, GameStatus.LOST}
    ),
    GameStatus.WON: frozenset(),
    GameStatus.LOST: frozenset(),
}


def can_transition(source: GameStatus, target: GameStatus) -> bool:
    """
    Check whether a game may move from ``source`` to ``target``.

    Reset is always allowed and is not part of this table.
    """
    return target in _TRANSITIONS[source]


class StateMachine:
    """Holds the current status and enforces forward-only transitions."""

    def __init__(self) -> None:
        self._status = GameStatus.DORMANT

    @property
    def status(self) -> GameStatus:
        return self._status

    def transition(self, target: GameStatus) -> None:
        """
        Move to ``target``.

        Raises:
            RuntimeError: If the move is not in the transition table.
        """
        if not can_transition(self._status, target):
            raise RuntimeError(
                f"illegal transition {self._status.name} -> {target.name}"
            )
        self._status = target

    def reset(self) -> None:
        self._status = GameStatus.DORMANT
