"""
Cell module for minefield grids.

Represents individual cells with their visual state (hidden, revealed
or flagged) and content (hazard or adjacency count), plus the frozen
view of a cell handed out in snapshots.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Tuple


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


HIDDEN_OBSERVATION = -1
FLAGGED_OBSERVATION = -2
HAZARD_OBSERVATION = 9


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    A single mutable cell of the grid.

    Attributes:
        has_hazard: Whether this cell holds a hazard.
        adjacent_count: Count of hazards in neighbouring cells (0-8).
        state: Current visual state (hidden, revealed, or flagged).
        triggered: Whether revealing this hazard lost the game.
    """

    has_hazard: bool = False
    adjacent_count: int = 0
    state: CellState = CellState.HIDDEN
    triggered: bool = False

    def reveal(self) -> bool:
        """
        Reveal this cell.

        Returns:
            True if cell was revealed, False if already revealed or
            flagged.
        """
        if self.state != CellState.HIDDEN:
            return False
        self.state = CellState.REVEALED
        return True

    def flag(self) -> bool:
        """Flag a hidden cell. Returns False if nothing changed."""
        if self.state != CellState.HIDDEN:
            return False
        self.state = CellState.FLAGGED
        return True

    def unflag(self) -> bool:
        """Remove a flag. Returns False if nothing changed."""
        if self.state != CellState.FLAGGED:
            return False
        self.state = CellState.HIDDEN
        return True

    def expose(self) -> None:
        """Reveal a hazard at game end, dropping any flag on it."""
        self.state = CellState.REVEALED

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden."""
        return self.state == CellState.HIDDEN

    @property
    def is_revealed(self) -> bool:
        """Check if cell is revealed."""
        return self.state == CellState.REVEALED

    @property
    def is_flagged(self) -> bool:
        """Check if cell is flagged."""
        return self.state == CellState.FLAGGED

    def to_observation(self) -> int:
        """
        Convert cell to an integer observation.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Revealed cell with adjacent hazard count
            9: Revealed hazard
        """
        if self.state == CellState.HIDDEN:
            return HIDDEN_OBSERVATION
        if self.state == CellState.FLAGGED:
            return FLAGGED_OBSERVATION
        if self.has_hazard:
            return HAZARD_OBSERVATION
        return self.adjacent_count

    def view(self, x: int, y: int) -> "CellView":
        """Freeze the current state of this cell at (x, y)."""
        return CellView(
            x=x,
            y=y,
            has_hazard=self.has_hazard,
            adjacent_count=self.adjacent_count,
            revealed=self.is_revealed,
            flagged=self.is_flagged,
            triggered=self.triggered,
        )


@dataclass(frozen=True)
class CellView:
    """Immutable copy of a cell, as exposed to hosts."""

    x: int
    y: int
    has_hazard: bool
    adjacent_count: int
    revealed: bool
    flagged: bool
    triggered: bool

    @property
    def coord(self) -> Tuple[int, int]:
        """Position as an ``(x, y)`` pair."""
        return (self.x, self.y)

    def to_observation(self) -> int:
        """Same encoding as ``Cell.to_observation``."""
        if self.flagged:
            return FLAGGED_OBSERVATION
        if not self.revealed:
            return HIDDEN_OBSERVATION
        if self.has_hazard:
            return HAZARD_OBSERVATION
        return self.adjacent_count
