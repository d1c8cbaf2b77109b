"""
Grid module for minefield games.

Stores the cells of one game and implements the pure grid algorithms:
neighbour lookup, adjacency counting and the iterative flood reveal.
Game rules (when to place, when the game ends) live in the engine.
"""
from typing import FrozenSet, Iterable, Iterator, List, Optional, Tuple

import numpy as np

from .cell import Cell, CellView
from .placement import Coord, moore_neighbors

Field = Tuple[Tuple[CellView, ...], ...]


# ============================================================================
# Grid Class
# ============================================================================

class Grid:
    """
    A ``width x height`` matrix of cells, addressed as ``(x, y)``.

    Hazards are absent until ``place()`` is called with their positions;
    adjacency counts are computed at that moment and never change again.
    """

    def __init__(self, width: int, height: int) -> None:
        """
        Create an empty grid.

        Args:
            width: Number of columns.
            height: Number of rows.
        """
        self.width = width
        self.height = height
        self._cells: List[List[Cell]] = [
            [Cell() for _ in range(height)] for _ in range(width)
        ]
        self._hazards: FrozenSet[Coord] = frozenset()
        self._placed = False
        self._safe_revealed = 0

    # ========================================================================
    # Lookup (Low-level)
    # ========================================================================

    def in_bounds(self, x: int, y: int) -> bool:
        """Check if position is within grid bounds."""
        return 0 <= x < self.width and 0 <= y < self.height

    def cell(self, x: int, y: int) -> Optional[Cell]:
        """Get cell at position, or None if out of bounds."""
        if not self.in_bounds(x, y):
            return None
        return self._cells[x][y]

    def cells(self) -> Iterator[Tuple[Coord, Cell]]:
        """Iterate over ((x, y), cell) pairs, column by column."""
        for x, column in enumerate(self._cells):
            for y, cell in enumerate(column):
                yield (x, y), cell

    def neighbors(self, x: int, y: int) -> List[Coord]:
        """Get in-bounds Moore neighbours of (x, y), excluding itself."""
        return moore_neighbors(x, y, self.width, self.height)

    # ========================================================================
    # Placement and Adjacency
    # ========================================================================

    @property
    def placed(self) -> bool:
        """Whether hazards have been placed on this grid."""
        return self._placed

    @property
    def hazard_positions(self) -> FrozenSet[Coord]:
        return self._hazards

    def place(self, positions: Iterable[Coord]) -> None:
        """
        Put hazards on the given positions and compute adjacency counts.

        Args:
            positions: Coordinates receiving a hazard.

        Raises:
            RuntimeError: If hazards were already placed on this grid.
        """
        if self._placed:
            raise RuntimeError("Hazards are already placed on this grid")
        self._hazards = frozenset(positions)
        for x, y in self._hazards:
            self._cells[x][y].has_hazard = True
        self._placed = True
        self.compute_adjacency()

    def compute_adjacency(self) -> None:
        """Calculate adjacent hazard counts for all cells."""
        for (x, y), cell in self.cells():
            cell.adjacent_count = self.adjacent_count(x, y)

    def adjacent_count(self, x: int, y: int) -> int:
        """Count hazards among the neighbours of (x, y)."""
        return sum(
            1 for nx, ny in self.neighbors(x, y)
            if self._cells[nx][ny].has_hazard
        )

    # ========================================================================
    # Revealing
    # ========================================================================

    def reveal(self, x: int, y: int) -> bool:
        """Reveal a single cell without propagation."""
        cell = self._cells[x][y]
        if not cell.reveal():
            return False
        if not cell.has_hazard:
            self._safe_revealed += 1
        return True

    def flood_reveal(self, x: int, y: int) -> List[Coord]:
        """
        Reveal the connected zero-count region around (x, y).

        Uses an explicit stack. Cells with a non-zero count are revealed
        but not expanded; flagged and already revealed cells are skipped.

        Args:
            x: Column of a safe starting cell.
            y: Row of a safe starting cell.

        Returns:
            Coordinates revealed by this call, in reveal order.
        """
        revealed: List[Coord] = []
        stack = [(x, y)]
        while stack:
            cx, cy = stack.pop()
            cell = self._cells[cx][cy]
            if cell.has_hazard or not self.reveal(cx, cy):
                continue
            revealed.append((cx, cy))
            if cell.adjacent_count == 0:
                stack.extend(
                    (nx, ny) for nx, ny in self.neighbors(cx, cy)
                    if self._cells[nx][ny].is_hidden
                )
        return revealed

    def expose_hazards(self, trigger: Coord) -> None:
        """Reveal every hazard and mark the one at ``trigger``."""
        for x, y in self._hazards:
            self._cells[x][y].expose()
        tx, ty = trigger
        self._cells[tx][ty].triggered = True

    def all_safe_revealed(self) -> bool:
        """Check if every non-hazard cell is revealed."""
        safe_cells = self.width * self.height - len(self._hazards)
        return self._placed and self._safe_revealed >= safe_cells

    # ========================================================================
    # Views
    # ========================================================================

    def snapshot(self) -> Field:
        """Freeze the grid into columns of ``CellView`` (``field[x][y]``)."""
        return tuple(
            tuple(cell.view(x, y) for y, cell in enumerate(column))
            for x, column in enumerate(self._cells)
        )

    def get_observation(self) -> np.ndarray:
        """
        Get grid state as a numpy array, indexed ``[y, x]``.

        Returns:
            2D int8 array using the ``Cell.to_observation`` encoding.
        """
        obs = np.zeros((self.height, self.width), dtype=np.int8)
        for (x, y), cell in self.cells():
            obs[y, x] = cell.to_observation()
        return obs
