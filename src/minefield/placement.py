"""
Hazard placement for minefield grids.

Hazards are placed lazily on the first reveal of a game. Placement is a
pure function of the grid size, the hazard count, an exclusion set and
a random source; the engine decides when to call it.
"""
import random
from enum import Enum, auto
from typing import FrozenSet, Iterable, List, Set, Tuple

Coord = Tuple[int, int]


# ============================================================================
# Exclusion Policy
# ============================================================================

class ExclusionPolicy(Enum):
    """Which cells stay hazard-free around the first revealed cell."""

    CELL = auto()
    NEIGHBORHOOD = auto()


def moore_neighbors(x: int, y: int, width: int, height: int) -> List[Coord]:
    """
    Get in-bounds neighbours of a cell.

    Args:
        x: Column of the centre cell.
        y: Row of the centre cell.
        width: Number of columns in the grid.
        height: Number of rows in the grid.

    Returns:
        Up to 8 (x, y) tuples, never including the centre cell.
    """
    neighbors = []
    for delta_y in (-1, 0, 1):
        for delta_x in (-1, 0, 1):
            if delta_x == 0 and delta_y == 0:
                continue
            new_x = x + delta_x
            new_y = y + delta_y
            if 0 <= new_x < width and 0 <= new_y < height:
                neighbors.append((new_x, new_y))
    return neighbors


def excluded_cells(
    policy: ExclusionPolicy, width: int, height: int, x: int, y: int
) -> Set[Coord]:
    """Cells that must stay hazard-free when (x, y) is revealed first."""
    excluded = {(x, y)}
    if policy is ExclusionPolicy.NEIGHBORHOOD:
        excluded.update(moore_neighbors(x, y, width, height))
    return excluded


def max_hazards(policy: ExclusionPolicy, width: int, height: int) -> int:
    """
    Largest hazard count that can be placed wherever the first reveal lands.

    The neighbourhood policy is sized for the worst case, an interior
    cell whose full 3x3 block is excluded.
    """
    if policy is ExclusionPolicy.NEIGHBORHOOD:
        worst_case = min(3, width) * min(3, height)
    else:
        worst_case = 1
    return width * height - worst_case


# ============================================================================
# Placement
# ============================================================================

def place_hazards(
    width: int,
    height: int,
    count: int,
    exclude: Iterable[Coord],
    rng: random.Random,
) -> FrozenSet[Coord]:
    """
    Choose hazard positions uniformly among non-excluded cells.

    Args:
        width: Number of columns.
        height: Number of rows.
        count: Exact number of hazards to place.
        exclude: Coordinates that must not receive a hazard.
        rng: Random source used for sampling.

    Returns:
        Frozenset of exactly ``count`` distinct (x, y) positions.

    Raises:
        ValueError: If fewer than ``count`` cells are available.
    """
    excluded = set(exclude)
    candidates = [
        (x, y)
        for y in range(height)
        for x in range(width)
        if (x, y) not in excluded
    ]
    if count > len(candidates):
        raise ValueError(
            f"Cannot place {count} hazards in {len(candidates)} free cells"
        )
    return frozenset(rng.sample(candidates, count))
