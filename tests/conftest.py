"""
Pytest configuration and shared fixtures.
"""
import pytest
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minefield import Cell, GameConfig, Grid, ManualScheduler, Minesweeper


# ============================================================================
# Engine Fixtures
# ============================================================================

@pytest.fixture
def scheduler() -> ManualScheduler:
    """Virtual-time scheduler driving the engine clock."""
    return ManualScheduler()


@pytest.fixture
def default_game(scheduler: ManualScheduler) -> Minesweeper:
    """Create a 9x9 game with 10 hazards."""
    game = Minesweeper(9, 9, 10, seed=1234, scheduler=scheduler)
    yield game
    game.destroy()


@pytest.fixture
def empty_game(scheduler: ManualScheduler) -> Minesweeper:
    """Create a game with no hazards for flood testing."""
    game = Minesweeper(5, 5, 0, scheduler=scheduler)
    yield game
    game.destroy()


@pytest.fixture
def rig_hazards(monkeypatch):
    """
    Force the next placements onto fixed positions.

    Returns a function taking the hazard coordinates; the exclusion set
    passed by the engine is recorded in the returned list.
    """
    calls = []

    def rig(*positions):
        def fake_place(width, height, count, exclude, rng):
            calls.append(set(exclude))
            assert len(positions) == count
            return frozenset(positions)

        monkeypatch.setattr("minefield.engine.place_hazards", fake_place)
        return calls

    return rig


# ============================================================================
# Grid and Cell Fixtures
# ============================================================================

@pytest.fixture
def corner_grid() -> Grid:
    """A 3x3 grid with a single hazard at (2, 2)."""
    grid = Grid(3, 3)
    grid.place({(2, 2)})
    return grid


@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def hazard_cell() -> Cell:
    """Create a cell containing a hazard."""
    return Cell(has_hazard=True)


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> GameConfig:
    """Create a valid game configuration."""
    return GameConfig(9, 9, 10)
