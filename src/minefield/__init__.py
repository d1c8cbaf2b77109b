"""
Minefield game module.

Provides the game engine (grid, hazard placement, state machine,
actions and duration clock) plus text and Gymnasium hosts.
"""
from .cell import Cell, CellState, CellView
from .clock import Clock, EventType, ManualScheduler, Notifier, Subscription
from .config import GameConfig
from .engine import Minesweeper, Progress
from .environment import MinesweeperEnv
from .errors import ConfigurationError, DisposedError, MinefieldError
from .grid import Grid
from .placement import ExclusionPolicy, excluded_cells, max_hazards, place_hazards
from .render import render_ascii, render_status
from .state import GameStatus, can_transition

__all__ = [
    "Cell",
    "CellState",
    "CellView",
    "Clock",
    "EventType",
    "ManualScheduler",
    "Notifier",
    "Subscription",
    "GameConfig",
    "Minesweeper",
    "Progress",
    "MinesweeperEnv",
    "ConfigurationError",
    "DisposedError",
    "MinefieldError",
    "Grid",
    "ExclusionPolicy",
    "excluded_cells",
    "max_hazards",
    "place_hazards",
    "render_ascii",
    "render_status",
    "GameStatus",
    "can_transition",
]
