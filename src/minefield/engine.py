"""
Game engine for minefield.

``Minesweeper`` owns one grid, one status and one clock. Every action
runs synchronously to completion and returns an immutable ``Progress``
snapshot; stale or illegal actions leave the state untouched and return
the current snapshot instead of raising.
"""
import logging
import random
import weakref
from dataclasses import dataclass
from typing import Optional

import numpy as np

from .cell import CellView
from .clock import Callback, Clock, EventType, Notifier, Scheduler, Subscription
from .config import GameConfig
from .errors import DisposedError
from .grid import Field, Grid
from .placement import ExclusionPolicy, excluded_cells, place_hazards
from .state import GameStatus, StateMachine

logger = logging.getLogger(__name__)


# ============================================================================
# Snapshot
# ============================================================================

@dataclass(frozen=True)
class Progress:
    """
    Immutable snapshot of a game.

    Attributes:
        field: Columns of cell views, indexed ``field[x][y]``.
        status: Life-cycle state at snapshot time.
        duration: Elapsed seconds of play.
    """

    field: Field
    status: GameStatus
    duration: int

    @property
    def width(self) -> int:
        return len(self.field)

    @property
    def height(self) -> int:
        return len(self.field[0]) if self.field else 0

    def cell(self, x: int, y: int) -> CellView:
        return self.field[x][y]

    @property
    def flag_count(self) -> int:
        """Number of flagged cells."""
        return sum(cell.flagged for column in self.field for cell in column)

    def to_observation(self) -> np.ndarray:
        """
        Encode the snapshot as an int8 array indexed ``[y, x]``.

        Returns:
            -1 hidden, -2 flagged, 0-8 revealed count, 9 revealed hazard.
        """
        obs = np.zeros((self.height, self.width), dtype=np.int8)
        for column in self.field:
            for cell in column:
                obs[cell.y, cell.x] = cell.to_observation()
        return obs


# ============================================================================
# Engine
# ============================================================================

class Minesweeper:
    """
    A single-player mine-clearing game.

    Hazards are placed on the first reveal so that the first revealed
    cell (and, under ``ExclusionPolicy.NEIGHBORHOOD``, its neighbours)
    is always safe. The clock runs while the game is ``ACTIVE``.

    After ``destroy()`` every method except ``destroy`` itself raises
    ``DisposedError``.
    """

    def __init__(
        self,
        width: int,
        height: int,
        hazard_count: int,
        *,
        policy: ExclusionPolicy = ExclusionPolicy.CELL,
        seed: Optional[int] = None,
        tick_interval: float = 1.0,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        """
        Create a dormant game.

        Args:
            width: Number of columns.
            height: Number of rows.
            hazard_count: Hazards to place on the first reveal.
            policy: Exclusion policy for the first reveal.
            seed: Seed for hazard placement.
            tick_interval: Seconds between duration ticks.
            scheduler: Event loop for the clock; defaults to the running
                asyncio loop.

        Raises:
            ConfigurationError: If the hazards cannot be placed validly.
        """
        self._config = GameConfig(
            width=width,
            height=height,
            hazard_count=hazard_count,
            policy=policy,
            seed=seed,
            tick_interval=tick_interval,
        )
        self._rng = random.Random(seed)
        self._notifier = Notifier()
        self._clock = Clock(self._notifier, tick_interval, scheduler)
        self._state = StateMachine()
        self._grid = Grid(width, height)
        self._destroyed = False
        self._finalizer = weakref.finalize(self, self._clock.pending.cancel)

    @classmethod
    def from_config(
        cls, config: GameConfig, scheduler: Optional[Scheduler] = None
    ) -> "Minesweeper":
        """Create a game from an existing configuration."""
        return cls(
            config.width,
            config.height,
            config.hazard_count,
            policy=config.policy,
            seed=config.seed,
            tick_interval=config.tick_interval,
            scheduler=scheduler,
        )

    def __enter__(self) -> "Minesweeper":
        return self

    def __exit__(self, *exc_info) -> None:
        self.destroy()

    # ========================================================================
    # Accessors
    # ========================================================================

    @property
    def config(self) -> GameConfig:
        return self._config

    @property
    def width(self) -> int:
        return self._config.width

    @property
    def height(self) -> int:
        return self._config.height

    @property
    def hazard_count(self) -> int:
        return self._config.hazard_count

    @property
    def status(self) -> GameStatus:
        self._check_alive()
        return self._state.status

    @property
    def duration(self) -> int:
        self._check_alive()
        return self._clock.duration

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    # ========================================================================
    # Actions
    # ========================================================================

    def reveal(self, x: int, y: int) -> Progress:
        """
        Reveal the cell at (x, y).

        Ignored when the game is over, the position is out of bounds, or
        the cell is already revealed or flagged. The first reveal places
        hazards and starts the clock; revealing a hazard loses the game;
        revealing a zero-count cell floods its region.

        Returns:
            Snapshot after the action.
        """
        self._check_alive()
        if not self._can_reveal(x, y):
            logger.debug("Ignoring reveal of (%d, %d) in %s", x, y, self._state.status.name)
            return self._progress()

        if self._state.status is GameStatus.DORMANT:
            self._start(x, y)

        if self._grid.cell(x, y).has_hazard:
            self._lose(x, y)
        else:
            self._grid.flood_reveal(x, y)
            if self._grid.all_safe_revealed():
                self._finish(GameStatus.WON)
        return self._progress()

    def flag(self, x: int, y: int) -> Progress:
        """Flag a hidden cell; ignored on revealed cells or after the game ends."""
        self._check_alive()
        if self._can_mark(x, y):
            self._grid.cell(x, y).flag()
        return self._progress()

    def unflag(self, x: int, y: int) -> Progress:
        """Remove a flag; ignored when there is none or after the game ends."""
        self._check_alive()
        if self._can_mark(x, y):
            self._grid.cell(x, y).unflag()
        return self._progress()

    def toggle_flag(self, x: int, y: int) -> Progress:
        """Flag or unflag depending on the current state of the cell."""
        self._check_alive()
        cell = self._grid.cell(x, y)
        if cell is not None and cell.is_flagged:
            return self.unflag(x, y)
        return self.flag(x, y)

    def reset(self) -> Progress:
        """Start over with the same dimensions and hazard count."""
        self._check_alive()
        self._grid = Grid(self.width, self.height)
        self._state.reset()
        self._clock.reset()
        logger.debug("Game reset")
        return self._progress()

    def query_progress(self) -> Progress:
        """Get the current snapshot without side effects."""
        self._check_alive()
        return self._progress()

    # ========================================================================
    # Subscriptions and Teardown
    # ========================================================================

    def subscribe(self, event: EventType, callback: Callback) -> Subscription:
        """
        Register ``callback`` for ``event``.

        ``DURATION_CHANGE`` subscribers receive the new duration in
        seconds on every tick, and 0 when a reset clears the clock.
        """
        self._check_alive()
        return self._notifier.subscribe(event, callback)

    def unsubscribe(self, subscription: Subscription) -> None:
        self._check_alive()
        self._notifier.unsubscribe(subscription)

    def destroy(self) -> None:
        """Release the clock and all subscribers. Safe to call twice."""
        if self._destroyed:
            return
        self._destroyed = True
        self._finalizer()
        self._clock.close()
        self._notifier.clear()

    # ========================================================================
    # Internals
    # ========================================================================

    def _check_alive(self) -> None:
        if self._destroyed:
            raise DisposedError("This game has been destroyed")

    def _can_reveal(self, x: int, y: int) -> bool:
        if self._state.status.is_terminal:
            return False
        cell = self._grid.cell(x, y)
        return cell is not None and cell.is_hidden

    def _can_mark(self, x: int, y: int) -> bool:
        if self._state.status.is_terminal:
            return False
        cell = self._grid.cell(x, y)
        return cell is not None and not cell.is_revealed

    def _start(self, x: int, y: int) -> None:
        """Place hazards around the first reveal and start the clock."""
        exclude = excluded_cells(self._config.policy, self.width, self.height, x, y)
        hazards = place_hazards(
            self.width, self.height, self.hazard_count, exclude, self._rng
        )
        self._grid.place(hazards)
        self._state.transition(GameStatus.ACTIVE)
        self._clock.start()
        logger.debug("Placed %d hazards after first reveal at (%d, %d)", len(hazards), x, y)

    def _lose(self, x: int, y: int) -> None:
        self._grid.reveal(x, y)
        self._grid.expose_hazards((x, y))
        self._finish(GameStatus.LOST)

    def _finish(self, status: GameStatus) -> None:
        self._state.transition(status)
        self._clock.stop()
        logger.info("Game %s after %d seconds", status.value, self._clock.duration)

    def _progress(self) -> Progress:
        return Progress(
            field=self._grid.snapshot(),
            status=self._state.status,
            duration=self._clock.duration,
        )
