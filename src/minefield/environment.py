"""
Gymnasium environment wrapper for minefield.

Provides a standard RL interface over the engine so that automated
players can drive complete games.
"""
from typing import Any, Dict, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .clock import ManualScheduler
from .config import GameConfig
from .engine import Minesweeper, Progress
from .render import render_ascii
from .state import GameStatus


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for minefield.

    Observation:
        2D array indexed ``[y, x]`` where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = revealed cell with adjacent hazard count
        - 9 = revealed hazard

    Actions:
        Discrete action space of size width * height.
        Action i reveals cell (i % width, i // width).

    Rewards:
        - +1 for revealing a safe cell
        - +10 for winning the game
        - -10 for hitting a hazard
        - -0.1 for an ignored action (already revealed or flagged)

    The engine clock runs on virtual time advanced one tick per step, so
    ``info["duration"]`` counts steps.
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the environment.

        Args:
            config: Game configuration (default: 9x9 with 10 hazards).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or GameConfig()
        self.scheduler = ManualScheduler()
        self.game = Minesweeper.from_config(self.config, scheduler=self.scheduler)
        self.render_mode = render_mode

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(self.config.total_cells)

        self._steps = 0
        self._progress = self.game.query_progress()

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new game.

        Args:
            seed: Reseeds hazard placement when given.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        if seed is not None:
            self.game.destroy()
            config = GameConfig(
                width=self.config.width,
                height=self.config.height,
                hazard_count=self.config.hazard_count,
                policy=self.config.policy,
                seed=seed,
                tick_interval=self.config.tick_interval,
            )
            self.game = Minesweeper.from_config(config, scheduler=self.scheduler)
        self._progress = self.game.reset()
        self._steps = 0
        return self._progress.to_observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Reveal the cell addressed by ``action``.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        x, y = self.action_to_position(action)
        self._steps += 1

        previous = self._progress
        self._progress = self.game.reveal(x, y)
        self.scheduler.advance(self.config.tick_interval)
        reward = self._calculate_reward(previous, x, y)
        self._progress = self.game.query_progress()

        terminated = self._progress.status.is_terminal
        return (
            self._progress.to_observation(),
            reward,
            terminated,
            False,
            self._get_info(),
        )

    def action_to_position(self, action: int) -> Tuple[int, int]:
        """Convert flat action index to (x, y) position."""
        return int(action) % self.config.width, int(action) // self.config.width

    def position_to_action(self, x: int, y: int) -> int:
        """Convert (x, y) position to flat action index."""
        return y * self.config.width + x

    def _calculate_reward(self, previous: Progress, x: int, y: int) -> float:
        """Reward for revealing (x, y), given the snapshot before the step."""
        before = previous.cell(x, y)
        if previous.status.is_terminal or before.revealed or before.flagged:
            return -0.1
        status = self._progress.status
        if status is GameStatus.WON:
            return 10.0
        if status is GameStatus.LOST:
            return -10.0
        return 1.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        progress = self._progress
        revealed = sum(
            1 for column in progress.field for cell in column
            if cell.revealed and not cell.has_hazard
        )
        return {
            "steps": self._steps,
            "revealed": revealed,
            "total_safe": self.config.safe_cells,
            "game_state": progress.status.name,
            "duration": progress.duration,
            "valid_actions": int(self.get_action_mask().sum()),
        }

    @property
    def progress(self) -> Progress:
        return self._progress

    def render(self) -> Optional[str]:
        """Render the current game state."""
        if self.render_mode == "ansi":
            return render_ascii(self._progress)
        if self.render_mode == "human":
            print(render_ascii(self._progress))
        return None

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = hidden, unflagged cell.
        """
        return self._progress.to_observation().flatten() == -1

    def close(self) -> None:
        self.game.destroy()
        super().close()
