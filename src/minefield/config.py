"""
Configuration for a minefield game.

Holds the grid dimensions, hazard count and the knobs that shape
hazard placement and timing. Validation happens eagerly so that an
impossible game is rejected at construction, never at reveal time.
"""
from dataclasses import dataclass
from typing import Optional

from .errors import ConfigurationError
from .placement import ExclusionPolicy, max_hazards


@dataclass(frozen=True)
class GameConfig:
    """
    Parameters of a single game.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        hazard_count: Total hazards to place on the first reveal.
        policy: Which cells are kept hazard-free around the first reveal.
        seed: Seed for the placement RNG (None for OS entropy).
        tick_interval: Seconds between duration ticks.
    """

    width: int = 9
    height: int = 9
    hazard_count: int = 10
    policy: ExclusionPolicy = ExclusionPolicy.CELL
    seed: Optional[int] = None
    tick_interval: float = 1.0

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.width < 1 or self.height < 1:
            raise ConfigurationError("Grid dimensions must be positive")
        if self.hazard_count < 0:
            raise ConfigurationError("Hazard count cannot be negative")
        limit = max_hazards(self.policy, self.width, self.height)
        if self.hazard_count > limit:
            raise ConfigurationError(
                f"Too many hazards for a {self.width}x{self.height} grid "
                f"with {self.policy.name.lower()} exclusion (max {limit})"
            )
        if self.tick_interval <= 0:
            raise ConfigurationError("Tick interval must be positive")

    @property
    def total_cells(self) -> int:
        """Number of cells in the grid."""
        return self.width * self.height

    @property
    def safe_cells(self) -> int:
        """Number of cells without a hazard."""
        return self.total_cells - self.hazard_count
