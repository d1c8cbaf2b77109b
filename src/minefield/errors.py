"""
Exceptions raised by the minefield engine.

Only two conditions are ever raised to a caller: a configuration that
cannot produce a valid game, and use of an engine after ``destroy()``.
Stale or illegal in-game actions are absorbed as no-ops.
"""


class MinefieldError(Exception):
    """Base class for all minefield errors."""


class ConfigurationError(MinefieldError, ValueError):
    """Raised at construction when the game parameters are unusable."""


class DisposedError(MinefieldError, RuntimeError):
    """Raised when an engine is used after it has been destroyed."""
