"""Text rendering of game snapshots."""
from .cell import CellView
from .engine import Progress

HIDDEN = "#"
FLAG = "F"
EMPTY = "."
HAZARD = "*"
TRIGGERED = "X"


def render_cell(cell: CellView) -> str:
    """Single-character symbol for a cell; flags win over every other state."""
    if cell.flagged:
        return FLAG
    if not cell.revealed:
        return HIDDEN
    if cell.triggered:
        return TRIGGERED
    if cell.has_hazard:
        return HAZARD
    if cell.adjacent_count == 0:
        return EMPTY
    return str(cell.adjacent_count)


def render_ascii(progress: Progress) -> str:
    """Render a snapshot as one line of space-separated symbols per row."""
    rows = []
    for y in range(progress.height):
        rows.append(" ".join(
            render_cell(progress.field[x][y]) for x in range(progress.width)
        ))
    return "\n".join(rows)


def render_status(progress: Progress, hazard_count: int) -> str:
    """One-line banner: status, remaining hazard counter and duration."""
    remaining = hazard_count - progress.flag_count
    return (
        f"[{progress.status.value.upper()}] "
        f"hazards left: {remaining}  time: {progress.duration}s"
    )
