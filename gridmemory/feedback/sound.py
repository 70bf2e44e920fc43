"""
Pentatonic note mapping for grid cells.

Each cell plays its own tone, so the same pattern always sounds the same.
"""

from __future__ import annotations

from gridmemory.game.models import GridPosition

# C major pentatonic, C4 through A8 (Hz)
NOTE_FREQUENCIES: tuple[float, ...] = (
    261.63, 293.66, 329.63, 392.00, 440.00,
    523.25, 587.33, 659.25, 783.99, 880.00,
    1046.50, 1174.66, 1318.51, 1567.98, 1760.00,
    2093.00, 2349.32, 2637.02, 3135.96, 3520.00,
    4186.01, 4698.63, 5274.04, 6271.93, 7040.00,
)


def note_index(position: GridPosition, grid_size: int) -> int:
    """Index into NOTE_FREQUENCIES for a cell (row-major, wrapping)."""
    cell_index = position.row * grid_size + position.column
    return cell_index % len(NOTE_FREQUENCIES)


def note_frequency(position: GridPosition, grid_size: int) -> float:
    """Tone frequency in Hz for a cell."""
    return NOTE_FREQUENCIES[note_index(position, grid_size)]
