"""
User settings and the store that publishes changes to them.

The engine only reads snapshots; the presentation layer calls update().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import TYPE_CHECKING, Callable

from gridmemory.config import (
    BETWEEN_SHOW_DELAY,
    DEFAULT_DIFFICULTY,
    DEFAULT_GRID_SIZE,
    DEFAULT_SHOW_DURATION,
    DEFAULT_VOLUME,
    GRID_SIZES,
    INITIAL_SEQUENCE_LENGTH,
    MAX_SEQUENCE_LENGTH,
)

if TYPE_CHECKING:
    from gridmemory.game.models import GameConfiguration

logger = logging.getLogger(__name__)

DIFFICULTY_MODES = ("random", "progressive")

SettingsListener = Callable[["GameSettings", "GameSettings"], None]


@dataclass(frozen=True)
class GameSettings:
    """
    Snapshot of the user's game settings.

    Attributes:
        grid_size: Rows (and columns) of the grid, one of GRID_SIZES
        difficulty: Sequence strategy, "random" or "progressive"
        show_duration: Seconds each step stays highlighted
        timed_mode: Per-round countdown that ends the game on expiry
        forgiving_mode: Lives with a score penalty instead of instant game over
        confetti_enabled: Celebrate every third level
        sound_enabled: Play a tone per cell
        haptics_enabled: Vibrate on cues
        volume: Tone volume, 0.0 to 1.0
    """

    grid_size: int = DEFAULT_GRID_SIZE
    difficulty: str = DEFAULT_DIFFICULTY
    show_duration: float = DEFAULT_SHOW_DURATION
    timed_mode: bool = False
    forgiving_mode: bool = False
    confetti_enabled: bool = True
    sound_enabled: bool = True
    haptics_enabled: bool = True
    volume: float = DEFAULT_VOLUME

    def __post_init__(self) -> None:
        if self.grid_size not in GRID_SIZES:
            raise ValueError(f"Grid size must be one of {GRID_SIZES}, got {self.grid_size}")
        if self.difficulty not in DIFFICULTY_MODES:
            raise ValueError(
                f"Unknown difficulty '{self.difficulty}'. Available: {', '.join(DIFFICULTY_MODES)}"
            )
        if self.show_duration <= 0:
            raise ValueError(f"Show duration must be positive, got {self.show_duration}")
        if not 0.0 <= self.volume <= 1.0:
            raise ValueError(f"Volume must be between 0 and 1, got {self.volume}")

    @property
    def grid_size_display(self) -> str:
        return f"{self.grid_size}×{self.grid_size}"

    def to_configuration(self) -> GameConfiguration:
        """Build the immutable per-round configuration."""
        from gridmemory.game.models import GameConfiguration

        return GameConfiguration(
            grid_size=self.grid_size,
            initial_sequence_length=INITIAL_SEQUENCE_LENGTH,
            max_sequence_length=MAX_SEQUENCE_LENGTH,
            show_duration=self.show_duration,
            between_show_delay=BETWEEN_SHOW_DELAY,
        )


class SettingsStore:
    """
    Holds the current GameSettings and notifies listeners on change.

    Listeners receive (old, new) snapshots and are only called when at
    least one field actually changed.
    """

    def __init__(self, settings: GameSettings | None = None) -> None:
        self._settings = settings or GameSettings()
        self._listeners: list[SettingsListener] = []

    @property
    def snapshot(self) -> GameSettings:
        return self._settings

    def create_configuration(self) -> GameConfiguration:
        return self._settings.to_configuration()

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **changes) -> GameSettings:
        """
        Replace some settings fields.

        Raises:
            ValueError: If a field name is unknown or a value is invalid
        """
        known = {f.name for f in fields(GameSettings)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

        old = self._settings
        new = replace(old, **changes)
        if new == old:
            return old

        self._settings = new
        logger.debug(f"Settings changed: {changes}")
        for listener in list(self._listeners):
            listener(old, new)
        return new
