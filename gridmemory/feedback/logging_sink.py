"""
Feedback sink that reports cues through the logging module.

Used by the terminal client in place of real haptics and audio: each cue
is logged as the effect a device would produce, honoring the sound and
haptic toggles in the current settings.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from gridmemory.feedback.base import FeedbackSink
from gridmemory.feedback.sound import note_frequency

if TYPE_CHECKING:
    from gridmemory.game.models import GridPosition
    from gridmemory.settings import SettingsStore

logger = logging.getLogger(__name__)


class LoggingFeedback(FeedbackSink):
    """Logs the haptic and sound effect each cue would trigger."""

    def __init__(self, settings: SettingsStore) -> None:
        self._settings = settings

    def _haptic(self, kind: str) -> None:
        if self._settings.snapshot.haptics_enabled:
            logger.debug(f"Haptic: {kind}")

    def _tone(self, position: GridPosition, grid_size: int) -> None:
        settings = self._settings.snapshot
        if settings.sound_enabled:
            frequency = note_frequency(position, grid_size)
            logger.debug(
                f"Tone {frequency:.2f}Hz at volume {settings.volume:.0%} for cell {position}"
            )

    def game_started(self) -> None:
        self._haptic("warning")
        logger.info("Game started")

    def sequence_step_shown(self, position: GridPosition, grid_size: int) -> None:
        self._haptic("impact")
        self._tone(position, grid_size)

    def correct_tap(self, position: GridPosition, grid_size: int) -> None:
        self._haptic("selection")
        self._tone(position, grid_size)

    def wrong_tap(self) -> None:
        self._haptic("error")

    def level_completed(self, level: int) -> None:
        self._haptic("success")
        logger.info(f"Level completed, now on level {level}")

    def celebrate(self, duration: float) -> None:
        logger.info(f"Confetti for {duration:.1f}s")
