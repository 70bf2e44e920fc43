"""
Feedback sink protocol for haptic, sound and celebration cues.

The engine fires these notifications and never waits on them; a sink
that fails only loses its own effect.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gridmemory.game.models import GridPosition


class FeedbackSink:
    """
    Base class for feedback collaborators.

    Every hook is a no-op here, so subclasses override only the cues
    they can produce (a haptics-only sink ignores celebrate(), etc.).
    """

    def game_started(self) -> None:
        """Called when a new game begins."""
        pass

    def sequence_step_shown(self, position: GridPosition, grid_size: int) -> None:
        """Called as each step of the sequence is highlighted."""
        pass

    def correct_tap(self, position: GridPosition, grid_size: int) -> None:
        """Called when the player taps the expected cell."""
        pass

    def wrong_tap(self) -> None:
        """Called when the player taps the wrong cell."""
        pass

    def level_completed(self, level: int) -> None:
        """Called after a sequence is fully reproduced. `level` is the new level."""
        pass

    def celebrate(self, duration: float) -> None:
        """Called when a confetti celebration starts."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class NullFeedback(FeedbackSink):
    """Feedback sink that does nothing."""


class CompositeFeedback(FeedbackSink):
    """
    Fans every cue out to several sinks.

    A failing sink does not stop the others from receiving the cue.
    """

    def __init__(self, *sinks: FeedbackSink) -> None:
        self._sinks = list(sinks)

    @property
    def sinks(self) -> list[FeedbackSink]:
        return list(self._sinks)

    def _broadcast(self, hook: str, *args) -> None:
        errors: list[Exception] = []
        for sink in self._sinks:
            try:
                getattr(sink, hook)(*args)
            except Exception as e:
                errors.append(e)
        if errors:
            raise errors[0]

    def game_started(self) -> None:
        self._broadcast("game_started")

    def sequence_step_shown(self, position: GridPosition, grid_size: int) -> None:
        self._broadcast("sequence_step_shown", position, grid_size)

    def correct_tap(self, position: GridPosition, grid_size: int) -> None:
        self._broadcast("correct_tap", position, grid_size)

    def wrong_tap(self) -> None:
        self._broadcast("wrong_tap")

    def level_completed(self, level: int) -> None:
        self._broadcast("level_completed", level)

    def celebrate(self, duration: float) -> None:
        self._broadcast("celebrate", duration)

    def __repr__(self) -> str:
        return f"CompositeFeedback({', '.join(repr(s) for s in self._sinks)})"
