"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest and provides
fixtures available to all test files.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from gridmemory.feedback.base import FeedbackSink
from gridmemory.game.clock import ManualClock
from gridmemory.game.engine import GameEngine
from gridmemory.game.models import GameResult, GameState, GridPosition
from gridmemory.settings import GameSettings, SettingsStore


class RecordingFeedback(FeedbackSink):
    """Feedback sink that remembers every cue it receives."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def game_started(self) -> None:
        self.events.append(("game_started",))

    def sequence_step_shown(self, position, grid_size) -> None:
        self.events.append(("step_shown", position))

    def correct_tap(self, position, grid_size) -> None:
        self.events.append(("correct_tap", position))

    def wrong_tap(self) -> None:
        self.events.append(("wrong_tap",))

    def level_completed(self, level) -> None:
        self.events.append(("level_completed", level))

    def celebrate(self, duration) -> None:
        self.events.append(("celebrate", duration))

    def names(self) -> list[str]:
        return [event[0] for event in self.events]


class FakeStats:
    """Statistics sink that keeps results in memory."""

    def __init__(self) -> None:
        self.results: list[GameResult] = []

    def record(self, result: GameResult) -> None:
        self.results.append(result)


@dataclass
class Harness:
    """An engine wired to a manual clock and recording collaborators."""

    engine: GameEngine
    clock: ManualClock
    settings: SettingsStore
    feedback: RecordingFeedback
    stats: FakeStats = field(default_factory=FakeStats)

    async def wait_for(self, state: GameState, step: float = 0.1, limit: float = 30.0) -> None:
        """Advance time until the engine reaches `state`."""
        waited = 0.0
        while self.engine.state != state:
            if waited >= limit:
                raise AssertionError(f"Engine stuck in {self.engine.state}, wanted {state}")
            await self.clock.advance(step)
            waited += step

    def tap_sequence(self) -> None:
        """Tap every remaining step correctly."""
        for position in self.engine.sequence[self.engine.current_index:]:
            self.engine.cell_tapped(position)

    def wrong_position(self) -> GridPosition:
        """A position that differs from the next expected step."""
        expected = self.engine.sequence[self.engine.current_index]
        return next(p for p in self.engine.configuration.positions() if p != expected)


@pytest.fixture
def make_harness():
    """Factory building a Harness with the given settings overrides."""

    def factory(seed: int = 7, **overrides) -> Harness:
        settings = SettingsStore(GameSettings(**overrides))
        clock = ManualClock()
        feedback = RecordingFeedback()
        stats = FakeStats()
        engine = GameEngine(
            settings=settings,
            feedback=feedback,
            stats=stats,
            clock=clock,
            seed=seed,
        )
        return Harness(engine=engine, clock=clock, settings=settings, feedback=feedback, stats=stats)

    return factory


@pytest.fixture
def make_recorder():
    """Factory for feedback sinks that record their cues."""
    return RecordingFeedback


@pytest.fixture
def stats_paths(tmp_path: Path) -> tuple[Path, Path]:
    """Return temporary stats and history file paths."""
    return tmp_path / "user_stats.json", tmp_path / "game_history.jsonl"
