"""
Game dataclasses: grid addresses, cells, configuration, score and results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from gridmemory.config import (
    BETWEEN_SHOW_DELAY,
    DEFAULT_GRID_SIZE,
    DEFAULT_SHOW_DURATION,
    INITIAL_SEQUENCE_LENGTH,
    MAX_LIVES,
    MAX_SEQUENCE_LENGTH,
    MIN_PENALTY,
    PENALTY_PER_STEP,
    SCORE_PER_STEP,
    TIMER_BASE_SECONDS,
    TIMER_SECONDS_PER_LEVEL,
)


class GameState(str, Enum):
    """Phases of a game session."""

    READY = "ready"
    SHOWING = "showing"
    PLAYING = "playing"
    WAITING = "waiting"
    PAUSED = "paused"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class GridPosition:
    """
    A cell address on the grid.

    Attributes:
        row: Zero-based row index
        column: Zero-based column index
    """

    row: int
    column: int

    def __str__(self) -> str:
        return f"({self.row}, {self.column})"


@dataclass
class GridCell:
    """
    Visual feedback flags for one grid cell.

    None of these flags carry gameplay state; they only tell the
    presentation layer how to draw the cell.
    """

    position: GridPosition
    is_highlighted: bool = False
    is_selected: bool = False
    is_wrong: bool = False

    def clear(self) -> None:
        self.is_highlighted = False
        self.is_selected = False
        self.is_wrong = False


@dataclass(frozen=True)
class GameConfiguration:
    """
    Immutable per-round configuration derived from the user settings.

    Attributes:
        grid_size: Number of rows (and columns)
        initial_sequence_length: Sequence length at level 1
        max_sequence_length: Upper bound on the sequence length
        show_duration: Seconds each step stays highlighted
        between_show_delay: Seconds between two highlighted steps
    """

    grid_size: int = DEFAULT_GRID_SIZE
    initial_sequence_length: int = INITIAL_SEQUENCE_LENGTH
    max_sequence_length: int = MAX_SEQUENCE_LENGTH
    show_duration: float = DEFAULT_SHOW_DURATION
    between_show_delay: float = BETWEEN_SHOW_DELAY

    def contains(self, position: GridPosition) -> bool:
        """Whether the position lies on this grid."""
        return 0 <= position.row < self.grid_size and 0 <= position.column < self.grid_size

    def positions(self) -> list[GridPosition]:
        """All grid positions in row-major order."""
        return [
            GridPosition(row, column)
            for row in range(self.grid_size)
            for column in range(self.grid_size)
        ]


@dataclass
class GameScore:
    """
    Mutable score aggregate for one game.

    Attributes:
        current_level: 1-indexed level
        current_sequence_length: Length of the sequence for this level
        max_sequence_length: Cap on current_sequence_length
        total_score: Points earned so far
        streak: Levels cleared without a mistake
        best_streak: Longest streak in this game
        is_timed_mode: Whether the round timer is active
        time_remaining: Seconds left on the round timer (timed mode only)
        lives: Lives left (forgiving mode only)
        max_lives: Lives granted at game start
    """

    current_level: int = 1
    current_sequence_length: int = INITIAL_SEQUENCE_LENGTH
    max_sequence_length: int = MAX_SEQUENCE_LENGTH
    total_score: int = 0
    streak: int = 0
    best_streak: int = 0
    is_timed_mode: bool = False
    time_remaining: float = 0.0
    lives: int = MAX_LIVES
    max_lives: int = MAX_LIVES

    def __post_init__(self) -> None:
        self.current_sequence_length = min(
            self.current_sequence_length, self.max_sequence_length
        )
        if self.is_timed_mode and self.time_remaining <= 0:
            self.time_remaining = self.round_time_limit

    @property
    def round_time_limit(self) -> float:
        """Seconds allowed per round at the current level."""
        return TIMER_BASE_SECONDS + self.current_level * TIMER_SECONDS_PER_LEVEL

    @property
    def mistake_penalty(self) -> int:
        """Points deducted for a forgiven mistake."""
        return max(self.current_sequence_length * PENALTY_PER_STEP, MIN_PENALTY)

    def increment_level(self) -> None:
        """Advance to the next level after a fully reproduced sequence."""
        self.current_level += 1
        self.current_sequence_length = min(
            self.current_sequence_length + 1, self.max_sequence_length
        )
        self.streak += 1
        self.best_streak = max(self.best_streak, self.streak)
        self.total_score += self.current_sequence_length * SCORE_PER_STEP
        if self.is_timed_mode:
            self.reset_timer()

    def reset_streak(self) -> None:
        self.streak = 0

    def reset_timer(self) -> None:
        self.time_remaining = self.round_time_limit

    def lose_life(self) -> bool:
        """Spend one life. Returns True if any lives remain."""
        self.lives = max(self.lives - 1, 0)
        return self.lives > 0

    def apply_mistake_penalty(self) -> None:
        self.total_score = max(self.total_score - self.mistake_penalty, 0)


@dataclass(frozen=True)
class GameResult:
    """
    Complete record of a finished game.

    Attributes:
        level: Level reached
        score: Final total score
        best_streak: Longest streak in the game
        sequence_length: Sequence length when the game ended
        grid_size: Grid size played on
        difficulty: Sequence strategy name
        timed: Whether timed mode was on
        forgiving: Whether forgiving mode was on
        play_seconds: Wall time from start to game over
        timestamp: When the game ended
    """

    level: int
    score: int
    best_streak: int
    sequence_length: int
    grid_size: int
    difficulty: str
    timed: bool
    forgiving: bool
    play_seconds: float
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "level": self.level,
            "score": self.score,
            "best_streak": self.best_streak,
            "sequence_length": self.sequence_length,
            "grid_size": self.grid_size,
            "difficulty": self.difficulty,
            "timed": self.timed,
            "forgiving": self.forgiving,
            "play_seconds": round(self.play_seconds, 2),
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> GameResult:
        return cls(
            level=int(data["level"]),
            score=int(data["score"]),
            best_streak=int(data.get("best_streak", 0)),
            sequence_length=int(data.get("sequence_length", 0)),
            grid_size=int(data.get("grid_size", DEFAULT_GRID_SIZE)),
            difficulty=data.get("difficulty", "random"),
            timed=bool(data.get("timed", False)),
            forgiving=bool(data.get("forgiving", False)),
            play_seconds=float(data.get("play_seconds", 0.0)),
            timestamp=datetime.fromisoformat(data["timestamp"])
            if "timestamp" in data
            else datetime.now(),
        )
