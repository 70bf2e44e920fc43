"""
Lifetime player statistics with JSON persistence.

The aggregate lives in a small JSON file; every finished game is also
appended to a JSONL history for the dashboard.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from gridmemory.config import HISTORY_PATH, STATS_PATH
from gridmemory.game.models import GameResult

logger = logging.getLogger(__name__)


@dataclass
class UserStats:
    """
    Best results and totals across all games.

    Attributes:
        highest_level: Highest level reached (at least 1)
        highest_score: Best final score
        best_streak: Longest streak in any game
        total_games_played: Number of finished games
        total_play_time: Seconds spent playing
    """

    highest_level: int = 1
    highest_score: int = 0
    best_streak: int = 0
    total_games_played: int = 0
    total_play_time: float = 0.0

    def update_from_result(self, result: GameResult) -> None:
        """Fold a finished game into the totals."""
        self.highest_level = max(self.highest_level, result.level)
        self.highest_score = max(self.highest_score, result.score)
        self.best_streak = max(self.best_streak, result.best_streak)
        self.total_games_played += 1

    def add_play_time(self, seconds: float) -> None:
        self.total_play_time += max(seconds, 0.0)

    @property
    def average_play_time_per_game(self) -> float:
        if self.total_games_played == 0:
            return 0.0
        return self.total_play_time / self.total_games_played

    @property
    def formatted_total_play_time(self) -> str:
        """Play time as '1h 5m' or '12m'."""
        total = int(self.total_play_time)
        hours = total // 3600
        minutes = total % 3600 // 60
        if hours > 0:
            return f"{hours}h {minutes}m"
        return f"{minutes}m"

    @property
    def has_any_stats(self) -> bool:
        return (
            self.highest_score > 0
            or self.total_games_played > 0
            or self.best_streak > 0
            or self.highest_level > 1
        )

    @classmethod
    def from_dict(cls, data: dict) -> UserStats:
        return cls(
            highest_level=max(int(data.get("highest_level", 1)), 1),
            highest_score=int(data.get("highest_score", 0)),
            best_streak=int(data.get("best_streak", 0)),
            total_games_played=int(data.get("total_games_played", 0)),
            total_play_time=float(data.get("total_play_time", 0.0)),
        )


class StatsStore:
    """
    Statistics sink backed by files on disk.

    Loads lazily on first access. A missing or unreadable stats file
    starts from empty statistics instead of failing the game.
    """

    def __init__(
        self,
        stats_path: Path = STATS_PATH,
        history_path: Path | None = HISTORY_PATH,
    ) -> None:
        self._stats_path = Path(stats_path)
        self._history_path = Path(history_path) if history_path is not None else None
        self._stats: UserStats | None = None

    @property
    def stats(self) -> UserStats:
        if self._stats is None:
            self._stats = self.load()
        return self._stats

    def load(self) -> UserStats:
        """Read statistics from disk."""
        if not self._stats_path.exists():
            return UserStats()
        try:
            with open(self._stats_path, encoding="utf-8") as f:
                return UserStats.from_dict(json.load(f))
        except (OSError, ValueError, TypeError) as e:
            logger.warning(f"Could not read stats from {self._stats_path}: {e}")
            return UserStats()

    def save(self) -> None:
        self._stats_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._stats_path, "w", encoding="utf-8") as f:
            json.dump(asdict(self.stats), f, indent=2)

    def record(self, result: GameResult) -> None:
        """Fold a finished game into the statistics and persist it."""
        stats = self.stats
        stats.update_from_result(result)
        stats.add_play_time(result.play_seconds)
        self.save()
        self._append_history(result)
        logger.info(
            f"Recorded game: level {result.level}, score {result.score} "
            f"({stats.total_games_played} games played)"
        )

    def _append_history(self, result: GameResult) -> None:
        if self._history_path is None:
            return
        self._history_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._history_path, "a", encoding="utf-8") as f:
            f.write(json.dumps(result.to_dict()) + "\n")

    def history(self) -> list[GameResult]:
        """All recorded games, oldest first. Malformed lines are skipped."""
        if self._history_path is None or not self._history_path.exists():
            return []

        results = []
        with open(self._history_path, encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if not line:
                    continue
                try:
                    results.append(GameResult.from_dict(json.loads(line)))
                except (ValueError, KeyError, TypeError):
                    continue
        return results

    def reset(self) -> None:
        """Clear statistics and history."""
        self._stats = UserStats()
        self.save()
        if self._history_path is not None and self._history_path.exists():
            self._history_path.unlink()
