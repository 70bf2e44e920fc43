"""
Data loader for persisted statistics and game history.
"""

from dataclasses import dataclass
from pathlib import Path

from gridmemory.config import HISTORY_PATH, STATS_PATH
from gridmemory.game.models import GameResult
from gridmemory.stats import StatsStore, UserStats


@dataclass
class ModeSummary:
    mode: str
    games_played: int
    avg_score: float
    avg_level: float
    best_score: int


def get_store(stats_path: Path = STATS_PATH, history_path: Path = HISTORY_PATH) -> StatsStore:
    return StatsStore(stats_path, history_path)


def get_stats(store: StatsStore | None = None) -> UserStats:
    """Lifetime statistics."""
    return (store or get_store()).load()


def get_history(store: StatsStore | None = None) -> list[GameResult]:
    """All recorded games, oldest first."""
    return (store or get_store()).history()


def mode_label(result: GameResult) -> str:
    """e.g. '4×4 progressive, timed'."""
    label = f"{result.grid_size}×{result.grid_size} {result.difficulty}"
    extras = [name for name, on in (("timed", result.timed), ("forgiving", result.forgiving)) if on]
    if extras:
        label += ", " + ", ".join(extras)
    return label


def get_mode_summaries(history: list[GameResult]) -> list[ModeSummary]:
    """Per-mode averages, best-scoring mode first."""
    by_mode: dict[str, list[GameResult]] = {}
    for result in history:
        by_mode.setdefault(mode_label(result), []).append(result)

    summaries = [
        ModeSummary(
            mode=mode,
            games_played=len(results),
            avg_score=sum(r.score for r in results) / len(results),
            avg_level=sum(r.level for r in results) / len(results),
            best_score=max(r.score for r in results),
        )
        for mode, results in by_mode.items()
    ]
    return sorted(summaries, key=lambda s: s.best_score, reverse=True)
