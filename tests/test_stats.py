"""
Unit tests for statistics aggregation and persistence.
"""

import json

import pytest

from gridmemory.game.models import GameResult
from gridmemory.stats import StatsStore, UserStats


def make_result(level: int = 3, score: int = 90, best_streak: int = 2, play_seconds: float = 30.0):
    return GameResult(
        level=level,
        score=score,
        best_streak=best_streak,
        sequence_length=level + 2,
        grid_size=4,
        difficulty="random",
        timed=False,
        forgiving=False,
        play_seconds=play_seconds,
    )


class TestUserStats:
    """Aggregation rules."""

    def test_empty_stats(self):
        stats = UserStats()
        assert stats.highest_level == 1
        assert not stats.has_any_stats
        assert stats.average_play_time_per_game == 0.0

    def test_update_keeps_maxima(self):
        stats = UserStats()
        stats.update_from_result(make_result(level=5, score=200, best_streak=4))
        stats.update_from_result(make_result(level=2, score=20, best_streak=1))
        assert stats.highest_level == 5
        assert stats.highest_score == 200
        assert stats.best_streak == 4
        assert stats.total_games_played == 2
        assert stats.has_any_stats

    def test_average_play_time(self):
        stats = UserStats(total_games_played=4, total_play_time=120.0)
        assert stats.average_play_time_per_game == pytest.approx(30.0)

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [(0, "0m"), (59, "0m"), (720, "12m"), (3900, "1h 5m")],
    )
    def test_formatted_play_time(self, seconds, expected):
        assert UserStats(total_play_time=seconds).formatted_total_play_time == expected


class TestStatsStore:
    """Persistence on disk."""

    def test_missing_file_gives_empty_stats(self, stats_paths):
        stats_path, history_path = stats_paths
        store = StatsStore(stats_path, history_path)
        assert store.stats == UserStats()
        assert store.history() == []

    def test_record_persists(self, stats_paths):
        stats_path, history_path = stats_paths
        store = StatsStore(stats_path, history_path)
        store.record(make_result(level=4, score=130, play_seconds=45.0))

        reloaded = StatsStore(stats_path, history_path).stats
        assert reloaded.highest_level == 4
        assert reloaded.highest_score == 130
        assert reloaded.total_games_played == 1
        assert reloaded.total_play_time == pytest.approx(45.0)

    def test_history_appends(self, stats_paths):
        stats_path, history_path = stats_paths
        store = StatsStore(stats_path, history_path)
        store.record(make_result(score=10))
        store.record(make_result(score=20))

        history = store.history()
        assert [r.score for r in history] == [10, 20]

    def test_corrupt_stats_file_is_ignored(self, stats_paths):
        stats_path, history_path = stats_paths
        stats_path.write_text("{not json", encoding="utf-8")
        store = StatsStore(stats_path, history_path)
        assert store.stats == UserStats()

    def test_malformed_history_lines_skipped(self, stats_paths):
        stats_path, history_path = stats_paths
        store = StatsStore(stats_path, history_path)
        store.record(make_result(score=10))
        with open(history_path, "a", encoding="utf-8") as f:
            f.write("garbage\n")
            f.write(json.dumps({"score": 5}) + "\n")

        assert [r.score for r in store.history()] == [10]

    def test_reset_clears_everything(self, stats_paths):
        stats_path, history_path = stats_paths
        store = StatsStore(stats_path, history_path)
        store.record(make_result())
        store.reset()

        assert not history_path.exists()
        assert StatsStore(stats_path, history_path).stats == UserStats()
