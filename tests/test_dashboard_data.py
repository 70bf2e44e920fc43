"""
Unit tests for the dashboard data loader.
"""

from gridmemory.game.models import GameResult
from gridmemory.stats import StatsStore
from ui.components.data_loader import get_history, get_mode_summaries, get_stats, mode_label


def make_result(score: int, level: int, grid_size: int = 4, difficulty: str = "random", timed: bool = False):
    return GameResult(
        level=level,
        score=score,
        best_streak=level - 1,
        sequence_length=level + 2,
        grid_size=grid_size,
        difficulty=difficulty,
        timed=timed,
        forgiving=False,
        play_seconds=20.0,
    )


class TestModeSummaries:
    """Grouping history by game mode."""

    def test_mode_label(self):
        assert mode_label(make_result(10, 2)) == "4×4 random"
        assert mode_label(make_result(10, 2, 5, "progressive", timed=True)) == "5×5 progressive, timed"

    def test_summaries_sorted_by_best_score(self):
        history = [
            make_result(40, 2),
            make_result(90, 3),
            make_result(300, 6, difficulty="progressive"),
        ]
        summaries = get_mode_summaries(history)

        assert [s.mode for s in summaries] == ["4×4 progressive", "4×4 random"]
        random_mode = summaries[1]
        assert random_mode.games_played == 2
        assert random_mode.avg_score == 65
        assert random_mode.avg_level == 2.5
        assert random_mode.best_score == 90

    def test_empty_history(self):
        assert get_mode_summaries([]) == []


class TestLoaders:
    def test_reads_from_store(self, stats_paths):
        store = StatsStore(*stats_paths)
        store.record(make_result(40, 2))

        assert get_stats(store).highest_score == 40
        assert [r.score for r in get_history(store)] == [40]
