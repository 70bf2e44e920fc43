"""
Unit tests for feedback sinks and the cell tone mapping.
"""

import logging

import pytest

from gridmemory.feedback import (
    NOTE_FREQUENCIES,
    CompositeFeedback,
    FeedbackSink,
    LoggingFeedback,
    NullFeedback,
    note_frequency,
    note_index,
)
from gridmemory.game.models import GridPosition
from gridmemory.settings import GameSettings, SettingsStore


class TestNoteMapping:
    """Pentatonic tone per cell."""

    def test_first_cell_is_middle_c(self):
        assert note_frequency(GridPosition(0, 0), 4) == pytest.approx(261.63)

    def test_row_major_index(self):
        assert note_index(GridPosition(1, 2), 4) == 6
        assert note_index(GridPosition(2, 1), 3) == 7

    def test_every_cell_of_largest_grid_has_distinct_note(self):
        notes = {note_index(GridPosition(r, c), 5) for r in range(5) for c in range(5)}
        assert len(notes) == len(NOTE_FREQUENCIES) == 25


class TestCompositeFeedback:
    """Fan-out to several sinks."""

    def test_broadcasts_to_all(self, make_recorder):
        first, second = make_recorder(), make_recorder()
        composite = CompositeFeedback(first, second)
        composite.level_completed(4)
        assert first.events == second.events == [("level_completed", 4)]

    def test_failing_sink_does_not_block_others(self, make_recorder):
        class Broken(FeedbackSink):
            def wrong_tap(self):
                raise RuntimeError("speaker unplugged")

        recorder = make_recorder()
        composite = CompositeFeedback(Broken(), recorder)
        with pytest.raises(RuntimeError):
            composite.wrong_tap()
        assert recorder.events == [("wrong_tap",)]

    def test_null_feedback_accepts_everything(self):
        sink = NullFeedback()
        sink.game_started()
        sink.sequence_step_shown(GridPosition(0, 0), 3)
        sink.celebrate(3.5)


class TestLoggingFeedback:
    """Logged cues honor sound and haptic toggles."""

    def test_logs_tone_when_sound_enabled(self, caplog):
        sink = LoggingFeedback(SettingsStore(GameSettings(sound_enabled=True)))
        with caplog.at_level(logging.DEBUG, logger="gridmemory.feedback.logging_sink"):
            sink.correct_tap(GridPosition(0, 0), 4)
        assert "261.63Hz" in caplog.text

    def test_silent_when_sound_and_haptics_disabled(self, caplog):
        settings = SettingsStore(GameSettings(sound_enabled=False, haptics_enabled=False))
        sink = LoggingFeedback(settings)
        with caplog.at_level(logging.DEBUG, logger="gridmemory.feedback.logging_sink"):
            sink.correct_tap(GridPosition(0, 0), 4)
            sink.wrong_tap()
        assert caplog.text == ""
