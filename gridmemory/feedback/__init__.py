"""
Feedback module.

Side-effect collaborators the engine notifies during play:
- FeedbackSink: Base class with no-op hooks
- NullFeedback: Ignores every cue
- CompositeFeedback: Fans cues out to several sinks
- LoggingFeedback: Logs haptic and tone cues
"""

from gridmemory.feedback.base import CompositeFeedback, FeedbackSink, NullFeedback
from gridmemory.feedback.logging_sink import LoggingFeedback
from gridmemory.feedback.sound import NOTE_FREQUENCIES, note_frequency, note_index

__all__ = [
    "FeedbackSink",
    "NullFeedback",
    "CompositeFeedback",
    "LoggingFeedback",
    "NOTE_FREQUENCIES",
    "note_frequency",
    "note_index",
]
