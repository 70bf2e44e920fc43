"""
Game engine module.

Provides the session state machine and its data model:
- GameEngine: Runs rounds, judges taps, keeps score
- GameState: Phases of a session
- GridPosition / GridCell: Grid addresses and their feedback flags
- GameConfiguration / GameScore / GameResult: Rules, score and final record
- SequenceGenerator: Random and progressive sequence strategies
- Clock: Real and manual time sources
"""

from gridmemory.game.clock import AsyncioClock, Clock, ManualClock
from gridmemory.game.engine import GameEngine
from gridmemory.game.models import (
    GameConfiguration,
    GameResult,
    GameScore,
    GameState,
    GridCell,
    GridPosition,
)
from gridmemory.game.sequence import (
    ProgressiveSequenceGenerator,
    RandomSequenceGenerator,
    SequenceGenerator,
    get_generator,
)

__all__ = [
    "GameEngine",
    "GameState",
    "GridPosition",
    "GridCell",
    "GameConfiguration",
    "GameScore",
    "GameResult",
    "SequenceGenerator",
    "RandomSequenceGenerator",
    "ProgressiveSequenceGenerator",
    "get_generator",
    "Clock",
    "AsyncioClock",
    "ManualClock",
]
