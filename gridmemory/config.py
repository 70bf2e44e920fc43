"""
Configuration constants for Grid Memory.

All paths, timings, scoring rules and default settings are defined here.
Overrides are read from environment variables (or a local .env file).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# Path Configuration
# =============================================================================

# Project root is parent of gridmemory/
PROJECT_ROOT = Path(__file__).parent.parent

# Data directory (holds persisted statistics and game history)
DATA_DIR = Path(os.environ.get("GRIDMEMORY_DATA_DIR", PROJECT_ROOT / "data"))

# Individual data file paths
STATS_PATH = DATA_DIR / "user_stats.json"
HISTORY_PATH = DATA_DIR / "game_history.jsonl"

# =============================================================================
# Grid Configuration
# =============================================================================

# Supported grid sizes (3×3, 4×4, 5×5)
GRID_SIZES = (3, 4, 5)

DEFAULT_GRID_SIZE = int(os.environ.get("GRIDMEMORY_GRID_SIZE", "4"))

# Sequence length at level 1 and the hard cap
INITIAL_SEQUENCE_LENGTH = 3
MAX_SEQUENCE_LENGTH = 20

# =============================================================================
# Default Settings
# =============================================================================

# "random" or "progressive"
DEFAULT_DIFFICULTY = os.environ.get("GRIDMEMORY_DIFFICULTY", "random")

# Seconds each step stays highlighted
DEFAULT_SHOW_DURATION = float(os.environ.get("GRIDMEMORY_SHOW_DURATION", "0.6"))

# Pause between two highlighted steps
BETWEEN_SHOW_DELAY = 0.3

DEFAULT_VOLUME = 0.8

# =============================================================================
# Timing Configuration (seconds)
# =============================================================================

# Delay before the first step of a sequence is shown
SEQUENCE_START_DELAY = 1.0

# Delay after the last step before input is accepted
POST_SEQUENCE_DELAY = 0.5

# Tap feedback flashes
SELECTED_FLASH_DURATION = 0.2
WRONG_FLASH_DURATION = 0.3

# Pause between a completed level and the next round
NEXT_ROUND_DELAY = 1.5

# How long the full sequence is revealed after game over
GAME_OVER_REVEAL_DURATION = 2.0

# Confetti is shown every CONFETTI_LEVEL_INTERVAL levels
CONFETTI_DURATION = 3.5
CONFETTI_LEVEL_INTERVAL = 3

# =============================================================================
# Timed Mode Configuration
# =============================================================================

# Round time limit = TIMER_BASE_SECONDS + level * TIMER_SECONDS_PER_LEVEL
TIMER_BASE_SECONDS = 10.0
TIMER_SECONDS_PER_LEVEL = 2.0

# Countdown polling interval
TIMER_TICK = 0.1

# =============================================================================
# Scoring Configuration
# =============================================================================

# Level-up bonus = sequence length * SCORE_PER_STEP
SCORE_PER_STEP = 10

# Mistake penalty = max(sequence length * PENALTY_PER_STEP, MIN_PENALTY)
PENALTY_PER_STEP = 5
MIN_PENALTY = 10

# Lives granted in forgiving mode
MAX_LIVES = 3

# =============================================================================
# Logging Configuration
# =============================================================================

# Log level (DEBUG, INFO, WARNING, ERROR)
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

# =============================================================================
# Validation Helpers
# =============================================================================

def validate_data_files() -> dict[str, bool]:
    """Check which data files exist."""
    return {
        "stats": STATS_PATH.exists(),
        "history": HISTORY_PATH.exists(),
    }


def get_missing_data_files() -> list[str]:
    """Return list of missing data file names."""
    status = validate_data_files()
    return [name for name, exists in status.items() if not exists]
