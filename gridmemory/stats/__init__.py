"""
Statistics module.

- UserStats: Lifetime bests and totals
- StatsStore: Persists UserStats and the game history
"""

from gridmemory.stats.store import StatsStore, UserStats

__all__ = [
    "StatsStore",
    "UserStats",
]
