"""
Streamlit UI module.

Provides the stats dashboard for Grid Memory:
- Lifetime bests and totals
- Score and level charts over the recorded game history
"""
