"""
Grid Memory - Stats dashboard.

Run with: streamlit run ui/app.py
"""

import sys
from pathlib import Path

import streamlit as st

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

st.set_page_config(page_title="Grid Memory", page_icon="🧠", layout="wide")

st.title("Grid Memory")
st.caption("Watch the pattern. Repeat it. Go one step further.")

try:
    from ui.components.charts import (
        create_level_histogram,
        create_mode_chart,
        create_score_history_chart,
    )
    from ui.components.data_loader import get_history, get_mode_summaries, get_stats

    stats = get_stats()
    history = get_history()

    if not stats.has_any_stats:
        st.warning("No games yet. Run: `python scripts/play.py`")
        st.stop()

    # Metrics
    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric("Highest Level", stats.highest_level)
    c2.metric("High Score", stats.highest_score)
    c3.metric("Best Streak", stats.best_streak)
    c4.metric("Games", stats.total_games_played)
    c5.metric("Play Time", stats.formatted_total_play_time)

    st.divider()

    if history:
        col1, col2 = st.columns(2)

        with col1:
            st.plotly_chart(create_score_history_chart(history), use_container_width=True)

        with col2:
            st.plotly_chart(create_level_histogram(history), use_container_width=True)

        summaries = get_mode_summaries(history)
        st.plotly_chart(create_mode_chart(summaries), use_container_width=True)

        # Recent games
        rows = [
            {
                "When": r.timestamp.strftime("%Y-%m-%d %H:%M"),
                "Mode": f"{r.grid_size}×{r.grid_size} {r.difficulty}",
                "Level": r.level,
                "Score": r.score,
                "Streak": r.best_streak,
                "Time": f"{r.play_seconds:.0f}s",
            }
            for r in reversed(history[-10:])
        ]
        st.dataframe(rows, use_container_width=True, hide_index=True)

except ImportError as e:
    st.error(f"Missing: {e}")
