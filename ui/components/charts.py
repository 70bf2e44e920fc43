"""
Plotly chart components for the stats dashboard.
"""

import plotly.graph_objects as go

from gridmemory.game.models import GameResult
from ui.components.data_loader import ModeSummary


def create_score_history_chart(history: list[GameResult]) -> go.Figure:
    """Line chart of final score per game."""
    games = list(range(1, len(history) + 1))

    fig = go.Figure(data=[
        go.Scatter(
            x=games,
            y=[r.score for r in history],
            mode="lines+markers",
            marker=dict(size=6, color="#3498db"),
            hovertemplate="Game %{x}<br>Score %{y}<extra></extra>",
        )
    ])

    fig.update_layout(
        title="Score per Game",
        xaxis_title="Game",
        yaxis_title="Score",
        showlegend=False,
        height=280,
        margin=dict(t=35, b=45, l=45, r=15),
    )
    return fig


def create_level_histogram(history: list[GameResult]) -> go.Figure:
    """Bar chart of how often each level was reached."""
    counts: dict[int, int] = {}
    for r in history:
        counts[r.level] = counts.get(r.level, 0) + 1
    levels = sorted(counts)

    fig = go.Figure(data=[
        go.Bar(x=levels, y=[counts[level] for level in levels], marker_color="#2ecc71")
    ])

    fig.update_layout(
        title="Levels Reached",
        xaxis_title="Level",
        yaxis_title="Games",
        showlegend=False,
        height=280,
        margin=dict(t=35, b=45, l=45, r=15),
    )
    fig.update_xaxes(dtick=1)
    return fig


def create_mode_chart(summaries: list[ModeSummary]) -> go.Figure:
    """Bar chart of average score by game mode."""
    labels = [s.mode for s in summaries[:10]]

    fig = go.Figure(data=[
        go.Bar(
            x=labels,
            y=[s.avg_score for s in summaries[:10]],
            marker_color="#9b59b6",
            hovertemplate="<b>%{x}</b><br>Avg score %{y:.0f}<extra></extra>",
        )
    ])

    fig.update_layout(
        title="Average Score by Mode",
        yaxis_title="Score",
        showlegend=False,
        height=280,
        margin=dict(t=35, b=70, l=45, r=15),
    )
    fig.update_xaxes(tickangle=45, tickfont=dict(size=9))
    return fig
