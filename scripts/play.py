#!/usr/bin/env python3
"""
Grid Memory CLI - Play the memory grid in a terminal.

Usage:
    python scripts/play.py
    python scripts/play.py --grid-size 5 --difficulty progressive
    python scripts/play.py --timed --forgiving
    python scripts/play.py --show-duration 0.4 --seed 42 --verbose

Controls:
    <row> <col>  - Tap a cell (1-based, e.g. "2 3")
    p            - Pause / resume
    n            - New game
    q            - Quit

Grid legend:
    #  highlighted step
    +  correct tap
    x  wrong tap
    .  idle cell
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
import threading
from pathlib import Path

# Fix Windows console encoding
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from gridmemory.config import (  # noqa: E402 - must be after sys.path modification
    DEFAULT_DIFFICULTY,
    DEFAULT_GRID_SIZE,
    DEFAULT_SHOW_DURATION,
    GRID_SIZES,
    HISTORY_PATH,
    LOG_LEVEL,
    STATS_PATH,
)
from gridmemory.feedback import LoggingFeedback  # noqa: E402
from gridmemory.game import GameEngine, GameState, GridPosition  # noqa: E402
from gridmemory.settings import DIFFICULTY_MODES, GameSettings, SettingsStore  # noqa: E402
from gridmemory.stats import StatsStore  # noqa: E402

STATUS_TEXT = {
    GameState.READY: "Ready",
    GameState.SHOWING: "Watch the sequence...",
    GameState.PLAYING: "Your turn! Repeat the sequence",
    GameState.WAITING: "Well done!",
    GameState.PAUSED: "Paused (p to resume)",
    GameState.GAME_OVER: "Game over (n for a new game, q to quit)",
}


class TerminalRenderer:
    """Prints the grid whenever what it would show changes."""

    def __init__(self) -> None:
        self._last_frame = ""

    def render(self, engine: GameEngine) -> None:
        frame = self.frame(engine)
        if frame != self._last_frame:
            self._last_frame = frame
            print(frame, flush=True)

    @staticmethod
    def frame(engine: GameEngine) -> str:
        score = engine.score
        header = f"Level {score.current_level}  Score {score.total_score}  Streak {score.streak}"
        if engine.is_timed and engine.state == GameState.PLAYING:
            header += f"  Time {int(score.time_remaining) // 60}:{int(score.time_remaining) % 60:02d}"
        if engine.is_forgiving:
            header += "  Lives " + "♥" * score.lives + "♡" * (score.max_lives - score.lives)

        rows = []
        for row in engine.grid_cells:
            symbols = []
            for cell in row:
                if cell.is_wrong:
                    symbols.append("x")
                elif cell.is_selected:
                    symbols.append("+")
                elif cell.is_highlighted:
                    symbols.append("#")
                else:
                    symbols.append(".")
            rows.append("  " + " ".join(symbols))

        progress = ""
        if engine.state == GameState.PLAYING:
            progress = f"  ({engine.current_index}/{len(engine.sequence)})"
        confetti = "  *** Confetti! ***" if engine.show_confetti else ""

        return "\n".join(
            ["", header, *rows, STATUS_TEXT[engine.state] + progress + confetti]
        )


def parse_tap(text: str, grid_size: int) -> GridPosition | None:
    """Parse '<row> <col>' (1-based) into a GridPosition."""
    parts = text.replace(",", " ").split()
    if len(parts) != 2:
        return None
    try:
        row, column = (int(part) - 1 for part in parts)
    except ValueError:
        return None
    position = GridPosition(row, column)
    if not (0 <= row < grid_size and 0 <= column < grid_size):
        return None
    return position


def parse_args() -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Play the Grid Memory game",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )

    parser.add_argument(
        "--grid-size",
        type=int,
        default=DEFAULT_GRID_SIZE,
        choices=GRID_SIZES,
        help=f"Grid rows and columns (default: {DEFAULT_GRID_SIZE})",
    )
    parser.add_argument(
        "--difficulty",
        type=str,
        default=DEFAULT_DIFFICULTY,
        choices=DIFFICULTY_MODES,
        help=f"Sequence strategy (default: {DEFAULT_DIFFICULTY})",
    )
    parser.add_argument(
        "--show-duration",
        type=float,
        default=DEFAULT_SHOW_DURATION,
        help=f"Seconds each step is highlighted (default: {DEFAULT_SHOW_DURATION})",
    )
    parser.add_argument(
        "--timed",
        action="store_true",
        help="Enable the per-round countdown",
    )
    parser.add_argument(
        "--forgiving",
        action="store_true",
        help="Play with 3 lives instead of one mistake",
    )
    parser.add_argument(
        "--no-confetti",
        action="store_true",
        help="Disable the celebration every third level",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducible sequences",
    )
    parser.add_argument(
        "--no-stats",
        action="store_true",
        help="Do not save statistics for this session",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args()


def read_lines(loop: asyncio.AbstractEventLoop, lines: asyncio.Queue) -> None:
    """Push stdin lines onto the queue; an empty string marks EOF."""
    try:
        for line in sys.stdin:
            loop.call_soon_threadsafe(lines.put_nowait, line)
        loop.call_soon_threadsafe(lines.put_nowait, "")
    except RuntimeError:
        # The loop closed while this thread was still reading
        return


async def play(engine: GameEngine) -> None:
    """Read commands from stdin until the player quits."""
    loop = asyncio.get_running_loop()
    grid_size = engine.configuration.grid_size

    # Daemon thread: a pending readline must not block interpreter exit
    lines: asyncio.Queue = asyncio.Queue()
    threading.Thread(target=read_lines, args=(loop, lines), daemon=True).start()

    engine.start_new_game()
    while True:
        line = await lines.get()
        if not line:
            break
        command = line.strip().lower()

        if command == "q":
            break
        if command == "n":
            engine.start_new_game()
            continue
        if command == "p":
            if engine.is_paused:
                engine.resume_game()
            else:
                engine.pause_game()
            continue

        position = parse_tap(command, grid_size)
        if position is None:
            print(f"Enter a cell as '<row> <col>' between 1 and {grid_size}", flush=True)
            continue
        engine.cell_tapped(position)

    engine.reset_game()


def main() -> int:
    """Main entry point."""
    args = parse_args()

    # Set up logging
    log_level = logging.DEBUG if args.verbose else LOG_LEVEL
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        settings = SettingsStore(
            GameSettings(
                grid_size=args.grid_size,
                difficulty=args.difficulty,
                show_duration=args.show_duration,
                timed_mode=args.timed,
                forgiving_mode=args.forgiving,
                confetti_enabled=not args.no_confetti,
            )
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    stats = None if args.no_stats else StatsStore(STATS_PATH, HISTORY_PATH)
    renderer = TerminalRenderer()

    print("\n" + "=" * 60)
    print("Grid Memory")
    print("=" * 60)
    print(f"  Grid:       {settings.snapshot.grid_size_display}")
    print(f"  Difficulty: {args.difficulty}")
    print(f"  Timed:      {args.timed}")
    print(f"  Forgiving:  {args.forgiving}")
    print("=" * 60)

    with GameEngine(
        settings=settings,
        feedback=LoggingFeedback(settings),
        stats=stats,
        seed=args.seed,
    ) as engine:
        engine.subscribe(renderer.render)
        try:
            asyncio.run(play(engine))
        except KeyboardInterrupt:
            print("\n\nGame interrupted by user")
            return 130  # Standard exit code for Ctrl+C

        score = engine.score

    # Print results
    print("\n" + "=" * 60)
    print(f"Final level: {score.current_level}")
    print(f"Final score: {score.total_score}")
    print(f"Best streak: {score.best_streak}")
    print("=" * 60)

    if stats is not None:
        lifetime = stats.stats
        print("\nLifetime stats:")
        print(f"  Highest level: {lifetime.highest_level}")
        print(f"  Highest score: {lifetime.highest_score}")
        print(f"  Best streak:   {lifetime.best_streak}")
        print(f"  Games played:  {lifetime.total_games_played}")
        print(f"  Play time:     {lifetime.formatted_total_play_time}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
