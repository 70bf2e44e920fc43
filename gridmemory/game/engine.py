"""
Game engine: the session state machine behind one memory grid.

The engine owns sequence generation, display timing, input judging,
scoring, lives and the round timer. It runs on a single asyncio event
loop; its timed phases are background processes suspended through an
injected Clock, so tests can fast-forward time.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING, Callable

from gridmemory.config import (
    CONFETTI_DURATION,
    CONFETTI_LEVEL_INTERVAL,
    GAME_OVER_REVEAL_DURATION,
    MAX_LIVES,
    NEXT_ROUND_DELAY,
    POST_SEQUENCE_DELAY,
    SELECTED_FLASH_DURATION,
    SEQUENCE_START_DELAY,
    TIMER_TICK,
    WRONG_FLASH_DURATION,
)
from gridmemory.feedback.base import FeedbackSink, NullFeedback
from gridmemory.game.clock import AsyncioClock, Clock, Process
from gridmemory.game.models import (
    GameConfiguration,
    GameResult,
    GameScore,
    GameState,
    GridCell,
    GridPosition,
)
from gridmemory.game.sequence import SequenceGenerator, get_generator
from gridmemory.settings import GameSettings, SettingsStore

if TYPE_CHECKING:
    from gridmemory.stats.store import StatsStore

logger = logging.getLogger(__name__)

EngineListener = Callable[["GameEngine"], None]


class GameEngine:
    """
    Runs memory grid games one round at a time.

    Published state (read by the presentation layer):
    - state: Current GameState
    - grid_cells: Rows of GridCell feedback flags
    - score: GameScore of the current game
    - sequence / player_sequence / current_index: Round progress
    - show_confetti: Whether a celebration is on screen

    Commands: start_new_game, start_new_round, cell_tapped, pause_game,
    resume_game, reset_game. Nothing here raises on bad timing; commands
    that make no sense in the current state are ignored.
    """

    def __init__(
        self,
        settings: SettingsStore | None = None,
        feedback: FeedbackSink | None = None,
        stats: StatsStore | None = None,
        clock: Clock | None = None,
        seed: int | None = None,
    ) -> None:
        """
        Initialize the engine.

        Args:
            settings: Settings provider (defaults to a fresh SettingsStore)
            feedback: Haptic/sound/confetti sink
            stats: Receives a GameResult at every game over
            clock: Time source for all timed phases
            seed: Random seed for sequence generation
        """
        self._settings = settings or SettingsStore()
        self._feedback = feedback or NullFeedback()
        self._stats = stats
        self._clock = clock or AsyncioClock()
        self._rng = random.Random(seed)

        snapshot = self._settings.snapshot
        self._session: GameSettings = snapshot
        self._generator: SequenceGenerator = get_generator(snapshot.difficulty, rng=self._rng)
        self.configuration: GameConfiguration = snapshot.to_configuration()

        self.state = GameState.READY
        self.grid_cells: list[list[GridCell]] = []
        self.score = GameScore()
        self.sequence: list[GridPosition] = []
        self.player_sequence: list[GridPosition] = []
        self.current_index = 0
        self.show_confetti = False

        # Background processes, each cancellable on its own
        self._display = Process("display")
        self._advance = Process("advance")
        self._timer = Process("timer")
        self._reveal = Process("reveal")
        self._confetti = Process("confetti")
        self._flashes: set[asyncio.Task] = set()

        # Pause gate shared by the display, advance and timer processes
        self._paused_from: GameState | None = None
        self._running = asyncio.Event()
        self._running.set()
        self._pause_requested = asyncio.Event()

        self._started_at: float | None = None
        self._listeners: list[EngineListener] = []
        self._unsubscribe_settings = self._settings.subscribe(self._on_settings_changed)

        self._setup_grid()

    # -------------------------------------------------------------------------
    # Published state
    # -------------------------------------------------------------------------

    @property
    def generator(self) -> SequenceGenerator:
        return self._generator

    @property
    def is_paused(self) -> bool:
        return self.state == GameState.PAUSED

    @property
    def is_timed(self) -> bool:
        return self.score.is_timed_mode

    @property
    def is_forgiving(self) -> bool:
        return self._session.forgiving_mode

    def cell_at(self, position: GridPosition) -> GridCell:
        return self.grid_cells[position.row][position.column]

    def highlighted_positions(self) -> list[GridPosition]:
        return [cell.position for row in self.grid_cells for cell in row if cell.is_highlighted]

    def subscribe(self, listener: EngineListener) -> Callable[[], None]:
        """Call `listener(engine)` after every published change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _publish(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.warning(f"Engine listener failed: {e}")

    def _notify(self, hook: str, *args) -> None:
        """Fire a feedback cue. Feedback is best-effort and never blocks play."""
        try:
            getattr(self._feedback, hook)(*args)
        except Exception as e:
            logger.debug(f"Feedback '{hook}' failed: {e}")

    # -------------------------------------------------------------------------
    # Grid management
    # -------------------------------------------------------------------------

    def _setup_grid(self) -> None:
        size = self.configuration.grid_size
        self.grid_cells = [
            [GridCell(position=GridPosition(row, column)) for column in range(size)]
            for row in range(size)
        ]

    def _reset_grid(self) -> None:
        for row in self.grid_cells:
            for cell in row:
                cell.clear()

    # -------------------------------------------------------------------------
    # Game control
    # -------------------------------------------------------------------------

    def start_new_game(self) -> None:
        """Start a fresh game from level 1 and show the first sequence."""
        self._stop_processes()

        self._session = self._settings.snapshot
        self.configuration = self._session.to_configuration()
        if len(self.grid_cells) != self.configuration.grid_size:
            self._setup_grid()

        self.score = GameScore(
            current_sequence_length=self.configuration.initial_sequence_length,
            max_sequence_length=self.configuration.max_sequence_length,
            is_timed_mode=self._session.timed_mode,
            lives=MAX_LIVES,
            max_lives=MAX_LIVES,
        )
        self._generator.reset()
        self.show_confetti = False
        self._started_at = self._clock.now()

        logger.info(
            f"Starting game: {self._session.grid_size_display} grid, "
            f"{self._generator.name} difficulty"
            f"{', timed' if self._session.timed_mode else ''}"
            f"{', forgiving' if self._session.forgiving_mode else ''}"
        )
        self._notify("game_started")
        self._begin_round()

    def start_new_round(self) -> None:
        """Generate and show a new sequence for the current level."""
        if self.state not in (GameState.READY, GameState.SHOWING, GameState.WAITING):
            logger.debug(f"Ignoring start_new_round in state {self.state.value}")
            return
        self._begin_round()

    def reset_game(self) -> None:
        """Abandon the current game and return to READY. The score is kept."""
        self._stop_processes()
        self.state = GameState.READY
        self.sequence = []
        self.player_sequence = []
        self.current_index = 0
        self.show_confetti = False
        self._reset_grid()
        self._publish()

    def pause_game(self) -> None:
        """Freeze the display and timer where they are."""
        if self.state not in (GameState.SHOWING, GameState.PLAYING):
            return
        self._paused_from = self.state
        self.state = GameState.PAUSED
        self._running.clear()
        self._pause_requested.set()
        logger.info(f"Paused while {self._paused_from.value}")
        self._publish()

    def resume_game(self) -> None:
        """Continue exactly where pause_game left off."""
        if self.state != GameState.PAUSED or self._paused_from is None:
            return
        self.state = self._paused_from
        self._paused_from = None
        self._pause_requested.clear()
        self._running.set()
        logger.info(f"Resumed, back to {self.state.value}")
        self._publish()

    def close(self) -> None:
        """Stop all processes and detach from the settings store."""
        self._stop_processes()
        self._unsubscribe_settings()

    def __enter__(self) -> "GameEngine":
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _stop_processes(self) -> None:
        for process in (self._display, self._advance, self._timer, self._reveal, self._confetti):
            process.cancel()
        for task in list(self._flashes):
            task.cancel()
        self._flashes.clear()
        self._paused_from = None
        self._pause_requested.clear()
        self._running.set()

    # -------------------------------------------------------------------------
    # Rounds and sequence display
    # -------------------------------------------------------------------------

    def _begin_round(self) -> None:
        self._reset_grid()
        self.configuration = self._settings.create_configuration()
        self.sequence = self._generator.generate(
            self.score.current_sequence_length,
            self.configuration.grid_size,
        )
        logger.debug(
            f"Level {self.score.current_level}: "
            f"{' '.join(str(p) for p in self.sequence)}"
        )
        self._show_sequence()

    def _show_sequence(self) -> None:
        self.player_sequence = []
        self.current_index = 0
        self.state = GameState.SHOWING
        self._publish()
        self._display.start(self._run_display())

    async def _run_display(self) -> None:
        config = self.configuration
        await self._hold(SEQUENCE_START_DELAY)

        last = len(self.sequence) - 1
        for index, position in enumerate(self.sequence):
            cell = self.cell_at(position)
            cell.is_highlighted = True
            self._notify("sequence_step_shown", position, config.grid_size)
            self._publish()

            await self._hold(config.show_duration)

            cell.is_highlighted = False
            self._publish()

            if index < last:
                await self._hold(config.between_show_delay)

        # Wait a bit before allowing player input
        await self._hold(POST_SEQUENCE_DELAY)
        self.state = GameState.PLAYING
        self._publish()

        if self.score.is_timed_mode:
            self._timer.start(self._run_timer())

    async def _hold(self, seconds: float) -> None:
        """
        Suspend for `seconds` of unpaused time.

        A pause stops the countdown; resume continues with whatever was
        left. Returns only while the game is not paused.
        """
        remaining = seconds
        while remaining > 1e-9:
            await self._running.wait()
            started = self._clock.now()
            sleeper = asyncio.ensure_future(self._clock.sleep(remaining))
            pause_watch = asyncio.ensure_future(self._pause_requested.wait())
            try:
                done, _ = await asyncio.wait(
                    {sleeper, pause_watch},
                    return_when=asyncio.FIRST_COMPLETED,
                )
            finally:
                sleeper.cancel()
                pause_watch.cancel()
            if sleeper in done:
                break
            remaining -= self._clock.now() - started
        await self._running.wait()

    # -------------------------------------------------------------------------
    # Player input
    # -------------------------------------------------------------------------

    def cell_tapped(self, position: GridPosition) -> None:
        """Judge one tap against the expected step of the sequence."""
        if self.state != GameState.PLAYING:
            logger.debug(f"Ignoring tap at {position} in state {self.state.value}")
            return
        if not self.configuration.contains(position):
            logger.debug(f"Ignoring tap outside the grid at {position}")
            return

        self.player_sequence.append(position)
        expected = self.sequence[self.current_index]

        if position != expected:
            logger.debug(f"Wrong tap at {position}, expected {expected}")
            self._flash(position, "is_wrong", WRONG_FLASH_DURATION)
            self._notify("wrong_tap")
            self._handle_mistake()
            return

        self._flash(position, "is_selected", SELECTED_FLASH_DURATION)
        self._notify("correct_tap", position, self.configuration.grid_size)
        self.current_index += 1

        if self.current_index >= len(self.sequence):
            self._level_completed()
        else:
            self._publish()

    def _flash(self, position: GridPosition, flag: str, duration: float) -> None:
        """Set a feedback flag on a cell and clear it after `duration`."""
        cell = self.cell_at(position)
        setattr(cell, flag, True)

        async def clear_later() -> None:
            await self._clock.sleep(duration)
            setattr(cell, flag, False)
            self._publish()

        task = asyncio.get_running_loop().create_task(clear_later())
        self._flashes.add(task)
        task.add_done_callback(self._flashes.discard)

    # -------------------------------------------------------------------------
    # Game events
    # -------------------------------------------------------------------------

    def _level_completed(self) -> None:
        self.state = GameState.WAITING
        self._timer.cancel()
        self.score.increment_level()

        level = self.score.current_level
        logger.info(
            f"Level {level - 1} cleared: score {self.score.total_score}, "
            f"streak {self.score.streak}"
        )
        self._notify("level_completed", level)

        if level % CONFETTI_LEVEL_INTERVAL == 0 and self._settings.snapshot.confetti_enabled:
            self._celebrate()

        self._publish()
        self._advance.start(self._next_round_after_delay())

    async def _next_round_after_delay(self) -> None:
        await self._hold(NEXT_ROUND_DELAY)
        if self.state == GameState.WAITING:
            self._begin_round()

    def _celebrate(self) -> None:
        self.show_confetti = True
        self._notify("celebrate", CONFETTI_DURATION)
        self._confetti.start(self._end_celebration())

    async def _end_celebration(self) -> None:
        await self._clock.sleep(CONFETTI_DURATION)
        self.show_confetti = False
        self._publish()

    def _handle_mistake(self) -> None:
        """Spend a life and replay the round, or end the game."""
        self.score.reset_streak()

        if self._session.forgiving_mode and self.score.lose_life():
            self.score.apply_mistake_penalty()
            self._timer.cancel()
            if self.score.is_timed_mode:
                self.score.reset_timer()
            logger.info(
                f"Mistake forgiven: {self.score.lives} lives left, "
                f"score {self.score.total_score}"
            )
            # The same sequence is shown again from the start
            self._show_sequence()
            return

        self._game_over()

    def _game_over(self) -> None:
        self.state = GameState.GAME_OVER
        self._display.cancel()
        self._timer.cancel()
        self._advance.cancel()

        logger.info(
            f"Game over at level {self.score.current_level} "
            f"with score {self.score.total_score}"
        )
        self._record_result()

        # Reveal the sequence the player should have tapped
        for position in self.sequence:
            self.cell_at(position).is_highlighted = True
        # Listeners may restart the game from the publish below
        self._reveal.start(self._clear_after_reveal())
        self._publish()

    async def _clear_after_reveal(self) -> None:
        await self._clock.sleep(GAME_OVER_REVEAL_DURATION)
        if self.state != GameState.GAME_OVER:
            return
        self._reset_grid()
        self._publish()

    def _record_result(self) -> None:
        if self._stats is None:
            return

        play_seconds = 0.0
        if self._started_at is not None:
            play_seconds = self._clock.now() - self._started_at

        result = GameResult(
            level=self.score.current_level,
            score=self.score.total_score,
            best_streak=self.score.best_streak,
            sequence_length=self.score.current_sequence_length,
            grid_size=self.configuration.grid_size,
            difficulty=self._generator.name,
            timed=self.score.is_timed_mode,
            forgiving=self._session.forgiving_mode,
            play_seconds=play_seconds,
        )
        try:
            self._stats.record(result)
        except Exception as e:
            logger.warning(f"Failed to record game result: {e}")

    # -------------------------------------------------------------------------
    # Round timer
    # -------------------------------------------------------------------------

    async def _run_timer(self) -> None:
        while self.state == GameState.PLAYING:
            await self._hold(TIMER_TICK)
            if self.state != GameState.PLAYING:
                return

            self.score.time_remaining = max(round(self.score.time_remaining - TIMER_TICK, 6), 0.0)
            self._publish()

            if self.score.time_remaining <= 0:
                logger.info("Time's up")
                self._notify("wrong_tap")
                self._handle_mistake()
                return

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def _on_settings_changed(self, old: GameSettings, new: GameSettings) -> None:
        if old.grid_size == new.grid_size and old.difficulty == new.difficulty:
            return

        if self.state != GameState.READY:
            logger.info("Grid or difficulty changed mid-game, resetting")
            self.reset_game()

        if new.difficulty != old.difficulty:
            self._generator = get_generator(new.difficulty, rng=self._rng)
        else:
            self._generator.reset()

        self.configuration = new.to_configuration()
        self._setup_grid()
        self._publish()
