"""Screen flow and countdown for a single playthrough."""
from __future__ import annotations

import logging

from esper import World

from blockmatch.components.game_state import GameMode
from blockmatch.config import GameConfig
from blockmatch.events.bus import (
    EVENT_MOVE_COMPLETE,
    EVENT_NEW_GAME,
    EVENT_SCORE_CHANGED,
    EVENT_SCREEN_ADVANCE,
    EVENT_TICK,
    EVENT_TIME_UP,
    EventBus,
)
from blockmatch.utils.board_state import current_mode, get_countdown, get_score, move_in_progress
from blockmatch.utils.game_state import set_game_mode

logger = logging.getLogger(__name__)


class SessionSystem:
    """Moves TITLE -> INSTRUCTIONS -> PLAYING -> GAME_OVER -> TITLE and runs the timer.

    ``time_up`` carries the final score: when the clock runs out mid-cascade
    it is held back until that move completes.
    """

    def __init__(self, world: World, event_bus: EventBus) -> None:
        self.world = world
        self.event_bus = event_bus
        self.config: GameConfig = getattr(world, "config", None) or GameConfig()
        self._time_up_pending = False
        self.event_bus.subscribe(EVENT_SCREEN_ADVANCE, self._on_screen_advance)
        self.event_bus.subscribe(EVENT_TICK, self._on_tick)
        self.event_bus.subscribe(EVENT_MOVE_COMPLETE, self._on_move_complete)

    def _on_screen_advance(self, sender, **payload) -> None:
        mode = current_mode(self.world)
        if mode == GameMode.TITLE:
            set_game_mode(self.world, self.event_bus, GameMode.INSTRUCTIONS)
        elif mode == GameMode.INSTRUCTIONS:
            self.start_game()
        elif mode == GameMode.GAME_OVER:
            # Leaving before the last cascade settles reports the score so far.
            self._emit_time_up()
            self._reset_session()
            set_game_mode(self.world, self.event_bus, GameMode.TITLE)

    def _on_tick(self, sender, **payload) -> None:
        if current_mode(self.world) != GameMode.PLAYING:
            return
        countdown = get_countdown(self.world)
        if countdown is None:
            return
        countdown.remaining -= payload.get("dt", 1 / 60)
        if countdown.remaining > 0:
            return
        countdown.remaining = 0.0
        set_game_mode(self.world, self.event_bus, GameMode.GAME_OVER)
        self._time_up_pending = True
        if move_in_progress(self.world):
            logger.info("Time up while a move is resolving; waiting for it to finish")
            return
        self._emit_time_up()

    def _on_move_complete(self, sender, **payload) -> None:
        self._emit_time_up()

    def _emit_time_up(self) -> None:
        if not self._time_up_pending:
            return
        self._time_up_pending = False
        score = get_score(self.world).value
        logger.info("Time up with score %s", score)
        self.event_bus.emit(EVENT_TIME_UP, score=score)

    def start_game(self) -> None:
        self._time_up_pending = False
        self._reset_session()
        set_game_mode(self.world, self.event_bus, GameMode.PLAYING)
        self.event_bus.emit(EVENT_NEW_GAME)

    def _reset_session(self) -> None:
        score = get_score(self.world)
        score.value = self.config.gameplay.initial_score
        countdown = get_countdown(self.world)
        if countdown is not None:
            countdown.remaining = float(self.config.gameplay.time_limit_seconds)
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=score.value, delta=0)
