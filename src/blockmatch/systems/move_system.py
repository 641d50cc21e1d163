"""Paced swap controller.

Accepts one swap at a time, resolves it through the cascade generator and
spaces the phases out over ``tick`` events so a renderer can animate them.
"""
from __future__ import annotations

import logging
from typing import Iterator, Tuple

from esper import World

from blockmatch.config import GameConfig, PacingConfig
from blockmatch.events.bus import (
    EVENT_BOARD_RESET,
    EVENT_CASCADE_COMPLETE,
    EVENT_CASCADE_STEP,
    EVENT_GRAVITY_APPLIED,
    EVENT_MATCH_CLEARED,
    EVENT_MATCH_FOUND,
    EVENT_MOVE_COMPLETE,
    EVENT_REFILL_COMPLETED,
    EVENT_SCORE_CHANGED,
    EVENT_TICK,
    EVENT_TILE_SWAP_INVALID,
    EVENT_TILE_SWAP_REJECTED,
    EVENT_TILE_SWAP_REQUEST,
    EVENT_TILE_SWAP_VALID,
    EventBus,
)
from blockmatch.systems.cascade import CascadePhase, PhaseKind, resolve_cascade
from blockmatch.systems.grid_ops import find_all_matches, swap_cells
from blockmatch.utils.board_state import get_grid, get_move_state, get_palette, get_rules, get_score

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


class MoveSystem:
    def __init__(self, world: World, event_bus: EventBus, *, pacing: PacingConfig | None = None) -> None:
        self.world = world
        self.event_bus = event_bus
        if pacing is None:
            config: GameConfig = getattr(world, "config", None) or GameConfig()
            pacing = config.pacing
        self.pacing = pacing
        self._phases: Iterator[CascadePhase] | None = None
        self._wait = 0.0
        self.event_bus.subscribe(EVENT_TILE_SWAP_REQUEST, self.on_swap_request)
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_BOARD_RESET, self.on_board_reset)

    @property
    def resolving(self) -> bool:
        return self._phases is not None

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def on_swap_request(self, sender, **kwargs) -> None:
        src = kwargs.get("src")
        dst = kwargs.get("dst")
        if not src or not dst:
            return
        state = get_move_state(self.world)
        if not state.begin(tuple(src), tuple(dst)):
            logger.warning("Dropping swap %s<->%s: a move is still resolving", src, dst)
            self.event_bus.emit(EVENT_TILE_SWAP_REJECTED, src=src, dst=dst, reason="busy")
            return
        try:
            self._start_move(tuple(src), tuple(dst))
        except Exception:
            self._abort()
            raise

    def on_tick(self, sender, **kwargs) -> None:
        if self._phases is None:
            return
        self._wait -= kwargs.get("dt", 1 / 60)
        try:
            self._advance()
        except Exception:
            self._abort()
            raise

    def on_board_reset(self, sender, **kwargs) -> None:
        # A new grid replaces the one the in-flight cascade was mutating.
        if self._phases is None and not get_move_state(self.world).busy:
            return
        logger.info("Board reset while a move was resolving; dropping it")
        self._abort()

    # ------------------------------------------------------------------
    # Move lifecycle
    # ------------------------------------------------------------------

    def _start_move(self, src: Position, dst: Position) -> None:
        grid = get_grid(self.world)
        rules = get_rules(self.world)
        swap_cells(grid, src, dst)
        matches = find_all_matches(grid, rules.min_match)
        if not matches:
            swap_cells(grid, src, dst)
            logger.debug("Swap %s<->%s made no match; reverted", src, dst)
            self.event_bus.emit(EVENT_TILE_SWAP_INVALID, src=src, dst=dst)
            self._complete()
            return
        get_move_state(self.world).committed = True
        self.event_bus.emit(EVENT_TILE_SWAP_VALID, src=src, dst=dst, positions=sorted(matches))
        self._phases = resolve_cascade(
            grid,
            matches,
            get_palette(self.world),
            rules.min_match,
            rules.score_per_match,
            rng=getattr(self.world, "random", None),
        )
        self._wait = 0.0
        self._advance()

    def _advance(self) -> None:
        while self._phases is not None and self._wait <= 0.0:
            phase = next(self._phases, None)
            if phase is None:
                self._phases = None
                state = get_move_state(self.world)
                self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=len(state.passes))
                self._complete()
                return
            self._apply_phase(phase)
            self._wait += self._delay_for(phase.kind)

    def _apply_phase(self, phase: CascadePhase) -> None:
        if phase.kind is PhaseKind.CLEARED:
            state = get_move_state(self.world)
            state.passes.append(len(phase.positions))
            state.score_delta += phase.score_delta
            score = get_score(self.world)
            score.value += phase.score_delta
            positions = list(phase.positions)
            self.event_bus.emit(EVENT_MATCH_FOUND, positions=positions, size=len(positions), depth=phase.depth)
            self.event_bus.emit(EVENT_CASCADE_STEP, depth=phase.depth, positions=positions)
            self.event_bus.emit(
                EVENT_MATCH_CLEARED,
                positions=positions,
                types=list(phase.types),
                depth=phase.depth,
                score_delta=phase.score_delta,
                snapshot=phase.snapshot,
            )
            self.event_bus.emit(EVENT_SCORE_CHANGED, score=score.value, delta=phase.score_delta)
        elif phase.kind is PhaseKind.DROPPED:
            moves = [
                {'from': move.source, 'to': move.target, 'block': move.block}
                for move in phase.moves
            ]
            self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=moves, depth=phase.depth, snapshot=phase.snapshot)
        elif phase.kind is PhaseKind.REFILLED:
            self.event_bus.emit(
                EVENT_REFILL_COMPLETED,
                new_tiles=list(phase.positions),
                depth=phase.depth,
                snapshot=phase.snapshot,
            )

    def _delay_for(self, kind: PhaseKind) -> float:
        if kind is PhaseKind.CLEARED:
            return self.pacing.clear_delay
        if kind is PhaseKind.DROPPED:
            return self.pacing.drop_delay
        return self.pacing.refill_delay

    def _complete(self) -> None:
        state = get_move_state(self.world)
        payload = dict(
            src=state.src,
            dst=state.dst,
            committed=state.committed,
            score_delta=state.score_delta,
            passes=list(state.passes),
        )
        state.finish()
        logger.debug("Move complete: %s", payload)
        self.event_bus.emit(EVENT_MOVE_COMPLETE, **payload)

    def _abort(self) -> None:
        self._phases = None
        self._wait = 0.0
        get_move_state(self.world).finish()
