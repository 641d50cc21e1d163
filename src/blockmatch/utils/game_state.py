from __future__ import annotations

import logging

from esper import World

from blockmatch.components.game_state import GameMode, GameState
from blockmatch.events.bus import EVENT_GAME_MODE_CHANGED, EventBus

logger = logging.getLogger(__name__)


def set_game_mode(world: World, event_bus: EventBus, mode: GameMode) -> None:
    """Update the global game mode and emit a change event when it differs."""

    previous_mode: GameMode | None = None
    for _, state in world.get_component(GameState):
        previous_mode = state.mode
        if state.mode == mode:
            return
        state.mode = mode
        logger.info("Game mode %s -> %s", previous_mode.name, mode.name)
        event_bus.emit(EVENT_GAME_MODE_CHANGED, previous_mode=previous_mode, new_mode=mode)
        return
    # No existing GameState component; create a new one.
    world.create_entity(GameState(mode=mode))
    logger.info("Game mode set to %s", mode.name)
    event_bus.emit(EVENT_GAME_MODE_CHANGED, previous_mode=previous_mode, new_mode=mode)
