from __future__ import annotations

from typing import Type, TypeVar

from esper import World

from blockmatch.components.board import Board
from blockmatch.components.game_state import Countdown, GameMode, GameState
from blockmatch.components.grid import Grid
from blockmatch.components.match_rules import MatchRules
from blockmatch.components.move_state import MoveState
from blockmatch.components.palette import Palette
from blockmatch.components.score import Score

C = TypeVar("C")


def board_entity(world: World) -> int | None:
    for entity, _ in world.get_component(Board):
        return entity
    return None


def _board_component(world: World, component_type: Type[C]) -> C:
    entity = board_entity(world)
    if entity is None:
        raise RuntimeError("Board entity not found")
    return world.component_for_entity(entity, component_type)


def get_grid(world: World) -> Grid:
    return _board_component(world, Grid)


def get_palette(world: World) -> Palette:
    return _board_component(world, Palette)


def get_rules(world: World) -> MatchRules:
    return _board_component(world, MatchRules)


def get_score(world: World) -> Score:
    return _board_component(world, Score)


def get_move_state(world: World) -> MoveState:
    return _board_component(world, MoveState)


def move_in_progress(world: World) -> bool:
    entity = board_entity(world)
    if entity is None:
        return False
    try:
        state = world.component_for_entity(entity, MoveState)
    except KeyError:
        return False
    return state.busy


def get_game_state(world: World) -> GameState | None:
    for _, state in world.get_component(GameState):
        return state
    return None


def current_mode(world: World) -> GameMode | None:
    state = get_game_state(world)
    return state.mode if state is not None else None


def get_countdown(world: World) -> Countdown | None:
    for _, countdown in world.get_component(Countdown):
        return countdown
    return None
