import random

from esper import World

from blockmatch.config import GameConfig
from blockmatch.components.board import Board
from blockmatch.components.game_state import Countdown, GameMode, GameState
from blockmatch.components.grid import Grid
from blockmatch.components.match_rules import MatchRules
from blockmatch.components.move_state import MoveState
from blockmatch.components.score import Score


def create_world(
    config: GameConfig | None = None,
    *,
    initial_mode: GameMode = GameMode.TITLE,
    rng: random.Random | None = None,
) -> World:
    """Build the world with its session state entity and an empty board entity.

    The grid starts empty; BoardSystem fills it when a playthrough begins.
    """
    config = config or GameConfig()
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "config", config)

    world.create_entity(
        GameState(mode=initial_mode),
        Countdown(remaining=float(config.gameplay.time_limit_seconds)),
    )

    world.create_entity(
        Board(),
        Grid(rows=config.grid.rows, cols=config.grid.cols),
        config.palette(),
        MatchRules(
            min_match=config.gameplay.min_match,
            score_per_match=config.gameplay.score_per_match,
        ),
        Score(value=config.gameplay.initial_score),
        MoveState(),
    )
    return world
