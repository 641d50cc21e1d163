from __future__ import annotations

import random
from typing import Sequence

from esper import World

from blockmatch.components.grid import Grid
from blockmatch.config import GameConfig, config_from_dict
from blockmatch.events.bus import EventBus, EVENT_TICK
from blockmatch.utils.board_state import board_entity
from blockmatch.world import create_world

BLOCKS = ["A", "B", "C", "D"]


class ScriptedRandom(random.Random):
    """Random whose ``choice`` returns queued picks first, then falls back to seeded draws."""

    def queue(self, *picks: str) -> "ScriptedRandom":
        self.picks = list(picks)
        return self

    def choice(self, seq):
        picks = getattr(self, "picks", None)
        if picks:
            pick = picks.pop(0)
            assert pick in seq, f"scripted pick {pick!r} not among {list(seq)!r}"
            return pick
        return super().choice(seq)


class DummyWindow:
    def __init__(self, width=800, height=600):
        self.width = width
        self.height = height


def make_config(rows: int = 4, cols: int = 3, blocks: Sequence[str] = BLOCKS, **gameplay) -> GameConfig:
    return config_from_dict({
        "grid": {"rows": rows, "cols": cols, "blockSize": 64},
        "gameplay": gameplay,
        "assets": {"images": [{"name": name, "kind": "block"} for name in blocks]},
    })


def make_world(rows: Sequence[Sequence[str | None]] | None = None, *, config: GameConfig | None = None,
               rng: random.Random | None = None, **kwargs) -> World:
    if config is None:
        shape = (len(rows), len(rows[0])) if rows else (4, 3)
        config = make_config(*shape)
    world = create_world(config, rng=rng or random.Random(0), **kwargs)
    if rows is not None:
        set_grid(world, rows)
    return world


def set_grid(world: World, rows: Sequence[Sequence[str | None]]) -> Grid:
    grid = Grid.from_rows(rows)
    world.add_component(board_entity(world), grid)
    return grid


def drive_ticks(bus: EventBus, ticks: int, dt: float = 0.5) -> None:
    for _ in range(ticks):
        bus.emit(EVENT_TICK, dt=dt)


def record(bus: EventBus, *names: str) -> list[tuple[str, dict]]:
    """Subscribe to the given events and collect (name, payload) pairs in emission order."""
    seen: list[tuple[str, dict]] = []
    for name in names:
        bus.subscribe(name, lambda sender, _name=name, **payload: seen.append((_name, payload)))
    return seen


# Four rows by three columns. Swapping (2,2)<->(3,2) lines up A A A on the
# bottom row; scripting the first refill as A A A gives a second pass.
CASCADE_BEFORE_SWAP = [
    ["C", "D", "C"],
    ["D", "C", "D"],
    ["B", "A", "A"],
    ["A", "A", "B"],
]
CASCADE_SWAP = ((2, 2), (3, 2))
CASCADE_REFILLS = ("A", "A", "A", "C", "D", "B")
CASCADE_FINAL = (
    ("C", "D", "B"),
    ("C", "D", "C"),
    ("D", "C", "D"),
    ("B", "A", "B"),
)
