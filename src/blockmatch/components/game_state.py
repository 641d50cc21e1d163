"""Game state resource describing the active screen."""
from dataclasses import dataclass
from enum import Enum, auto


class GameMode(Enum):
    """Screens of a playthrough; only PLAYING accepts board input."""
    TITLE = auto()
    INSTRUCTIONS = auto()
    PLAYING = auto()
    GAME_OVER = auto()


@dataclass
class GameState:
    """Singleton component storing the currently active game mode."""
    mode: GameMode = GameMode.TITLE


@dataclass(slots=True)
class Countdown:
    remaining: float = 0.0
