from dataclasses import dataclass

@dataclass(slots=True)
class Board:
    """Empty tag component marking the single entity that owns the board.

    The same entity carries the Grid, Palette, MatchRules, Score and MoveState components.
    """
    pass
