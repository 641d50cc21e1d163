from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods alive for systems nobody holds a reference to.
        sig.connect(fn, weak=False)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"                  # payload: x, y, button
EVENT_TILE_CLICK = "tile_click"                    # payload: row, col
EVENT_SCREEN_ADVANCE = "screen_advance"            # payload: None


# ============================================================================
# TILE & BOARD MECHANICS
# ============================================================================
EVENT_TILE_SELECTED = "tile_selected"              # payload: row, col
EVENT_TILE_DESELECTED = "tile_deselected"          # payload: reason=str
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src=(r,c), dst=(r,c), positions=[(r,c),...]
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_REJECTED = "tile_swap_rejected"    # payload: src=(r,c), dst=(r,c), reason=str
EVENT_MATCH_FOUND = "match_found"                  # payload: positions=[(r,c),...], size=int, depth=int
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions, types=[(r,c,type)], depth, score_delta, snapshot
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=[{'from','to','block'}], depth, snapshot
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(r,c),...], depth, snapshot
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(r,c),...]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int
EVENT_MOVE_COMPLETE = "move_complete"              # payload: src, dst, committed=bool, score_delta, passes=list[int]
EVENT_NO_MOVES_LEFT = "no_moves_left"              # payload: None; a board_reset(reason="no_moves_left") follows
EVENT_BOARD_RESET = "board_reset"                  # payload: rows=int, cols=int, snapshot, reason=str


# ============================================================================
# SCORE & SESSION
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score, delta
EVENT_GAME_MODE_CHANGED = "game_mode_changed"      # payload: previous_mode=GameMode|None, new_mode=GameMode
EVENT_TIME_UP = "time_up"                          # payload: score (final, after any move still resolving)
EVENT_NEW_GAME = "new_game"                        # payload: None
