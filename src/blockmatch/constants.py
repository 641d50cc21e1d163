GRID_ROWS = 8
GRID_COLS = 8
BLOCK_SIZE = 64

CANVAS_WIDTH = 800
CANVAS_HEIGHT = 600

MIN_MATCH = 3
SCORE_PER_MATCH = 10
INITIAL_SCORE = 0
TIME_LIMIT_SECONDS = 60.0

# Pauses between cascade phases, in seconds of tick time.
CLEAR_DELAY = 0.1
DROP_DELAY = 0.2
REFILL_DELAY = 0.1

# Space kept free under the board for the score / timer line.
BOTTOM_MARGIN = 48

BLOCK_ASSET_KIND = "block"
BLOCK_ASSET_PREFIX = "block_"
BACKGROUND_ASSET_KIND = "background"
MATCH_SOUND_NAME = "match_sound"
MUSIC_SOUND_NAME = "bgm_loop"

# Boards regenerated before giving up on finding one with a valid swap.
MAX_BOARD_ATTEMPTS = 200

# Fallback block colours when the config does not map a block name.
FALLBACK_BLOCK_COLORS = [
    (180, 60, 60),
    (80, 170, 80),
    (70, 90, 180),
    (200, 190, 80),
    (170, 80, 160),
    (70, 170, 170),
    (200, 130, 60),
]
CELL_COLOR_EVEN = (170, 215, 81)
CELL_COLOR_ODD = (162, 209, 73)

# Block set used when no configuration file provides one.
DEFAULT_BLOCK_NAMES = [
    "block_red",
    "block_green",
    "block_blue",
    "block_yellow",
    "block_purple",
    "block_orange",
]
