BOARD_SIZE = 9

# Balls spawned (and previewed) after every move that clears nothing.
BALLS_PER_TURN = 3
# Real balls placed on a fresh board; BALLS_PER_TURN previews are added on top.
INITIAL_BALLS = 3
MIN_LINE_LENGTH = 5

# Points per cleared line keyed by line length; other lengths score their length.
SCORING_TABLE = {
    5: 5,
    6: 8,
    7: 13,
    8: 21,
    9: 34,
}

# Animation timing (seconds).
MOVE_STEP_SECONDS = 0.05
POP_SECONDS = 0.3
TIMER_INTERVAL_SECONDS = 1.0

# Window / layout
WINDOW_WIDTH = 800
WINDOW_HEIGHT = 600
BOTTOM_MARGIN = 20
# Space reserved above the board for score, timer and next-ball preview.
HEADER_HEIGHT = 70
# Board may not exceed this fraction of the window in either direction.
BOARD_MAX_WIDTH_PCT = 0.75
BOARD_MAX_HEIGHT_PCT = 0.90
# Preview markers are drawn at this fraction of a full ball.
PREVIEW_SCALE = 0.35

# Number of entries kept by the in-memory high-score table.
HIGH_SCORE_CAPACITY = 10
