from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems that are not stored anywhere else alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                        # payload: dt=float
EVENT_TIMER_TICK = "timer_tick"            # payload: seconds=int


# ============================================================================
# INPUT & INTERACTION
# ============================================================================
EVENT_MOUSE_PRESS = "mouse_press"          # payload: x, y, button
EVENT_MOUSE_MOVE = "mouse_move"            # payload: x, y, dx, dy
EVENT_KEY_PRESS = "key_press"              # payload: symbol, modifiers
EVENT_CELL_CLICK = "cell_click"            # payload: x, y
EVENT_CELL_HOVER = "cell_hover"            # payload: x, y
EVENT_CELL_LEAVE = "cell_leave"            # payload: (none)
EVENT_DESELECT_REQUEST = "deselect_request"  # payload: reason=str
EVENT_NEW_GAME_REQUEST = "new_game_request"  # payload: (none)


# ============================================================================
# SELECTION & MOVES
# ============================================================================
EVENT_BALL_SELECTED = "ball_selected"      # payload: x, y
EVENT_BALL_DESELECTED = "ball_deselected"  # payload: x, y, reason=str
EVENT_MOVE_REJECTED = "move_rejected"      # payload: source=(x,y), target=(x,y), reason=str
EVENT_MOVE_STARTED = "move_started"        # payload: path=[(x,y),...], color=BallColor
EVENT_MOVE_STEP = "move_step"              # payload: step=int, position=(x,y)
EVENT_PATH_PREVIEW = "path_preview"        # payload: path=[(x,y),...]|None, not_reachable=bool, cell=(x,y)|None


# ============================================================================
# BOARD MECHANICS
# ============================================================================
EVENT_MOVE_SETTLED = "move_settled"                # payload: source=(x,y), target=(x,y), lines=list, score_delta=int
EVENT_LINES_CLEARED = "lines_cleared"              # payload: lines=[[(x,y),...]], positions=[(x,y),...], points=int
EVENT_BALLS_SPAWNED = "balls_spawned"              # payload: positions=[(x,y),...]
EVENT_PREVIEW_PLACED = "preview_placed"            # payload: positions=[(x,y),...], colors=[BallColor]
EVENT_PREVIEW_RECALCULATED = "preview_recalculated"  # payload: previous=[(x,y),...], positions=[(x,y),...]


# ============================================================================
# SCORE & GAME LIFECYCLE
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"              # payload: score=int, delta=int
EVENT_GAME_OVER = "game_over"                      # payload: score=int, timer=int, statistics=GameStatistics
EVENT_NEW_GAME_STARTED = "new_game_started"        # payload: snapshot=GameSnapshot
EVENT_STATE_CHANGED = "state_changed"              # payload: snapshot=GameSnapshot, reason=str
EVENT_HIGH_SCORE_RECORDED = "high_score_recorded"  # payload: score=int, elapsed=int, metadata=dict, accepted=bool


# ============================================================================
# ANIMATION
# ============================================================================
EVENT_ANIMATION_START = "animation_start"          # payload: kind=str, items=list/positions, meta=...
EVENT_ANIMATION_COMPLETE = "animation_complete"    # payload: kind=str, items=list/positions, meta=...
