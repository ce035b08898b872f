from typing import Optional, Tuple

from lines.events.bus import (
    EventBus,
    EVENT_CELL_CLICK,
    EVENT_CELL_HOVER,
    EVENT_CELL_LEAVE,
    EVENT_DESELECT_REQUEST,
    EVENT_KEY_PRESS,
    EVENT_MOUSE_MOVE,
    EVENT_MOUSE_PRESS,
    EVENT_NEW_GAME_REQUEST,
)
from lines.ui.layout import cell_at_point

# Arcade button / key codes, kept as plain ints so this module never imports arcade.
MOUSE_BUTTON_LEFT = 1
MOUSE_BUTTON_RIGHT = 4
KEY_N = 110
KEY_F2 = 65471
KEY_ESCAPE = 65307


class InputSystem:
    """Translates window mouse/keyboard events into board-level events."""
    def __init__(self, event_bus: EventBus, window):
        self.event_bus = event_bus
        self.window = window
        self._hovered: Optional[Tuple[int, int]] = None
        self.event_bus.subscribe(EVENT_MOUSE_PRESS, self.on_mouse_press)
        self.event_bus.subscribe(EVENT_MOUSE_MOVE, self.on_mouse_move)
        self.event_bus.subscribe(EVENT_KEY_PRESS, self.on_key_press)

    def _cell_at(self, x, y) -> Optional[Tuple[int, int]]:
        if x is None or y is None:
            return None
        return cell_at_point(x, y, self.window.width, self.window.height)

    def on_mouse_press(self, sender, **kwargs):
        button = kwargs.get('button')
        if button == MOUSE_BUTTON_RIGHT:
            self.event_bus.emit(EVENT_DESELECT_REQUEST, reason='right_click')
            return
        if button != MOUSE_BUTTON_LEFT:
            return
        cell = self._cell_at(kwargs.get('x'), kwargs.get('y'))
        if cell is None:
            return
        self.event_bus.emit(EVENT_CELL_CLICK, x=cell[0], y=cell[1])

    def on_mouse_move(self, sender, **kwargs):
        cell = self._cell_at(kwargs.get('x'), kwargs.get('y'))
        if cell == self._hovered:
            return
        self._hovered = cell
        if cell is None:
            self.event_bus.emit(EVENT_CELL_LEAVE)
        else:
            self.event_bus.emit(EVENT_CELL_HOVER, x=cell[0], y=cell[1])

    def on_key_press(self, sender, **kwargs):
        symbol = kwargs.get('symbol')
        if symbol in (KEY_N, KEY_F2):
            self.event_bus.emit(EVENT_NEW_GAME_REQUEST)
        elif symbol == KEY_ESCAPE:
            self.event_bus.emit(EVENT_DESELECT_REQUEST, reason='escape')
