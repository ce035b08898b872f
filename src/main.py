"""Entry point for the Lines puzzle.

Sets up ECS world, event bus, systems, and Arcade window.
"""
import logging

from arcade import Window, run, set_background_color, color
from lines.world import create_world
from lines.constants import WINDOW_WIDTH, WINDOW_HEIGHT
from lines.events.bus import (
    EventBus,
    EVENT_KEY_PRESS,
    EVENT_MOUSE_MOVE,
    EVENT_MOUSE_PRESS,
    EVENT_TICK,
)
from lines.systems.animation import AnimationSystem
from lines.systems.high_scores import InMemoryHighScores
from lines.systems.input import InputSystem
from lines.systems.render import RenderSystem
from lines.systems.timer import TimerSystem
from lines.systems.turn_engine import TurnEngine


class LinesWindow(Window):
    def __init__(self):
        super().__init__(WINDOW_WIDTH, WINDOW_HEIGHT, "Lines", resizable=True)
        self.set_update_rate(1/60)
        self.event_bus = EventBus()
        self.world = create_world()
        self.high_scores = InMemoryHighScores()

        # Presentation first so it sees the first published snapshot.
        self.render_system = RenderSystem(self.world, self.event_bus, self)
        self.input_system = InputSystem(self.event_bus, self)
        self.animation_system = AnimationSystem(self.world, self.event_bus)
        self.timer_system = TimerSystem(self.world, self.event_bus)
        self.turn_engine = TurnEngine(self.world, self.event_bus, recorder=self.high_scores)

        set_background_color(color.BLACK)

    def on_draw(self):
        self.clear()
        self.render_system.process()

    def on_update(self, delta_time: float):
        self.event_bus.emit(EVENT_TICK, dt=delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        self.event_bus.emit(EVENT_MOUSE_PRESS, x=x, y=y, button=button)

    def on_mouse_motion(self, x: float, y: float, dx: float, dy: float):
        self.event_bus.emit(EVENT_MOUSE_MOVE, x=x, y=y, dx=dx, dy=dy)

    def on_key_press(self, symbol: int, modifiers: int):
        self.event_bus.emit(EVENT_KEY_PRESS, symbol=symbol, modifiers=modifiers)


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    window = LinesWindow()
    run()

if __name__ == "__main__":
    main()
