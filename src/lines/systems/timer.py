from esper import World

from lines.constants import TIMER_INTERVAL_SECONDS
from lines.events.bus import (
    EventBus,
    EVENT_NEW_GAME_STARTED,
    EVENT_STATE_CHANGED,
    EVENT_TICK,
    EVENT_TIMER_TICK,
)
from lines.systems.state_utils import build_snapshot, get_or_create_game_state


class TimerSystem:
    """Counts whole seconds of play while the game timer is active.

    The timer is switched on by the turn engine after the first settled move
    and off at game over; it is paused, not reset, until the next new game.
    """
    def __init__(self, world: World, event_bus: EventBus, interval: float = TIMER_INTERVAL_SECONDS):
        self.world = world
        self.event_bus = event_bus
        self.interval = interval
        self._accumulated = 0.0
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)
        self.event_bus.subscribe(EVENT_NEW_GAME_STARTED, self.on_new_game_started)

    def on_new_game_started(self, sender, **kwargs):
        self._accumulated = 0.0

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        try:
            dt = float(dt)
        except (TypeError, ValueError):
            return
        _, state = get_or_create_game_state(self.world)
        if not state.timer_active or state.game_over:
            return
        self._accumulated += dt
        ticked = False
        while self._accumulated >= self.interval:
            self._accumulated -= self.interval
            state.timer += 1
            ticked = True
            self.event_bus.emit(EVENT_TIMER_TICK, seconds=state.timer)
        if ticked:
            self.event_bus.emit(EVENT_STATE_CHANGED, snapshot=build_snapshot(state), reason="timer")
