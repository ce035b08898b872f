from esper import World

from lines.components.animation_move import MoveAnimation
from lines.components.animation_pop import PopAnimation
from lines.components.duration import Duration
from lines.constants import MOVE_STEP_SECONDS, POP_SECONDS
from lines.events.bus import (
    EventBus,
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_START,
    EVENT_MOVE_STEP,
    EVENT_NEW_GAME_STARTED,
    EVENT_TICK,
)


class AnimationSystem:
    """Drives timing of animations; each animation is its own entity.

    ``move`` walks a ball one cell per MOVE_STEP_SECONDS along its path and
    reports completion so the turn engine can settle. ``pop`` fades cleared
    balls out and is purely cosmetic.
    """
    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        move_step: float = MOVE_STEP_SECONDS,
        pop_duration: float = POP_SECONDS,
    ):
        self.world = world
        self.event_bus = event_bus
        self.move_step = move_step
        self.pop_duration = pop_duration
        event_bus.subscribe(EVENT_TICK, self.on_tick)
        event_bus.subscribe(EVENT_ANIMATION_START, self.on_animation_start)
        event_bus.subscribe(EVENT_NEW_GAME_STARTED, self.on_new_game_started)

    @property
    def busy(self) -> bool:
        return bool(self.world.get_component(MoveAnimation))

    def on_animation_start(self, sender, **kwargs):
        kind = kwargs.get('kind')
        items = kwargs.get('items') or []
        meta = kwargs.get('meta') or {}
        if kind == 'move':
            if len(items) < 2:
                return
            self.world.create_entity(
                MoveAnimation(path=list(items), color=meta.get('color')),
                Duration(self.move_step),
            )
        elif kind == 'pop':
            color = meta.get('color')
            for pos in items:
                self.world.create_entity(PopAnimation(pos=tuple(pos), color=color), Duration(self.pop_duration))

    def on_new_game_started(self, sender, **kwargs):
        # Leftover animations belong to the previous board.
        for comp_type in (MoveAnimation, PopAnimation):
            for ent, _ in list(self.world.get_component(comp_type)):
                self.world.delete_entity(ent, immediate=True)

    def on_tick(self, sender, **kwargs):
        dt = kwargs.get('dt', 1/60)
        self._advance_moves(dt)
        self._advance_pops(dt)

    def _advance_moves(self, dt: float) -> None:
        for ent, move in list(self.world.get_component(MoveAnimation)):
            step_duration = self.world.component_for_entity(ent, Duration).value
            move.elapsed += dt
            while not move.finished and move.elapsed >= step_duration:
                move.elapsed -= step_duration
                move.step += 1
                self.event_bus.emit(EVENT_MOVE_STEP, step=move.step, position=move.position)
            if move.finished:
                path = list(move.path)
                self.world.delete_entity(ent, immediate=True)
                self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind='move', items=path)

    def _advance_pops(self, dt: float) -> None:
        pops = list(self.world.get_component(PopAnimation))
        if not pops:
            return
        for ent, pop in pops:
            if pop.alpha > 0.0:
                duration = self.world.component_for_entity(ent, Duration).value
                pop.alpha = max(0.0, pop.alpha - dt / duration)
        if all(pop.alpha <= 0.0 for _, pop in pops):
            positions = [pop.pos for _, pop in pops]
            for ent, _ in pops:
                self.world.delete_entity(ent, immediate=True)
            self.event_bus.emit(EVENT_ANIMATION_COMPLETE, kind='pop', items=positions)
