from __future__ import annotations

import logging
import random
import uuid
from typing import List, Optional, Set

from esper import World

from lines.components.board import Coordinate
from lines.components.game_state import GamePhase, GameSnapshot, GameState
from lines.components.game_statistics import GameStatistics
from lines.components.hover_state import HoverState
from lines.constants import BALLS_PER_TURN, INITIAL_BALLS
from lines.events.bus import (
    EventBus,
    EVENT_ANIMATION_COMPLETE,
    EVENT_ANIMATION_START,
    EVENT_BALL_DESELECTED,
    EVENT_BALL_SELECTED,
    EVENT_BALLS_SPAWNED,
    EVENT_CELL_CLICK,
    EVENT_CELL_HOVER,
    EVENT_CELL_LEAVE,
    EVENT_DESELECT_REQUEST,
    EVENT_GAME_OVER,
    EVENT_HIGH_SCORE_RECORDED,
    EVENT_LINES_CLEARED,
    EVENT_MOVE_REJECTED,
    EVENT_MOVE_SETTLED,
    EVENT_MOVE_STARTED,
    EVENT_NEW_GAME_REQUEST,
    EVENT_NEW_GAME_STARTED,
    EVENT_PATH_PREVIEW,
    EVENT_PREVIEW_PLACED,
    EVENT_PREVIEW_RECALCULATED,
    EVENT_SCORE_CHANGED,
    EVENT_STATE_CHANGED,
)
from lines.systems.board_ops import in_bounds, set_active
from lines.systems.high_scores import HighScoreRecorder
from lines.systems.pathfinding import find_path, reachable_cells
from lines.systems.settle import SettleResult, new_game_board, settle_move
from lines.systems.spawn import random_colors
from lines.systems.state_utils import build_snapshot, get_or_create_game_state

logger = logging.getLogger(__name__)


class TurnEngine:
    """Owns GameState and drives select -> move -> settle -> game over.

    Flow:
      - A click on a ball selects it; a click on an empty cell while a ball is
        selected starts a move if a path exists.
      - The move is handed to the animation system as ``kind='move'``; its
        EVENT_ANIMATION_COMPLETE triggers ``complete_move`` (tests may call it
        directly).
      - ``complete_move`` applies the settle transaction and publishes a snapshot.
    Clicks are ignored while a move animates and after the game is over.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        *,
        rng: random.Random | None = None,
        recorder: HighScoreRecorder | None = None,
        initial_balls: int = INITIAL_BALLS,
        balls_per_turn: int = BALLS_PER_TURN,
        auto_start: bool = True,
    ):
        self.world = world
        self.event_bus = event_bus
        candidate_rng = rng or getattr(world, "random", None)
        self.rng = candidate_rng if isinstance(candidate_rng, random.Random) else random.Random()
        self.recorder = recorder
        self.initial_balls = initial_balls
        self.balls_per_turn = balls_per_turn
        self.state_entity, _ = get_or_create_game_state(world)
        self.game_id: str = uuid.uuid4().hex
        # Cells the selected ball can reach; refreshed on every selection.
        self._reachable: Set[Coordinate] = set()
        self.event_bus.subscribe(EVENT_CELL_CLICK, self.on_cell_click)
        self.event_bus.subscribe(EVENT_CELL_HOVER, self.on_cell_hover)
        self.event_bus.subscribe(EVENT_CELL_LEAVE, self.on_cell_leave)
        self.event_bus.subscribe(EVENT_DESELECT_REQUEST, self.on_deselect_request)
        self.event_bus.subscribe(EVENT_NEW_GAME_REQUEST, self.on_new_game_request)
        self.event_bus.subscribe(EVENT_ANIMATION_COMPLETE, self.on_animation_complete)
        if auto_start:
            self.start_new_game()

    # ------------------------------------------------------------------
    # Component access
    # ------------------------------------------------------------------
    @property
    def state(self) -> GameState:
        return self.world.component_for_entity(self.state_entity, GameState)

    @property
    def statistics(self) -> GameStatistics:
        return self.world.component_for_entity(self.state_entity, GameStatistics)

    @property
    def hover_state(self) -> HoverState:
        return self.world.component_for_entity(self.state_entity, HoverState)

    @property
    def phase(self) -> GamePhase:
        return self.state.phase

    def snapshot(self) -> GameSnapshot:
        return build_snapshot(self.state)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------
    def on_cell_click(self, sender, **kwargs):
        x = kwargs.get("x")
        y = kwargs.get("y")
        if x is None or y is None:
            return
        self.select_or_move(x, y)

    def on_cell_hover(self, sender, **kwargs):
        x = kwargs.get("x")
        y = kwargs.get("y")
        if x is None or y is None:
            return
        self.hover(x, y)

    def on_cell_leave(self, sender, **kwargs):
        self.leave_hover()

    def on_deselect_request(self, sender, **kwargs):
        self.deselect(reason=kwargs.get("reason", "request"))

    def on_new_game_request(self, sender, **kwargs):
        self.start_new_game()

    def on_animation_complete(self, sender, **kwargs):
        if kwargs.get("kind") == "move":
            self.complete_move()

    # ------------------------------------------------------------------
    # Player operations
    # ------------------------------------------------------------------
    def select_or_move(self, x: int, y: int) -> bool:
        """Select the ball at (x, y) or move the selected ball there.

        Returns True when the click changed state (selection or move start).
        """
        state = self.state
        if state.game_over or state.phase in (GamePhase.ANIMATING, GamePhase.GAME_OVER):
            return False
        if not in_bounds(state.board, x, y):
            return False
        cell = state.board[y][x]
        if cell.ball is not None:
            self._select(x, y)
            return True
        if state.selected is None:
            return False
        source = state.selected
        path = find_path(state.board, source, (x, y))
        if path is None or len(path) < 2:
            hover = self.hover_state
            hover.cell = (x, y)
            hover.path_trail = None
            hover.not_reachable = True
            self.event_bus.emit(EVENT_MOVE_REJECTED, source=source, target=(x, y), reason="unreachable")
            self._emit_path_preview()
            return False
        self._start_move(source, (x, y), path)
        return True

    def hover(self, x: int, y: int) -> Optional[List[Coordinate]]:
        """Preview the path the selected ball would take to (x, y)."""
        state = self.state
        hover = self.hover_state
        if not in_bounds(state.board, x, y):
            self.leave_hover()
            return None
        hover.cell = (x, y)
        hover.path_trail = None
        hover.not_reachable = False
        if state.game_over or state.phase != GamePhase.SELECTED or state.selected is None:
            self._emit_path_preview()
            return None
        if state.board[y][x].ball is None:
            if (x, y) in self._reachable:
                hover.path_trail = find_path(state.board, state.selected, (x, y))
            hover.not_reachable = hover.path_trail is None
        self._emit_path_preview()
        return hover.path_trail

    def leave_hover(self) -> None:
        hover = self.hover_state
        had_preview = hover.path_trail is not None or hover.not_reachable
        hover.clear()
        if had_preview:
            self._emit_path_preview()

    def deselect(self, reason: str = "request") -> bool:
        state = self.state
        if state.phase != GamePhase.SELECTED or state.selected is None:
            return False
        prev = state.selected
        state.board = set_active(state.board, None)
        state.selected = None
        state.phase = GamePhase.IDLE
        self.hover_state.clear()
        self.event_bus.emit(EVENT_BALL_DESELECTED, x=prev[0], y=prev[1], reason=reason)
        self._publish("deselect")
        return True

    def start_new_game(self) -> GameSnapshot:
        state = self.state
        next_balls = random_colors(self.balls_per_turn, self.rng)
        state.board = new_game_board(self.rng, next_balls, initial_balls=self.initial_balls)
        state.score = 0
        state.selected = None
        state.game_over = False
        state.next_balls = next_balls
        state.timer = 0
        state.timer_active = False
        state.phase = GamePhase.IDLE
        state.pending_move = None
        self.statistics.reset()
        self.hover_state.clear()
        self.game_id = uuid.uuid4().hex
        logger.info("new game %s started", self.game_id)
        snapshot = build_snapshot(state)
        self.event_bus.emit(EVENT_NEW_GAME_STARTED, snapshot=snapshot)
        self._publish("new_game")
        return snapshot

    def complete_move(self) -> Optional[SettleResult]:
        """Run the settle sequence for the move currently animating."""
        state = self.state
        if state.phase != GamePhase.ANIMATING or state.pending_move is None:
            return None
        source, target, _ = state.pending_move
        first_move = self.statistics.turns == 0
        moving = state.board[source[1]][source[0]].ball
        result = settle_move(
            state.board,
            source,
            target,
            state.next_balls,
            self.rng,
            balls_per_turn=self.balls_per_turn,
        )
        previous_score = state.score
        state.board = result.board
        state.score += result.score_delta
        state.next_balls = list(result.next_balls)
        state.selected = None
        state.pending_move = None
        self.statistics.record_turn()
        self.statistics.record_lines([len(line) for line in result.lines], len(result.cleared))
        self._emit_settle_events(source, target, result, previous_score, moving.color if moving else None)
        if result.game_over:
            self._end_game()
        else:
            state.phase = GamePhase.IDLE
            if first_move:
                state.timer_active = True
        if result.score_delta > 0:
            self._maybe_record_high_score()
        self._publish("move_settled")
        return result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _select(self, x: int, y: int) -> None:
        state = self.state
        prev = state.selected
        state.board = set_active(state.board, (x, y))
        state.selected = (x, y)
        state.phase = GamePhase.SELECTED
        hover = self.hover_state
        hover.path_trail = None
        hover.not_reachable = False
        self._reachable = reachable_cells(state.board, (x, y))
        if prev is not None and prev != (x, y):
            self.event_bus.emit(EVENT_BALL_DESELECTED, x=prev[0], y=prev[1], reason="reselect")
        self.event_bus.emit(EVENT_BALL_SELECTED, x=x, y=y)
        self._emit_path_preview()
        self._publish("select")

    def _start_move(self, source: Coordinate, target: Coordinate, path: List[Coordinate]) -> None:
        state = self.state
        ball = state.board[source[1]][source[0]].ball
        assert ball is not None
        state.board = set_active(state.board, None)
        state.phase = GamePhase.ANIMATING
        state.pending_move = (source, target, path)
        self.hover_state.clear()
        self.event_bus.emit(EVENT_MOVE_STARTED, path=list(path), color=ball.color)
        self.event_bus.emit(EVENT_ANIMATION_START, kind="move", items=list(path), meta={"color": ball.color})
        self._publish("move_started")

    def _emit_settle_events(
        self,
        source: Coordinate,
        target: Coordinate,
        result: SettleResult,
        previous_score: int,
        color,
    ) -> None:
        if result.preview_recalculated:
            self.event_bus.emit(
                EVENT_PREVIEW_RECALCULATED,
                previous=list(result.previous_previews),
                positions=list(result.recalculated),
            )
        if result.lines:
            self.event_bus.emit(
                EVENT_LINES_CLEARED,
                lines=[list(line) for line in result.lines],
                positions=list(result.cleared),
                points=result.score_delta,
            )
            self.event_bus.emit(
                EVENT_ANIMATION_START,
                kind="pop",
                items=list(result.cleared),
                meta={"color": color},
            )
        if result.spawned:
            self.event_bus.emit(EVENT_BALLS_SPAWNED, positions=list(result.spawned))
        if result.previews and not result.lines:
            self.event_bus.emit(EVENT_PREVIEW_PLACED, positions=list(result.previews), colors=list(result.next_balls))
        if result.score_delta:
            self.event_bus.emit(EVENT_SCORE_CHANGED, score=self.state.score, delta=result.score_delta)
        self.event_bus.emit(
            EVENT_MOVE_SETTLED,
            source=source,
            target=target,
            lines=[list(line) for line in result.lines],
            score_delta=self.state.score - previous_score,
        )

    def _end_game(self) -> None:
        state = self.state
        state.game_over = True
        state.phase = GamePhase.GAME_OVER
        state.selected = None
        state.timer_active = False
        logger.info("game %s over with score %d after %ds", self.game_id, state.score, state.timer)
        self.event_bus.emit(
            EVENT_GAME_OVER,
            score=state.score,
            timer=state.timer,
            statistics=self.statistics,
        )

    def _maybe_record_high_score(self) -> None:
        if self.recorder is None:
            return
        state = self.state
        metadata = self.statistics.as_metadata()
        metadata["game_id"] = self.game_id
        try:
            if not self.recorder.is_new_high_score(state.score):
                return
            accepted = self.recorder.record_high_score(state.score, state.timer, metadata)
        except Exception:
            # Recording is advisory; the game carries on regardless.
            logger.exception("high score recorder failed for score %d", state.score)
            return
        self.event_bus.emit(
            EVENT_HIGH_SCORE_RECORDED,
            score=state.score,
            elapsed=state.timer,
            metadata=metadata,
            accepted=bool(accepted),
        )

    def _emit_path_preview(self) -> None:
        hover = self.hover_state
        self.event_bus.emit(
            EVENT_PATH_PREVIEW,
            path=hover.path_trail,
            not_reachable=hover.not_reachable,
            cell=hover.cell,
        )

    def _publish(self, reason: str) -> None:
        self.event_bus.emit(EVENT_STATE_CHANGED, snapshot=build_snapshot(self.state), reason=reason)
