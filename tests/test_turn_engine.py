import logging

import pytest

from lines.components.board import Ball, BallColor
from lines.components.game_state import GamePhase
from lines.events.bus import (
    EVENT_ANIMATION_START,
    EVENT_BALL_SELECTED,
    EVENT_CELL_CLICK,
    EVENT_GAME_OVER,
    EVENT_HIGH_SCORE_RECORDED,
    EVENT_LINES_CLEARED,
    EVENT_MOVE_REJECTED,
    EVENT_MOVE_SETTLED,
    EVENT_NEW_GAME_REQUEST,
    EVENT_PATH_PREVIEW,
    EVENT_PREVIEW_PLACED,
    EVENT_PREVIEW_RECALCULATED,
    EVENT_STATE_CHANGED,
)
from lines.constants import INITIAL_BALLS
from lines.systems.board_ops import incoming_positions, is_board_full
from lines.systems.high_scores import InMemoryHighScores
from lines.systems.turn_engine import TurnEngine
from tests.helpers import board_from_rows, capture, patterned_board


def _engine(world, bus, **kwargs):
    return TurnEngine(world, bus, **kwargs)


def _load(engine, board):
    state = engine.state
    state.board = board
    state.selected = None
    state.phase = GamePhase.IDLE
    state.next_balls = [BallColor.GREEN, BallColor.BLUE, BallColor.YELLOW]


def _move(engine, source, target):
    assert engine.select_or_move(*source)
    assert engine.select_or_move(*target)
    return engine.complete_move()


def test_new_game_publishes_initial_board(world, bus):
    published = capture(bus, EVENT_STATE_CHANGED)
    engine = _engine(world, bus)
    assert published[-1]["reason"] == "new_game"
    snapshot = published[-1]["snapshot"]
    balls = [cell for row in snapshot.board for cell in row if cell.ball is not None]
    assert len(balls) == INITIAL_BALLS
    assert len(incoming_positions(snapshot.board)) == len(snapshot.next_balls) == 3
    assert snapshot.score == 0 and snapshot.timer == 0 and not snapshot.timer_active
    assert engine.phase == GamePhase.IDLE


def test_selecting_and_reselecting(world, bus):
    engine = _engine(world, bus)
    _load(engine, board_from_rows(["RG"]))
    selected = capture(bus, EVENT_BALL_SELECTED)
    assert engine.select_or_move(0, 0)
    assert engine.state.board[0][0].active
    assert engine.select_or_move(1, 0)
    assert engine.state.selected == (1, 0)
    assert not engine.state.board[0][0].active
    assert engine.state.board[0][1].active
    assert [(e["x"], e["y"]) for e in selected] == [(0, 0), (1, 0)]


def test_click_on_empty_cell_without_selection_does_nothing(world, bus):
    engine = _engine(world, bus)
    _load(engine, board_from_rows(["R"]))
    assert not engine.select_or_move(4, 4)
    assert engine.phase == GamePhase.IDLE


def test_unreachable_target_is_rejected_and_selection_kept(world, bus):
    engine = _engine(world, bus)
    rows = [
        "R........",
        ".........",
        ".........",
        ".........",
        "...GGG...",
        "...G.G...",
        "...GGG...",
    ]
    _load(engine, board_from_rows(rows))
    rejected = capture(bus, EVENT_MOVE_REJECTED)
    engine.select_or_move(0, 0)
    assert not engine.select_or_move(4, 5)
    assert rejected == [{"source": (0, 0), "target": (4, 5), "reason": "unreachable"}]
    assert engine.state.selected == (0, 0)
    assert engine.phase == GamePhase.SELECTED
    assert engine.hover_state.not_reachable


def test_clicks_are_ignored_while_animating(world, bus):
    engine = _engine(world, bus)
    _load(engine, board_from_rows(["R.G"]))
    starts = capture(bus, EVENT_ANIMATION_START)
    engine.select_or_move(0, 0)
    assert engine.select_or_move(8, 8)
    assert engine.phase == GamePhase.ANIMATING
    assert starts[-1]["kind"] == "move"
    assert starts[-1]["items"][0] == (0, 0) and starts[-1]["items"][-1] == (8, 8)
    assert not engine.select_or_move(2, 0)
    assert engine.state.selected == (0, 0)


def test_hover_previews_path_for_selected_ball(world, bus):
    engine = _engine(world, bus)
    _load(engine, board_from_rows(["R"]))
    previews = capture(bus, EVENT_PATH_PREVIEW)
    assert engine.hover(3, 0) is None
    engine.select_or_move(0, 0)
    path = engine.hover(3, 0)
    assert path == [(0, 0), (1, 0), (2, 0), (3, 0)]
    assert previews[-1]["path"] == path
    engine.leave_hover()
    assert previews[-1] == {"path": None, "not_reachable": False, "cell": None}


def test_deselect_returns_to_idle(world, bus):
    engine = _engine(world, bus)
    _load(engine, board_from_rows(["R"]))
    engine.select_or_move(0, 0)
    assert engine.deselect()
    assert engine.phase == GamePhase.IDLE
    assert not any(cell.active for row in engine.state.board for cell in row)
    assert not engine.deselect()


def test_snapshots_are_not_changed_by_later_moves(world, bus):
    engine = _engine(world, bus)
    _load(engine, board_from_rows(["R"]))
    before = engine.snapshot()
    _move(engine, (0, 0), (8, 8))
    assert before.board[0][0].ball == Ball(BallColor.RED)
    assert before.board[8][8].ball is None
    assert before.score == 0
    after = engine.snapshot()
    assert after.board[8][8].ball == Ball(BallColor.RED)
    after.board[8][8].ball = None
    assert engine.state.board[8][8].ball == Ball(BallColor.RED)


def test_first_settled_move_starts_the_timer(world, bus):
    engine = _engine(world, bus)
    _load(engine, board_from_rows(["R"]))
    assert not engine.state.timer_active
    _move(engine, (0, 0), (1, 0))
    assert engine.state.timer_active
    assert engine.phase == GamePhase.IDLE
    assert engine.statistics.turns == 1


def test_line_clear_scores_and_emits_events(world, bus):
    engine = _engine(world, bus)
    _load(engine, board_from_rows(["RRRR.....", "....R...."]))
    cleared = capture(bus, EVENT_LINES_CLEARED)
    settled = capture(bus, EVENT_MOVE_SETTLED)
    placed = capture(bus, EVENT_PREVIEW_PLACED)
    result = _move(engine, (4, 1), (4, 0))
    assert result.score_delta == 5
    assert engine.state.score == 5
    assert cleared[0]["points"] == 5
    assert settled[0]["score_delta"] == 5
    assert placed == []
    assert engine.statistics.lines_popped == 1
    assert engine.statistics.longest_line == 5


def test_game_over_is_final_until_new_game(world, bus):
    engine = _engine(world, bus)
    board = patterned_board(empty=[(8, 8)])
    board[8][8].incoming_ball = Ball(BallColor.RED)
    _load(engine, board)
    over = capture(bus, EVENT_GAME_OVER)
    recalculated = capture(bus, EVENT_PREVIEW_RECALCULATED)
    placed = capture(bus, EVENT_PREVIEW_PLACED)
    _move(engine, (7, 8), (8, 8))
    state = engine.state
    assert state.game_over
    assert engine.phase == GamePhase.GAME_OVER
    assert is_board_full(state.board)
    assert incoming_positions(state.board) == []
    assert len(over) == 1
    assert recalculated[0]["positions"] == [(7, 8)]
    assert placed == []
    assert not state.timer_active

    board_before = engine.snapshot().board
    assert not engine.select_or_move(0, 0)
    assert not engine.select_or_move(8, 8)
    assert engine.snapshot().board == board_before
    assert engine.state.game_over

    bus.emit(EVENT_NEW_GAME_REQUEST)
    assert not engine.state.game_over
    assert engine.phase == GamePhase.IDLE
    assert engine.state.score == 0
    assert engine.statistics.turns == 0


def test_cell_click_event_drives_selection(world, bus):
    engine = _engine(world, bus)
    _load(engine, board_from_rows(["R"]))
    bus.emit(EVENT_CELL_CLICK, x=0, y=0)
    assert engine.state.selected == (0, 0)


def test_high_score_is_recorded_with_statistics(world, bus):
    table = InMemoryHighScores()
    engine = _engine(world, bus, recorder=table)
    _load(engine, board_from_rows(["RRRR.....", "....R...."]))
    recorded = capture(bus, EVENT_HIGH_SCORE_RECORDED)
    _move(engine, (4, 1), (4, 0))
    assert table.best == 5
    entry = table.entries[0]
    assert entry.metadata["game_id"] == engine.game_id
    assert entry.metadata["lines_popped"] == 1
    assert entry.metadata["line_lengths"] == [5]
    assert recorded[0]["accepted"] is True


class FailingRecorder:
    def is_new_high_score(self, score):
        return True

    def record_high_score(self, score, elapsed_seconds, metadata):
        raise RuntimeError("disk full")


def test_failing_recorder_does_not_break_the_game(world, bus, caplog):
    engine = _engine(world, bus, recorder=FailingRecorder())
    _load(engine, board_from_rows(["RRRR.....", "....R...."]))
    with caplog.at_level(logging.ERROR, logger="lines.systems.turn_engine"):
        result = _move(engine, (4, 1), (4, 0))
    assert result.score_delta == 5
    assert engine.state.score == 5
    assert engine.phase == GamePhase.IDLE
    assert "high score recorder failed" in caplog.text


def test_same_seed_plays_the_same_game():
    import random
    from lines.events.bus import EventBus
    from lines.world import create_world

    boards = []
    for _ in range(2):
        engine = TurnEngine(create_world(rng=random.Random(99)), EventBus())
        boards.append(engine.snapshot().board)
    assert boards[0] == boards[1]


@pytest.mark.parametrize("initial_balls", [0, 5])
def test_initial_ball_count_is_configurable(world, bus, initial_balls):
    engine = _engine(world, bus, initial_balls=initial_balls)
    count = sum(1 for row in engine.state.board for cell in row if cell.ball is not None)
    assert count == initial_balls
