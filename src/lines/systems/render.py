from typing import Any, Dict, List, Optional, Tuple

from esper import World

from lines.components.animation_move import MoveAnimation
from lines.components.animation_pop import PopAnimation
from lines.components.game_state import GameSnapshot
from lines.constants import BOARD_SIZE, HEADER_HEIGHT, PREVIEW_SCALE
from lines.events.bus import EventBus, EVENT_GAME_OVER, EVENT_PATH_PREVIEW, EVENT_STATE_CHANGED
from lines.ui.layout import cell_center, compute_board_geometry

PADDING = 6
GRID_COLOR = (70, 70, 80)
CELL_COLOR = (200, 200, 205)
ACTIVE_COLOR = (255, 255, 255)
TRAIL_COLOR = (120, 120, 130)
BLOCKED_COLOR = (190, 60, 60)
TEXT_COLOR = (235, 235, 235)
PANEL_COLOR = (20, 20, 30, 220)


def format_timer(seconds: int) -> str:
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def summary_lines(summary: Dict[str, Any]) -> List[str]:
    """Text rows for the game-over panel."""
    return [
        f"Final score: {summary['score']}",
        f"Time: {format_timer(summary['elapsed_seconds'])}",
        f"Turns: {summary['turns']}",
        f"Lines popped: {summary['lines_popped']}",
        f"Longest line: {summary['longest_line']}",
        f"Balls cleared: {summary['balls_cleared']}",
        f"Avg score/turn: {summary['average_score_per_turn']:.1f}",
        f"Lines/turn: {summary['lines_per_turn']:.2f}",
    ]


class RenderSystem:
    """Draws the last published snapshot plus in-flight animations.

    Rendering happens only when the window calls ``process``. Without an active
    arcade window (tests) the layout cache is still built and draw calls are skipped.
    """
    def __init__(self, world: World, event_bus: EventBus, window):
        self.world = world
        self.event_bus = event_bus
        self.window = window
        self.snapshot: Optional[GameSnapshot] = None
        self.path_trail: Optional[List[Tuple[int, int]]] = None
        self.not_reachable = False
        self.hover_cell: Optional[Tuple[int, int]] = None
        self.game_over_summary: Optional[Dict[str, Any]] = None
        self._last_cell_layout: Dict[Tuple[int, int], Dict[str, Any]] = {}
        self.event_bus.subscribe(EVENT_STATE_CHANGED, self.on_state_changed)
        self.event_bus.subscribe(EVENT_PATH_PREVIEW, self.on_path_preview)
        self.event_bus.subscribe(EVENT_GAME_OVER, self.on_game_over)

    def on_state_changed(self, sender, **kwargs):
        snapshot = kwargs.get('snapshot')
        if snapshot is not None:
            self.snapshot = snapshot
        reason = kwargs.get('reason')
        if reason in ('select', 'move_started', 'move_settled', 'new_game', 'deselect'):
            self.path_trail = None
            self.not_reachable = False
            self.hover_cell = None
        if reason == 'new_game':
            self.game_over_summary = None

    def on_path_preview(self, sender, **kwargs):
        self.path_trail = kwargs.get('path')
        self.not_reachable = bool(kwargs.get('not_reachable'))
        self.hover_cell = kwargs.get('cell')

    def on_game_over(self, sender, **kwargs):
        statistics = kwargs.get('statistics')
        if statistics is None:
            return
        self.game_over_summary = statistics.summary(kwargs.get('score', 0), kwargs.get('timer', 0))

    @property
    def cell_layout(self) -> Dict[Tuple[int, int], Dict[str, Any]]:
        return dict(self._last_cell_layout)

    def process(self):
        # Local import keeps tests headless without creating a window.
        import arcade
        headless = False
        try:
            arcade.get_window()
        except Exception:
            headless = True
        self._last_cell_layout = {}
        snapshot = self.snapshot
        if snapshot is None:
            return
        width, height = self.window.width, self.window.height
        tile_size, start_x, start_y = compute_board_geometry(width, height)
        radius = max(tile_size - PADDING, 4) / 2
        moving = self._active_move()
        hidden_source = moving.path[0] if moving is not None else None

        if not headless:
            self._draw_grid(arcade, snapshot, tile_size, start_x, start_y)
            self._draw_trail(arcade, tile_size)

        for row in snapshot.board:
            for cell in row:
                pos = (cell.x, cell.y)
                cx, cy = cell_center(cell.x, cell.y, width, height)
                if cell.ball is not None and pos != hidden_source:
                    self._last_cell_layout[pos] = {"center": (cx, cy), "radius": radius, "kind": "ball"}
                    if not headless:
                        arcade.draw_circle_filled(cx, cy, radius, cell.ball.color.rgb)
                        if cell.active:
                            arcade.draw_circle_outline(cx, cy, radius + 2, ACTIVE_COLOR, 3)
                elif cell.incoming_ball is not None:
                    preview_radius = radius * PREVIEW_SCALE
                    self._last_cell_layout[pos] = {"center": (cx, cy), "radius": preview_radius, "kind": "preview"}
                    if not headless:
                        arcade.draw_circle_filled(cx, cy, preview_radius, cell.incoming_ball.color.rgb)

        for _, pop in self.world.get_component(PopAnimation):
            if headless or pop.color is None:
                continue
            cx, cy = cell_center(pop.pos[0], pop.pos[1], width, height)
            r, g, b = pop.color.rgb
            arcade.draw_circle_filled(cx, cy, radius * (0.5 + pop.alpha / 2), (r, g, b, int(255 * pop.alpha)))

        if moving is not None:
            mx, my = moving.position
            cx, cy = cell_center(mx, my, width, height)
            self._last_cell_layout[(mx, my)] = {"center": (cx, cy), "radius": radius, "kind": "moving"}
            if not headless and moving.color is not None:
                arcade.draw_circle_filled(cx, cy, radius, moving.color.rgb)

        if not headless:
            self._draw_header(arcade, snapshot, tile_size, start_x, start_y)

    def _active_move(self) -> Optional[MoveAnimation]:
        for _, move in self.world.get_component(MoveAnimation):
            return move
        return None

    def _draw_grid(self, arcade, snapshot: GameSnapshot, tile_size: int, start_x: float, start_y: float) -> None:
        for y in range(BOARD_SIZE):
            for x in range(BOARD_SIZE):
                left = start_x + x * tile_size
                bottom = start_y + (BOARD_SIZE - 1 - y) * tile_size
                arcade.draw_lrbt_rectangle_filled(left, left + tile_size, bottom, bottom + tile_size, CELL_COLOR)
                arcade.draw_lrbt_rectangle_outline(left, left + tile_size, bottom, bottom + tile_size, GRID_COLOR, 1)

    @property
    def blocked_cell(self) -> Optional[Tuple[int, int]]:
        """Cell to mark as unreachable, if the pointer is on one."""
        return self.hover_cell if self.not_reachable else None

    def _draw_trail(self, arcade, tile_size: int) -> None:
        width, height = self.window.width, self.window.height
        for x, y in (self.path_trail or [])[1:]:
            cx, cy = cell_center(x, y, width, height)
            arcade.draw_circle_filled(cx, cy, max(tile_size * 0.08, 2), TRAIL_COLOR)
        blocked = self.blocked_cell
        if blocked is not None:
            cx, cy = cell_center(blocked[0], blocked[1], width, height)
            arm = tile_size * 0.25
            arcade.draw_line(cx - arm, cy - arm, cx + arm, cy + arm, BLOCKED_COLOR, 3)
            arcade.draw_line(cx - arm, cy + arm, cx + arm, cy - arm, BLOCKED_COLOR, 3)

    def _draw_header(self, arcade, snapshot: GameSnapshot, tile_size: int, start_x: float, start_y: float) -> None:
        top = start_y + BOARD_SIZE * tile_size
        text_y = top + HEADER_HEIGHT / 2
        arcade.draw_text(f"Score: {snapshot.score}", start_x, text_y, TEXT_COLOR, 16)
        board_right = start_x + BOARD_SIZE * tile_size
        arcade.draw_text(format_timer(snapshot.timer), board_right - 70, text_y, TEXT_COLOR, 16)
        # Next balls, centred above the board.
        preview_r = tile_size * 0.25
        centre_x = start_x + BOARD_SIZE * tile_size / 2
        offset = (len(snapshot.next_balls) - 1) / 2
        for i, color in enumerate(snapshot.next_balls):
            cx = centre_x + (i - offset) * preview_r * 3
            arcade.draw_circle_filled(cx, text_y + 8, preview_r, color.rgb)
        if snapshot.game_over:
            self._draw_game_over(arcade, tile_size, start_x, start_y)

    def _draw_game_over(self, arcade, tile_size: int, start_x: float, start_y: float) -> None:
        board_px = BOARD_SIZE * tile_size
        arcade.draw_lrbt_rectangle_filled(
            start_x, start_x + board_px, start_y, start_y + board_px, PANEL_COLOR
        )
        rows = ["Game over - press N for a new game"]
        if self.game_over_summary is not None:
            rows += summary_lines(self.game_over_summary)
        line_height = 26
        y = start_y + board_px / 2 + line_height * (len(rows) - 1) / 2
        for i, row in enumerate(rows):
            arcade.draw_text(
                row,
                start_x,
                y - i * line_height,
                BLOCKED_COLOR if i == 0 else TEXT_COLOR,
                20 if i == 0 else 16,
                width=int(board_px),
                align="center",
            )
