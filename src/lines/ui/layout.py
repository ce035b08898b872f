from typing import Optional, Tuple

from lines.constants import (
    BOARD_SIZE, BOTTOM_MARGIN, HEADER_HEIGHT, BOARD_MAX_WIDTH_PCT, BOARD_MAX_HEIGHT_PCT,
)

def compute_board_geometry(window_width: int, window_height: int):
    """Return (tile_size, start_x, start_y) for the board's bottom-left corner.

    Shared by RenderSystem and InputSystem so clicks map onto what is drawn.
    """
    max_board_w = window_width * BOARD_MAX_WIDTH_PCT
    max_board_h = (window_height - BOTTOM_MARGIN - HEADER_HEIGHT) * BOARD_MAX_HEIGHT_PCT
    tile_size = int(min(max_board_w / BOARD_SIZE, max_board_h / BOARD_SIZE))
    if tile_size < 20:
        tile_size = 20
    total_width = BOARD_SIZE * tile_size
    start_x = (window_width - total_width) / 2
    start_y = BOTTOM_MARGIN
    return tile_size, start_x, start_y


def cell_center(x: int, y: int, window_width: int, window_height: int) -> Tuple[float, float]:
    """Screen center of board cell (x, y); board row 0 is drawn at the top."""
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height)
    cx = start_x + x * tile_size + tile_size / 2
    cy = start_y + (BOARD_SIZE - 1 - y) * tile_size + tile_size / 2
    return cx, cy


def cell_at_point(px: float, py: float, window_width: int, window_height: int) -> Optional[Tuple[int, int]]:
    tile_size, start_x, start_y = compute_board_geometry(window_width, window_height)
    total = BOARD_SIZE * tile_size
    if px < start_x or px >= start_x + total:
        return None
    if py < start_y or py >= start_y + total:
        return None
    col = int((px - start_x) // tile_size)
    row_from_bottom = int((py - start_y) // tile_size)
    return col, BOARD_SIZE - 1 - row_from_bottom
