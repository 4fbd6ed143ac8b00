"""Pure Connect-Four board helpers: construction, disc drops, win and fullness checks."""

from __future__ import annotations

from typing import Any

ROWS = 6
COLUMNS = 7
WIN_LENGTH = 4
NO_ROW = -1

Cell = int | None
Board = list[list[Cell]]

# horizontal, vertical, main diagonal, anti-diagonal
_AXES: tuple[tuple[int, int], ...] = ((0, 1), (1, 0), (1, 1), (1, -1))


def create_board() -> Board:
    """Return a ROWS x COLUMNS grid of empty cells; row 0 is the top row."""
    return [[None] * COLUMNS for _ in range(ROWS)]


def is_valid_column(column: Any) -> bool:
    """True for a non-bool int inside the board's column range."""
    if isinstance(column, bool) or not isinstance(column, int):
        return False
    return 0 <= column < COLUMNS


def drop_disc(board: Board, column: int, player: int) -> int:
    """Place `player` on the lowest empty cell of `column`.

    Returns the row used, or NO_ROW when the column is already full. The
    column is not range-checked here.
    """
    for row in range(ROWS - 1, -1, -1):
        if board[row][column] is None:
            board[row][column] = player
            return row
    return NO_ROW


def _in_bounds(row: int, column: int) -> bool:
    return 0 <= row < ROWS and 0 <= column < COLUMNS


def _run_length(board: Board, row: int, column: int, d_row: int, d_col: int, player: int) -> int:
    count = 0
    for step in range(1, WIN_LENGTH):
        r = row + d_row * step
        c = column + d_col * step
        if not _in_bounds(r, c) or board[r][c] != player:
            break
        count += 1
    return count


def check_winner(board: Board, row: int, column: int, player: int) -> bool:
    """Return True when the disc at (row, column) completes a line of four.

    Only lines through the last placed disc are scanned; every earlier move
    was already checked when it was made.
    """
    if row < 0:
        return False
    for d_row, d_col in _AXES:
        total = 1
        total += _run_length(board, row, column, d_row, d_col, player)
        total += _run_length(board, row, column, -d_row, -d_col, player)
        if total >= WIN_LENGTH:
            return True
    return False


def is_board_full(board: Board) -> bool:
    """True once every cell holds a disc."""
    return all(cell is not None for row in board for cell in row)


__all__ = [
    "Board",
    "COLUMNS",
    "NO_ROW",
    "ROWS",
    "WIN_LENGTH",
    "check_winner",
    "create_board",
    "drop_disc",
    "is_board_full",
    "is_valid_column",
]
