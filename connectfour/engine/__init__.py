"""Board engine package."""

from connectfour.engine.board import COLUMNS
from connectfour.engine.board import NO_ROW
from connectfour.engine.board import ROWS
from connectfour.engine.board import check_winner
from connectfour.engine.board import create_board
from connectfour.engine.board import drop_disc
from connectfour.engine.board import is_board_full
from connectfour.engine.board import is_valid_column

__all__ = [
    "COLUMNS",
    "NO_ROW",
    "ROWS",
    "check_winner",
    "create_board",
    "drop_disc",
    "is_board_full",
    "is_valid_column",
]
