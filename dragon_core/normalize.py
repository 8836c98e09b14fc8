from __future__ import annotations

from typing import Tuple

from .board import Board


def canonical_key(board: Board) -> Tuple:
    """Key that is equal for boards differing only in which slot holds what.

    Free cells, goal piles and columns are each interchangeable among themselves,
    so each group is sorted by its cells' contents. The joker cell is kept as is.
    """
    return (
        board.joker.has_joker,
        tuple(sorted(cell.sort_key() for cell in board.free)),
        tuple(sorted(goal.sort_key() for goal in board.goals)),
        tuple(sorted(column.sort_key() for column in board.columns)),
    )


def canonical_board(board: Board) -> Board:
    """Build the canonical view of a board: every interchangeable group in sorted order."""
    return Board(
        joker=board.joker,
        free=tuple(sorted(board.free, key=lambda cell: cell.sort_key())),
        goals=tuple(sorted(board.goals, key=lambda goal: goal.sort_key())),
        columns=tuple(sorted(board.columns, key=lambda column: column.sort_key())),
    )
