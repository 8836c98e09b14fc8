from __future__ import annotations

from typing import List, Sequence

from .board import Board
from .cards import CardKind
from .cells import GoalPile


def _safe_rank(goals: Sequence[GoalPile]) -> int:
    return min(goal.rank for goal in goals) + 2


def auto_safe_rank(board: Board) -> int:
    """Highest number rank that can go to the goal without ever being needed as a support card.

    A card of rank r can only hold a card of rank r-1 in another suit; once every
    goal pile reaches r-2, nothing left on the table needs it.
    """
    return _safe_rank(board.goals)


def do_automoves(board: Board) -> Board:
    """Performs every always-safe move until none is left, and returns the resulting board.

    Exposed jokers go to the joker cell; exposed number cards no higher than the
    safe rank go to the first goal pile that takes them. Each pass looks at every
    column and then every free cell once, and the safe rank is refreshed between
    passes. Returns `board` itself when nothing moves.
    """
    joker = board.joker
    free: List = list(board.free)
    goals: List[GoalPile] = list(board.goals)
    columns: List = list(board.columns)
    safe_rank = _safe_rank(goals)
    moved = False

    progress = True
    while progress:
        progress = False
        for cells in (columns, free):
            for i, cell in enumerate(cells):
                card = cell.top()
                if card is None:
                    continue
                if card.kind is CardKind.JOKER:
                    new_joker = joker.accept(card)
                    if new_joker is not None:
                        joker = new_joker
                        cells[i] = cell.pop()
                        progress = True
                elif card.kind is CardKind.NUMBER and card.rank <= safe_rank:
                    for g, goal in enumerate(goals):
                        new_goal = goal.accept(card)
                        if new_goal is not None:
                            goals[g] = new_goal
                            cells[i] = cell.pop()
                            progress = True
                            break
        moved = moved or progress
        safe_rank = _safe_rank(goals)

    if not moved:
        return board
    return Board(joker, tuple(free), tuple(goals), tuple(columns))
