from __future__ import annotations

from collections import Counter

from .board import Board
from .cards import CardKind


def estimated_moves_to_solve(board: Board) -> int:
    """Rough guess of how many moves are left (the "h" score).

    Automoves are counted as moves here while the search folds them into the move
    that triggered them, so the estimate is not admissible. It still steers the
    search away from pointless moves.
    """
    # Number cards not yet on a goal pile.
    ungoaled = sum(9 - goal.rank for goal in board.goals)

    # Dragon suits still waiting to be grouped.
    grouped = sum(1 for cell in board.free if cell.card is not None and cell.card.kind is CardKind.DRAGON_STACK)
    ungrouped_suits = 3 - grouped

    # Dragons buried under a dragon of the same suit need an extra move to split up.
    trapped = 0
    if ungrouped_suits:
        for column in board.columns:
            counts = Counter(card.suit for card in column.stack if card.kind is CardKind.DRAGON)
            trapped += sum(n - 1 for n in counts.values())

    return ungoaled + trapped + ungrouped_suits
