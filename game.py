from __future__ import annotations

# Facade module that re-exports the dragon solitaire core.
# Single-responsibility modules live under dragon_core/*.

from dragon_core.automove import auto_safe_rank, do_automoves
from dragon_core.board import (
    COLUMN_SLOTS,
    FREE_SLOTS,
    GOAL_SLOTS,
    JOKER_SLOT,
    Board,
    CellIndex,
    CellKind,
    empty_board,
    new_board,
)
from dragon_core.cards import SUITS, Card, CardKind, Suit, create_deck, dragon, number, parse_card
from dragon_core.cells import Column, FreeCell, GoalPile, JokerCell
from dragon_core.deal import Seed, deal
from dragon_core.errors import AmbiguousMove, InvalidMove, MoveError
from dragon_core.hashkey import board_key
from dragon_core.heuristic import estimated_moves_to_solve
from dragon_core.moves import next_states
from dragon_core.normalize import canonical_board, canonical_key
from dragon_core.solver import SearchContext, SolveResult, SolveStatus, solve


def main() -> int:
    # CLI driver delegated to dragon_core.cli
    from dragon_core.cli import main as _main
    return _main()


if __name__ == '__main__':
    raise SystemExit(main())
