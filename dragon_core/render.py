from __future__ import annotations

from itertools import zip_longest
from typing import List, Optional

from .board import Board
from .cards import Card, CardKind, Suit

# 256-colour palette entries per suit
_SUIT_COLORS = {Suit.BLACK: 0, Suit.GREEN: 2, Suit.RED: 1}
EMPTY = ' -'


def _term_color(suit: Suit, text: str) -> str:
    return f"\x1b[38;5;{_SUIT_COLORS[suit]}m{text}\x1b[0m"


def render_card(card: Optional[Card], color: bool = False) -> str:
    """Two characters wide. With color the suit letter is replaced by the suit's colour."""
    if card is None:
        return EMPTY
    if card.kind is CardKind.JOKER:
        return ' J'
    if card.kind is CardKind.DRAGON_STACK:
        return ' X'
    assert card.suit is not None
    face = 'D' if card.kind is CardKind.DRAGON else str(card.rank)
    if color:
        return ' ' + _term_color(card.suit, face)
    return card.suit.letter + face


def join_vertical(columns: List[List[str]], blank: str = '  ') -> str:
    """Lays out lists of cells side by side, padding short columns with blanks."""
    lines = []
    for row in zip_longest(*columns, fillvalue=blank):
        lines.append(' '.join(row).rstrip())
    return '\n'.join(lines)


def render_board(board: Board, color: bool = False) -> str:
    """Top row: free cells, joker cell, goal piles. Below: the eight columns."""
    top: List[str] = [render_card(cell.card, color) for cell in board.free]
    top.append('  ')
    top.append(' J' if board.joker.has_joker else EMPTY)
    top.append('  ')
    top.extend(render_card(goal.top_card, color) for goal in board.goals)

    header = ' '.join(f'c{i + 1}' for i in range(len(board.columns)))
    columns = [
        [render_card(card, color) for card in column.stack] or [EMPTY]
        for column in board.columns
    ]
    return '\n'.join([' '.join(top).rstrip(), '', header, join_vertical(columns)])
