from __future__ import annotations

from typing import List

from .board import Board, CellIndex, COLUMN_SLOTS, FREE_SLOTS, GOAL_SLOTS
from .cards import CardKind, SUITS
from .errors import AmbiguousMove, InvalidMove

SOURCE_SLOTS = FREE_SLOTS + COLUMN_SLOTS
DEST_SLOTS = GOAL_SLOTS + FREE_SLOTS + COLUMN_SLOTS


def valid_sources(board: Board) -> List[CellIndex]:
    """Free cells and columns showing a card that can be picked up."""
    sources: List[CellIndex] = []
    for slot in SOURCE_SLOTS:
        card = board.get_cell(slot).top()
        if card is not None and card.kind is not CardKind.DRAGON_STACK:
            sources.append(slot)
    return sources


def valid_destinations(board: Board) -> List[CellIndex]:
    """Destinations worth trying.

    Empty free cells are interchangeable, as are empty columns, so only the first
    of each is kept. Empty goal piles are left to the automove.
    """
    dests: List[CellIndex] = []
    seen_empty_free = False
    seen_empty_column = False
    for slot in DEST_SLOTS:
        empty = board.get_cell(slot).top() is None
        if slot in GOAL_SLOTS:
            if empty:
                continue
        elif empty:
            if slot in FREE_SLOTS:
                if seen_empty_free:
                    continue
                seen_empty_free = True
            else:
                if seen_empty_column:
                    continue
                seen_empty_column = True
        dests.append(slot)
    return dests


def next_states(board: Board) -> List[Board]:
    """Every board one move away, each already automoved.

    Grouping dragons counts as a move. A run that could land on an empty column at
    several heights yields one board per height.
    """
    states: List[Board] = []
    for suit in SUITS:
        try:
            states.append(board.group_dragons(suit).do_automoves())
        except InvalidMove:
            pass

    dests = valid_destinations(board)
    for source in valid_sources(board):
        for dest in dests:
            try:
                states.append(board.move_stack(source, dest).do_automoves())
            except AmbiguousMove as amb:
                for height in range(1, amb.max_height + 1):
                    try:
                        states.append(board.move_n_cards(source, dest, height).do_automoves())
                    except InvalidMove:
                        pass
            except InvalidMove:
                pass
    return states
