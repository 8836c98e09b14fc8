"""
Interactive play as a small state machine.

A Session is immutable; every transition returns a new one. The mode says what
the player is doing and carries only the fields that step needs:

    SelectSource -> SelectDestination(source) -> [ChooseHeight(source, dest, ...)]
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Union

from .board import Board, CellIndex, CellKind
from .cards import CardKind
from .errors import AmbiguousMove, InvalidMove


@dataclass(frozen=True)
class SelectSource:
    pass


@dataclass(frozen=True)
class SelectDestination:
    source: CellIndex


@dataclass(frozen=True)
class ChooseHeight:
    source: CellIndex
    dest: CellIndex
    height: int
    max_height: int


Mode = Union[SelectSource, SelectDestination, ChooseHeight]


@dataclass(frozen=True)
class Session:
    board: Board
    mode: Mode = SelectSource()
    message: str = ''


def start_session(board: Board) -> Session:
    return Session(board=board.do_automoves())


def _played(session: Session, board: Board, message: str = '') -> Session:
    return Session(board=board.do_automoves(), mode=SelectSource(), message=message)


def select(session: Session, index: CellIndex) -> Session:
    """Picks a source, then a destination. Goal piles and the joker cell are never sources."""
    mode = session.mode
    if isinstance(mode, SelectSource):
        if index.kind in (CellKind.GOAL, CellKind.JOKER):
            return replace(session, message='Cards cannot be taken from there')
        card = session.board.get_cell(index).top()
        if card is None or card.kind is CardKind.DRAGON_STACK:
            return replace(session, message='Nothing to pick up there')
        return Session(session.board, SelectDestination(index), f'Selected {index.token}')

    if isinstance(mode, SelectDestination):
        try:
            board = session.board.move_stack(mode.source, index)
        except AmbiguousMove as amb:
            return Session(
                session.board,
                ChooseHeight(mode.source, index, amb.max_height, amb.max_height),
                f'How many cards? 1-{amb.max_height}',
            )
        except InvalidMove as e:
            return Session(session.board, SelectSource(), str(e))
        return _played(session, board)

    return confirm_height(session)


def confirm_height(session: Session) -> Session:
    mode = session.mode
    if not isinstance(mode, ChooseHeight):
        return session
    try:
        board = session.board.move_n_cards(mode.source, mode.dest, mode.height)
    except InvalidMove as e:
        return Session(session.board, SelectSource(), str(e))
    return _played(session, board)


def set_height(session: Session, height: int) -> Session:
    mode = session.mode
    if not isinstance(mode, ChooseHeight):
        return replace(session, message='No stack height to choose')
    height = max(1, min(height, mode.max_height))
    return Session(session.board, replace(mode, height=height), f'Height {height}')


def raise_height(session: Session) -> Session:
    mode = session.mode
    if not isinstance(mode, ChooseHeight):
        return session
    return set_height(session, mode.height + 1)


def lower_height(session: Session) -> Session:
    mode = session.mode
    if not isinstance(mode, ChooseHeight):
        return session
    return set_height(session, mode.height - 1)


def cancel(session: Session) -> Session:
    mode = session.mode
    if isinstance(mode, ChooseHeight):
        return Session(session.board, SelectDestination(mode.source))
    return Session(session.board, SelectSource())


def group(session: Session, index: CellIndex) -> Session:
    """Groups the dragons of the suit showing at `index`."""
    card = session.board.get_cell(index).top()
    if card is None or card.kind is not CardKind.DRAGON:
        return replace(session, message='Point at an exposed dragon to group')
    assert card.suit is not None
    try:
        board = session.board.group_dragons(card.suit)
    except InvalidMove as e:
        return replace(session, message=str(e))
    return _played(session, board, f'Grouped {card.suit.name.lower()} dragons')


def run_command(session: Session, line: str) -> Session:
    """Applies one line of player input such as 'select c3', 'up' or 'group f2'."""
    words = line.split()
    if not words:
        return session
    command, args = words[0].lower(), words[1:]

    if command in ('up', 'down', 'height'):
        if command == 'up':
            return raise_height(session)
        if command == 'down':
            return lower_height(session)
        if len(args) != 1 or not args[0].isdigit():
            return replace(session, message='Usage: height N')
        return set_height(session, int(args[0]))
    if command in ('ok', 'confirm'):
        return confirm_height(session)
    if command in ('cancel', 'c'):
        return cancel(session)
    if command in ('select', 's', 'group', 'g'):
        if len(args) != 1:
            return replace(session, message=f'Usage: {command} CELL')
        try:
            index = CellIndex.parse(args[0])
        except ValueError as e:
            return replace(session, message=str(e))
        if command in ('group', 'g'):
            return group(session, index)
        return select(session, index)
    return replace(session, message=f'Unknown command: {command}')
