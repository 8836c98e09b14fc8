from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import cached_property
from typing import Dict, Iterable, Iterator, NamedTuple, Optional, Sequence, Tuple, Union

from .cards import Card, CardKind, DRAGON_STACK, Suit, dragon, parse_card
from .cells import Cell, Column, FreeCell, GoalPile, JokerCell
from .errors import AmbiguousMove, InvalidMove

FREE_COUNT = 3
GOAL_COUNT = 3
COLUMN_COUNT = 8


class CellKind(Enum):
    JOKER = 'j'
    FREE = 'f'
    GOAL = 'g'
    COLUMN = 'c'


_KIND_SIZES = {
    CellKind.JOKER: 1,
    CellKind.FREE: FREE_COUNT,
    CellKind.GOAL: GOAL_COUNT,
    CellKind.COLUMN: COLUMN_COUNT,
}


class CellIndex(NamedTuple):
    """Address of one cell on the board; `n` is zero-based within its kind."""
    kind: CellKind
    n: int = 0

    @classmethod
    def parse(cls, token: str) -> 'CellIndex':
        """Parses a one-based token such as 'f1', 'g3', 'c8' or 'j'."""
        text = token.strip().lower()
        if text == 'j':
            return cls(CellKind.JOKER, 0)
        try:
            kind = CellKind(text[:1])
            n = int(text[1:]) - 1
        except ValueError:
            raise ValueError(f'Invalid cell: {token!r}') from None
        if kind is CellKind.JOKER or not 0 <= n < _KIND_SIZES[kind]:
            raise ValueError(f'Invalid cell: {token!r}')
        return cls(kind, n)

    @property
    def token(self) -> str:
        if self.kind is CellKind.JOKER:
            return 'j'
        return f'{self.kind.value}{self.n + 1}'


JOKER_SLOT = CellIndex(CellKind.JOKER)
FREE_SLOTS: Tuple[CellIndex, ...] = tuple(CellIndex(CellKind.FREE, i) for i in range(FREE_COUNT))
GOAL_SLOTS: Tuple[CellIndex, ...] = tuple(CellIndex(CellKind.GOAL, i) for i in range(GOAL_COUNT))
COLUMN_SLOTS: Tuple[CellIndex, ...] = tuple(CellIndex(CellKind.COLUMN, i) for i in range(COLUMN_COUNT))


def _replace_at(cells: tuple, n: int, cell: Cell) -> tuple:
    return cells[:n] + (cell,) + cells[n + 1:]


@dataclass(frozen=True, eq=False)
class Board:
    """Immutable snapshot of every cell on the table.

    Moves return a new Board that reuses the untouched cell objects. Equality
    and hashing ignore which free cell, goal pile or column holds what, see
    normalize.canonical_key.
    """
    joker: JokerCell
    free: Tuple[FreeCell, ...]
    goals: Tuple[GoalPile, ...]
    columns: Tuple[Column, ...]

    # ---------- cell access ----------

    def get_cell(self, index: CellIndex) -> Cell:
        kind, n = index
        if kind is CellKind.COLUMN:
            return self.columns[n]
        if kind is CellKind.FREE:
            return self.free[n]
        if kind is CellKind.GOAL:
            return self.goals[n]
        return self.joker

    def with_cells(self, changes: Dict[CellIndex, Cell]) -> 'Board':
        """Returns a board with the given cells replaced and every other cell shared."""
        joker, free, goals, columns = self.joker, self.free, self.goals, self.columns
        for (kind, n), cell in changes.items():
            if kind is CellKind.COLUMN:
                columns = _replace_at(columns, n, cell)
            elif kind is CellKind.FREE:
                free = _replace_at(free, n, cell)
            elif kind is CellKind.GOAL:
                goals = _replace_at(goals, n, cell)
            else:
                joker = cell  # type: ignore[assignment]
        return Board(joker, free, goals, columns)

    def iter_cards(self) -> Iterator[Card]:
        """Every card on the board; a grouped dragon stack is a single DRAGON_STACK."""
        yield from self.joker.cards()
        for cell in self.free:
            yield from cell.cards()
        for goal in self.goals:
            if goal.top_card is not None:
                suit = goal.top_card.suit
                for rank in range(1, goal.rank + 1):
                    yield Card(CardKind.NUMBER, suit, rank)
        for column in self.columns:
            yield from column.cards()

    # ---------- moves ----------

    def move_stack(self, source: CellIndex, dest: CellIndex) -> 'Board':
        """Move the top card or run from `source` to `dest` and return the new board.

        Raises InvalidMove for an illegal move and AmbiguousMove when the run could
        land on an empty column at several heights (use move_n_cards then).
        """
        if source == dest:
            raise InvalidMove('A cell cannot move onto itself')
        if source.kind in (CellKind.GOAL, CellKind.JOKER):
            raise InvalidMove('Cards never leave the goal piles or the joker cell')

        if source.kind is CellKind.COLUMN and dest.kind is CellKind.COLUMN:
            if self.columns[dest.n].top() is not None:
                return self._move_number_run(source.n, dest.n)
            height = self.columns[source.n].run_height()
            if height > 1:
                raise AmbiguousMove(height)

        source_cell = self.get_cell(source)
        card = source_cell.top()
        if card is None:
            raise InvalidMove('Nothing to move')
        new_dest = self.get_cell(dest).accept(card)
        if new_dest is None:
            raise InvalidMove(f'{card} does not fit on {dest.token}')
        return self.with_cells({dest: new_dest, source: source_cell.pop()})

    def move_n_cards(self, source: CellIndex, dest: CellIndex, n: int) -> 'Board':
        """Move exactly the top `n` cards of the run in `source` onto column `dest`."""
        if source.kind is not CellKind.COLUMN or dest.kind is not CellKind.COLUMN:
            raise ValueError('move_n_cards only moves runs between columns')
        if source == dest:
            raise InvalidMove('A cell cannot move onto itself')
        return self._move_run(source.n, dest.n, n)

    def _move_number_run(self, source: int, dest: int) -> 'Board':
        # Onto an occupied column the height is fixed by the rank gap.
        dest_top = self.columns[dest].top()
        source_top = self.columns[source].top()
        if dest_top is None or source_top is None or not (dest_top.is_number and source_top.is_number):
            raise InvalidMove('Only number cards stack onto an occupied column')
        return self._move_run(source, dest, max(dest_top.rank - source_top.rank, 0))

    def _move_run(self, source: int, dest: int, n: int) -> 'Board':
        source_col = self.columns[source]
        if n <= 0 or n > source_col.run_height():
            raise InvalidMove(f'Cannot move {n} cards from c{source + 1}')
        new_dest = self.columns[dest].accept_run(source_col.stack[-n:])
        if new_dest is None:
            raise InvalidMove(f'Run does not fit on c{dest + 1}')
        return self.with_cells({
            CellIndex(CellKind.COLUMN, source): source_col.pop_n(n),
            CellIndex(CellKind.COLUMN, dest): new_dest,
        })

    def group_dragons(self, suit: Suit) -> 'Board':
        """Stack the four exposed dragons of `suit` into a free cell for good.

        A free cell that held one of those dragons counts as empty. Raises
        InvalidMove, leaving nothing half-done, when a dragon is buried or no
        free cell is left.
        """
        target = dragon(suit)
        changes: Dict[CellIndex, Cell] = {}
        for index in COLUMN_SLOTS + FREE_SLOTS:
            cell = self.get_cell(index)
            if cell.top() == target:
                changes[index] = cell.pop()  # type: ignore[union-attr]
                if len(changes) == 4:
                    break
        if len(changes) < 4:
            raise InvalidMove(f'Not all {suit.name.lower()} dragons are exposed')
        for index in FREE_SLOTS:
            cell = changes.get(index, self.get_cell(index))
            if cell.top() is None:
                changes[index] = FreeCell(DRAGON_STACK)
                return self.with_cells(changes)
        raise InvalidMove('No free cell to hold the dragons')

    # ---------- state queries ----------

    def is_solved(self) -> bool:
        return all(column.top() is None for column in self.columns)

    def auto_safe_rank(self) -> int:
        from .automove import auto_safe_rank
        return auto_safe_rank(self)

    def do_automoves(self) -> 'Board':
        from .automove import do_automoves
        return do_automoves(self)

    def pretty(self, color: bool = False) -> str:
        from .render import render_board
        return render_board(self, color=color)

    # ---------- canonical equality ----------

    @cached_property
    def canonical_key(self) -> tuple:
        from .normalize import canonical_key
        return canonical_key(self)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        if self is other:
            return True
        if self.free is other.free and self.goals is other.goals and self.columns is other.columns:
            return self.joker == other.joker
        return self.canonical_key == other.canonical_key

    def __hash__(self) -> int:
        return hash(self.canonical_key)


CardLike = Union[Card, str]


def _card(value: CardLike) -> Card:
    if isinstance(value, str):
        return parse_card(value)
    if not isinstance(value, Card):
        raise ValueError(f'Expected a card or card code, got {value!r}')
    return value


def new_board(
    free_cells: Sequence[Optional[CardLike]] = (None,) * FREE_COUNT,
    has_joker: bool = False,
    goals: Sequence[Optional[CardLike]] = (None,) * GOAL_COUNT,
    columns: Sequence[Iterable[CardLike]] = ((),) * COLUMN_COUNT,
) -> Board:
    """Builds an arbitrary board. Cards may be Card objects or codes such as 'R7'."""
    if len(free_cells) != FREE_COUNT:
        raise ValueError(f'Expected {FREE_COUNT} free cells, got {len(free_cells)}')
    if len(goals) != GOAL_COUNT:
        raise ValueError(f'Expected {GOAL_COUNT} goal piles, got {len(goals)}')
    if len(columns) != COLUMN_COUNT:
        raise ValueError(f'Expected {COLUMN_COUNT} columns, got {len(columns)}')

    free = tuple(FreeCell(None if c is None else _card(c)) for c in free_cells)
    goal_cells = []
    for value in goals:
        top = None if value is None else _card(value)
        if top is not None and not top.is_number:
            raise ValueError(f'Goal piles only hold number cards, got {top}')
        goal_cells.append(GoalPile(top))
    stacks = []
    for column in columns:
        stack = tuple(_card(c) for c in column)
        if any(card.kind is CardKind.DRAGON_STACK for card in stack):
            raise ValueError('A dragon stack can only sit in a free cell')
        stacks.append(Column(stack))
    return Board(JokerCell(bool(has_joker)), free, tuple(goal_cells), tuple(stacks))


def empty_board() -> Board:
    return new_board()
