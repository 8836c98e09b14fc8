from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Sequence, Tuple, Union

from .cards import Card, CardKind, JOKER


@dataclass(frozen=True)
class JokerCell:
    """Home of the joker. Once filled it never gives the card back."""
    has_joker: bool = False

    def top(self) -> Optional[Card]:
        return None

    def accept(self, card: Card) -> Optional['JokerCell']:
        if card.kind is CardKind.JOKER:
            return JokerCell(has_joker=True)
        return None

    def pop(self) -> 'JokerCell':
        raise ValueError('The joker never leaves the joker cell')

    def pop_n(self, n: int) -> 'JokerCell':
        raise ValueError('The joker never leaves the joker cell')

    def cards(self) -> Tuple[Card, ...]:
        return (JOKER,) if self.has_joker else ()


@dataclass(frozen=True)
class FreeCell:
    """Holds at most one card of any kind."""
    card: Optional[Card] = None

    def top(self) -> Optional[Card]:
        return self.card

    def accept(self, card: Card) -> Optional['FreeCell']:
        if card.kind is CardKind.DRAGON_STACK or self.card is not None:
            return None
        return FreeCell(card)

    def pop(self) -> 'FreeCell':
        return FreeCell()

    def pop_n(self, n: int) -> 'FreeCell':
        raise ValueError('Only columns give up more than one card at a time')

    def cards(self) -> Tuple[Card, ...]:
        return () if self.card is None else (self.card,)

    def sort_key(self) -> Tuple:
        return () if self.card is None else self.card.sort_key()


@dataclass(frozen=True)
class GoalPile:
    """Number cards of one suit, built up from 1. Only the top card is kept."""
    top_card: Optional[Card] = None

    def top(self) -> Optional[Card]:
        return self.top_card

    @property
    def rank(self) -> int:
        return 0 if self.top_card is None else self.top_card.rank

    def accept(self, card: Card) -> Optional['GoalPile']:
        if card.kind is not CardKind.NUMBER:
            return None
        if self.top_card is None:
            return GoalPile(card) if card.rank == 1 else None
        if card.suit is self.top_card.suit and card.rank == self.top_card.rank + 1:
            return GoalPile(card)
        return None

    def pop(self) -> 'GoalPile':
        raise ValueError('Cards may not be taken from a goal pile')

    def pop_n(self, n: int) -> 'GoalPile':
        raise ValueError('Cards may not be taken from a goal pile')

    def sort_key(self) -> Tuple:
        return () if self.top_card is None else self.top_card.sort_key()


@dataclass(frozen=True)
class Column:
    """A stack of cards, index 0 at the bottom."""
    stack: Tuple[Card, ...] = ()

    def top(self) -> Optional[Card]:
        return self.stack[-1] if self.stack else None

    def __len__(self) -> int:
        return len(self.stack)

    def accept(self, card: Card) -> Optional['Column']:
        if card.kind is CardKind.DRAGON_STACK:
            return None
        return self.accept_run((card,))

    def accept_run(self, cards: Sequence[Card]) -> Optional['Column']:
        """Returns this column with `cards` placed on top, or None if they don't fit.

        `cards` is ordered bottom first and must already be a valid run.
        """
        if not cards:
            raise ValueError('Cannot place an empty run')
        if self.stack and not self.stack[-1].can_hold(cards[0]):
            return None
        return Column(self.stack + tuple(cards))

    def pop(self) -> 'Column':
        return self.pop_n(1)

    def pop_n(self, n: int) -> 'Column':
        if not 0 < n <= len(self.stack):
            raise ValueError(f'Cannot take {n} cards from a column of {len(self.stack)}')
        return Column(self.stack[:-n])

    def iter_run(self) -> Iterator[Card]:
        """Yields the exposed run, starting at the top card and walking down.

        Only number cards of alternating suit and consecutive rank chain; any
        top card on its own forms a run of one.
        """
        last: Optional[Card] = None
        for card in reversed(self.stack):
            if last is not None and not card.can_hold(last):
                return
            yield card
            last = card

    def run_height(self) -> int:
        return sum(1 for _ in self.iter_run())

    def cards(self) -> Tuple[Card, ...]:
        return self.stack

    def sort_key(self) -> Tuple:
        return tuple(card.sort_key() for card in self.stack)


Cell = Union[JokerCell, FreeCell, Column, GoalPile]
