from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple


class Suit(Enum):
    BLACK = 0
    GREEN = 1
    RED = 2

    @property
    def letter(self) -> str:
        return self.name[0]

    @classmethod
    def from_letter(cls, letter: str) -> 'Suit':
        for suit in cls:
            if suit.letter == letter.upper():
                return suit
        raise ValueError(f'Unknown suit: {letter!r}')


SUITS: Tuple[Suit, ...] = (Suit.BLACK, Suit.GREEN, Suit.RED)


class CardKind(Enum):
    JOKER = 0
    DRAGON = 1
    NUMBER = 2
    DRAGON_STACK = 3


@dataclass(frozen=True)
class Card:
    """A single card. Only dragons and numbers carry a suit, only numbers a rank."""
    kind: CardKind
    suit: Optional[Suit] = None
    rank: int = 0

    @property
    def is_number(self) -> bool:
        return self.kind is CardKind.NUMBER

    @property
    def is_dragon(self) -> bool:
        return self.kind is CardKind.DRAGON

    def sort_key(self) -> Tuple[int, int, int]:
        """Total order over cards: kind, then suit, then rank."""
        return (self.kind.value, -1 if self.suit is None else self.suit.value, self.rank)

    def can_hold(self, card: 'Card') -> bool:
        """True if `card` may sit directly on top of this card in a column."""
        return (
            self.kind is CardKind.NUMBER
            and card.kind is CardKind.NUMBER
            and self.suit is not card.suit
            and self.rank == card.rank + 1
        )

    @property
    def code(self) -> str:
        if self.kind is CardKind.JOKER:
            return 'J'
        if self.kind is CardKind.DRAGON_STACK:
            return 'X'
        assert self.suit is not None
        if self.kind is CardKind.DRAGON:
            return self.suit.letter + 'D'
        return f'{self.suit.letter}{self.rank}'

    def __str__(self) -> str:
        return self.code


JOKER = Card(CardKind.JOKER)
DRAGON_STACK = Card(CardKind.DRAGON_STACK)


def dragon(suit: Suit) -> Card:
    return Card(CardKind.DRAGON, suit)


def number(suit: Suit, rank: int) -> Card:
    if not 1 <= rank <= 9:
        raise ValueError(f'Number cards run from 1 to 9, got {rank}')
    return Card(CardKind.NUMBER, suit, rank)


def parse_card(code: str) -> Card:
    """Parses a card code: 'J', 'X', 'GD' or a suit letter followed by a rank ('R7')."""
    text = code.strip().upper()
    if text == 'J':
        return JOKER
    if text == 'X':
        return DRAGON_STACK
    if len(text) != 2:
        raise ValueError(f'Invalid card code: {code!r}')
    suit = Suit.from_letter(text[0])
    if text[1] == 'D':
        return dragon(suit)
    if not text[1].isdigit():
        raise ValueError(f'Invalid card code: {code!r}')
    return number(suit, int(text[1]))


def create_deck() -> List[Card]:
    """The full 40-card deck: per suit 4 dragons and ranks 1-9, then the joker."""
    deck: List[Card] = []
    for suit in SUITS:
        deck.extend(dragon(suit) for _ in range(4))
        deck.extend(number(suit, rank) for rank in range(1, 10))
    deck.append(JOKER)
    return deck
