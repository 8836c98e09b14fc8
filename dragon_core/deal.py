from __future__ import annotations

import base64
import math
import random
import secrets
from dataclasses import dataclass
from typing import List, Optional, Sequence, TypeVar

from .board import Board, COLUMN_COUNT, new_board
from .cards import create_deck

SEED_BYTES = 32

T = TypeVar('T')


@dataclass(frozen=True)
class Seed:
    """Opaque 32-byte key that reproduces a deal."""
    key: bytes

    def __post_init__(self) -> None:
        if len(self.key) != SEED_BYTES:
            raise ValueError(f'Seed must be {SEED_BYTES} bytes, got {len(self.key)}')

    @classmethod
    def random(cls) -> 'Seed':
        return cls(secrets.token_bytes(SEED_BYTES))

    @classmethod
    def from_string(cls, text: str) -> 'Seed':
        try:
            key = base64.b85decode(text.strip().encode('ascii'))
        except ValueError as e:
            raise ValueError(f'Invalid seed {text!r}: {e}') from None
        return cls(key)

    def to_string(self) -> str:
        return base64.b85encode(self.key).decode('ascii')

    def __str__(self) -> str:
        return self.to_string()


def distribute(cards: Sequence[T], n: int) -> List[List[T]]:
    """Splits `cards` into `n` piles of consecutive chunks (the last piles may run short)."""
    chunk = max(1, math.ceil(len(cards) / n))
    piles: List[List[T]] = [[] for _ in range(n)]
    for i, card in enumerate(cards):
        piles[i // chunk].append(card)
    return piles


def deal(seed: Optional[Seed] = None) -> Board:
    """Shuffles a full deck and deals it across the columns. Forced moves are not applied."""
    seed = seed or Seed.random()
    deck = create_deck()
    random.Random(seed.key).shuffle(deck)
    return new_board(columns=distribute(deck, COLUMN_COUNT))
