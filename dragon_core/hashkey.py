from __future__ import annotations

from typing import Iterator, Tuple

from .board import Board
from .normalize import canonical_key

_MASK64 = 0xFFFFFFFFFFFFFFFF


def _card_code(sort_key: Tuple[int, int, int]) -> int:
    kind, suit, rank = sort_key
    return kind * 64 + (suit + 1) * 16 + rank + 1


def _canonical_values(board: Board) -> Iterator[int]:
    """Flatten the canonical key into integers; every cell is prefixed with its length."""
    has_joker, free, goals, columns = canonical_key(board)
    yield 1 if has_joker else 0
    for group in (free, goals):
        for cell in group:
            if cell:
                yield 1
                yield _card_code(cell)
            else:
                yield 0
    for column in columns:
        yield len(column)
        for card in column:
            yield _card_code(card)


def _pair64(left: int, right: int) -> int:
    if left >= right:
        return (left * left) + left + right
    else:
        return left + (right * right)


def _mix64(value: int) -> int:
    value = (value + 0x9e3779b97f4a7c15) & _MASK64
    value ^= (value >> 30)
    value = (value * 0xbf58476d1ce4e5b9) & _MASK64
    value ^= (value >> 27)
    value = (value * 0x94d049bb133111eb) & _MASK64
    value ^= (value >> 31)
    return value & _MASK64


def _hash_values64(values: Iterator[int]) -> int:
    h = 0
    for v in values:
        # Mix before pairing so long runs of small values don't collapse.
        h = _mix64(_pair64(h, v & _MASK64) & _MASK64)
    return h


def board_key(board: Board) -> str:
    """Stable 64-bit hex key of the canonical board, identical across processes."""
    return f"{_hash_values64(_canonical_values(board)):016x}"
