"""
Move errors raised by board operations.
"""


class MoveError(Exception):
    """Base class for a move attempt that did not produce a new board."""


class InvalidMove(MoveError):
    """The move breaks the rules. The board it was attempted on is unchanged."""


class AmbiguousMove(MoveError):
    """More than one run height could be moved; retry with move_n_cards."""

    def __init__(self, max_height: int):
        super().__init__(f'Ambiguous move: choose a height from 1 to {max_height}')
        self.max_height = max_height
