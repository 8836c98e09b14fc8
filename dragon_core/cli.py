from __future__ import annotations

import argparse
from typing import Callable, List, Optional

from .board import Board
from .config import SolverSettings, configure_logging, load_settings
from .deal import Seed, deal
from .session import ChooseHeight, SelectDestination, Session, run_command, start_session
from .solver import SolveStatus, solve

CONTROLS = """\
Controls:
- select CELL (or s CELL) to pick up a card, then again to place it
- cells are f1-f3 (free), g1-g3 (goal), c1-c8 (columns)
- up / down / height N / ok to choose how many cards to move
- group CELL (or g CELL) to group the dragons showing at CELL
- cancel (or c) to step back
- hint to ask the solver for the next position
- help to show these controls, quit to leave"""

_FAILURES = {
    SolveStatus.NO_PATH: 'No solution found with the modelled moves.',
    SolveStatus.CANCELLED: 'Search cancelled.',
    SolveStatus.BUDGET_EXHAUSTED: 'Search budget exhausted before a solution was found.',
}


def describe_mode(session: Session) -> str:
    mode = session.mode
    if isinstance(mode, SelectDestination):
        return f'Moving from {mode.source.token}: choose a destination'
    if isinstance(mode, ChooseHeight):
        return f'Moving {mode.height} of {mode.max_height} cards from {mode.source.token} to {mode.dest.token}'
    return 'Choose a card to move'


def hint(board: Board, settings: SolverSettings) -> str:
    res = solve(board, settings.make_context())
    if not res.solved or res.path is None:
        return _FAILURES[res.status]
    if len(res.path) < 2:
        return 'Already solved.'
    return f'{res.move_count} moves to go. Next position:\n{res.path[1].pretty()}'


def play(board: Board, settings: SolverSettings, color: bool = False,
         read: Callable[[str], str] = input) -> bool:
    """Interactive loop on stdin. Returns True if the player won."""
    session = start_session(board)
    print(CONTROLS)
    while not session.board.is_solved():
        print()
        print(session.board.pretty(color))
        print(describe_mode(session))
        if session.message:
            print(session.message)
        try:
            line = read('> ')
        except EOFError:
            print()
            return False
        command = line.strip().lower()
        if command in ('q', 'quit', 'exit'):
            return False
        if command in ('?', 'help'):
            print(CONTROLS)
            continue
        if command == 'hint':
            print(hint(session.board, settings))
            continue
        session = run_command(session, line)
    print(session.board.pretty(color))
    print('You win!')
    return True


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Dragon solitaire: play a deal or let the solver win it')
    parser.add_argument('--seed', default=None, help='Seed text to replay a deal (printed with every deal)')
    parser.add_argument('--play', action='store_true', help='Play interactively instead of solving')
    parser.add_argument('--color', action='store_true', help='Colour cards by suit')
    parser.add_argument('--timeout', type=float, default=None, help='Solver time budget in seconds')
    parser.add_argument('--max-states', type=int, default=None, help='Solver budget in expanded boards')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    args = parser.parse_args(argv)

    settings = load_settings()
    if args.timeout is not None:
        settings.timeout_sec = args.timeout
    if args.max_states is not None:
        settings.max_states = args.max_states
    configure_logging(settings.debug or args.verbose)

    try:
        seed = Seed.from_string(args.seed) if args.seed else Seed.random()
    except ValueError as e:
        parser.error(str(e))
    board = deal(seed)
    print(f'Seed: {seed}')

    if args.play:
        return 0 if play(board, settings, color=args.color) else 1

    board = board.do_automoves()
    print('Initial board:')
    print(board.pretty(args.color))
    res = solve(board, settings.make_context())
    if not res.solved or res.path is None:
        print(_FAILURES[res.status])
        return 1
    for step, position in enumerate(res.path[1:], start=1):
        print(f'\nMove {step}:')
        print(position.pretty(args.color))
    print(f'\nSolved in {res.move_count} moves ({res.metrics.states_expanded} boards expanded).')
    return 0
