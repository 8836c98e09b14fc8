"""
Best-first search for a winning line of boards.

The frontier is ordered by f = g + h, where g counts moves from the start board
and h is heuristic.estimated_moves_to_solve. Every successor from
moves.next_states costs one move, automoves included. Because h is not
admissible the result is a win, not necessarily the shortest one.
"""
from __future__ import annotations

import heapq
import itertools
import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Set, Tuple

from .board import Board
from .hashkey import board_key
from .heuristic import estimated_moves_to_solve
from .moves import next_states

logger = logging.getLogger(__name__)

PROGRESS_EVERY = 5000


class SolveStatus(Enum):
    SOLVED = 'solved'
    # The frontier ran dry. This is "no path under the modelled moves", which
    # does not prove a human could not win the deal.
    NO_PATH = 'no_path'
    CANCELLED = 'cancelled'
    BUDGET_EXHAUSTED = 'budget_exhausted'


@dataclass
class SearchContext:
    """
    Cancellation and budgets for a single search.

    Attributes:
        cancel_flag: Set from another thread to stop the search
        timeout_sec: Wall-clock budget in seconds, None for unlimited
        max_expansions: Number of boards to expand before giving up, None for unlimited
        start_time: When the search started (time.monotonic)
        progress_callback: Called with (expanded, frontier_size) every PROGRESS_EVERY expansions
    """
    cancel_flag: threading.Event = field(default_factory=threading.Event)
    timeout_sec: Optional[float] = None
    max_expansions: Optional[int] = None
    start_time: float = field(default_factory=time.monotonic)
    progress_callback: Optional[Callable[[int, int], None]] = None

    def is_cancelled(self) -> bool:
        return self.cancel_flag.is_set()

    def is_over_budget(self, expanded: int) -> bool:
        if self.max_expansions is not None and expanded >= self.max_expansions:
            return True
        if self.timeout_sec is not None and self.elapsed_time() > self.timeout_sec:
            return True
        return False

    def elapsed_time(self) -> float:
        return time.monotonic() - self.start_time

    def report_progress(self, expanded: int, frontier: int) -> None:
        if self.progress_callback:
            self.progress_callback(expanded, frontier)


@dataclass
class SearchMetrics:
    states_expanded: int = 0
    states_generated: int = 0
    max_frontier: int = 0
    computation_time_ms: float = 0.0


@dataclass
class SolveResult:
    """Outcome of a search. `path` runs from the start board to a solved board."""
    status: SolveStatus
    path: Optional[List[Board]] = None
    metrics: SearchMetrics = field(default_factory=SearchMetrics)

    @property
    def solved(self) -> bool:
        return self.status is SolveStatus.SOLVED

    @property
    def move_count(self) -> Optional[int]:
        return None if self.path is None else len(self.path) - 1


def reconstruct_path(came_from: Dict[Board, Board], board: Board) -> List[Board]:
    path = [board]
    while board in came_from:
        board = came_from[board]
        path.append(board)
    path.reverse()
    return path


def solve(board: Board, context: Optional[SearchContext] = None) -> SolveResult:
    """Search for a sequence of boards leading from `board` to a solved board.

    The start board is used as given; callers that want the forced moves applied
    first should call do_automoves themselves.
    """
    context = context or SearchContext()
    context.start_time = time.monotonic()
    metrics = SearchMetrics()
    started = time.perf_counter()

    def finish(status: SolveStatus, path: Optional[List[Board]] = None) -> SolveResult:
        metrics.computation_time_ms = (time.perf_counter() - started) * 1000
        logger.info(
            "search %s finished: %s, %s moves, %d expanded, %d generated, %.0f ms",
            board_key(board), status.value, None if path is None else len(path) - 1,
            metrics.states_expanded, metrics.states_generated, metrics.computation_time_ms,
        )
        return SolveResult(status=status, path=path, metrics=metrics)

    tie = itertools.count()
    frontier: List[Tuple[int, int, Board]] = [(estimated_moves_to_solve(board), next(tie), board)]
    came_from: Dict[Board, Board] = {}
    gscores: Dict[Board, int] = {board: 0}
    closed: Set[Board] = set()

    while frontier:
        if context.is_cancelled():
            return finish(SolveStatus.CANCELLED)
        if context.is_over_budget(metrics.states_expanded):
            return finish(SolveStatus.BUDGET_EXHAUSTED)

        _, _, current = heapq.heappop(frontier)
        if current.is_solved():
            return finish(SolveStatus.SOLVED, reconstruct_path(came_from, current))
        if current in closed:
            continue
        closed.add(current)
        metrics.states_expanded += 1

        gscore = gscores[current] + 1
        for next_board in next_states(current):
            metrics.states_generated += 1
            if next_board in closed:
                continue
            known = gscores.get(next_board)
            if known is not None and known <= gscore:
                continue
            came_from[next_board] = current
            gscores[next_board] = gscore
            heapq.heappush(frontier, (gscore + estimated_moves_to_solve(next_board), next(tie), next_board))

        metrics.max_frontier = max(metrics.max_frontier, len(frontier))
        if metrics.states_expanded % PROGRESS_EVERY == 0:
            logger.debug(
                "expanded %d boards, frontier %d, g=%d",
                metrics.states_expanded, len(frontier), gscore - 1,
            )
            context.report_progress(metrics.states_expanded, len(frontier))

    return finish(SolveStatus.NO_PATH)
