import itertools
import random
import threading
import time
import unittest
from unittest import mock

from game import (
    SearchContext,
    SolveStatus,
    Seed,
    deal,
    empty_board,
    estimated_moves_to_solve,
    new_board,
    next_states,
    solve,
)
from dragon_core.moves import valid_destinations, valid_sources
from dragon_core import solver as solver_module
from dragon_core.cards import create_deck
from dragon_core.solver import reconstruct_path
from board_fixtures import cols, dead_end, endgame_with_buried_dragon, split_counts, two_dragons_in_one_column

SEED = Seed(bytes(range(32)))


class TestHeuristic(unittest.TestCase):
    def test_given_known_boards_when_estimating_then_counts_cards_dragons_and_suits(self):
        self.assertEqual(estimated_moves_to_solve(empty_board()), 30)
        self.assertEqual(estimated_moves_to_solve(two_dragons_in_one_column()), 2)
        self.assertEqual(estimated_moves_to_solve(endgame_with_buried_dragon()), 15)

    def test_given_all_suits_grouped_when_estimating_then_trapped_dragons_ignored(self):
        board = new_board(free_cells=["X", "X", "X"], goals=["R9", "G9", "B9"])
        self.assertEqual(estimated_moves_to_solve(board), 0)


class TestNextStates(unittest.TestCase):
    def test_given_interchangeable_empty_cells_when_listing_destinations_then_first_of_each_kept(self):
        board = new_board(free_cells=[None, "B3", None], goals=["R1", None, None], columns=cols(c2=["R5"]))
        tokens = [d.token for d in valid_destinations(board)]
        self.assertEqual(tokens, ["g1", "f1", "f2", "c1", "c2"])
        self.assertEqual([s.token for s in valid_sources(board)], ["f2", "c2"])

    def test_given_lone_card_when_expanding_then_free_cell_and_empty_column_moves(self):
        board = new_board(columns=cols(c1=["R5"]))
        self.assertEqual(len(next_states(board)), 2)

    def test_given_run_when_expanding_to_empty_column_then_one_successor_per_height(self):
        board = new_board(free_cells=["X", "X", "X"], columns=cols(c1=["R7", "G6", "R5"]))
        children = next_states(board)
        self.assertEqual(len(children), 3)
        lengths = sorted(sorted(len(c) for c in child.columns if len(c)) for child in children)
        self.assertEqual(lengths, [[1, 2], [1, 2], [3]])

    def test_given_successors_when_checking_then_each_is_automoved(self):
        board = new_board(columns=cols(c1=["B5", "R1"], c2=["G1", "B9"]))
        for child in next_states(board):
            self.assertIs(child.do_automoves(), child)

    def test_given_dead_end_when_expanding_then_no_successors(self):
        self.assertEqual(next_states(dead_end()), [])


class TestSolve(unittest.TestCase):
    def test_given_buried_dragon_endgame_when_solving_then_two_moves(self):
        start = endgame_with_buried_dragon()
        res = solve(start)
        self.assertEqual(res.status, SolveStatus.SOLVED)
        self.assertTrue(res.solved)
        self.assertEqual(len(res.path), 3)
        self.assertEqual(res.move_count, 2)
        self.assertEqual(res.path[0], start)
        self.assertTrue(res.path[-1].is_solved())

    def test_given_stacked_dragons_when_solving_then_two_moves(self):
        res = solve(two_dragons_in_one_column())
        self.assertEqual(res.status, SolveStatus.SOLVED)
        self.assertEqual(len(res.path), 3)

    def test_given_path_when_walking_it_then_each_step_is_a_successor(self):
        res = solve(endgame_with_buried_dragon())
        for parent, child in zip(res.path, res.path[1:]):
            self.assertIn(child, next_states(parent))

    def test_given_solved_board_when_solving_then_path_is_start(self):
        res = solve(empty_board())
        self.assertEqual(res.status, SolveStatus.SOLVED)
        self.assertEqual(res.move_count, 0)

    def test_given_dead_end_when_solving_then_no_path(self):
        res = solve(dead_end())
        self.assertEqual(res.status, SolveStatus.NO_PATH)
        self.assertIsNone(res.path)
        self.assertIsNone(res.move_count)
        self.assertEqual(res.metrics.states_expanded, 1)

    def test_given_cancel_flag_set_when_solving_then_cancelled(self):
        flag = threading.Event()
        flag.set()
        res = solve(deal(SEED).do_automoves(), SearchContext(cancel_flag=flag))
        self.assertEqual(res.status, SolveStatus.CANCELLED)
        self.assertIsNone(res.path)

    def test_given_expansion_budget_when_solving_then_budget_exhausted(self):
        res = solve(deal(SEED).do_automoves(), SearchContext(max_expansions=1))
        self.assertEqual(res.status, SolveStatus.BUDGET_EXHAUSTED)
        self.assertEqual(res.metrics.states_expanded, 1)
        self.assertGreater(res.metrics.states_generated, 0)

    def test_given_clock_past_timeout_when_solving_then_budget_exhausted(self):
        ctx = SearchContext(timeout_sec=1.0)
        with mock.patch.object(solver_module.time, "monotonic", side_effect=itertools.count(0.0, 10.0)):
            res = solve(deal(SEED).do_automoves(), ctx)
        self.assertEqual(res.status, SolveStatus.BUDGET_EXHAUSTED)
        self.assertEqual(res.metrics.states_expanded, 0)

    def test_given_context_created_long_ago_when_solving_then_clock_starts_with_search(self):
        ctx = SearchContext(timeout_sec=60.0, start_time=time.monotonic() - 3600.0)
        res = solve(two_dragons_in_one_column(), ctx)
        self.assertEqual(res.status, SolveStatus.SOLVED)

    def test_given_parent_links_when_reconstructing_then_start_first(self):
        a = new_board(columns=cols(c1=["R5"]))
        b = new_board(columns=cols(c1=["R6"]))
        c = new_board(columns=cols(c1=["R7"]))
        self.assertEqual(reconstruct_path({c: b, b: a}, c), [a, b, c])


class TestConservation(unittest.TestCase):
    def assertConserved(self, board):
        deck_others, deck_dragons, _ = split_counts(new_board(columns=[create_deck()[i::8] for i in range(8)]))
        others, dragons, stacks = split_counts(board)
        self.assertEqual(others, deck_others)
        for code, n in dragons.items():
            self.assertIn(n, (0, 4), code)
        missing = sum(deck_dragons.values()) - sum(dragons.values())
        self.assertEqual(missing, 4 * stacks)

    def test_given_seeded_deal_when_walking_random_moves_then_every_board_keeps_the_deck(self):
        rng = random.Random(7)
        board = deal(SEED).do_automoves()
        self.assertConserved(board)
        for _ in range(60):
            children = next_states(board)
            if not children:
                break
            for child in children:
                self.assertConserved(child)
            board = rng.choice(children)

    def test_given_grouped_endgame_when_solving_then_path_boards_keep_their_cards(self):
        res = solve(endgame_with_buried_dragon())
        counts = [split_counts(b) for b in res.path]
        for others, dragons, stacks in counts:
            self.assertEqual(sum(others.values()) + sum(dragons.values()) + 4 * stacks,
                             sum(counts[0][0].values()) + sum(counts[0][1].values()) + 4 * counts[0][2])
        self.assertEqual(counts[-1][0], counts[0][0])


if __name__ == "__main__":
    unittest.main()
