import unittest

from game import auto_safe_rank, do_automoves, new_board


def _cols(**stacks):
    return [stacks.get(f"c{i + 1}", []) for i in range(8)]


def _codes(column):
    return [card.code for card in column.stack]


def _goal_codes(board):
    return [None if g.top_card is None else g.top_card.code for g in board.goals]


class TestAutomoves(unittest.TestCase):
    def test_given_exposed_joker_when_automoving_then_joker_cell_filled(self):
        board = new_board(columns=_cols(c4=["J"]))
        moved = do_automoves(board)
        self.assertTrue(moved.joker.has_joker)
        self.assertEqual(len(moved.columns[3]), 0)

    def test_given_exposed_one_when_automoving_then_first_goal_takes_it(self):
        board = new_board(columns=_cols(c6=["G1"]))
        moved = board.do_automoves()
        self.assertEqual(_goal_codes(moved), ["G1", None, None])
        self.assertEqual(len(moved.columns[5]), 0)

    def test_given_covered_cards_when_automoving_then_all_safe_cards_collected(self):
        board = new_board(columns=_cols(c4=["R2", "R9", "B2"], c5=["B1", "R1", "G2", "G1"]))
        moved = board.do_automoves()
        self.assertEqual(len(moved.columns[4]), 0)
        self.assertEqual(_codes(moved.columns[3]), ["R2", "R9"])
        self.assertEqual(_goal_codes(moved), ["G2", "R1", "B2"])

    def test_given_card_still_needed_when_automoving_then_it_stays(self):
        board = new_board(columns=_cols(c4=["B3", "R9", "B2"], c5=["B1", "G3", "G2", "G1"]))
        moved = board.do_automoves()
        self.assertEqual(_codes(moved.columns[4]), ["B1", "G3"])
        self.assertEqual(_codes(moved.columns[3]), ["B3", "R9", "B2"])
        self.assertEqual(_goal_codes(moved), ["G2", None, None])

    def test_given_free_cell_card_when_automoving_then_it_goes_home(self):
        board = new_board(free_cells=[None, "R1", "J"])
        moved = board.do_automoves()
        self.assertTrue(moved.joker.has_joker)
        self.assertEqual(_goal_codes(moved), ["R1", None, None])
        self.assertTrue(all(cell.card is None for cell in moved.free))

    def test_given_nothing_to_move_when_automoving_then_same_board_returned(self):
        board = new_board(columns=_cols(c1=["R9"], c2=["GD"]))
        self.assertIs(board.do_automoves(), board)

    def test_given_automoved_board_when_automoving_again_then_unchanged(self):
        board = new_board(columns=_cols(c4=["R2", "R9", "B2"], c5=["B1", "R1", "G2", "G1", "J"]))
        once = board.do_automoves()
        self.assertIs(once.do_automoves(), once)

    def test_given_goals_when_reading_safe_rank_then_lowest_pile_plus_two(self):
        self.assertEqual(auto_safe_rank(new_board()), 2)
        self.assertEqual(new_board(goals=["R5", "G3", "B4"]).auto_safe_rank(), 5)
        self.assertEqual(new_board(goals=["R5", "G3", None]).auto_safe_rank(), 2)


if __name__ == "__main__":
    unittest.main()
