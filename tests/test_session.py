import unittest

from game import CellIndex, new_board
from dragon_core.session import (
    ChooseHeight,
    SelectDestination,
    SelectSource,
    cancel,
    confirm_height,
    lower_height,
    raise_height,
    run_command,
    select,
    start_session,
)
from board_fixtures import cols


def _cell(token):
    return CellIndex.parse(token)


class TestSessionTransitions(unittest.TestCase):
    def setUp(self):
        self.session = start_session(new_board(columns=cols(c1=["R7", "G6", "R5"], c4=["R9"])))

    def test_given_start_when_created_then_forced_moves_applied(self):
        s = start_session(new_board(columns=cols(c1=["R9", "J"])))
        self.assertTrue(s.board.joker.has_joker)
        self.assertIsInstance(s.mode, SelectSource)

    def test_given_source_and_empty_column_when_selecting_then_height_chosen(self):
        s = select(self.session, _cell("c1"))
        self.assertEqual(s.mode, SelectDestination(_cell("c1")))
        s = select(s, _cell("c2"))
        self.assertEqual(s.mode, ChooseHeight(_cell("c1"), _cell("c2"), 3, 3))
        s = lower_height(s)
        self.assertEqual(s.mode.height, 2)
        s = raise_height(raise_height(s))
        self.assertEqual(s.mode.height, 3)
        s = lower_height(lower_height(lower_height(lower_height(s))))
        self.assertEqual(s.mode.height, 1)
        s = confirm_height(s)
        self.assertIsInstance(s.mode, SelectSource)
        self.assertEqual([c.code for c in s.board.columns[0].stack], ["R7", "G6"])
        self.assertEqual([c.code for c in s.board.columns[1].stack], ["R5"])

    def test_given_height_choice_when_cancelling_then_steps_back(self):
        s = select(select(self.session, _cell("c1")), _cell("c2"))
        s = cancel(s)
        self.assertEqual(s.mode, SelectDestination(_cell("c1")))
        s = cancel(s)
        self.assertIsInstance(s.mode, SelectSource)
        self.assertIs(s.board, self.session.board)

    def test_given_goal_or_empty_source_when_selecting_then_message_only(self):
        s = select(self.session, _cell("g1"))
        self.assertIsInstance(s.mode, SelectSource)
        self.assertTrue(s.message)
        s = select(self.session, _cell("c3"))
        self.assertIsInstance(s.mode, SelectSource)
        self.assertTrue(s.message)

    def test_given_illegal_destination_when_selecting_then_back_to_source(self):
        s = select(select(self.session, _cell("c1")), _cell("c4"))
        self.assertIsInstance(s.mode, SelectSource)
        self.assertIs(s.board, self.session.board)
        self.assertTrue(s.message)

    def test_given_single_card_when_moving_then_played_directly(self):
        s = select(select(self.session, _cell("c4")), _cell("f2"))
        self.assertIsInstance(s.mode, SelectSource)
        self.assertEqual(s.board.free[1].card.code, "R9")


class TestRunCommand(unittest.TestCase):
    def setUp(self):
        self.session = start_session(new_board(columns=cols(c1=["R7", "G6", "R5"], c4=["R9"])))

    def test_given_command_lines_when_running_then_move_played(self):
        s = self.session
        for line in ("s c1", "select C2", "down", "ok"):
            s = run_command(s, line)
        self.assertEqual([c.code for c in s.board.columns[1].stack], ["G6", "R5"])

    def test_given_height_command_when_out_of_range_then_clamped(self):
        s = run_command(run_command(self.session, "s c1"), "s c2")
        s = run_command(s, "height 9")
        self.assertEqual(s.mode.height, 3)
        s = run_command(s, "height 0")
        self.assertEqual(s.mode.height, 1)
        s = run_command(s, "height x")
        self.assertEqual(s.message, "Usage: height N")

    def test_given_bad_input_when_running_then_message_and_same_board(self):
        self.assertIs(run_command(self.session, "   "), self.session)
        s = run_command(self.session, "dance")
        self.assertEqual(s.message, "Unknown command: dance")
        s = run_command(self.session, "select c9")
        self.assertIn("Invalid cell", s.message)
        s = run_command(self.session, "select")
        self.assertEqual(s.message, "Usage: select CELL")
        self.assertIs(s.board, self.session.board)

    def test_given_exposed_dragons_when_grouping_then_stack_placed_and_won(self):
        board = new_board(columns=cols(c1=["RD"], c3=["RD"], c5=["RD"], c8=["RD"]))
        s = run_command(start_session(board), "g c3")
        self.assertEqual(s.board.free[0].card.code, "X")
        self.assertTrue(s.board.is_solved())
        self.assertEqual(s.message, "Grouped red dragons")

    def test_given_no_dragon_when_grouping_then_message(self):
        s = run_command(self.session, "group c1")
        self.assertEqual(s.board, self.session.board)
        self.assertTrue(s.message)


if __name__ == "__main__":
    unittest.main()
