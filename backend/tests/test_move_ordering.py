import sys
import os
import unittest

# Add parent directory to path to make imports work in test
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from game_logic import GameRules, MARK, DELETE, RELOCATE, new_board, new_move_counters, get_all_possible_moves
from models.minimax_agent import MinimaxAgent


class TestMoveOrdering(unittest.TestCase):
    """Winning moves first, then blocking moves, then the rest in generation order"""

    def setUp(self):
        self.rules = GameRules()
        self.agent = MinimaxAgent(max_depth=1)
        self.board = new_board(6)
        for i in (0, 1, 2):
            self.board[i] = "O"

    def ordered(self, counters):
        moves = get_all_possible_moves(self.board, "X", ["O"], counters, self.rules)
        ordered = self.agent.order_moves(self.board, moves, "X", ["O"], self.rules)
        self.assertEqual(sorted(map(str, ordered)), sorted(map(str, moves)))
        return ordered

    def test_winning_then_blocking_then_rest(self):
        for i in (6, 7, 8):
            self.board[i] = "X"
        counters = new_move_counters(["X", "O"])
        counters["X"] = {"moves_since_delete": 0, "moves_since_move": 0}

        ordered = self.ordered(counters)
        self.assertEqual(ordered[0], {"action": MARK, "index": 9})
        self.assertEqual(ordered[1], {"action": MARK, "index": 3})
        self.assertEqual(ordered[2], {"action": MARK, "index": 4})

    def test_relocation_into_blocking_cell(self):
        self.board[10] = "X"
        ordered = self.ordered(new_move_counters(["X", "O"]))
        self.assertEqual(ordered[0], {"action": MARK, "index": 3})
        self.assertEqual(ordered[1], {"action": RELOCATE, "index": 3, "from_index": 10})

    def test_deletes_are_not_blocking(self):
        ordered = self.ordered(new_move_counters(["X", "O"]))
        self.assertEqual(ordered[0], {"action": MARK, "index": 3})
        deletes = [move for move in ordered if move["action"] == DELETE]
        self.assertEqual([move["index"] for move in deletes], [0, 1, 2])
        self.assertGreater(ordered.index(deletes[0]), 1)

    def test_no_threats_keeps_generation_order(self):
        board = new_board(6)
        board[14] = "X"
        board[21] = "O"
        moves = get_all_possible_moves(board, "X", ["O"], new_move_counters(["X", "O"]), self.rules)
        self.assertEqual(self.agent.order_moves(board, moves, "X", ["O"], self.rules), moves)


if __name__ == '__main__':
    unittest.main()
