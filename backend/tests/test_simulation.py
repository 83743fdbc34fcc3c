import sys
import os
import unittest

# Add parent directory to path to make imports work in test
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import GameConfig
from errors import ConfigurationError
from simulation.game_runner import GameRunner
from simulation.run_simulation import parse_agent_spec, run_games, summarize


class TestGameRunner(unittest.TestCase):

    def test_random_game_finishes(self):
        runner = GameRunner([{"algorithm": "random", "seed": 1}, {"algorithm": "random", "seed": 2}])
        result = runner.run_game()
        self.assertIn(result["winner"], ("X", "O", "DRAW"))
        self.assertIn(result["reason"], ("STANDARD", "MOVE_LIMIT"))
        self.assertLessEqual(result["moves"], 200)
        self.assertEqual(len(result["move_history"].split(",")), result["moves"])
        self.assertEqual(result["board_size"], 6)

    def test_minimax_against_random(self):
        config = GameConfig(board_size=4, win_length=3, variation="mark-only", time_budget_seconds=5)
        runner = GameRunner([{"algorithm": "minimax", "max_depth": 1}, {"algorithm": "random", "seed": 3}], config)
        result = runner.run_game()
        # Mark-only games end within one move per cell
        self.assertEqual(result["reason"], "STANDARD")
        self.assertLessEqual(result["moves"], 16)
        self.assertTrue(result["move_history"].startswith("X:m"))
        if result["winner"] != "DRAW":
            self.assertEqual(len(result["winning_line"]), 3)

    def test_move_limit(self):
        runner = GameRunner([{"algorithm": "random", "seed": 4}, {"algorithm": "random", "seed": 5}], max_moves=3)
        result = runner.run_game()
        self.assertEqual(result["moves"], 3)
        self.assertEqual(result["reason"], "MOVE_LIMIT")
        self.assertEqual(result["winner"], "DRAW")

    def test_agent_count_must_match(self):
        with self.assertRaises(ConfigurationError):
            GameRunner([{"algorithm": "random"}], GameConfig(num_players=2))

    def test_unknown_algorithm(self):
        runner = GameRunner([{"algorithm": "oracle"}, {"algorithm": "random"}])
        with self.assertRaises(ValueError):
            runner.run_game()


class TestRunSimulation(unittest.TestCase):

    def test_parse_agent_spec(self):
        self.assertEqual(parse_agent_spec("minimax:hard"), {"algorithm": "minimax", "difficulty": "hard"})
        self.assertEqual(parse_agent_spec("minimax:3"), {"algorithm": "minimax", "max_depth": 3})
        self.assertEqual(parse_agent_spec("random:9"), {"algorithm": "random", "seed": 9})
        self.assertEqual(parse_agent_spec("random"), {"algorithm": "random"})

    def test_run_games_and_summary(self):
        config = GameConfig(num_players=3, board_size=4, win_length=3, variation="mark-only")
        agents = [parse_agent_spec(spec) for spec in ("random:1", "random:2", "random:3")]
        df = run_games(agents, 2, config)
        self.assertEqual(len(df), 2)
        self.assertIn("move_history", df.columns)

        summary = summarize(df)
        self.assertEqual(summary["games"].sum(), 2)
        self.assertAlmostEqual(summary["rate"].sum(), 1.0)


if __name__ == '__main__':
    unittest.main()
