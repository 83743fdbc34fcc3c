import sys
import os
import json
import tempfile
import unittest

# Add parent directory to path to make imports work in test
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import GameConfig, PlayerConfig, config_from_dict, load_config, save_config
from errors import ConfigurationError, GameError


class TestGameConfig(unittest.TestCase):

    def test_defaults(self):
        config = GameConfig()
        config.validate()
        self.assertEqual(config.board_size, 6)
        self.assertEqual(config.win_length, 4)
        self.assertEqual(config.symbols, ["X", "O"])
        self.assertEqual(len(config.players), 2)
        self.assertFalse(any(p.is_computer for p in config.players))

    def test_board_grows_with_players(self):
        self.assertEqual(GameConfig(num_players=3).board_size, 7)
        self.assertEqual(GameConfig(num_players=5).board_size, 9)
        self.assertEqual(GameConfig(num_players=5).symbols, ["X", "O", "D", "T", "S"])

    def test_vs_computer(self):
        config = GameConfig.vs_computer("hard")
        self.assertFalse(config.players[0].is_computer)
        self.assertTrue(config.players[1].is_computer)
        self.assertEqual(config.players[1].difficulty, "hard")

    def test_rules(self):
        rules = GameConfig(board_size=8, win_length=5, variation="mark+delete").rules()
        self.assertEqual(rules.board_size, 8)
        self.assertEqual(rules.win_length, 5)
        self.assertEqual(rules.cell_count, 64)
        self.assertEqual(rules.allowed_actions, ("mark", "delete"))

    def test_invalid_settings(self):
        invalid = [
            GameConfig(num_players=1),
            GameConfig(num_players=6),
            GameConfig(board_size=3),
            GameConfig(win_length=0),
            GameConfig(delete_cooldown=-1),
            GameConfig(variation="mark+teleport"),
            GameConfig(time_budget_seconds=0),
            GameConfig(num_players=3, players=[PlayerConfig(), PlayerConfig()]),
            GameConfig(players=[PlayerConfig(), PlayerConfig(control="robot")]),
            GameConfig.vs_computer("impossible"),
        ]
        for config in invalid:
            with self.assertRaises(ConfigurationError):
                config.validate()

    def test_error_details(self):
        with self.assertRaises(GameError) as ctx:
            GameConfig(board_size=3).validate()
        data = ctx.exception.to_dict()
        self.assertEqual(data["code"], "CONFIGURATION_ERROR")
        self.assertEqual(data["context"]["board_size"], 3)
        self.assertIn("CONFIGURATION_ERROR", str(ctx.exception))


class TestConfigFiles(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_save_and_load(self):
        path = os.path.join(self.tmpdir.name, "configs", "game.json")
        config = GameConfig.vs_computer("expert", variation="mark-only")
        save_config(config, path)
        loaded = load_config(path)
        self.assertEqual(loaded, config)

    def test_unknown_key(self):
        with self.assertRaises(ConfigurationError):
            config_from_dict({"num_players": 2, "gravity": True})
        with self.assertRaises(ConfigurationError):
            config_from_dict({"players": [{"name": "A", "colour": "red"}]})

    def test_missing_or_broken_file(self):
        with self.assertRaises(ConfigurationError):
            load_config(os.path.join(self.tmpdir.name, "missing.json"))

        path = os.path.join(self.tmpdir.name, "broken.json")
        with open(path, "w") as f:
            f.write("{not json")
        with self.assertRaises(ConfigurationError):
            load_config(path)

    def test_load_validates(self):
        path = os.path.join(self.tmpdir.name, "bad.json")
        with open(path, "w") as f:
            json.dump({"num_players": 2, "board_size": 2}, f)
        with self.assertRaises(ConfigurationError):
            load_config(path)


if __name__ == '__main__':
    unittest.main()
