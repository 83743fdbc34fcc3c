import sys
import os
import unittest

# Add parent directory to path to make imports work in test
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from fastapi.testclient import TestClient

import main
from main import app


def empty_board(size=6):
    return [None] * (size * size)


class TestBestMoveEndpoint(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)

    def request(self, **overrides):
        payload = {
            "board": empty_board(),
            "mover_symbol": "X",
            "opponent_symbols": ["O"],
            "board_size": 6,
            "max_depth": 1,
        }
        payload.update(overrides)
        return self.client.post("/get-best-move", json=payload)

    def test_root_and_settings(self):
        self.assertEqual(self.client.get("/").status_code, 200)
        settings = self.client.get("/agent-settings").json()
        self.assertEqual(settings["difficulty_depths"]["expert"], 8)
        self.assertIn("mark-only", settings["variations"])

    def test_immediate_win(self):
        board = empty_board()
        for i in (0, 1, 2):
            board[i] = "X"
        board[30] = "O"
        response = self.request(board=board, max_depth=3)
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data["best_move"], {"action": "mark", "index": 3})
        self.assertEqual(data["best_score"], 999)
        self.assertEqual(data["completed_depth"], 1)

    def test_counters_are_used(self):
        board = empty_board()
        board[0] = "O"
        response = self.request(
            board=board,
            variation="mark+delete",
            move_counters={"X": {"moves_since_delete": 0, "moves_since_move": 0}},
        )
        self.assertEqual(response.json()["best_move"]["action"], "mark")

    def test_full_board_has_no_move(self):
        board = ["X", "O", "X", "X", "O", "O", "O", "X", "X"]
        response = self.request(board=board, board_size=3, win_length=3, variation="mark-only")
        data = response.json()
        self.assertIsNone(data["best_move"])
        self.assertIsNone(data["best_score"])

    def test_invalid_requests(self):
        self.assertEqual(self.request(board=empty_board(5)).status_code, 400)
        self.assertEqual(self.request(board=empty_board(3), board_size=3).status_code, 400)
        self.assertEqual(self.request(variation="mark+teleport").status_code, 400)
        self.assertEqual(self.request(opponent_symbols=["X"]).status_code, 400)
        self.assertEqual(self.request(opponent_symbols=[]).status_code, 422)
        self.assertEqual(self.request(max_depth=12).status_code, 422)

    def test_unknown_cell_values_rejected(self):
        board = [""] * 36
        board[0] = "X"
        response = self.request(board=board)
        self.assertEqual(response.status_code, 400)
        self.assertIn("unknown cell", response.json()["detail"])

        board = empty_board()
        board[5] = "D"
        self.assertEqual(self.request(board=board).status_code, 400)
        self.assertEqual(self.request(board=board, opponent_symbols=["O", "D"]).status_code, 200)


class TestSessionEndpoints(unittest.TestCase):

    def setUp(self):
        self.client = TestClient(app)
        main.sessions.clear()

    def create(self, **payload):
        response = self.client.post("/sessions", json=payload)
        self.assertEqual(response.status_code, 200)
        return response.json()

    def test_create_and_play(self):
        data = self.create()
        code = data["session_id"]
        self.assertEqual(len(data["board"]), 36)
        self.assertEqual(data["current_symbol"], "X")

        response = self.client.post(f"/sessions/{code}/moves", json={"symbol": "X", "action": "mark", "index": 7})
        body = response.json()
        self.assertTrue(body["success"])
        self.assertEqual(body["next_mover_symbol"], "O")
        self.assertEqual(body["state"]["board"][7], "X")

        response = self.client.post(f"/sessions/{code}/moves", json={"symbol": "X", "action": "mark", "index": 8})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["error"], "Not your turn")

        state = self.client.get(f"/sessions/{code.lower()}").json()
        self.assertEqual(state["current_symbol"], "O")

        reset = self.client.post(f"/sessions/{code}/reset").json()
        self.assertIsNone(reset["board"][7])

        self.assertEqual(self.client.delete(f"/sessions/{code}").status_code, 200)
        self.assertEqual(self.client.get(f"/sessions/{code}").status_code, 404)

    def test_relocation_with_source(self):
        code = self.create()["session_id"]
        self.client.post(f"/sessions/{code}/moves", json={"symbol": "X", "action": "mark", "index": 14})
        self.client.post(f"/sessions/{code}/moves", json={"symbol": "O", "action": "mark", "index": 0})
        body = self.client.post(
            f"/sessions/{code}/moves",
            json={"symbol": "X", "action": "relocate", "index": 21, "from_index": 14},
        ).json()
        self.assertTrue(body["success"])
        self.assertEqual(body["applied_move"], {"action": "relocate", "index": 21, "from_index": 14})

    def test_computer_move(self):
        data = self.create(players=[
            {"control": "human"},
            {"control": "computer", "difficulty": "easy"},
        ], time_budget_seconds=10)
        code = data["session_id"]

        response = self.client.post(f"/sessions/{code}/computer-move")
        self.assertEqual(response.json()["error"], "Current player is not computer-controlled")

        self.client.post(f"/sessions/{code}/moves", json={"symbol": "X", "action": "mark", "index": 14})
        body = self.client.post(f"/sessions/{code}/computer-move").json()
        self.assertTrue(body["success"])
        self.assertEqual(body["symbol"], "O")
        self.assertEqual(body["state"]["current_symbol"], "X")

    def test_invalid_session_settings(self):
        response = self.client.post("/sessions", json={"num_players": 2, "board_size": 3})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["detail"]["code"], "CONFIGURATION_ERROR")
        self.assertEqual(self.client.post("/sessions", json={"num_players": 6}).status_code, 422)

    def test_unknown_session(self):
        self.assertEqual(self.client.post("/sessions/NOPE42/reset").status_code, 404)
        response = self.client.post("/sessions/NOPE42/moves", json={"symbol": "X", "action": "mark", "index": 0})
        self.assertEqual(response.status_code, 404)


if __name__ == '__main__':
    unittest.main()
