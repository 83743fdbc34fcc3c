from typing import Optional, TypedDict
import random
from models.game_state import GameState


class Move(TypedDict, total=False):
    action: str  # "mark", "delete" or "relocate"
    index: int
    from_index: Optional[int]  # Relocations only


class RandomAgent:
    def __init__(self, seed: Optional[int] = None):
        self.rng = random.Random(seed)

    def get_move(self, state: GameState) -> Optional[Move]:
        """
        Get a random valid move for the current player, or None if there is none.
        Returns one of:
        - {"action": "mark", "index": int}
        - {"action": "delete", "index": int}
        - {"action": "relocate", "index": int, "from_index": int}
        """
        possible_moves = state.get_valid_moves()
        if not possible_moves:
            return None

        return self.rng.choice(possible_moves)
