from typing import Dict, List, Optional, Any
import time
import uuid
import sys
import os

# Add the parent directory to the path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import GameConfig, DIFFICULTY_DEPTHS
from errors import ConfigurationError
from game_logic import MARK, DELETE, RELOCATE
from models.game_state import GameState
from models.minimax_agent import MinimaxAgent
from models.random_agent import RandomAgent


class GameRunner:
    """
    Runs a single game between computer agents and captures the results.
    Stops after max_moves to avoid endless delete/relocate cycles.
    """

    def __init__(self, agent_configs: List[Dict], game_config: Optional[GameConfig] = None, max_moves: int = 200):
        """
        Initialize a game runner with agent configurations.

        Args:
            agent_configs: One configuration dict per seat, e.g.
                {"algorithm": "minimax", "difficulty": "easy"} or {"algorithm": "random"}
            game_config: Board and rule settings; defaults to the standard game for len(agent_configs) players
            max_moves: Move limit after which the game counts as a draw
        """
        self.agent_configs = agent_configs
        self.game_config = game_config or GameConfig(num_players=len(agent_configs))
        self.game_config.validate()
        if len(agent_configs) != self.game_config.num_players:
            raise ConfigurationError(
                "One agent configuration is required per player",
                context={"agents": len(agent_configs), "num_players": self.game_config.num_players}
            )
        self.max_moves = max_moves
        self.game_id = str(uuid.uuid4())  # Generate a unique game ID
        self.move_history = []

    def _create_agent(self, config: Dict) -> Any:
        """
        Create an agent based on configuration.

        Args:
            config: Agent configuration with at least 'algorithm' key

        Returns:
            An instance of the appropriate agent class
        """
        if config['algorithm'] == 'minimax':
            max_depth = config.get('max_depth') or DIFFICULTY_DEPTHS[config.get('difficulty', 'easy')]
            return MinimaxAgent(
                max_depth=max_depth,
                max_time=config.get('max_time', self.game_config.time_budget_seconds)
            )
        elif config['algorithm'] == 'random':
            return RandomAgent(seed=config.get('seed'))
        else:
            raise ValueError(f"Unknown algorithm: {config['algorithm']}")

    def _format_move(self, symbol: str, move: Dict) -> str:
        """
        Format a move into condensed notation: X:m12, O:d7, X:r14<13.
        """
        if move["action"] == MARK:
            return f"{symbol}:m{move['index']}"
        elif move["action"] == DELETE:
            return f"{symbol}:d{move['index']}"
        elif move["action"] == RELOCATE:
            return f"{symbol}:r{move['index']}<{move['from_index']}"
        return f"{symbol}:?"

    def run_game(self) -> Dict:
        """
        Run a complete game and return statistics.

        Returns:
            Dict containing game statistics
        """
        state = GameState(self.game_config.rules(), self.game_config.symbols)
        agents = {
            symbol: self._create_agent(config)
            for symbol, config in zip(state.symbols, self.agent_configs)
        }

        start_time = time.time()
        move_count = 0
        move_times = {symbol: [] for symbol in state.symbols}
        reason = "STANDARD"

        # Main game loop
        while not state.is_terminal():
            if move_count >= self.max_moves:
                reason = "MOVE_LIMIT"
                break

            symbol = state.turn
            move_start = time.time()
            move = agents[symbol].get_move(state)
            move_times[symbol].append(time.time() - move_start)

            if move is None:
                reason = "NO_MOVES"
                break

            applied = state.apply_move(move)
            self.move_history.append(self._format_move(symbol, applied))
            move_count += 1

        winner = state.get_winner()
        return {
            "game_id": self.game_id,
            "agent_configs": self.agent_configs,
            "num_players": self.game_config.num_players,
            "board_size": self.game_config.board_size,
            "winner": winner or "DRAW",
            "reason": reason,
            "moves": move_count,
            "game_duration": time.time() - start_time,
            "avg_move_times": {
                symbol: sum(times) / len(times) if times else 0
                for symbol, times in move_times.items()
            },
            "winning_line": state.winning_line,
            "move_history": ",".join(self.move_history),
        }
