from typing import Callable, Dict, List, Optional, Any
from dataclasses import dataclass
import logging
import threading

from config import GameConfig, COMPUTER, DIFFICULTY_DEPTHS, DEFAULT_DIFFICULTY
from errors import RuleViolation
from models.game_state import GameState
from models.minimax_agent import MinimaxAgent

logger = logging.getLogger(__name__)


@dataclass
class Player:
    symbol: str
    name: str
    control: str
    difficulty: Optional[str] = None

    @property
    def is_computer(self) -> bool:
        return self.control == COMPUTER

    @property
    def max_depth(self) -> Optional[int]:
        if not self.is_computer:
            return None
        return DIFFICULTY_DEPTHS[self.difficulty or DEFAULT_DIFFICULTY]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "symbol": self.symbol,
            "name": self.name,
            "control": self.control,
            "difficulty": self.difficulty,
        }


class GameSession:
    """
    Coordinates one game between human and computer players.

    Enforces turn order, turns rule violations into failure responses,
    runs computer turns, keeps scores across resets and notifies listeners
    of every applied move. Move application and computer turns are
    serialized with a per-session lock.
    """

    def __init__(self, config: GameConfig, session_id: Optional[str] = None):
        config.validate()
        self.config = config
        self.session_id = session_id
        self.players = [
            Player(
                symbol=symbol,
                name=config.player_name(i),
                control=player_config.control,
                difficulty=player_config.difficulty,
            )
            for i, (symbol, player_config) in enumerate(zip(config.symbols, config.players))
        ]
        self.state = GameState(config.rules(), config.symbols)
        self.scores = {player.symbol: 0 for player in self.players}
        self._lock = threading.RLock()
        self._listeners: List[Callable[[Dict], None]] = []

    @property
    def current_player(self) -> Player:
        return self.players[self.state.current_index]

    def get_player(self, symbol: str) -> Optional[Player]:
        for player in self.players:
            if player.symbol == symbol:
                return player
        return None

    def add_listener(self, callback: Callable[[Dict], None]) -> None:
        """Register a callback receiving every successful move response and resets."""
        self._listeners.append(callback)

    def _notify(self, event: Dict) -> None:
        for callback in self._listeners:
            callback(event)

    @staticmethod
    def _failure(reason: str) -> Dict:
        return {"success": False, "error": reason}

    def make_move(self, symbol: str, move: Dict) -> Dict:
        """
        Apply move on behalf of the player holding symbol.

        Returns:
            {"success": False, "error": reason} for any rejected move, otherwise
            {"success": True, "applied_move", "game_over", ...} with winner and
            winning_line, draw, or next_mover_symbol depending on the outcome.
        """
        with self._lock:
            return self._make_move(symbol, move)

    def _make_move(self, symbol: str, move: Dict) -> Dict:
        if self.state.is_terminal():
            return self._failure("Game is not active")
        if self.get_player(symbol) is None:
            return self._failure("Player not found")
        if symbol != self.state.turn:
            return self._failure("Not your turn")

        try:
            applied = self.state.apply_move(move)
        except RuleViolation as e:
            logger.info(f"Rejected move {move} from {symbol}: {e.reason}")
            return self._failure(e.reason)

        response = {
            "success": True,
            "symbol": symbol,
            "applied_move": applied,
            "game_over": self.state.is_terminal(),
            "move_counters": self.state.to_dict()["move_counters"],
        }

        if self.state.game_status == GameState.WON:
            self.scores[symbol] += 1
            response["winner"] = symbol
            response["winner_name"] = self.get_player(symbol).name
            response["winning_line"] = list(self.state.winning_line)
            logger.info(f"Session {self.session_id}: {symbol} wins with line {self.state.winning_line}")
        elif self.state.game_status == GameState.DRAW:
            response["draw"] = True
            logger.info(f"Session {self.session_id}: draw")
        else:
            response["next_mover_symbol"] = self.current_player.symbol
            response["next_mover_name"] = self.current_player.name

        self._notify(response)
        return response

    def play_computer_turn(self) -> Dict:
        """
        Let the current computer player search for and play its move.

        Returns:
            The same response shape as make_move, plus the search summary.
        """
        with self._lock:
            if self.state.is_terminal():
                return self._failure("Game is not active")
            player = self.current_player
            if not player.is_computer:
                return self._failure("Current player is not computer-controlled")

            agent = MinimaxAgent(max_depth=player.max_depth, max_time=self.config.time_budget_seconds)
            result = agent.search(
                self.state.board, player.symbol, self.state.opponents(player.symbol),
                self.state.move_counters, self.state.rules
            )

            if result.best_move is None:
                # No legal move: the game cannot continue
                logger.warning(f"Session {self.session_id}: no move for {player.symbol}, ending in a draw")
                self.state.game_status = GameState.DRAW
                response = {
                    "success": True,
                    "symbol": player.symbol,
                    "applied_move": None,
                    "game_over": True,
                    "draw": True,
                    "move_counters": self.state.to_dict()["move_counters"],
                }
                self._notify(response)
                return response

            response = self._make_move(player.symbol, result.best_move)
            response["search"] = result.to_dict()
            return response

    def reset(self) -> Dict:
        """Start a new game with the same players; scores are kept."""
        with self._lock:
            self.state.reset()
            logger.info(f"Session {self.session_id} reset")
            self._notify({"reset": True})
            return self.to_dict()

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            data = self.state.to_dict()
            data.update({
                "session_id": self.session_id,
                "players": [player.to_dict() for player in self.players],
                "current_player_name": self.current_player.name,
                "scores": dict(self.scores),
                "time_budget_seconds": self.config.time_budget_seconds,
            })
            return data
