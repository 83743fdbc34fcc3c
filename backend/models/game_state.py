from typing import List, Dict, Optional, Any
from game_logic import (
    GameRules,
    PLAYER_SYMBOLS,
    new_board,
    new_move_counters,
    copy_move_counters,
    is_action_available,
    apply_move,
    get_all_possible_moves,
    check_winner,
    check_draw,
    is_full,
)
from errors import RuleViolation


class GameState:
    """
    A class representing the state of one game: board, per-player move counters,
    round-robin turn order and outcome.
    This class is the authoritative rules engine; agents work on clones or snapshots.
    """

    PLAYING = "PLAYING"
    WON = "WON"
    DRAW = "DRAW"

    def __init__(self, rules: Optional[GameRules] = None, symbols: Optional[List[str]] = None):
        self.rules = rules or GameRules()
        self.symbols = list(symbols) if symbols else PLAYER_SYMBOLS[:2]
        self.reset()

    def reset(self) -> None:
        """Clear the board and counters and give the turn to the first player."""
        self.board = new_board(self.rules.board_size)
        self.move_counters = new_move_counters(
            self.symbols, self.rules.delete_cooldown, self.rules.move_cooldown
        )
        self.current_index = 0
        self.game_status = self.PLAYING  # "PLAYING", "WON" or "DRAW"
        self.winner = None
        self.winning_line = []
        self.last_move = None

    @property
    def turn(self) -> str:
        return self.symbols[self.current_index]

    def opponents(self, symbol: Optional[str] = None) -> List[str]:
        """All other symbols in turn order."""
        symbol = symbol or self.turn
        return [s for s in self.symbols if s != symbol]

    def clone(self) -> 'GameState':
        """Create an independent copy of the current game state."""
        new_state = GameState(self.rules, self.symbols)
        new_state.board = list(self.board)
        new_state.move_counters = copy_move_counters(self.move_counters)
        new_state.current_index = self.current_index
        new_state.game_status = self.game_status
        new_state.winner = self.winner
        new_state.winning_line = list(self.winning_line)
        new_state.last_move = dict(self.last_move) if self.last_move else None
        return new_state

    def is_action_available(self, action: str, symbol: Optional[str] = None) -> bool:
        """Whether symbol (default: current player) may use action right now."""
        symbol = symbol or self.turn
        return is_action_available(action, self.move_counters[symbol], self.rules)

    def get_valid_moves(self) -> List[Dict]:
        """Get all valid moves for the current player."""
        if self.is_terminal():
            return []
        return get_all_possible_moves(
            self.board, self.turn, self.opponents(), self.move_counters, self.rules
        )

    def apply_move(self, move: Dict) -> Dict:
        """
        Apply a move for the current player.

        Returns:
            The applied move (relocations carry their from_index).

        Raises:
            RuleViolation: If the game is over or the move is illegal; state is unchanged.
        """
        if self.is_terminal():
            raise RuleViolation("Game is not active", context={"status": self.game_status})

        symbol = self.turn
        applied = apply_move(self.board, move, symbol, self.move_counters, self.rules)
        self.last_move = applied

        # Only the mover can have completed a line
        line = check_winner(self.board, symbol, self.rules.board_size, self.rules.win_length)
        if line:
            self.game_status = self.WON
            self.winner = symbol
            self.winning_line = line
        elif is_full(self.board):
            self.game_status = self.DRAW
        else:
            self.current_index = (self.current_index + 1) % len(self.symbols)

        return applied

    def check_win(self, symbol: str) -> Optional[List[int]]:
        """Winning line of symbol on the current board, if any."""
        return check_winner(self.board, symbol, self.rules.board_size, self.rules.win_length)

    def check_draw(self, symbol: Optional[str] = None) -> bool:
        """Board full and no win for symbol (default: the player whose turn it is)."""
        return check_draw(self.board, symbol or self.turn, self.rules.board_size, self.rules.win_length)

    def is_terminal(self) -> bool:
        """Check if the game has ended."""
        return self.game_status != self.PLAYING

    def get_winner(self) -> Optional[str]:
        """Get the winner of the game if it has ended with a win."""
        return self.winner

    def to_dict(self) -> Dict[str, Any]:
        """Serializable snapshot of the game."""
        return {
            "board": list(self.board),
            "board_size": self.rules.board_size,
            "win_length": self.rules.win_length,
            "symbols": list(self.symbols),
            "current_symbol": self.turn,
            "move_counters": copy_move_counters(self.move_counters),
            "game_status": self.game_status,
            "winner": self.winner,
            "winning_line": list(self.winning_line),
            "delete_cooldown": self.rules.delete_cooldown,
            "move_cooldown": self.rules.move_cooldown,
            "variation": self.rules.variation,
            "last_move": self.last_move,
        }
