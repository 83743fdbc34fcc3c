from typing import List, Optional, Dict, Any
from dataclasses import dataclass
import logging
import time

from models.game_state import GameState
from models.evaluation import evaluate_board, select_threatening_opponent
from game_logic import (
    GameRules,
    get_all_possible_moves,
    copy_move_counters,
    execute_move,
    place_move,
    check_winner,
    is_full,
)

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    """Outcome of one search invocation."""
    best_move: Optional[Dict] = None
    best_score: float = float('-inf')
    completed_depth: int = 0
    nodes: int = 0
    elapsed: float = 0.0
    timed_out: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "best_move": self.best_move,
            "best_score": self.best_score,
            "completed_depth": self.completed_depth,
            "nodes": self.nodes,
            "elapsed": self.elapsed,
            "timed_out": self.timed_out,
        }


class MinimaxAgent:
    """
    Minimax agent with alpha-beta pruning, top-level move ordering and
    iterative deepening under a wall-clock budget.

    The maximizing layer is the mover. Each minimizing layer is played by the
    opponent that currently looks most threatening (see select_threatening_opponent),
    which reduces an n-player game to a two-sided search.
    """

    WIN_SCORE = 1000
    FORCED_WIN_THRESHOLD = 900

    def __init__(self, max_depth: int = 4, max_time: Optional[float] = None, use_pruning: bool = True,
                 iterative_deepening: bool = True):
        self.max_depth = max_depth
        self.max_time = max_time  # Seconds; None means no budget
        self.use_pruning = use_pruning
        self.iterative_deepening = iterative_deepening
        self.best_move = None
        self.best_score = None
        self.nodes_visited = 0
        self.last_result = None

        # Debug mode flag
        self.debug_mode = False

    def evaluate(self, board, player: str, opponents: List[str], rules: GameRules) -> float:
        """
        Static evaluation of board for player at the depth cutoff.

        Clamped to stay below FORCED_WIN_THRESHOLD so that only real wins and
        losses reach the sentinel band.
        """
        bound = self.FORCED_WIN_THRESHOLD - 1
        score = evaluate_board(board, player, opponents, rules.board_size, rules.win_length)
        return max(-bound, min(bound, score))

    def get_move(self, state: GameState) -> Optional[Dict]:
        """Get the best move for the current player of state, or None if there is none."""
        if state.is_terminal():
            return None
        result = self.search(state.board, state.turn, state.opponents(), state.move_counters, state.rules)
        return result.best_move

    def search(self, board, player: str, opponents: List[str], move_counters: Dict, rules: GameRules) -> SearchResult:
        """
        Choose the best move for player.

        Works on private copies of board and move_counters; the caller's objects are never modified.

        Returns:
            SearchResult. best_move is None only when player has no legal move.
        """
        start_time = time.time()
        deadline = start_time + self.max_time if self.max_time is not None else None
        board = list(board)
        move_counters = copy_move_counters(move_counters)
        opponents = list(opponents)
        self.nodes_visited = 0

        result = SearchResult()
        moves = get_all_possible_moves(board, player, opponents, move_counters, rules)
        if not moves:
            logger.warning(f"No legal moves for {player}")
            result.elapsed = time.time() - start_time
            self.last_result = result
            return result

        ordered_moves = self.order_moves(board, moves, player, opponents, rules)

        if self.iterative_deepening:
            depth_limits = list(range(1, self.max_depth + 1))
        else:
            depth_limits = [self.max_depth]

        for depth_limit in depth_limits:
            # The depth-1 pass always completes so there is always a move to return
            pass_deadline = None if depth_limit == 1 else deadline
            if pass_deadline is not None and result.best_move is not None and time.time() >= pass_deadline:
                result.timed_out = True
                break

            move, score, completed = self._search_root(
                board, ordered_moves, player, opponents, move_counters, rules, depth_limit, pass_deadline
            )

            if completed:
                result.best_move = move
                result.best_score = score
                result.completed_depth = depth_limit
                logger.debug(f"Depth {depth_limit} complete: best={move} score={score} nodes={self.nodes_visited}")
                if score > self.FORCED_WIN_THRESHOLD:
                    break
            else:
                result.timed_out = True
                if result.best_move is None and move is not None:
                    # Nothing completed yet, keep the partial pass's best
                    result.best_move = move
                    result.best_score = score
                logger.debug(f"Time budget expired during depth {depth_limit}")
                break

        result.nodes = self.nodes_visited
        result.elapsed = time.time() - start_time
        self.best_move = result.best_move
        self.best_score = result.best_score
        self.last_result = result

        logger.info(
            f"{player} selected {result.best_move} score={result.best_score} "
            f"depth={result.completed_depth} nodes={result.nodes} [{result.elapsed:.2f}s]"
        )
        return result

    def _search_root(self, board, ordered_moves: List[Dict], player: str, opponents: List[str],
                     move_counters: Dict, rules: GameRules, depth_limit: int, deadline: Optional[float]):
        """
        One full minimax pass over the root moves.

        Returns:
            (best_move, best_score, completed). When the deadline stops the pass
            early, best_move is the best among the moves evaluated so far.
            A forced win ends the pass at once and counts as completed.
        """
        best_move = None
        best_score = float('-inf')
        alpha = float('-inf')
        beta = float('inf')

        for move in ordered_moves:
            if deadline is not None and best_move is not None and time.time() >= deadline:
                return best_move, best_score, False

            child_board = list(board)
            child_counters = copy_move_counters(move_counters)
            execute_move(child_board, move, player, child_counters)

            score = self.minimax(child_board, child_counters, 1, alpha, beta, False,
                                 player, opponents, rules, depth_limit)

            if self.debug_mode:
                logger.debug(f"  depth {depth_limit} {move}: {score}")

            if score > best_score:
                best_score = score
                best_move = move
            if score > self.FORCED_WIN_THRESHOLD:
                # Forced win found, no need to look at the remaining moves
                return best_move, best_score, True
            if self.use_pruning:
                alpha = max(alpha, score)

        return best_move, best_score, True

    def order_moves(self, board, moves: List[Dict], player: str, opponents: List[str], rules: GameRules) -> List[Dict]:
        """
        Order root moves for better pruning: winning moves first, then moves
        taking a cell an opponent needs to complete a line, then the rest.
        Generation order is kept within each group.
        """
        winning = []
        blocking = []
        other = []

        for move in moves:
            next_board = list(board)
            place_move(next_board, move, player)
            if check_winner(next_board, player, rules.board_size, rules.win_length):
                winning.append(move)
            elif self._is_blocking_move(board, move, opponents, rules):
                blocking.append(move)
            else:
                other.append(move)

        return winning + blocking + other

    def _is_blocking_move(self, board, move: Dict, opponents: List[str], rules: GameRules) -> bool:
        """True if some opponent would complete a line by taking the move's target cell."""
        target = move["index"]
        if board[target] is not None:
            return False
        for opponent in opponents:
            test_board = list(board)
            test_board[target] = opponent
            if check_winner(test_board, opponent, rules.board_size, rules.win_length):
                return True
        return False

    def minimax(self, board, move_counters: Dict, depth: int, alpha: float, beta: float, is_maximizing: bool,
                player: str, opponents: List[str], rules: GameRules, depth_limit: int) -> float:
        """Minimax algorithm with optional alpha-beta pruning. Scores are from player's point of view."""
        self.nodes_visited += 1
        size = rules.board_size
        win_length = rules.win_length

        # Terminal checks, in precedence order
        if check_winner(board, player, size, win_length):
            return self.WIN_SCORE - depth  # Prefer faster wins
        for opponent in opponents:
            if check_winner(board, opponent, size, win_length):
                return -self.WIN_SCORE + depth  # Prefer slower losses
        if is_full(board):
            return 0

        if depth >= depth_limit:
            return self.evaluate(board, player, opponents, rules)

        if is_maximizing:
            actor = player
            actor_opponents = opponents
        else:
            actor = select_threatening_opponent(board, player, opponents, size, win_length)
            actor_opponents = [player] + [o for o in opponents if o != actor]

        moves = get_all_possible_moves(board, actor, actor_opponents, move_counters, rules)
        if not moves:
            return self.evaluate(board, player, opponents, rules)

        best_value = float('-inf') if is_maximizing else float('inf')

        for move in moves:
            child_board = list(board)
            child_counters = copy_move_counters(move_counters)
            execute_move(child_board, move, actor, child_counters)

            child_score = self.minimax(child_board, child_counters, depth + 1, alpha, beta, not is_maximizing,
                                       player, opponents, rules, depth_limit)

            if is_maximizing:
                best_value = max(best_value, child_score)
                if self.use_pruning:
                    alpha = max(alpha, best_value)
            else:
                best_value = min(best_value, child_score)
                if self.use_pruning:
                    beta = min(beta, best_value)

            if self.use_pruning and beta <= alpha:
                break  # Alpha-beta pruning

        return best_value
