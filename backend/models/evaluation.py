"""
Static board evaluation used at the search's depth cutoff.
"""
from typing import List, Optional, Sequence
from game_logic import get_lines


def evaluate_line(board: Sequence[Optional[str]], line: Sequence[int], player: str, opponents: Sequence[str]) -> int:
    """
    Score a single line for player.

    +10^n when the line holds n > 0 player marks and no opponent marks,
    -10^n when it holds n marks of exactly one opponent and no player marks,
    0 otherwise (empty or contested lines).
    """
    player_count = 0
    opponent_counts = {}
    for i in line:
        cell = board[i]
        if cell == player:
            player_count += 1
        elif cell is not None and cell in opponents:
            opponent_counts[cell] = opponent_counts.get(cell, 0) + 1

    if player_count > 0 and not opponent_counts:
        return 10 ** player_count
    if player_count == 0 and len(opponent_counts) == 1:
        return -(10 ** next(iter(opponent_counts.values())))
    return 0


def evaluate_board(board: Sequence[Optional[str]], player: str, opponents: Sequence[str],
                   board_size: int, win_length: int) -> int:
    """
    Heuristic value of board for player against opponents: the sum of
    evaluate_line() over every line of win_length cells.

    Line-local only; multi-line combinations and delete/relocate threats
    are not taken into account.
    """
    return sum(
        evaluate_line(board, line, player, opponents)
        for line in get_lines(board_size, win_length)
    )


def select_threatening_opponent(board: Sequence[Optional[str]], player: str, opponents: List[str],
                                board_size: int, win_length: int) -> str:
    """
    Pick the opponent with the highest evaluation when scored as the "player"
    against the true player and the remaining opponents. Ties go to the
    earliest opponent in turn order.
    """
    best_opponent = opponents[0]
    best_score = float('-inf')
    for opponent in opponents:
        others = [player] + [o for o in opponents if o != opponent]
        score = evaluate_board(board, opponent, others, board_size, win_length)
        if score > best_score:
            best_score = score
            best_opponent = opponent
    return best_opponent
