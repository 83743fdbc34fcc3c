"""
Board model and rules for multi-player Tic Tac Toe with delete and relocate moves.

The board is a flat list of size*size cells holding a player symbol or None.
All functions here are pure helpers over that list; GameState owns the turn order.
"""

from dataclasses import dataclass
from functools import lru_cache

from errors import RuleViolation

PLAYER_SYMBOLS = ["X", "O", "D", "T", "S"]
PLAYER_NAMES = {
    "X": "X",
    "O": "Circle",
    "D": "Dot",
    "T": "Triangle",
    "S": "Square",
}

MARK = "mark"
DELETE = "delete"
RELOCATE = "relocate"
ACTIONS = (MARK, DELETE, RELOCATE)

VARIATIONS = {
    "mark-only": (MARK,),
    "mark+delete": (MARK, DELETE),
    "mark+delete+relocate": (MARK, DELETE, RELOCATE),
}
DEFAULT_VARIATION = "mark+delete+relocate"

DEFAULT_WIN_LENGTH = 4
DEFAULT_DELETE_COOLDOWN = 5
DEFAULT_MOVE_COOLDOWN = 3

# Fixed scan order for relocation sources: first match wins.
NEIGHBOR_DIRECTIONS = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1),           (0, 1),
    (1, -1),  (1, 0),  (1, 1)
]


@dataclass(frozen=True)
class GameRules:
    """Immutable rule parameters shared by the rules engine, move generator and search."""
    board_size: int = 6
    win_length: int = DEFAULT_WIN_LENGTH
    delete_cooldown: int = DEFAULT_DELETE_COOLDOWN
    move_cooldown: int = DEFAULT_MOVE_COOLDOWN
    variation: str = DEFAULT_VARIATION

    @property
    def allowed_actions(self):
        return VARIATIONS[self.variation]

    @property
    def cell_count(self):
        return self.board_size * self.board_size


def new_board(size):
    """Create an empty flat board of size*size cells."""
    return [None] * (size * size)


def is_in_bounds(row, col, size):
    """Check if coordinates are within the board bounds."""
    return 0 <= row < size and 0 <= col < size


def scan_lines(size, win_length):
    """
    Yield every run of win_length consecutive cell indices along rows,
    columns, diagonals and anti-diagonals, in that order.

    The sequence is recomputed on each call; win checks and evaluation
    both walk it so they agree on what a line is.
    """
    for row in range(size):
        for col in range(size - win_length + 1):
            yield tuple(row * size + col + i for i in range(win_length))

    for col in range(size):
        for row in range(size - win_length + 1):
            yield tuple((row + i) * size + col for i in range(win_length))

    for row in range(size - win_length + 1):
        for col in range(size - win_length + 1):
            yield tuple((row + i) * size + (col + i) for i in range(win_length))

    for row in range(size - win_length + 1):
        for col in range(win_length - 1, size):
            yield tuple((row + i) * size + (col - i) for i in range(win_length))


@lru_cache(maxsize=None)
def get_lines(size, win_length):
    """Materialized scan_lines() for the search hot path."""
    return tuple(scan_lines(size, win_length))


def is_full(board):
    """True iff no cell is empty."""
    return all(cell is not None for cell in board)


def board_rows(board, size):
    """Compact text rows of the board, '.' for empty cells. Used for logging."""
    return [
        " ".join(cell if cell is not None else "." for cell in board[row * size:(row + 1) * size])
        for row in range(size)
    ]


def find_adjacent_own_cell(board, index, symbol, size):
    """
    Find the neighbor of index holding symbol, scanning NEIGHBOR_DIRECTIONS in order.

    Returns:
        The index of the first matching neighbor, or None.
    """
    row, col = divmod(index, size)
    for dr, dc in NEIGHBOR_DIRECTIONS:
        new_row = row + dr
        new_col = col + dc
        if is_in_bounds(new_row, new_col, size):
            adjacent_index = new_row * size + new_col
            if board[adjacent_index] == symbol:
                return adjacent_index
    return None


def check_winner(board, symbol, size, win_length):
    """
    Check whether symbol occupies a complete line.

    Returns:
        The winning line's cell indices, or None.
    """
    for line in get_lines(size, win_length):
        if all(board[i] == symbol for i in line):
            return list(line)
    return None


def check_draw(board, symbol, size, win_length):
    """Board full and the mover did not just complete a line."""
    return is_full(board) and check_winner(board, symbol, size, win_length) is None


def new_move_counters(symbols, delete_cooldown=DEFAULT_DELETE_COOLDOWN, move_cooldown=DEFAULT_MOVE_COOLDOWN):
    """Counters start at the cooldown values so both actions are available immediately."""
    return {
        symbol: {"moves_since_delete": delete_cooldown, "moves_since_move": move_cooldown}
        for symbol in symbols
    }


def copy_move_counters(move_counters):
    """Value copy of every player's counters."""
    return {symbol: dict(counters) for symbol, counters in move_counters.items()}


def is_action_available(action, counters, rules):
    """
    Check whether one player's counters allow action under rules.

    Reads counters only, never modifies them.
    """
    if action == MARK:
        return True
    if action not in rules.allowed_actions:
        return False
    if action == DELETE:
        return counters["moves_since_delete"] >= rules.delete_cooldown
    if action == RELOCATE:
        return counters["moves_since_move"] >= rules.move_cooldown
    return False


def update_move_counters(counters, action):
    """Advance one player's counters after a successful action of theirs."""
    if action == DELETE:
        counters["moves_since_delete"] = 0
        counters["moves_since_move"] += 1
    elif action == RELOCATE:
        counters["moves_since_move"] = 0
        counters["moves_since_delete"] += 1
    elif action == MARK:
        counters["moves_since_delete"] += 1
        counters["moves_since_move"] += 1


def make_move(action, index, from_index=None):
    """Build a move dictionary in wire format."""
    move = {"action": action, "index": index}
    if action == RELOCATE:
        move["from_index"] = from_index
    return move


def validate_move(board, move, symbol, counters, rules):
    """
    Validate move for the player holding symbol.

    Args:
        board: Flat board
        move: {"action", "index", "from_index"?}
        symbol: The mover's symbol
        counters: The mover's own counters
        rules: GameRules

    Returns:
        The resolved move; relocations get their from_index filled in.

    Raises:
        RuleViolation: If the move is illegal. Nothing is modified.
    """
    action = move.get("action")
    index = move.get("index")

    if action not in ACTIONS:
        raise RuleViolation(f"Unknown action: {action}", context={"action": action})
    if not isinstance(index, int) or isinstance(index, bool) or not 0 <= index < len(board):
        raise RuleViolation("Cell index out of range", context={"index": index})

    if action == MARK:
        if board[index] is not None:
            raise RuleViolation("Cell is not empty", context={"index": index})
        return make_move(MARK, index)

    if action not in rules.allowed_actions:
        raise RuleViolation(f"Action {action} is disabled in this variation", context={"variation": rules.variation})

    if action == DELETE:
        if counters["moves_since_delete"] < rules.delete_cooldown:
            raise RuleViolation("Delete on cooldown", context={
                "moves_since_delete": counters["moves_since_delete"],
                "delete_cooldown": rules.delete_cooldown,
            })
        if board[index] is None or board[index] == symbol:
            raise RuleViolation("Cannot delete this cell", context={"index": index})
        return make_move(DELETE, index)

    if counters["moves_since_move"] < rules.move_cooldown:
        raise RuleViolation("Move on cooldown", context={
            "moves_since_move": counters["moves_since_move"],
            "move_cooldown": rules.move_cooldown,
        })
    if board[index] is not None:
        raise RuleViolation("Target cell is not empty", context={"index": index})
    source_index = find_adjacent_own_cell(board, index, symbol, rules.board_size)
    if source_index is None:
        raise RuleViolation("No adjacent cell to move", context={"index": index})
    requested_source = move.get("from_index")
    if requested_source is not None and requested_source != source_index:
        raise RuleViolation("Source cell is not adjacent", context={
            "from_index": requested_source,
            "expected": source_index,
        })
    return make_move(RELOCATE, index, source_index)


def place_move(board, move, symbol):
    """Apply the board effect of an already-legal move in place."""
    action = move["action"]
    if action == MARK:
        board[move["index"]] = symbol
    elif action == DELETE:
        board[move["index"]] = None
    elif action == RELOCATE:
        board[move["index"]] = symbol
        board[move["from_index"]] = None


def execute_move(board, move, symbol, move_counters):
    """
    Apply an already-legal move in place and update the mover's counters.

    Used by the search on its own board copies; use apply_move for untrusted input.
    """
    place_move(board, move, symbol)
    update_move_counters(move_counters[symbol], move["action"])


def apply_move(board, move, symbol, move_counters, rules):
    """
    Validate and apply move for symbol, mutating board and move_counters.

    Returns:
        The applied (resolved) move.

    Raises:
        RuleViolation: If the move is illegal. Nothing is modified.
    """
    applied = validate_move(board, move, symbol, move_counters[symbol], rules)
    execute_move(board, applied, symbol, move_counters)
    return applied


def get_all_possible_moves(board, symbol, opponents, move_counters, rules):
    """
    Get all legal moves for symbol.

    Order: marks in board order, then deletes of opponent cells, then relocations.
    """
    counters = move_counters[symbol]
    size = rules.board_size
    moves = []

    for i, cell in enumerate(board):
        if cell is None:
            moves.append({"action": MARK, "index": i})

    if is_action_available(DELETE, counters, rules):
        for i, cell in enumerate(board):
            if cell is not None and cell in opponents:
                moves.append({"action": DELETE, "index": i})

    if is_action_available(RELOCATE, counters, rules):
        for i, cell in enumerate(board):
            if cell is None:
                source_index = find_adjacent_own_cell(board, i, symbol, size)
                if source_index is not None:
                    moves.append({"action": RELOCATE, "index": i, "from_index": source_index})

    return moves
