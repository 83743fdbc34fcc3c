"""
Configuration settings for game sessions.
"""

import os
import json
from typing import List, Dict, Any, Optional
from dataclasses import dataclass, field, asdict

from errors import ConfigurationError
from game_logic import (
    GameRules,
    PLAYER_SYMBOLS,
    PLAYER_NAMES,
    VARIATIONS,
    DEFAULT_VARIATION,
    DEFAULT_WIN_LENGTH,
    DEFAULT_DELETE_COOLDOWN,
    DEFAULT_MOVE_COOLDOWN,
)

MIN_PLAYERS = 2
MAX_PLAYERS = len(PLAYER_SYMBOLS)

HUMAN = "human"
COMPUTER = "computer"

# Difficulty -> maximum search depth (plies)
DIFFICULTY_DEPTHS = {
    "easy": 2,
    "medium": 4,
    "hard": 6,
    "expert": 8,
}
DEFAULT_DIFFICULTY = "medium"

# Wall-clock budget for one computer turn
DEFAULT_TIME_BUDGET_SECONDS = 5.0


def default_board_size(num_players: int) -> int:
    """6x6 for two players, growing by one per extra player."""
    return 4 + num_players


@dataclass
class PlayerConfig:
    """Configuration for one seat at the table."""
    name: Optional[str] = None
    control: str = HUMAN  # "human" or "computer"
    difficulty: Optional[str] = None  # Only for computer players

    @property
    def is_computer(self) -> bool:
        return self.control == COMPUTER


@dataclass
class GameConfig:
    """Configuration supplied at session creation."""
    num_players: int = 2
    board_size: Optional[int] = None  # If None, derived from num_players
    win_length: int = DEFAULT_WIN_LENGTH
    delete_cooldown: int = DEFAULT_DELETE_COOLDOWN
    move_cooldown: int = DEFAULT_MOVE_COOLDOWN
    variation: str = DEFAULT_VARIATION
    time_budget_seconds: Optional[float] = DEFAULT_TIME_BUDGET_SECONDS
    players: List[PlayerConfig] = field(default_factory=list)

    def __post_init__(self):
        if self.board_size is None:
            self.board_size = default_board_size(self.num_players)
        # Fill missing seats with human players
        if not self.players:
            self.players = [PlayerConfig() for _ in range(self.num_players)]

    @classmethod
    def vs_computer(cls, difficulty: str = DEFAULT_DIFFICULTY, **kwargs) -> 'GameConfig':
        """Two players: X human, O computer."""
        return cls(
            num_players=2,
            players=[PlayerConfig(), PlayerConfig(control=COMPUTER, difficulty=difficulty)],
            **kwargs
        )

    @property
    def symbols(self) -> List[str]:
        return PLAYER_SYMBOLS[:self.num_players]

    def player_name(self, index: int) -> str:
        player = self.players[index]
        return player.name or PLAYER_NAMES[PLAYER_SYMBOLS[index]]

    def validate(self) -> None:
        """
        Validate the configuration.

        Raises:
            ConfigurationError: If any setting is invalid
        """
        if not MIN_PLAYERS <= self.num_players <= MAX_PLAYERS:
            raise ConfigurationError(
                f"Number of players must be between {MIN_PLAYERS} and {MAX_PLAYERS}",
                context={"num_players": self.num_players}
            )
        if len(self.players) != self.num_players:
            raise ConfigurationError(
                "One player configuration is required per seat",
                context={"num_players": self.num_players, "players": len(self.players)}
            )
        if self.win_length < 1:
            raise ConfigurationError("Win length must be positive", context={"win_length": self.win_length})
        if self.board_size < self.win_length:
            raise ConfigurationError(
                "Board size must not be smaller than the win length",
                context={"board_size": self.board_size, "win_length": self.win_length}
            )
        if self.delete_cooldown < 0 or self.move_cooldown < 0:
            raise ConfigurationError(
                "Cooldowns must not be negative",
                context={"delete_cooldown": self.delete_cooldown, "move_cooldown": self.move_cooldown}
            )
        if self.variation not in VARIATIONS:
            raise ConfigurationError(
                f"Unknown variation: {self.variation}",
                context={"valid": list(VARIATIONS)}
            )
        if self.time_budget_seconds is not None and self.time_budget_seconds <= 0:
            raise ConfigurationError(
                "Time budget must be positive",
                context={"time_budget_seconds": self.time_budget_seconds}
            )
        for player in self.players:
            if player.control not in (HUMAN, COMPUTER):
                raise ConfigurationError(f"Unknown control kind: {player.control}")
            if player.is_computer and player.difficulty is not None and player.difficulty not in DIFFICULTY_DEPTHS:
                raise ConfigurationError(
                    f"Unknown difficulty: {player.difficulty}",
                    context={"valid": list(DIFFICULTY_DEPTHS)}
                )

    def rules(self) -> GameRules:
        """Rule parameters consumed by the rules engine and the search."""
        return GameRules(
            board_size=self.board_size,
            win_length=self.win_length,
            delete_cooldown=self.delete_cooldown,
            move_cooldown=self.move_cooldown,
            variation=self.variation,
        )


def config_from_dict(config_dict: Dict[str, Any]) -> GameConfig:
    """
    Build a GameConfig from a plain dictionary (as read from JSON).

    Raises:
        ConfigurationError: If the dictionary has unknown keys
    """
    config_dict = dict(config_dict)
    try:
        players = [PlayerConfig(**p) for p in config_dict.pop('players', [])]
        return GameConfig(players=players, **config_dict)
    except TypeError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")


def load_config(config_path: str) -> GameConfig:
    """
    Load and validate a game configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        GameConfig object
    """
    if not os.path.exists(config_path):
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            config_dict = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Error loading configuration: {e}")

    config = config_from_dict(config_dict)
    config.validate()
    return config


def save_config(config: GameConfig, config_path: str) -> None:
    """
    Save configuration to a JSON file.

    Args:
        config: GameConfig object
        config_path: Path to save the configuration file
    """
    os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)

    with open(config_path, 'w') as f:
        json.dump(asdict(config), f, indent=2)
