"""
Error hierarchy for the game backend.

Rule violations are expected, user-facing failures: the board is never
changed when one is raised. Configuration errors happen at session setup.

Usage:
    from errors import RuleViolation

    try:
        state.apply_move(move)
    except RuleViolation as e:
        logger.warning(f"Invalid move: {e.reason}")
"""

from typing import Any, Dict, Optional

__all__ = [
    "GameError",
    "RuleViolation",
    "ConfigurationError",
]


class GameError(Exception):
    """Base exception for all game errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "GAME_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


class RuleViolation(GameError):
    """Illegal move attempted (occupied cell, cooldown active, wrong turn...)."""
    code: str = "RULE_VIOLATION"

    def __init__(self, reason: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(reason, context=context)
        self.reason = reason


class ConfigurationError(GameError):
    """Invalid session configuration (player count, board size, win length...)."""
    code: str = "CONFIGURATION_ERROR"
