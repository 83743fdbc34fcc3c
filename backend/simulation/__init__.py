"""
Tic Tac Toe Online Simulation Package

This package provides tools for running batches of games
between computer agents.
"""

from .game_runner import GameRunner

__all__ = ["GameRunner"]
