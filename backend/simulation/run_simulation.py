#!/usr/bin/env python3
"""
Run a batch of computer-vs-computer games and save the results.

Example:
    python simulation/run_simulation.py --agents minimax:easy random --games 10
"""

import os
import sys
import argparse
import json
from datetime import datetime
from typing import Dict, List, Optional
import pandas as pd

# Add the parent directory to the path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import GameConfig, load_config
from simulation.game_runner import GameRunner


def parse_agent_spec(spec: str) -> Dict:
    """
    Parse an agent specification such as "minimax:hard", "minimax:3" or "random".
    """
    algorithm, _, option = spec.partition(":")
    config = {"algorithm": algorithm}
    if algorithm == "minimax" and option:
        if option.isdigit():
            config["max_depth"] = int(option)
        else:
            config["difficulty"] = option
    elif algorithm == "random" and option:
        config["seed"] = int(option)
    return config


def run_games(agent_configs: List[Dict], games: int, game_config: Optional[GameConfig] = None,
              max_moves: int = 200) -> pd.DataFrame:
    """
    Play games with the given seats and collect one result row per game.
    """
    rows = []
    for game_number in range(games):
        config = game_config or GameConfig(num_players=len(agent_configs))
        runner = GameRunner(agent_configs, config, max_moves=max_moves)
        result = runner.run_game()
        print(f"Game {game_number + 1}/{games}: winner={result['winner']} "
              f"moves={result['moves']} ({result['game_duration']:.1f}s)")
        result["agent_configs"] = json.dumps(result["agent_configs"])
        result["avg_move_times"] = json.dumps(result["avg_move_times"])
        result["winning_line"] = json.dumps(result["winning_line"])
        rows.append(result)
    return pd.DataFrame(rows)


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    """Win counts and rates per winner symbol (DRAW included)."""
    summary = df.groupby("winner").agg(games=("game_id", "count"), avg_moves=("moves", "mean"))
    summary["rate"] = summary["games"] / len(df)
    return summary.sort_values("games", ascending=False)


def main():
    parser = argparse.ArgumentParser(description="Run computer-vs-computer games")
    parser.add_argument("--agents", nargs="+", default=["minimax:easy", "random"],
                        help="One agent per seat: minimax[:difficulty|:depth] or random[:seed]")
    parser.add_argument("--games", type=int, default=10, help="Number of games to play")
    parser.add_argument("--config", type=str, default=None, help="Optional game configuration JSON")
    parser.add_argument("--max-moves", type=int, default=200, help="Move limit per game")
    parser.add_argument("--output-dir", type=str, default="simulation_results")
    args = parser.parse_args()

    agent_configs = [parse_agent_spec(spec) for spec in args.agents]
    game_config = load_config(args.config) if args.config else None

    print(f"Starting simulation at {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"  Agents: {args.agents}")
    print(f"  Games: {args.games}")

    df = run_games(agent_configs, args.games, game_config, args.max_moves)

    os.makedirs(args.output_dir, exist_ok=True)
    output_file = os.path.join(args.output_dir, f"games_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv")
    df.to_csv(output_file, index=False)

    print("\nSummary:")
    print(summarize(df).to_string())
    print(f"\nResults saved to: {output_file}")


if __name__ == "__main__":
    main()
