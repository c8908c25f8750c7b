"""
Main entry point for generating Queens levels.

Usage:
    python -m src.main configs/default.yaml
    python -m src.main --grid-size 8 --complexity hard --seed 7 --verbose
    python -m src.main configs/default.yaml --board-out level.txt
"""

import argparse
import random
import sys
from pathlib import Path

import yaml

from .environment import GeneratorConfig
from .storage import JsonLevelStore, load_or_generate
from .utils.grid_visualizer import render_board
from .verifiers import dump_board


def load_config(config_path: str) -> GeneratorConfig:
    """Load generator configuration from a YAML file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    return GeneratorConfig(**(data or {}))


def build_config(args: argparse.Namespace) -> GeneratorConfig:
    """Combine the optional config file with command-line overrides."""
    config = load_config(args.config) if args.config else GeneratorConfig()

    overrides = {
        "grid_size": args.grid_size,
        "complexity": args.complexity,
        "max_attempts": args.max_attempts,
        "seed": args.seed,
        "store_path": args.output,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if not overrides:
        return config

    # Re-validate so overrides get the same checks as file values
    return GeneratorConfig(**{**config.model_dump(), **overrides})


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Generate a Queens puzzle level",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example config.yaml:
  grid_size: 8
  complexity: medium
  max_attempts: 10
  seed: 42
  store_path: levels/levels.json
        """
    )
    parser.add_argument(
        "config",
        nargs="?",
        help="Path to YAML configuration file (optional)"
    )
    parser.add_argument("--grid-size", "-n", type=int, help="Board width and height")
    parser.add_argument(
        "--complexity", "-c",
        choices=["easy", "medium", "hard"],
        help="Complexity level"
    )
    parser.add_argument("--max-attempts", type=int, help="Attempts before falling back to an unverified level")
    parser.add_argument("--seed", type=int, help="Random seed for reproducible levels")
    parser.add_argument(
        "--output", "-o",
        help="Path of a JSON level store to read from and add verified levels to"
    )
    parser.add_argument(
        "--board-out",
        help="Write the level in text board format to this path"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Print progress to stdout"
    )

    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        sys.exit(1)

    store = JsonLevelStore(config.store_path, random.Random(config.seed)) if config.store_path else None

    if args.verbose:
        if args.config:
            print(f"Config: {args.config}")
        print(f"Grid: {config.grid_size}x{config.grid_size}, complexity: {config.complexity}, "
              f"attempts: {config.attempt_budget}")
        if store is not None:
            print(f"Store: {store.path}")
        print()

    try:
        state = load_or_generate(
            store,
            grid_size=config.grid_size,
            complexity=config.complexity,
            max_attempts=config.attempt_budget,
            rng=random.Random(config.seed),
            verbose=args.verbose,
        )
    except KeyboardInterrupt:
        print("\nGeneration interrupted by user")
        return 1
    except Exception as e:
        print(f"Error during generation: {e}", file=sys.stderr)
        sys.exit(1)

    if args.board_out:
        board_path = Path(args.board_out)
        board_path.parent.mkdir(parents=True, exist_ok=True)
        board_path.write_text(dump_board(state.board) + "\n")
        if args.verbose:
            print(f"Board saved to: {board_path}")

    # Print summary
    print()
    print(render_board(state.board))
    print()
    print("=== Level Summary ===")
    print(f"Grid size: {state.grid_size}")
    print(f"Complexity: {state.complexity}")
    print(f"Verified unique: {'yes' if state.verified else 'no'}")
    print(f"Region sizes: {', '.join(str(region.size) for region in state.regions)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
