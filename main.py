# main.py
import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
import yaml

from utils.logging_utils import setup_logging

try:
    from dungeon.render import RENDER_MODES, render
    from dungeon.world.procgen import (
        GenerationStalled,
        GeneratorConfig,
        generate_dungeon,
    )
    from dungeon_rng import DungeonRNG, EntropyError
except ImportError as e:
    structlog.get_logger().error(
        "CRITICAL: Failed to import dungeon modules.", error=str(e)
    )
    raise


# --- Paths relative to this script's location ---
SCRIPT_DIR = Path(__file__).parent.resolve()
CONFIG_DIR = SCRIPT_DIR / "config"
CONFIG_FILE = CONFIG_DIR / "config.yaml"
# --- End Paths ---

DEFAULTS: Dict[str, Any] = {
    "dungeon_width": 12,
    "dungeon_height": 8,
    "dungeon_seed": None,
    "coverage_ratio": 0.75,
    "max_passes": 1000,
    "display_mode": "visual",
    "log_level": "INFO",
    "json_logs": False,
}

EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_ENTROPY_FAILURE = 2
EXIT_STALLED = 3

log = structlog.get_logger()


# --- Config Loading Helpers ---
def load_yaml_config(config_path: Path, config_name: str) -> Dict[str, Any]:
    """Loads a generic YAML configuration file."""
    if not config_path.is_file():
        log.error(f"{config_name} config file not found", path=str(config_path))
        raise FileNotFoundError(
            f"{config_name} configuration file not found: {config_path}"
        )
    try:
        with config_path.open("r", encoding="utf-8") as f:
            config_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        log.error(
            f"Error parsing YAML for {config_name}",
            path=str(config_path),
            error=str(e),
        )
        raise
    if config_data is None:
        log.warning(f"{config_name} config file is empty.", path=str(config_path))
        return {}
    if not isinstance(config_data, dict):
        log.error(f"{config_name} config is not a mapping", path=str(config_path))
        raise ValueError(f"{config_name} configuration must be a mapping")
    log.debug(f"{config_name} config loaded", path=str(config_path))
    return config_data


def load_configs(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """Built-in defaults overlaid with the YAML file."""
    config = dict(DEFAULTS)
    config.update(load_yaml_config(config_path or CONFIG_FILE, "Main"))
    return config


# --- End Config Loading ---


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a random cell-maze dungeon and print it."
    )
    parser.add_argument("width", type=int, nargs="?", help="Grid width in cells.")
    parser.add_argument("height", type=int, nargs="?", help="Grid height in cells.")
    parser.add_argument(
        "--seed", type=int, default=None, help="Seed for the RNG (default: entropy)."
    )
    parser.add_argument(
        "--mode", choices=RENDER_MODES, default=None, help="Output format."
    )
    parser.add_argument(
        "--coverage",
        type=float,
        default=None,
        help="Share of the grid to discover before stopping.",
    )
    parser.add_argument(
        "--max-passes",
        type=int,
        default=None,
        help="Frontier sweeps allowed before reporting a stall (0 = unlimited).",
    )
    parser.add_argument(
        "--config", type=Path, default=CONFIG_FILE, help="YAML config file."
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        default=None,
        help="Logging level",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def merge_args(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Command line values override the loaded config."""
    merged = dict(config)
    overrides = {
        "dungeon_width": args.width,
        "dungeon_height": args.height,
        "dungeon_seed": args.seed,
        "display_mode": args.mode,
        "coverage_ratio": args.coverage,
        "log_level": args.log_level,
    }
    merged.update({k: v for k, v in overrides.items() if v is not None})
    if args.max_passes is not None:
        merged["max_passes"] = args.max_passes or None
    if args.verbose:
        merged["log_level"] = "DEBUG"
    return merged


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point; returns the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(logging.WARNING)

    try:
        config = merge_args(load_configs(args.config), args)
        level = getattr(logging, str(config["log_level"]).upper(), logging.INFO)
        setup_logging(level, json_output=bool(config["json_logs"]))
        gen_config = GeneratorConfig.from_mapping(config)
        width = int(config["dungeon_width"])
        height = int(config["dungeon_height"])
        seed = config["dungeon_seed"]
        rng = DungeonRNG(seed=None if seed is None else int(seed))
        log.info("Using dungeon seed", seed=rng.initial_seed)
        grid = generate_dungeon(width, height, rng=rng, config=gen_config)
        output = render(grid, str(config["display_mode"]))
    except (FileNotFoundError, yaml.YAMLError) as e:
        log.critical("Configuration could not be loaded", error=str(e))
        return EXIT_CONFIG_ERROR
    except (KeyError, TypeError, ValueError) as e:
        log.critical("Invalid configuration", error=str(e))
        return EXIT_CONFIG_ERROR
    except EntropyError as e:
        log.critical("Fatal entropy failure", error=str(e))
        return EXIT_ENTROPY_FAILURE
    except GenerationStalled as e:
        log.error(
            "Generation gave up",
            covered=e.covered,
            area=e.area,
            passes=e.passes,
        )
        return EXIT_STALLED

    print(output)
    log.info("Dungeon printed", draws=rng.draws, coverage=round(grid.coverage, 3))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
