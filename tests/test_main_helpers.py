import json
import logging

import pytest
import structlog
import yaml

import main
from main import (
    EXIT_CONFIG_ERROR,
    EXIT_OK,
    EXIT_STALLED,
    build_parser,
    load_configs,
    load_yaml_config,
    merge_args,
)
from utils.logging_utils import setup_logging


def _write_config(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_load_shipped_config():
    configs = load_configs()
    assert configs["dungeon_width"] >= 1
    assert configs["coverage_ratio"] == 0.75
    assert configs["display_mode"] in ("visual", "raw")


def test_load_yaml_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_yaml_config(tmp_path / "nope.yaml", "Main")


def test_load_yaml_config_empty_file(tmp_path):
    assert load_yaml_config(_write_config(tmp_path, ""), "Main") == {}


def test_load_yaml_config_bad_yaml(tmp_path):
    with pytest.raises(yaml.YAMLError):
        load_yaml_config(_write_config(tmp_path, "width: [1, 2"), "Main")


def test_load_yaml_config_requires_mapping(tmp_path):
    with pytest.raises(ValueError):
        load_yaml_config(_write_config(tmp_path, "- 1\n- 2\n"), "Main")


def test_command_line_overrides_config(tmp_path):
    path = _write_config(tmp_path, "dungeon_width: 4\ndungeon_height: 4\n")
    args = build_parser().parse_args(
        ["9", "3", "--seed", "5", "--mode", "raw", "--max-passes", "0", "-v"]
    )
    merged = merge_args(load_configs(path), args)
    assert merged["dungeon_width"] == 9
    assert merged["dungeon_height"] == 3
    assert merged["dungeon_seed"] == 5
    assert merged["display_mode"] == "raw"
    assert merged["max_passes"] is None
    assert merged["log_level"] == "DEBUG"
    # Untouched keys fall back to defaults
    assert merged["coverage_ratio"] == 0.75


def test_main_prints_dungeon(tmp_path, capsys):
    path = _write_config(tmp_path, "log_level: WARNING\n")
    code = main.main(["3", "2", "--seed", "1", "--config", str(path)])
    assert code == EXIT_OK
    out = capsys.readouterr().out.rstrip("\n").split("\n")
    assert len(out) == 6
    assert all(len(line) == 9 for line in out)
    assert sum(line.count("E") for line in out) == 1


def test_main_raw_output(tmp_path, capsys):
    path = _write_config(tmp_path, "log_level: WARNING\n")
    code = main.main(["1", "1", "--mode", "raw", "--config", str(path)])
    assert code == EXIT_OK
    assert capsys.readouterr().out.strip() == "48"


def test_main_reports_config_errors(tmp_path):
    assert main.main(["--config", str(tmp_path / "missing.yaml")]) == EXIT_CONFIG_ERROR
    path = _write_config(tmp_path, "log_level: WARNING\n")
    assert main.main(["0", "3", "--config", str(path)]) == EXIT_CONFIG_ERROR
    assert main.main(["3", "3", "--coverage", "2", "--config", str(path)]) == (
        EXIT_CONFIG_ERROR
    )


def test_main_reports_stall(tmp_path, monkeypatch):
    class LowRNG:
        initial_seed = 0
        draws = 0

        def __init__(self, seed=None):
            pass

        def next_int(self, min_value, max_value):
            return min_value

    monkeypatch.setattr(main, "DungeonRNG", LowRNG)
    path = _write_config(tmp_path, "log_level: WARNING\nmax_passes: 3\n")
    assert main.main(["4", "4", "--config", str(path)]) == EXIT_STALLED


def test_setup_logging_json_goes_to_stderr(capsys):
    setup_logging(logging.INFO, json_output=True)
    structlog.get_logger("dungeon.test").info("hello", covered=3)
    captured = capsys.readouterr()
    assert captured.out == ""
    record = json.loads(captured.err.strip().splitlines()[-1])
    assert record["event"] == "hello"
    assert record["covered"] == 3
    assert record["level"] == "info"
