from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies:
1. Mapping of CLI flags to configuration keys.
2. Unset options map to None so persisted values survive the merge.
3. The --log-file optional value semantics.
"""

import pytest

from dirmap.interface.cli.args import args_to_overrides, build_parser


def parse_args(arg_list):
    """Helper to simulate CLI argument parsing."""
    parser = build_parser()
    return parser.parse_args(arg_list)


def test_cli_positional_start_path():
    args = parse_args(["/data/photos"])

    overrides = args_to_overrides(args)

    assert overrides["start_path"] == "/data/photos"


def test_cli_tuning_options():
    args = parse_args(["src", "-o", "out.map", "--level", "9", "--workers", "4"])

    overrides = args_to_overrides(args)

    assert overrides["output_path"] == "out.map"
    assert overrides["compression_level"] == 9
    assert overrides["max_workers"] == 4


def test_cli_defaults_are_none_in_overrides():
    args = parse_args([])
    overrides = args_to_overrides(args)

    assert overrides["start_path"] is None
    assert overrides["output_path"] is None
    assert overrides["compression_level"] is None
    assert "log_level" not in overrides


def test_cli_debug_flag_sets_level():
    overrides = args_to_overrides(parse_args(["--debug", "x"]))

    assert overrides["log_level"] == "DEBUG"


def test_cli_inspect_and_flags():
    args = parse_args(["--inspect", "map", "--json", "--use-defaults"])

    assert args.inspect_path == "map"
    assert args.json_output is True
    assert args.use_defaults is True
    assert args.start_path is None


def test_cli_save_config_flag():
    assert parse_args(["x", "--save-config"]).save_config is True
    assert parse_args(["x"]).save_config is False


def test_cli_log_file_optional_value():
    assert parse_args([]).log_file is None
    assert parse_args(["x", "--log-file"]).log_file == ""
    assert parse_args(["x", "--log-file", "run.log"]).log_file == "run.log"


def test_cli_rejects_non_numeric_level():
    with pytest.raises(SystemExit):
        parse_args(["x", "--level", "fast"])
