from __future__ import annotations

"""
Unit tests for the CLI Application Controller.

Exercises exit code mapping and configuration merging without spawning
a subprocess; the engine is patched where the outcome must be forced.
"""

from pathlib import Path
from unittest.mock import patch

from dirmap.domain.config import load_config
from dirmap.domain.results import create_error_result
from dirmap.interface.cli import app


def test_merge_config_ignores_none_and_unknown_keys() -> None:
    base = {"start_path": "", "output_path": "map", "compression_level": 3}

    merged = app._merge_config(base, {"start_path": "data", "output_path": None, "bogus": 1})

    assert merged == {"start_path": "data", "output_path": "map", "compression_level": 3}
    assert base["start_path"] == ""


def test_format_size() -> None:
    assert app._format_size(512) == "512 B"
    assert app._format_size(2048) == "2.0 KiB (2,048 B)"
    assert app._format_size(3 * 1024 ** 3).startswith("3.0 GiB")


def test_main_success(sample_tree: Path, tmp_path: Path, capsys) -> None:
    output = tmp_path / "map"

    code = app.main([str(sample_tree), "-o", str(output), "--use-defaults"])

    assert code == app.EXIT_OK
    assert output.exists()
    assert "Snapshot written" in capsys.readouterr().out


def test_main_reports_engine_failure(sample_tree: Path, capsys) -> None:
    failed = create_error_result("boom", {"start_path": str(sample_tree)})

    with patch("dirmap.interface.cli.app.run_mapping", return_value=failed):
        code = app.main([str(sample_tree), "--use-defaults"])

    assert code == app.EXIT_FAILURE
    assert "ERROR: boom" in capsys.readouterr().err


def test_main_interrupted(sample_tree: Path) -> None:
    with patch("dirmap.interface.cli.app.run_mapping", side_effect=KeyboardInterrupt):
        assert app.main([str(sample_tree), "--use-defaults"]) == app.EXIT_INTERRUPTED


def test_main_unexpected_exception(sample_tree: Path) -> None:
    with patch("dirmap.interface.cli.app.run_mapping", side_effect=RuntimeError("kaput")):
        assert app.main([str(sample_tree), "--use-defaults"]) == app.EXIT_FAILURE


def test_main_missing_start_path(tmp_path: Path) -> None:
    assert app.main([str(tmp_path / "absent"), "--use-defaults"]) == app.EXIT_USAGE


def test_main_uses_persisted_config(sample_tree: Path, tmp_path: Path) -> None:
    persisted = {"start_path": str(sample_tree), "output_path": str(tmp_path / "persisted.map")}

    with patch("dirmap.interface.cli.app.load_config", return_value=persisted):
        code = app.main([])

    assert code == app.EXIT_OK
    assert (tmp_path / "persisted.map").exists()


def test_main_save_config_persists_effective_settings(tmp_path: Path) -> None:
    code = app.main(["some_dir", "--level", "9", "--save-config", "--dump-config", "--use-defaults"])

    assert code == app.EXIT_OK
    persisted = load_config()
    assert persisted["compression_level"] == 9
    assert persisted["start_path"] == "some_dir"


def test_saved_config_drives_next_run(sample_tree: Path, tmp_path: Path) -> None:
    output = tmp_path / "saved.map"
    assert app.main([str(sample_tree), "-o", str(output), "--save-config", "--dump-config"]) == app.EXIT_OK

    assert app.main([]) == app.EXIT_OK
    assert output.exists()
