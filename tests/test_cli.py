"""Tests for the grid-snake CLI."""

import json

from grid_snake.cli import _build_parser, main


class TestCLIParser:
    def test_no_command_returns_1(self):
        assert main([]) == 1

    def test_simulate_defaults(self):
        args = _build_parser().parse_args(["simulate"])
        assert args.command == "simulate"
        assert args.config is None
        assert args.games == 10
        assert args.rows is None

    def test_simulate_with_flags(self):
        args = _build_parser().parse_args([
            "simulate",
            "--games", "3",
            "--rows", "12",
            "--cols", "14",
            "--consumption-timing", "post_step",
        ])
        assert args.games == 3
        assert args.rows == 12
        assert args.cols == 14
        assert args.consumption_timing == "post_step"

    def test_serve_defaults(self):
        args = _build_parser().parse_args(["serve"])
        assert args.host == "127.0.0.1"
        assert args.port == 8000


class TestCLICommands:
    def test_simulate_short_run(self, capsys):
        result = main([
            "simulate", "--games", "2", "--rows", "8", "--cols", "8",
            "--initial-length", "3", "--max-ticks", "50",
        ])
        assert result == 0
        assert "Simulation: 2 games" in capsys.readouterr().out

    def test_simulate_invalid_settings(self):
        assert main(["simulate", "--cols", "4", "--initial-length", "9"]) == 2

    def test_config_written_and_loadable(self, tmp_path):
        path = tmp_path / "cfg.json"
        assert main(["config", str(path)]) == 0
        data = json.loads(path.read_text())
        assert data["rows"] == 48

        assert main([
            "simulate", "--config", str(path), "--games", "1",
            "--max-ticks", "10",
        ]) == 0
