"""Tests for the GameConfig dataclass."""

import json

import pytest

from grid_snake.config import GameConfig
from grid_snake.snake import ConsumptionTiming


class TestGameConfig:
    def test_defaults(self):
        cfg = GameConfig()
        assert cfg.rows == 48
        assert cfg.cols == 48
        assert cfg.initial_length == 10
        assert cfg.tick_interval_ms == 100
        assert cfg.food_bonus == 10
        assert cfg.timing is ConsumptionTiming.PRE_STEP

    def test_custom_values(self):
        cfg = GameConfig(rows=10, cols=12, consumption_timing="post_step")
        assert cfg.rows == 10
        assert cfg.cols == 12
        assert cfg.timing is ConsumptionTiming.POST_STEP

    @pytest.mark.parametrize(
        "overrides",
        [
            {"rows": 1},
            {"cols": 1},
            {"initial_length": 0},
            {"cols": 5, "initial_length": 6},
            {"tick_interval_ms": 0},
            {"food_bonus": 0},
            {"max_placement_attempts": 0},
            {"consumption_timing": "sometimes"},
        ],
    )
    def test_invalid_values(self, overrides):
        with pytest.raises(ValueError):
            GameConfig(**overrides)

    def test_replace_validates(self):
        cfg = GameConfig()
        assert cfg.replace(rows=20).rows == 20
        with pytest.raises(ValueError):
            cfg.replace(initial_length=100)

    def test_save_and_load(self, tmp_path):
        cfg = GameConfig(rows=20, cols=30, seed=7, consumption_timing="post_step")
        path = tmp_path / "nested" / "config.json"
        cfg.save(path)
        assert path.exists()
        assert GameConfig.load(path) == cfg

    def test_to_dict_serializable(self):
        serialized = json.dumps(GameConfig().to_dict())
        assert isinstance(serialized, str)
