"""Tests for the GameSession module."""

import json

import numpy as np

from grid_snake.collision import Collision
from grid_snake.config import GameConfig
from grid_snake.grid import CellType
from grid_snake.session import GameSession, Phase
from grid_snake.snake import Direction, Snake


def _running_session(config=None, seed=0):
    session = GameSession(config or GameConfig(seed=seed))
    session.start()
    return session


def _place_snake(session, cells, food):
    session.snake = Snake.from_cells(session.grid, cells)
    session.food = food


def _assert_consistent(session):
    body = session.body
    assert len(set(body)) == len(body)
    assert all(session.grid.in_bounds(seg) for seg in body)
    assert session.snake.occupied == {session.grid.key(seg) for seg in body}


class TestSessionInit:
    def test_default_state(self):
        session = GameSession(GameConfig(seed=0))
        state = session.state()
        assert state.phase is Phase.IDLE
        assert state.score == 0
        assert state.ticks == 0
        assert state.direction is Direction.RIGHT
        assert state.body == tuple((0, c) for c in range(10))
        assert state.head == (0, 9)
        assert (state.rows, state.cols) == (48, 48)

    def test_food_placed_off_snake(self):
        session = GameSession(GameConfig(seed=0))
        assert session.food is not None
        assert session.food not in session.body

    def test_state_is_json_serializable(self):
        session = _running_session()
        session.tick()
        serialized = json.dumps(session.to_dict())
        assert isinstance(serialized, str)

    def test_render(self):
        session = GameSession(GameConfig(seed=0))
        cells = session.render()
        assert cells[0, 9] == CellType.HEAD
        assert cells[session.food] == CellType.FOOD
        assert np.count_nonzero(cells == CellType.BODY) == 9


class TestSessionLifecycle:
    def test_start_enters_running(self):
        session = GameSession(GameConfig(seed=0))
        assert session.start()
        assert session.phase is Phase.RUNNING

    def test_start_twice_is_noop(self):
        session = _running_session()
        assert not session.start()
        assert session.phase is Phase.RUNNING

    def test_stop_pauses_and_clears_ticks(self):
        session = _running_session()
        session.tick()
        session.tick()
        assert session.ticks == 2
        assert session.stop()
        assert session.phase is Phase.STOPPED
        assert session.ticks == 0

    def test_stop_when_not_running(self):
        session = GameSession(GameConfig(seed=0))
        assert not session.stop()
        assert session.phase is Phase.IDLE

    def test_start_after_stop_resumes(self):
        session = _running_session()
        session.tick()
        body = session.body
        session.stop()
        session.start()
        assert session.phase is Phase.RUNNING
        assert session.body == body

    def test_start_after_game_over_resets(self):
        session = _running_session()
        session.set_direction(Direction.UP)
        session.tick()
        assert session.phase is Phase.GAME_OVER
        session.start()
        assert session.phase is Phase.RUNNING
        assert session.score == 0
        assert session.direction is Direction.RIGHT
        assert session.body == tuple((0, c) for c in range(10))

    def test_reset_any_time(self):
        session = _running_session()
        session.set_direction(Direction.DOWN)
        session.tick()
        state = session.reset()
        assert state.phase is Phase.IDLE
        assert state.direction is Direction.RIGHT
        assert state.ticks == 0
        assert state.body == tuple((0, c) for c in range(10))
        assert state.food not in state.body

    def test_reset_with_new_geometry(self):
        session = GameSession(GameConfig(seed=0))
        state = session.reset(rows=10, cols=12, initial_length=4)
        assert (state.rows, state.cols) == (10, 12)
        assert len(state.body) == 4
        # The new geometry sticks for later resets.
        assert session.reset().cols == 12


class TestSessionTickIdempotence:
    def test_tick_while_idle(self):
        session = GameSession(GameConfig(seed=0))
        before = session.state()
        result = session.tick()
        assert not result.moved
        assert not result.collided
        assert session.state() == before

    def test_tick_while_stopped(self):
        session = _running_session()
        session.stop()
        before = session.state()
        session.tick()
        assert session.state() == before

    def test_tick_after_game_over(self):
        session = _running_session()
        session.set_direction(Direction.UP)
        assert session.tick().collided
        before = session.state()
        for _ in range(3):
            result = session.tick()
            assert not result.collided
        assert session.state() == before


class TestSessionMovement:
    def test_basic_tick(self):
        session = _running_session()
        result = session.tick()
        assert result.moved
        assert not result.food_consumed
        assert session.head == (0, 10)
        assert session.ticks == 1

    def test_non_growth_drops_old_tail(self):
        session = _running_session()
        _place_snake(session, [(5, c) for c in range(5)], (40, 40))
        session.tick()
        assert len(session.body) == 5
        assert (5, 0) not in session.body
        assert session.body[0] == (5, 1)

    def test_direction_change(self):
        session = _running_session()
        session.set_direction(Direction.DOWN)
        session.tick()
        assert session.head == (1, 9)

    def test_reversal_ignored(self):
        session = _running_session()
        assert not session.set_direction(Direction.LEFT)
        session.tick()
        assert session.head == (0, 10)

    def test_can_follow_own_tail(self):
        session = _running_session()
        # Head at (1, 1) stepping down onto the tail, which moves away.
        _place_snake(session, [(2, 1), (2, 2), (1, 2), (1, 1)], (40, 40))
        session.set_direction(Direction.DOWN)
        result = session.tick()
        assert not result.collided
        assert session.head == (2, 1)
        _assert_consistent(session)


class TestSessionFood:
    def test_growth_law(self):
        session = _running_session()
        _place_snake(session, [(5, c) for c in range(5)], (5, 4))
        result = session.tick()
        assert result.food_consumed
        assert len(session.body) == 6
        assert session.score == 10
        assert session.food is not None
        assert session.food not in session.body
        _assert_consistent(session)

    def test_growth_keeps_old_tail(self):
        session = _running_session()
        _place_snake(session, [(5, c) for c in range(5)], (5, 4))
        session.tick()
        assert session.body[0] == (5, 0)
        assert session.head == (5, 5)

    def test_pre_step_food_is_eaten_one_tick_late(self):
        session = _running_session()
        _place_snake(session, [(5, c) for c in range(5)], (5, 5))
        first = session.tick()
        assert not first.food_consumed
        assert session.head == (5, 5)
        second = session.tick()
        assert second.food_consumed
        assert len(session.body) == 6

    def test_post_step_food_is_eaten_on_arrival(self):
        session = _running_session(GameConfig(seed=0, consumption_timing="post_step"))
        _place_snake(session, [(5, c) for c in range(5)], (5, 5))
        result = session.tick()
        assert result.food_consumed
        assert session.head == (5, 5)
        assert len(session.body) == 6

    def test_score_uses_configured_bonus(self):
        session = _running_session(GameConfig(seed=0, food_bonus=3))
        _place_snake(session, [(5, c) for c in range(5)], (5, 4))
        session.tick()
        assert session.score == 3


class TestSessionCollision:
    def test_wall_collision(self):
        session = _running_session()
        _place_snake(session, [(3, c) for c in range(38, 48)], (40, 0))
        before = session.body
        result = session.tick()
        assert result.collided
        assert result.collision is Collision.WALL
        assert not result.moved
        assert session.phase is Phase.GAME_OVER
        assert session.body == before

    def test_top_wall(self):
        session = _running_session()
        session.set_direction(Direction.UP)
        result = session.tick()
        assert result.collision is Collision.WALL

    def test_self_collision(self):
        session = _running_session()
        _place_snake(session, [(3, 1), (2, 1), (2, 2), (1, 2), (1, 1)], (40, 40))
        session.set_direction(Direction.DOWN)
        result = session.tick()
        assert result.collided
        assert result.collision is Collision.SELF
        assert session.phase is Phase.GAME_OVER

    def test_growing_into_own_tail_collides(self):
        session = _running_session()
        # The head sits on food, so the tail stays put this tick.
        _place_snake(session, [(2, 1), (2, 2), (1, 2), (1, 1)], (1, 1))
        session.set_direction(Direction.DOWN)
        result = session.tick()
        assert result.collision is Collision.SELF
        assert session.score == 0

    def test_collision_does_not_score(self):
        session = _running_session()
        _place_snake(session, [(0, c) for c in range(38, 48)], (0, 47))
        result = session.tick()
        assert result.collided
        assert not result.food_consumed
        assert session.score == 0


class TestSessionBoardFull:
    def test_filling_the_board_wins(self):
        config = GameConfig(
            rows=2, cols=2, initial_length=2, consumption_timing="post_step", seed=0,
        )
        session = _running_session(config)
        _place_snake(session, [(1, 0), (0, 0), (0, 1)], (1, 1))
        session.set_direction(Direction.DOWN)
        result = session.tick()
        assert result.food_consumed
        assert result.board_full
        assert session.phase is Phase.WON
        assert session.food is None
        assert len(session.body) == 4

    def test_start_after_win_resets(self):
        config = GameConfig(
            rows=2, cols=2, initial_length=2, consumption_timing="post_step", seed=0,
        )
        session = _running_session(config)
        _place_snake(session, [(1, 0), (0, 0), (0, 1)], (1, 1))
        session.set_direction(Direction.DOWN)
        session.tick()
        session.start()
        assert session.phase is Phase.RUNNING
        assert len(session.body) == 2
        assert session.food is not None


class TestSessionInvariants:
    def test_random_play_keeps_invariants(self):
        rng = np.random.default_rng(11)
        directions = list(Direction)
        config = GameConfig(rows=8, cols=8, initial_length=3, seed=11)
        session = GameSession(config)
        last_score = 0
        for _ in range(20):
            session.start()
            while session.phase is Phase.RUNNING:
                session.set_direction(directions[int(rng.integers(4))])
                session.tick()
                _assert_consistent(session)
                assert session.score >= last_score
                last_score = session.score
                if session.food is not None:
                    assert session.grid.in_bounds(session.food)
            last_score = 0


class TestEndToEnd:
    def test_post_step_scenario(self):
        session = _running_session(GameConfig(seed=5, consumption_timing="post_step"))
        session.food = (0, 10)
        result = session.tick()
        assert result.food_consumed
        assert len(session.body) == 11
        assert session.score == 10
        assert session.head == (0, 10)
        assert session.food not in session.body

    def test_pre_step_scenario(self):
        session = _running_session(GameConfig(seed=5))
        session.food = (0, 10)
        assert not session.tick().food_consumed
        result = session.tick()
        assert result.food_consumed
        assert len(session.body) == 11
        assert session.score == 10
        assert session.food not in session.body

    def test_same_seed_same_outcome(self):
        actions = [Direction.DOWN, Direction.DOWN, Direction.RIGHT, Direction.DOWN]
        assert self._run_game(123, actions) == self._run_game(123, actions)

    def test_different_seeds_differ(self):
        assert self._run_game(1, []) != self._run_game(2, [])

    @staticmethod
    def _run_game(seed, actions):
        session = _running_session(GameConfig(seed=seed))
        for action in actions:
            session.set_direction(action)
            session.tick()
        return session.to_dict()
