"""
Tests for the game state machine and full-tick behaviour.
"""

import threading

import pytest

from flappy_arcade.flappy_core.config_loader import load_config
from flappy_arcade.flappy_core.entities import GameState, Pipe
from flappy_arcade.flappy_core.game import CoreGame
from flappy_arcade.flappy_core.signals import Signal


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    return CoreGame(config=config, seed=42)


def signals_of(game):
    return [e.signal for e in game.drain_signals()]


def hover(game):
    """Arrange for the next physics step to leave the bird where it is."""
    game.bird.vy = -game.config.physics.gravity


def assert_fresh(game, config):
    assert game.score == 0
    assert len(game.session.pipes) == 0
    assert game.bird.y == config.board.center_y
    assert game.bird.vy == 0.0
    assert game.session.spawn_timer == 0


class TestLifecycle:
    """Test idle/playing/ended transitions."""

    def test_starts_idle(self, game, config):
        assert game.state == GameState.IDLE
        assert_fresh(game, config)

    def test_idle_activate_starts_and_flaps(self, game, config):
        state = game.activate()
        assert state == GameState.PLAYING
        assert game.bird.vy == config.physics.jump_velocity
        assert signals_of(game) == [Signal.FLAP]

    def test_idle_activate_resets_session(self, game, config):
        game.session.pipes.append(Pipe(x=100.0, top=100.0, bottom=200.0))
        game.session.scorer.apply_pass()
        game.activate()
        assert game.score == 0
        assert len(game.session.pipes) == 0
        assert game.bird.y == config.board.center_y

    def test_playing_activate_flaps_without_reset(self, game, config):
        game.activate()
        for _ in range(10):
            game.tick()
        game.drain_signals()
        y = game.bird.y

        game.activate()
        assert game.state == GameState.PLAYING
        assert game.bird.vy == config.physics.jump_velocity
        assert game.bird.y == y
        assert game.frame == 10
        assert signals_of(game) == [Signal.FLAP]

    def test_ended_activate_returns_to_idle(self, game, config):
        game.activate()
        while game.state == GameState.PLAYING:
            game.tick()
        game.drain_signals()

        state = game.activate()
        assert state == GameState.IDLE
        assert_fresh(game, config)
        assert signals_of(game) == [Signal.SWOOSH]

    def test_ended_ignores_ticks(self, game):
        game.activate()
        while game.state == GameState.PLAYING:
            game.tick()
        y, vy = game.bird.y, game.bird.vy

        for _ in range(20):
            result = game.tick()
            assert result.collision is None
        assert game.state == GameState.ENDED
        assert (game.bird.y, game.bird.vy) == (y, vy)

    def test_full_cycle(self, game):
        assert game.activate() == GameState.PLAYING
        while game.state == GameState.PLAYING:
            game.tick()
        assert game.activate() == GameState.IDLE
        assert game.activate() == GameState.PLAYING

    def test_reset_returns_idle_snapshot(self, game):
        game.activate()
        for _ in range(5):
            game.tick()
        snapshot = game.reset()
        assert snapshot.state == GameState.IDLE
        assert snapshot.score == 0
        assert snapshot.pipes == ()
        assert game.drain_signals() == []


class TestTick:
    """Test what one tick does."""

    def test_gravity_accumulates_while_playing(self, game, config):
        game.activate()
        previous = game.bird.vy
        for _ in range(30):
            game.tick()
            assert game.bird.vy == previous + config.physics.gravity
            previous = game.bird.vy

    def test_falls_to_floor_without_input(self, game, config):
        game.activate()
        ticks = 0
        while game.state == GameState.PLAYING:
            game.tick()
            ticks += 1
            assert ticks < 200
        assert game.bird.y == config.floor_y - config.bird.radius
        signals = signals_of(game)
        assert signals[-2:] == [Signal.HIT, Signal.DIE]

    def test_ground_scrolls_in_every_state(self, game, config):
        width = config.board.width
        speed = config.ground.scroll_speed

        game.tick()
        assert game.session.ground_offset == (-speed) % width

        game.activate()
        offsets = []
        for _ in range(3):
            game.tick()
            offsets.append(game.session.ground_offset)
        assert offsets == [(-speed * n) % width for n in (1, 2, 3)]

        while game.state == GameState.PLAYING:
            game.tick()
        before = game.session.ground_offset
        game.tick()
        assert game.session.ground_offset == (before - speed) % width

    def test_ground_offset_wraps(self, game, config):
        for _ in range(1000):
            game.tick()
            assert 0 <= game.session.ground_offset < config.board.width

    def test_ended_this_tick_only_on_the_crash(self, game):
        game.activate()
        results = []
        while game.state == GameState.PLAYING:
            results.append(game.tick())
        assert results[-1].ended_this_tick
        assert not any(r.ended_this_tick for r in results[:-1])
        assert not game.tick().ended_this_tick

    def test_frame_counts_every_tick(self, game):
        for _ in range(7):
            game.tick()
        assert game.frame == 7

    def test_tick_reports_score_delta(self, game, config):
        game.activate()
        game.session.pipes.append(Pipe(x=7.0, top=200.0, bottom=300.0))
        hover(game)
        result = game.tick()
        assert result.delta_score == 1
        assert len(result.score_events) == 1
        assert Signal.POINT in signals_of(game)


class TestScenarios:
    """End-to-end scenarios."""

    def test_idle_ticks_change_nothing(self, game, config):
        """400 idle ticks: still idle, no score, no pipes."""
        for _ in range(400):
            game.tick()
        assert game.state == GameState.IDLE
        assert game.score == 0
        assert len(game.session.pipes) == 0
        assert game.bird.y == config.board.center_y
        assert game.drain_signals() == []

    def test_spawn_cadence_and_scroll(self, game, config):
        """One spawn interval after the first pipe, it has scrolled a full interval."""
        interval = config.pipe.distance + 1
        speed = config.pipe.scroll_speed
        spawn_x = config.board.width - speed

        game.activate()
        for _ in range(interval):
            hover(game)
            game.tick()
        assert len(game.session.pipes) == 1
        assert game.session.pipes[0].x == spawn_x

        first = game.session.pipes[0]
        for _ in range(interval):
            # Keep the bird in the first pipe's gap
            game.bird.y = (first.top + first.bottom) / 2
            hover(game)
            game.tick()

        assert game.state == GameState.PLAYING
        pipes = list(game.session.pipes)
        assert len(pipes) == 2
        assert pipes[0] is first
        assert first.x == spawn_x - interval * speed
        assert pipes[1].x == spawn_x
        assert game.score == 1

    def test_floor_collision_from_constructed_pose(self, game, config):
        game.activate()
        game.bird.vy = 0.0
        game.bird.y = config.floor_y - config.bird.radius + 1
        game.tick()
        assert game.state == GameState.ENDED
        assert game.bird.y == config.floor_y - config.bird.radius

    def test_two_quick_flaps(self, game, config):
        game.activate()
        for _ in range(5):
            game.tick()
        game.session.pipes.append(Pipe(x=200.0, top=100.0, bottom=200.0))
        game.session.scorer.apply_pass()

        game.activate()
        assert game.bird.vy == config.physics.jump_velocity
        game.activate()
        assert game.bird.vy == config.physics.jump_velocity

        assert game.score == 1
        assert len(game.session.pipes) == 1
        assert game.frame == 5


class TestSnapshotAndThreads:
    """Test read-only snapshots and serialized inputs."""

    def test_snapshot_is_detached(self, game):
        game.activate()
        game.session.pipes.append(Pipe(x=100.0, top=100.0, bottom=200.0))
        snapshot = game.snapshot()
        game.session.pipes[0].x = 0.0
        game.bird.y = 10.0
        assert snapshot.pipes[0].x == 100.0
        assert snapshot.bird_y != 10.0

    def test_every_activate_emits_one_cue_under_contention(self, game):
        """Inputs from other threads never interleave with a tick."""
        threads_count, per_thread, ticks = 4, 500, 500

        def flapper():
            for _ in range(per_thread):
                game.activate()

        threads = [threading.Thread(target=flapper) for _ in range(threads_count)]
        for t in threads:
            t.start()
        for _ in range(ticks):
            game.tick()
        for t in threads:
            t.join()

        signals = signals_of(game)
        input_cues = [s for s in signals if s in (Signal.FLAP, Signal.SWOOSH)]
        assert len(input_cues) == threads_count * per_thread
        # HIT and DIE only ever come in pairs from a tick
        assert signals.count(Signal.HIT) == signals.count(Signal.DIE)

    def test_info_matches_snapshot(self, game):
        game.activate()
        for _ in range(3):
            game.tick()
        info = game.get_info()
        snapshot = game.snapshot()
        assert info["frame"] == snapshot.frame == 3
        assert info["state"] == "playing"
        assert info["bird_y"] == snapshot.bird_y
        assert info["pipe_count"] == 0
