"""
Tests for pipe spawning, scrolling, retirement and scoring.
"""

import pytest

from flappy_arcade.flappy_core.config_loader import load_config
from flappy_arcade.flappy_core.entities import Pipe, Session
from flappy_arcade.flappy_core.pipes import PipeManager
from flappy_arcade.flappy_core.signals import Signal, SignalBus, SignalEvent


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def session(config):
    return Session(config)


@pytest.fixture
def manager(config):
    return PipeManager(config, seed=42)


@pytest.fixture
def bus():
    return SignalBus()


def make_pipe(x, top=150.0, gap=100.0):
    return Pipe(x=x, top=top, bottom=top + gap)


class TestSpawning:
    """Test spawn cadence and placement."""

    def test_gap_top_range(self, config):
        """Reference bounds are [40, 260)."""
        assert config.gap_top_range == (40, 260)

    def test_gap_always_in_bounds(self, manager, session, config):
        low, high = config.gap_top_range
        for _ in range(500):
            pipe = manager.spawn(session)
            assert low <= pipe.top < high
            assert pipe.top == int(pipe.top)
            assert pipe.bottom == pipe.top + config.pipe.gap
            assert pipe.bottom <= config.floor_y

    def test_spawn_at_right_edge(self, manager, session, config):
        pipe = manager.spawn(session)
        assert pipe.x == config.board.width
        assert not pipe.scored

    def test_no_spawn_until_timer_exceeds_distance(self, manager, session, config):
        """The timer must strictly exceed the distance before a spawn."""
        for _ in range(config.pipe.distance):
            manager.update(session)
        assert len(session.pipes) == 0
        assert session.spawn_timer == config.pipe.distance

        manager.update(session)
        assert len(session.pipes) == 1
        assert session.spawn_timer == 0

    def test_spawned_pipe_moves_on_its_first_tick(self, manager, session, config):
        for _ in range(config.pipe.distance + 1):
            manager.update(session)
        assert session.pipes[0].x == config.board.width - config.pipe.scroll_speed

    def test_deterministic_with_seed(self, config):
        s1, s2 = Session(config), Session(config)
        m1, m2 = PipeManager(config, seed=7), PipeManager(config, seed=7)
        tops1 = [m1.spawn(s1).top for _ in range(30)]
        tops2 = [m2.spawn(s2).top for _ in range(30)]
        assert tops1 == tops2

    def test_reseed_restarts_sequence(self, manager, session):
        first = [manager.spawn(session).top for _ in range(10)]
        manager.reseed(42)
        again = [manager.spawn(session).top for _ in range(10)]
        assert first == again


class TestScrolling:
    """Test scrolling and FIFO retirement."""

    def test_all_pipes_shift_left(self, manager, session, config):
        session.pipes.extend([make_pipe(100.0), make_pipe(200.0)])
        manager.update(session)
        speed = config.pipe.scroll_speed
        assert [p.x for p in session.pipes] == [100.0 - speed, 200.0 - speed]

    def test_front_retired_once_fully_off_screen(self, manager, session, config):
        width = config.pipe.width
        session.pipes.append(make_pipe(-width + 1))
        manager.update(session)
        # x == -width - 1, trailing edge is past the left boundary
        assert len(session.pipes) == 0

    def test_front_kept_while_trailing_edge_visible(self, manager, session, config):
        width = config.pipe.width
        session.pipes.append(make_pipe(-width + 2))
        manager.update(session)
        # x == -width, not strictly past the boundary yet
        assert len(session.pipes) == 1

    def test_only_front_retired_per_tick(self, manager, session):
        session.pipes.extend([make_pipe(-60.0), make_pipe(-55.0)])
        manager.update(session)
        assert len(session.pipes) == 1
        assert session.pipes[0].x == -57.0

        manager.update(session)
        assert len(session.pipes) == 0

    def test_sorted_and_front_non_increasing(self, manager, session):
        """Pipes stay sorted; the front x only decreases until it is retired."""
        previous_front = None
        for _ in range(3000):
            front_before = session.pipes[0] if session.pipes else None
            manager.update(session)

            xs = [p.x for p in session.pipes]
            assert xs == sorted(xs)

            if front_before is not None and session.pipes and session.pipes[0] is front_before:
                assert front_before.x <= previous_front
            if session.pipes:
                previous_front = session.pipes[0].x


class TestScoring:
    """Test pass credit."""

    def test_pass_scores_once(self, manager, session, bus):
        # After one tick x == 5 and the trailing edge (57) is behind the bird (60)
        session.pipes.append(make_pipe(7.0))

        events = manager.update(session, bus)
        assert len(events) == 1
        assert session.score == 1
        assert session.pipes[0].scored
        assert bus.drain() == [SignalEvent(Signal.POINT)]

        for _ in range(10):
            assert manager.update(session, bus) == []
        assert session.score == 1
        assert bus.drain() == []

    def test_no_score_before_trailing_edge(self, manager, session, bus):
        # After one tick the trailing edge sits exactly at the bird's x
        session.pipes.append(make_pipe(10.0))
        manager.update(session, bus)
        assert session.score == 0
        assert not session.pipes[0].scored

    def test_each_pipe_scores_independently(self, manager, session, bus):
        session.pipes.extend([make_pipe(0.0), make_pipe(5.0)])
        events = manager.update(session, bus)
        assert [e.total for e in events] == [1, 2]
        assert session.score == 2
        assert len(bus.drain()) == 2
