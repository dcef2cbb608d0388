"""
Tests for bird physics.
"""

import math

import pytest

from flappy_arcade.flappy_core.config_loader import load_config
from flappy_arcade.flappy_core.entities import Bird, FlapPhase
from flappy_arcade.flappy_core.physics import BirdPhysics


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def physics(config):
    return BirdPhysics(config)


@pytest.fixture
def bird(config):
    return Bird(x=config.bird.x, y=config.board.center_y, radius=config.bird.radius)


class TestStep:
    """Test one-tick integration."""

    def test_velocity_grows_by_gravity(self, physics, bird, config):
        """Each tick adds exactly one gravity step to vy."""
        previous = bird.vy
        for _ in range(50):
            physics.step(bird)
            assert bird.vy == previous + config.physics.gravity
            previous = bird.vy

    def test_position_uses_updated_velocity(self, physics, bird):
        """Velocity is integrated before position."""
        bird.vy = 1.0
        y_before = bird.y
        physics.step(bird)
        assert bird.vy == 1.25
        assert bird.y == y_before + 1.25

    def test_step_after_flap(self, physics, bird, config):
        """A flap then a tick moves by jump_velocity + gravity."""
        y_before = bird.y
        physics.flap(bird)
        physics.step(bird)
        expected = config.physics.jump_velocity + config.physics.gravity
        assert bird.vy == expected
        assert bird.y == y_before + expected

    def test_x_never_changes(self, physics, bird):
        """The bird has no horizontal motion."""
        x = bird.x
        for _ in range(20):
            physics.step(bird)
        assert bird.x == x


class TestFlap:
    """Test the jump impulse."""

    @pytest.mark.parametrize("prior", [-4.5, -2.0, 0.0, 3.75, 12.0])
    def test_flap_overwrites_velocity(self, physics, bird, config, prior):
        """Flap sets vy to the jump velocity whatever it was."""
        bird.vy = prior
        physics.flap(bird)
        assert bird.vy == config.physics.jump_velocity

    def test_flap_does_not_move_bird(self, physics, bird):
        y = bird.y
        physics.flap(bird)
        assert bird.y == y


class TestPresentationValues:
    """Test phase and tilt derived during the step."""

    def test_phase_after_flap_is_falling_fast(self, physics, bird):
        """Any velocity at or above the jump velocity selects the first branch."""
        physics.flap(bird)
        physics.step(bird)
        assert bird.vy < 0
        assert bird.phase == FlapPhase.FALLING_FAST

    def test_phase_boundaries(self, physics, config):
        jump = config.physics.jump_velocity
        assert physics.select_phase(jump) == FlapPhase.FALLING_FAST
        assert physics.select_phase(0.0) == FlapPhase.FALLING_FAST
        assert physics.select_phase(jump - 0.5) == FlapPhase.RISING

    def test_tilt_clamped_from_above(self, physics, config):
        assert physics.tilt(100.0) == config.physics.max_tilt
        assert math.isclose(config.physics.max_tilt, math.pi / 4)

    def test_tilt_not_clamped_from_below(self, physics):
        assert physics.tilt(-4.25) == pytest.approx(-0.425)
        assert physics.tilt(-40.0) == pytest.approx(-4.0)

    def test_step_sets_rot(self, physics, bird):
        bird.vy = 2.0
        physics.step(bird)
        assert bird.rot == pytest.approx(0.225)
