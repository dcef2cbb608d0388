"""
Bird Physics
============

Fixed-step point-mass integration for the bird. One call is one tick;
there is no wall-clock time step.
"""

from __future__ import annotations

from typing import Optional

from flappy_arcade.flappy_core.config_loader import GameConfig, get_config
from flappy_arcade.flappy_core.entities import Bird, FlapPhase


class BirdPhysics:
    """
    Advances the bird under constant gravity.

    Velocity is integrated before position (semi-implicit Euler), so a flap
    followed by one tick moves the bird by ``jump_velocity + gravity``.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize physics.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._gravity = config.physics.gravity
        self._jump_velocity = config.physics.jump_velocity
        self._max_tilt = config.physics.max_tilt
        self._tilt_divisor = config.physics.tilt_divisor

    def step(self, bird: Bird) -> None:
        """Advance ``bird`` by one tick in place."""
        bird.vy += self._gravity
        bird.y += bird.vy
        bird.phase = self.select_phase(bird.vy)
        bird.rot = self.tilt(bird.vy)

    def select_phase(self, vy: float) -> FlapPhase:
        """
        Wing pose for a vertical velocity.

        The first branch catches every velocity at or above the jump velocity,
        which is all of them once play starts; the other two only trigger for
        velocities below it.
        """
        if vy >= self._jump_velocity:
            return FlapPhase.FALLING_FAST
        elif vy < 0:
            return FlapPhase.RISING
        else:
            return FlapPhase.NEUTRAL

    def tilt(self, vy: float) -> float:
        """Presentation tilt in radians, clamped from above only."""
        return min(self._max_tilt, vy / self._tilt_divisor)

    def flap(self, bird: Bird) -> None:
        """Overwrite the vertical velocity with the jump impulse."""
        bird.vy = self._jump_velocity
