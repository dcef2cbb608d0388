"""
Entity State
============

Plain data for the bird, the pipes and the session aggregate that owns them.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import IntEnum
from typing import Deque, Optional

from flappy_arcade.flappy_core.config_loader import GameConfig, get_config
from flappy_arcade.flappy_core.scoring import ScoreTracker


class GameState(IntEnum):
    """Lifecycle of one play-through."""
    IDLE = 0
    PLAYING = 1
    ENDED = 2


class FlapPhase(IntEnum):
    """Wing pose shown by the presentation layer."""
    RISING = 0        # upflap
    FALLING_FAST = 1  # downflap
    NEUTRAL = 2       # midflap


@dataclass
class Bird:
    """The falling actor. Collision uses a circle of ``radius`` at (x, y)."""
    x: float
    y: float
    radius: float
    vy: float = 0.0
    phase: FlapPhase = FlapPhase.RISING
    rot: float = 0.0


@dataclass
class Pipe:
    """A top/bottom pipe pair; ``x`` is the left edge."""
    x: float
    top: float
    bottom: float
    scored: bool = False


class Session:
    """
    Aggregate state of one play-through.

    Owns the bird, the pipe sequence (spawn order, which is also ascending x),
    the score, the spawn timer, the frame counter and the cosmetic ground
    offset. Components mutate it in place; the only method here is reset().
    """

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self.state = GameState.IDLE
        self.scorer = ScoreTracker()
        self.pipes: Deque[Pipe] = deque()
        self.bird = self._spawn_bird()
        self.spawn_timer: int = 0
        self.frame: int = 0
        self.ground_offset: float = 0.0

    def _spawn_bird(self) -> Bird:
        return Bird(
            x=self._config.bird.x,
            y=self._config.board.center_y,
            radius=self._config.bird.radius
        )

    @property
    def score(self) -> int:
        """Current score."""
        return self.scorer.score

    def reset(self) -> None:
        """
        Reinitialize the session for a new play-through.

        The bird returns to its spawn pose (vertically centred, at rest), pipes
        are cleared, score, spawn timer, frame counter and ground offset go back
        to zero. The lifecycle state is left to the caller.
        """
        self.bird = self._spawn_bird()
        self.pipes.clear()
        self.scorer.reset()
        self.spawn_timer = 0
        self.frame = 0
        self.ground_offset = 0.0
