"""
Collision Detection
===================

Circle-versus-pipe and circle-versus-floor tests that end the game.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from flappy_arcade.flappy_core.config_loader import GameConfig, get_config
from flappy_arcade.flappy_core.entities import Bird, GameState, Pipe, Session
from flappy_arcade.flappy_core.signals import Signal, SignalBus


@dataclass
class CollisionResult:
    """Result of one collision pass."""
    pipe_hits: List[int] = field(default_factory=list)  # indices into session.pipes
    floor_hit: bool = False

    @property
    def collided(self) -> bool:
        return self.floor_hit or len(self.pipe_hits) > 0

    @property
    def hit_count(self) -> int:
        return len(self.pipe_hits) + (1 if self.floor_hit else 0)


class CollisionDetector:
    """
    Tests the bird against every pipe and the floor.

    Pipe tests never stop at the first hit, so a bird touching two pipes at
    once produces two hit cues. Ending the game is idempotent.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize collision detector.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._pipe_width = config.pipe.width
        self._floor_y = config.floor_y
        self._die_delay = config.audio.die_delay

    def overlaps_horizontally(self, bird: Bird, pipe: Pipe) -> bool:
        return bird.x + bird.radius > pipe.x and bird.x - bird.radius < pipe.x + self._pipe_width

    def hits_pipe(self, bird: Bird, pipe: Pipe) -> bool:
        """True if the bird circle's bounds leave the gap while over the pipe."""
        if not self.overlaps_horizontally(bird, pipe):
            return False
        return bird.y - bird.radius < pipe.top or bird.y + bird.radius > pipe.bottom

    def hits_floor(self, bird: Bird) -> bool:
        return bird.y + bird.radius > self._floor_y

    def check(self, session: Session, bus: Optional[SignalBus] = None) -> CollisionResult:
        """
        Run all collision tests and apply their consequences.

        Any hit moves the session to ENDED and publishes HIT now and DIE after
        the configured delay. A floor hit also clamps the bird onto the floor.

        Args:
            session: Session to test and update.
            bus: Receives the hit/die cues.

        Returns:
            CollisionResult listing what was hit.
        """
        result = CollisionResult()
        bird = session.bird

        for index, pipe in enumerate(session.pipes):
            if self.hits_pipe(bird, pipe):
                result.pipe_hits.append(index)
                self._end(session, bus)

        if self.hits_floor(bird):
            bird.y = self._floor_y - bird.radius
            result.floor_hit = True
            self._end(session, bus)

        return result

    def _end(self, session: Session, bus: Optional[SignalBus]) -> None:
        session.state = GameState.ENDED
        if bus is not None:
            bus.publish(Signal.HIT)
            bus.publish(Signal.DIE, delay=self._die_delay)
