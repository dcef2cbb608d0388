"""
Pipe Manager
============

Spawns pipes at a fixed cadence, scrolls them left, retires the ones that
left the screen and credits the bird for each pipe it clears.
"""

from __future__ import annotations

import random
from typing import List, Optional

from flappy_arcade.flappy_core.config_loader import GameConfig, get_config
from flappy_arcade.flappy_core.entities import Pipe, Session
from flappy_arcade.flappy_core.scoring import ScoreEvent
from flappy_arcade.flappy_core.signals import Signal, SignalBus


class PipeManager:
    """
    Owns the pipe lifecycle for a session.

    Pipes are appended at the right edge and only ever removed from the
    front, and they all move at the same speed, so the sequence stays sorted
    by x without any explicit sorting.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize pipe manager.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for gap placement. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)

        self._board_width = config.board.width
        self._pipe_width = config.pipe.width
        self._gap = config.pipe.gap
        self._distance = config.pipe.distance
        self._scroll_speed = config.pipe.scroll_speed
        self._gap_low, self._gap_high = config.gap_top_range

    def reseed(self, seed: Optional[int]) -> None:
        """Restart gap placement from a new seed."""
        self._rng = random.Random(seed)

    def random_gap_top(self) -> int:
        """Uniform integer gap top keeping the whole gap in the playable area."""
        return self._rng.randrange(self._gap_low, self._gap_high)

    def spawn(self, session: Session) -> Pipe:
        """Append a new pipe at the right edge of the screen."""
        top = self.random_gap_top()
        pipe = Pipe(x=float(self._board_width), top=float(top), bottom=float(top + self._gap))
        session.pipes.append(pipe)
        return pipe

    def update(self, session: Session, bus: Optional[SignalBus] = None) -> List[ScoreEvent]:
        """
        Run one tick of pipe logic.

        Args:
            session: Session whose pipes and score are updated.
            bus: Receives a POINT signal per cleared pipe.

        Returns:
            Score events awarded this tick.
        """
        session.spawn_timer += 1
        if session.spawn_timer > self._distance:
            self.spawn(session)
            session.spawn_timer = 0

        for pipe in session.pipes:
            pipe.x -= self._scroll_speed

        # Front only: everything behind it is further right
        if session.pipes and session.pipes[0].x < -self._pipe_width:
            session.pipes.popleft()

        return self._credit_passes(session, bus)

    def _credit_passes(self, session: Session, bus: Optional[SignalBus]) -> List[ScoreEvent]:
        """Score every unscored pipe whose trailing edge the bird has passed."""
        events = []
        bird_x = session.bird.x
        for pipe in session.pipes:
            if not pipe.scored and bird_x > pipe.x + self._pipe_width:
                pipe.scored = True
                events.append(session.scorer.apply_pass(session.frame))
                if bus is not None:
                    bus.publish(Signal.POINT)
        return events
