"""
Core Game
=========

Main game orchestrator: the idle/playing/ended state machine, driven by a
per-frame tick and a single activate input.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from flappy_arcade.flappy_core.config_loader import GameConfig, get_config
from flappy_arcade.flappy_core.entities import Bird, GameState, Session
from flappy_arcade.flappy_core.physics import BirdPhysics
from flappy_arcade.flappy_core.pipes import PipeManager
from flappy_arcade.flappy_core.collision import CollisionDetector, CollisionResult
from flappy_arcade.flappy_core.scoring import ScoreEvent
from flappy_arcade.flappy_core.signals import Signal, SignalBus, SignalEvent
from flappy_arcade.flappy_core.state_snapshot import SnapshotBuilder, GameSnapshot


@dataclass
class TickResult:
    """Result of a single tick."""
    state: GameState
    delta_score: int
    score_events: List[ScoreEvent]
    collision: Optional[CollisionResult]

    @property
    def ended_this_tick(self) -> bool:
        return self.collision is not None and self.collision.collided


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - Session state (bird, pipes, score)
    - Bird physics
    - Pipe spawning, scrolling and scoring
    - Collision detection
    - Signal emission for sounds
    - State snapshots

    tick() and activate() each run under one lock, so an input arriving from
    another thread is applied as a whole between two ticks.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize game.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for gap placement.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed
        self._lock = threading.Lock()

        # Initialize subsystems
        self._session = Session(config)
        self._physics = BirdPhysics(config)
        self._pipes = PipeManager(config, seed)
        self._collision = CollisionDetector(config)
        self._bus = SignalBus()
        self._snapshot_builder = SnapshotBuilder(config)

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def session(self) -> Session:
        """Live session (mutable; prefer snapshot() for reading)."""
        return self._session

    @property
    def state(self) -> GameState:
        return self._session.state

    @property
    def bird(self) -> Bird:
        return self._session.bird

    @property
    def score(self) -> int:
        """Current score."""
        return self._session.score

    @property
    def frame(self) -> int:
        return self._session.frame

    @property
    def is_over(self) -> bool:
        """True if game has ended."""
        return self._session.state == GameState.ENDED

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Return to the idle screen with a fresh session.

        Args:
            seed: New random seed. Keeps the current gap sequence if None.

        Returns:
            Initial game snapshot.
        """
        with self._lock:
            if seed is not None:
                self._seed = seed
                self._pipes.reseed(seed)
            self._session.reset()
            self._session.state = GameState.IDLE
            self._bus.clear()
            return self._snapshot_builder.build(self._session)

    def activate(self) -> GameState:
        """
        Handle the single user input (key, click or touch).

        IDLE starts a new run with an immediate flap, PLAYING flaps, ENDED
        returns to IDLE.

        Returns:
            State after the input.
        """
        with self._lock:
            session = self._session
            if session.state == GameState.IDLE:
                session.reset()
                session.state = GameState.PLAYING
                self._physics.flap(session.bird)
                self._bus.publish(Signal.FLAP)
            elif session.state == GameState.PLAYING:
                self._physics.flap(session.bird)
                self._bus.publish(Signal.FLAP)
            elif session.state == GameState.ENDED:
                session.reset()
                session.state = GameState.IDLE
                self._bus.publish(Signal.SWOOSH)
            return session.state

    def tick(self) -> TickResult:
        """
        Advance the game by one frame.

        While PLAYING this runs physics, then pipes, then collisions. The
        ground keeps scrolling in every state.

        Returns:
            TickResult for this frame.
        """
        with self._lock:
            session = self._session
            session.frame += 1

            score_before = session.score
            score_events: List[ScoreEvent] = []
            collision = None

            if session.state == GameState.PLAYING:
                self._physics.step(session.bird)
                score_events = self._pipes.update(session, self._bus)
                collision = self._collision.check(session, self._bus)

            session.ground_offset = (
                session.ground_offset - self._config.ground.scroll_speed
            ) % self._config.board.width

            return TickResult(
                state=session.state,
                delta_score=session.score - score_before,
                score_events=score_events,
                collision=collision
            )

    def drain_signals(self) -> List[SignalEvent]:
        """Signals emitted since the last drain, in emission order."""
        with self._lock:
            return self._bus.drain()

    def snapshot(self) -> GameSnapshot:
        """Read-only copy of the current state for drawing."""
        with self._lock:
            return self._snapshot_builder.build(self._session)

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        with self._lock:
            session = self._session
            return {
                "score": session.score,
                "frame": session.frame,
                "state": session.state.name.lower(),
                "pipe_count": len(session.pipes),
                "bird_y": session.bird.y,
                "bird_vy": session.bird.vy,
            }
