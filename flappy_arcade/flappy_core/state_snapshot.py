"""
State Snapshot
==============

Read-only copies of the session for drawing, plus packing into fixed-size
numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple
import numpy as np

from flappy_arcade.flappy_core.config_loader import GameConfig, get_config
from flappy_arcade.flappy_core.entities import FlapPhase, GameState, Session


@dataclass(frozen=True)
class PipeView:
    """Immutable copy of one pipe."""
    x: float
    top: float
    bottom: float
    scored: bool


@dataclass(frozen=True)
class GameSnapshot:
    """
    Complete game state at the end of a tick.

    Pipes are ordered left to right. Nothing here aliases live session data.
    """
    # Lifecycle
    state: GameState
    frame: int
    score: int

    # Bird pose
    bird_x: float
    bird_y: float
    bird_vy: float
    bird_radius: float
    bird_phase: FlapPhase
    bird_rot: float

    # Pipes and scenery
    pipes: Tuple[PipeView, ...]
    ground_offset: float

    # Board info (for drawing and normalization)
    board_width: float
    board_height: float
    floor_y: float
    pipe_width: float
    max_pipes: int

    @property
    def is_idle(self) -> bool:
        return self.state == GameState.IDLE

    @property
    def is_playing(self) -> bool:
        return self.state == GameState.PLAYING

    @property
    def is_over(self) -> bool:
        return self.state == GameState.ENDED

    def next_pipe(self) -> Optional[PipeView]:
        """First pipe whose trailing edge is still ahead of the bird."""
        for pipe in self.pipes:
            if pipe.x + self.pipe_width >= self.bird_x:
                return pipe
        return None

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        pipe_x = np.zeros(self.max_pipes, dtype=np.float32)
        pipe_top = np.zeros(self.max_pipes, dtype=np.float32)
        pipe_bottom = np.zeros(self.max_pipes, dtype=np.float32)
        pipe_mask = np.zeros(self.max_pipes, dtype=bool)

        for i, pipe in enumerate(self.pipes[:self.max_pipes]):
            pipe_x[i] = pipe.x
            pipe_top[i] = pipe.top
            pipe_bottom[i] = pipe.bottom
            pipe_mask[i] = True

        nxt = self.next_pipe()
        if nxt is not None:
            next_dx = nxt.x - self.bird_x
            next_gap_center = (nxt.top + nxt.bottom) / 2
        else:
            next_dx = self.board_width
            next_gap_center = self.board_height / 2

        return {
            # Core state
            "state": np.array(int(self.state), dtype=np.int32),
            "score": np.array(self.score, dtype=np.int64),
            "frame": np.array(self.frame, dtype=np.int64),

            # Bird
            "bird_y": np.array(self.bird_y, dtype=np.float32),
            "bird_vy": np.array(self.bird_vy, dtype=np.float32),
            "distance_to_floor": np.array(self.floor_y - self.bird_y, dtype=np.float32),

            # Next pipe
            "next_pipe_dx": np.array(next_dx, dtype=np.float32),
            "next_gap_dy": np.array(next_gap_center - self.bird_y, dtype=np.float32),

            # Pipe arrays
            "pipe_x": pipe_x,
            "pipe_top": pipe_top,
            "pipe_bottom": pipe_bottom,
            "pipe_mask": pipe_mask,
        }


class SnapshotBuilder:
    """Builds game snapshots from a live session."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_pipes = config.observation.max_pipes

    def build(self, session: Session) -> GameSnapshot:
        """Build a snapshot from current session state."""
        bird = session.bird
        board = self._config.board
        return GameSnapshot(
            state=session.state,
            frame=session.frame,
            score=session.score,
            bird_x=bird.x,
            bird_y=bird.y,
            bird_vy=bird.vy,
            bird_radius=bird.radius,
            bird_phase=bird.phase,
            bird_rot=bird.rot,
            pipes=tuple(
                PipeView(x=p.x, top=p.top, bottom=p.bottom, scored=p.scored)
                for p in session.pipes
            ),
            ground_offset=session.ground_offset,
            board_width=float(board.width),
            board_height=float(board.height),
            floor_y=board.floor_y,
            pipe_width=self._config.pipe.width,
            max_pipes=self._max_pipes
        )
