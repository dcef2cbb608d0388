"""
Solid Renderer
==============

Fast numpy-based renderer that draws collision geometry as solid shapes:
pipes as rectangles outside their gap, the floor as a band and the bird as
its collision circle. Needs no display and no pygame.
"""

from __future__ import annotations

from typing import Optional
import numpy as np

from flappy_arcade.flappy_core.config_loader import GameConfig, get_config
from flappy_arcade.flappy_core.state_snapshot import GameSnapshot


class SolidRenderer:
    """Renders a snapshot as flat-colored hitboxes."""

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config

        self._bg_color = np.array([30, 30, 40], dtype=np.uint8)
        self._pipe_color = np.array([80, 170, 60], dtype=np.uint8)
        self._scored_pipe_color = np.array([50, 110, 40], dtype=np.uint8)
        self._ground_color = np.array([200, 190, 130], dtype=np.uint8)
        self._bird_color = np.array([250, 200, 60], dtype=np.uint8)
        self._ended_bird_color = np.array([220, 60, 60], dtype=np.uint8)

    def render(
        self,
        snapshot: GameSnapshot,
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            snapshot: State to draw.
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        img = np.empty((height, width, 3), dtype=np.uint8)
        img[:] = self._bg_color

        sx = width / snapshot.board_width
        sy = height / snapshot.board_height

        floor_row = int(snapshot.floor_y * sy)

        for pipe in snapshot.pipes:
            color = self._scored_pipe_color if pipe.scored else self._pipe_color
            left = max(0, int(pipe.x * sx))
            right = min(width, int((pipe.x + snapshot.pipe_width) * sx))
            if right <= left:
                continue
            img[:max(0, int(pipe.top * sy)), left:right] = color
            img[min(floor_row, int(pipe.bottom * sy)):floor_row, left:right] = color

        img[floor_row:, :] = self._ground_color

        bird_color = self._ended_bird_color if snapshot.is_over else self._bird_color
        self._draw_ellipse(
            img,
            snapshot.bird_x * sx,
            snapshot.bird_y * sy,
            max(1.0, snapshot.bird_radius * sx),
            max(1.0, snapshot.bird_radius * sy),
            bird_color
        )
        return img

    def _draw_ellipse(
        self,
        img: np.ndarray,
        cx: float,
        cy: float,
        rx: float,
        ry: float,
        color: np.ndarray
    ) -> None:
        """Draw a filled axis-aligned ellipse using numpy."""
        height, width = img.shape[:2]

        # Calculate bounding box
        x0 = max(0, int(cx - rx))
        x1 = min(width, int(cx + rx) + 1)
        y0 = max(0, int(cy - ry))
        y1 = min(height, int(cy + ry) + 1)
        if x0 >= x1 or y0 >= y1:
            return

        yy, xx = np.ogrid[y0:y1, x0:x1]
        mask = ((xx - cx) / rx) ** 2 + ((yy - cy) / ry) ** 2 <= 1.0
        img[y0:y1, x0:x1][mask] = color

    def close(self) -> None:
        pass
