"""
Full Pygame Renderer
====================

Sprite renderer using pygame. Supports both display mode (human play) and
headless RGB output.
"""

from __future__ import annotations

import math
from typing import Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

import numpy as np

from flappy_arcade.flappy_core.config_loader import GameConfig, get_config
from flappy_arcade.flappy_core.entities import FlapPhase
from flappy_arcade.flappy_core.scoring import layout_score_digits
from flappy_arcade.flappy_core.state_snapshot import GameSnapshot

BIRD_SPRITES = {
    FlapPhase.RISING: "bird_upflap",
    FlapPhase.FALLING_FAST: "bird_downflap",
    FlapPhase.NEUTRAL: "bird_midflap",
}

MESSAGE_Y = 80
GAMEOVER_Y = 150


class PygameRenderer:
    """
    Draws a snapshot at native board resolution, then scales to the target.

    Draw order: background, pipes, base, bird, then the state overlay
    (get-ready message when idle, score while playing or ended, game-over
    banner when ended).
    """

    def __init__(self, config: Optional[GameConfig] = None, assets=None):
        """
        Initialize renderer.

        Args:
            config: Game configuration.
            assets: AssetProvider to draw with. Uses the global one if None.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameRenderer")

        if config is None:
            config = get_config()

        self._config = config

        if not pygame.get_init():
            pygame.init()

        if assets is None:
            from flappy_arcade.flappy_core.sprite_loader import get_asset_provider
            assets = get_asset_provider()
        assets.load()
        self._assets = assets

        self._board_size = (config.board.width, config.board.height)
        self._canvas = pygame.Surface(self._board_size)

        # Display surface (created on demand)
        self._screen: Optional[pygame.Surface] = None
        self._screen_size: Optional[Tuple[int, int]] = None

        # Upper pipe is the lower sprite mirrored
        pipe = assets.sprite("pipe")
        self._pipe_size = (int(config.pipe.width), int(config.pipe.height))
        self._pipe_bottom = pygame.transform.scale(pipe, self._pipe_size)
        self._pipe_top = pygame.transform.flip(self._pipe_bottom, False, True)

    def render(
        self,
        snapshot: GameSnapshot,
        width: Optional[int] = None,
        height: Optional[int] = None
    ) -> np.ndarray:
        """
        Render to RGB array (for agent observation).

        Args:
            snapshot: State to draw.
            width: Output image width. Board width if None.
            height: Output image height. Board height if None.

        Returns:
            (height, width, 3) uint8 array.
        """
        self._render_to_surface(self._canvas, snapshot)
        surface = self._canvas
        size = (width or self._board_size[0], height or self._board_size[1])
        if size != self._board_size:
            surface = pygame.transform.scale(self._canvas, size)
        array = pygame.surfarray.array3d(surface)
        return np.transpose(array, (1, 0, 2))

    def render_to_screen(self, snapshot: GameSnapshot, scale: int = 1) -> None:
        """
        Render to pygame window.

        Args:
            snapshot: State to draw.
            scale: Integer window magnification.
        """
        window_size = (self._board_size[0] * scale, self._board_size[1] * scale)
        if self._screen is None or self._screen_size != window_size:
            self._screen = pygame.display.set_mode(window_size)
            self._screen_size = window_size
            pygame.display.set_caption("Flappy Bird")

        self._render_to_surface(self._canvas, snapshot)
        if scale == 1:
            self._screen.blit(self._canvas, (0, 0))
        else:
            pygame.transform.scale(self._canvas, window_size, self._screen)
        pygame.display.flip()

    def _render_to_surface(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        """Render game state to a board-sized pygame surface."""
        surface.blit(self._assets.sprite("background"), (0, 0))
        self._draw_pipes(surface, snapshot)
        self._draw_base(surface, snapshot)
        self._draw_bird(surface, snapshot)

        if snapshot.is_idle:
            self._draw_centered(surface, self._assets.sprite("message"), MESSAGE_Y)
        else:
            self._draw_score(surface, snapshot.score)
        if snapshot.is_over:
            self._draw_centered(surface, self._assets.sprite("gameover"), GAMEOVER_Y)

    def _draw_pipes(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        pipe_height = self._pipe_size[1]
        for pipe in snapshot.pipes:
            x = int(pipe.x)
            surface.blit(self._pipe_top, (x, int(pipe.top) - pipe_height))
            surface.blit(self._pipe_bottom, (x, int(pipe.bottom)))

    def _draw_base(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        """Two copies of the base so the scroll wraps without a seam."""
        base = self._assets.sprite("base")
        y = int(snapshot.floor_y)
        x = int(snapshot.ground_offset)
        surface.blit(base, (x - self._board_size[0], y))
        surface.blit(base, (x, y))

    def _draw_bird(self, surface: pygame.Surface, snapshot: GameSnapshot) -> None:
        sprite = self._assets.sprite(BIRD_SPRITES[snapshot.bird_phase])
        # Positive rot tilts the nose down; pygame rotates counter-clockwise
        rotated = pygame.transform.rotate(sprite, -math.degrees(snapshot.bird_rot))
        rect = rotated.get_rect(center=(int(snapshot.bird_x), int(snapshot.bird_y)))
        surface.blit(rotated, rect)

    def _draw_score(self, surface: pygame.Surface, score: int) -> None:
        for placement in layout_score_digits(score, self._assets, self._board_size[0]):
            surface.blit(self._assets.digit(placement.digit), (int(placement.x), int(placement.y)))

    def _draw_centered(self, surface: pygame.Surface, sprite: pygame.Surface, y: int) -> None:
        surface.blit(sprite, ((self._board_size[0] - sprite.get_width()) // 2, y))

    def handle_events(self) -> bool:
        """Handle pygame events. Returns False if quit requested."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False
        return True

    def close(self) -> None:
        """Clean up pygame resources."""
        if self._screen is not None:
            self._screen = None
