"""
Human Play Mode
================

Play Flappy Bird interactively.

Controls:
    - Space / Click / Touch: Start, flap, or return to the title after a crash
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--scale SCALE] [--fps FPS]
"""

from __future__ import annotations

import argparse
import sys
from typing import Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from flappy_arcade.flappy_core.audio import AudioCuePlayer
from flappy_arcade.flappy_core.config_loader import load_config, GameConfig
from flappy_arcade.flappy_core.game import CoreGame
from flappy_arcade.flappy_core.render_full_pygame import PygameRenderer
from flappy_arcade.flappy_core.sprite_loader import AssetProvider


class HumanPlayer:
    """
    Window, input and frame loop around CoreGame.

    Every frame: handle input, tick once, hand emitted signals to the audio
    player, draw. The loop only starts once the assets have finished loading.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        scale: int = 1,
        target_fps: int = 60
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._scale = scale
        self._target_fps = target_fps

        self._game = CoreGame(config=config, seed=seed)

        # Initialize pygame; a window must exist before sprites are converted
        pygame.init()
        self._screen = pygame.display.set_mode(
            (config.board.width * scale, config.board.height * scale)
        )
        pygame.display.set_caption("Flappy Bird")
        self._clock = pygame.time.Clock()

        self._assets = AssetProvider()
        self._audio = AudioCuePlayer(self._assets)
        self._renderer: Optional[PygameRenderer] = None

        self._running = False
        self._best = 0

    def run(self) -> int:
        """Load assets, then run the game loop. Returns the best score."""
        print("=== Flappy Bird ===")
        print("Space, click or tap to flap")
        print("ESC to quit")
        print()

        self._assets.on_loaded(self._start)
        self._assets.load()

        missing = self._assets.generated_sprites
        if missing:
            print(f"Using placeholder sprites for: {', '.join(missing)}")

        while self._running:
            self._handle_events()
            self._update()
            self._render()
            self._clock.tick(self._target_fps)

        pygame.quit()
        return self._best

    def _start(self) -> None:
        self._renderer = PygameRenderer(self._config, assets=self._assets)
        self._game.reset()
        self._running = True

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_SPACE:
                    self._game.activate()

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    self._game.activate()

            elif event.type == pygame.FINGERDOWN:
                self._game.activate()

    def _update(self) -> None:
        """Tick the game and route its cues to the audio player."""
        result = self._game.tick()

        if result.delta_score > 0:
            print(f"  +{result.delta_score} (Total: {self._game.score})")

        if result.ended_this_tick:
            self._best = max(self._best, self._game.score)
            print(f"\nGAME OVER - Score: {self._game.score} (Best: {self._best})")

        self._audio.handle_all(self._game.drain_signals())
        self._audio.update()

    def _render(self) -> None:
        """Render the game."""
        self._renderer.render_to_screen(self._game.snapshot(), scale=self._scale)


def main():
    parser = argparse.ArgumentParser(description="Play Flappy Bird interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--scale", type=int, default=1, help="Window magnification (default: 1)")
    parser.add_argument("--fps", type=int, default=60, help="Target FPS")

    args = parser.parse_args()

    try:
        config = load_config()
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            scale=args.scale,
            target_fps=args.fps
        )
        best = player.run()
        print(f"\nBest Score: {best}")
        return 0
    except ImportError as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
