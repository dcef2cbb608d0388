"""
Asset Loader
============

Loads the sprites and sounds used by the pygame front end and answers
digit-width queries for score layout.
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

ASSETS_DIR = Path(__file__).parent.parent.parent / "assets"

# Logical sprite name -> file under assets/sprites
SPRITE_FILES = {
    "background": "background-day.png",
    "base": "base.png",
    "bird_upflap": "yellowbird-upflap.png",
    "bird_midflap": "yellowbird-midflap.png",
    "bird_downflap": "yellowbird-downflap.png",
    "pipe": "pipe-green.png",
    "message": "message.png",
    "gameover": "gameover.png",
}
SPRITE_FILES.update({f"digit_{d}": f"{d}.png" for d in range(10)})

# Logical sound name -> file under assets/audio
SOUND_FILES = {
    "die": "die.wav",
    "hit": "hit.wav",
    "point": "point.wav",
    "swoosh": "swoosh.wav",
    "wing": "wing.wav",
}

# Sizes of the stock sprites, used for generated stand-ins
FALLBACK_SIZES: Dict[str, Tuple[int, int]] = {
    "background": (288, 512),
    "base": (336, 112),
    "bird_upflap": (34, 24),
    "bird_midflap": (34, 24),
    "bird_downflap": (34, 24),
    "pipe": (52, 320),
    "message": (184, 267),
    "gameover": (192, 42),
}
FALLBACK_SIZES.update({f"digit_{d}": (16 if d == 1 else 24, 36) for d in range(10)})

FALLBACK_COLORS = {
    "background": (78, 192, 202),
    "base": (222, 216, 149),
    "bird_upflap": (250, 200, 60),
    "bird_midflap": (245, 190, 50),
    "bird_downflap": (240, 180, 40),
    "pipe": (84, 168, 60),
    "message": (255, 255, 255),
    "gameover": (232, 97, 1),
}


class AssetProvider:
    """
    Loads and caches sprites and sounds.

    Missing or unreadable sprites are replaced by generated surfaces of the
    stock size. Missing or unreadable sounds are stored as None so playback
    requests against them can be dropped.
    """

    def __init__(self, assets_dir: Optional[Path] = None, load_sounds: bool = True):
        """
        Initialize asset provider.

        Args:
            assets_dir: Directory holding sprites/ and audio/. Uses default if None.
            load_sounds: Whether to initialize the mixer and load sounds.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required for asset loading")

        self._assets_dir = Path(assets_dir) if assets_dir is not None else ASSETS_DIR
        self._load_sounds = load_sounds
        self._sprites: Dict[str, pygame.Surface] = {}
        self._sounds: Dict[str, Optional[pygame.mixer.Sound]] = {}
        self._generated: List[str] = []
        self._callbacks: List[Callable[[], None]] = []
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def generated_sprites(self) -> List[str]:
        """Sprite names that fell back to generated surfaces."""
        return list(self._generated)

    def on_loaded(self, callback: Callable[[], None]) -> None:
        """
        Register a callback for load completion.

        Each callback runs exactly once: after load() finishes, or right away
        if loading already finished.
        """
        if self._loaded:
            callback()
        else:
            self._callbacks.append(callback)

    def load(self) -> None:
        """Load every sprite and sound, then fire the completion callbacks."""
        if self._loaded:
            return

        for name, filename in SPRITE_FILES.items():
            self._sprites[name] = self._load_sprite(name, filename)

        if self._load_sounds:
            self._init_mixer()
        for name, filename in SOUND_FILES.items():
            self._sounds[name] = self._load_sound(filename) if self._load_sounds else None

        self._loaded = True
        callbacks, self._callbacks = self._callbacks, []
        for callback in callbacks:
            callback()

    def _load_sprite(self, name: str, filename: str) -> pygame.Surface:
        path = self._assets_dir / "sprites" / filename
        if path.exists():
            try:
                image = pygame.image.load(str(path))
                if pygame.display.get_surface() is not None:
                    image = image.convert_alpha()
                return image
            except pygame.error:
                # Fall through to a generated sprite
                pass
        self._generated.append(name)
        return self._create_fallback_sprite(name)

    def _create_fallback_sprite(self, name: str) -> pygame.Surface:
        """Plain stand-in for a missing sprite, at the stock size."""
        width, height = FALLBACK_SIZES[name]
        surface = pygame.Surface((width, height), pygame.SRCALPHA)

        if name.startswith("digit_"):
            if not pygame.font.get_init():
                pygame.font.init()
            font = pygame.font.Font(None, height)
            text = font.render(name[-1], True, (255, 255, 255))
            surface.blit(text, text.get_rect(center=(width // 2, height // 2)))
            return surface

        color = FALLBACK_COLORS.get(name, (200, 200, 200))
        if name.startswith("bird_"):
            pygame.draw.ellipse(surface, color, surface.get_rect())
            pygame.draw.circle(surface, (255, 255, 255), (width - 9, 8), 4)
            pygame.draw.circle(surface, (0, 0, 0), (width - 8, 8), 2)
        elif name == "pipe":
            surface.fill(color)
            pygame.draw.rect(surface, (60, 120, 40), surface.get_rect(), 2)
        elif name in ("message", "gameover"):
            pygame.draw.rect(surface, color, surface.get_rect(), 3, border_radius=6)
        else:
            surface.fill(color)
        return surface

    def _init_mixer(self) -> None:
        if pygame.mixer.get_init():
            return
        try:
            pygame.mixer.init()
        except pygame.error:
            # No audio device: every sound stays None
            pass

    def _load_sound(self, filename: str) -> Optional["pygame.mixer.Sound"]:
        if not pygame.mixer.get_init():
            return None
        path = self._assets_dir / "audio" / filename
        if not path.exists():
            return None
        try:
            return pygame.mixer.Sound(str(path))
        except pygame.error:
            return None

    def sprite(self, name: str) -> pygame.Surface:
        """Loaded sprite by logical name."""
        return self._sprites[name]

    def sound(self, name: str) -> Optional["pygame.mixer.Sound"]:
        """Loaded sound by logical name, or None if unavailable."""
        return self._sounds.get(name)

    def digit(self, digit: int) -> pygame.Surface:
        if not 0 <= digit <= 9:
            raise ValueError(f"Digit must be in 0-9, got {digit}")
        return self._sprites[f"digit_{digit}"]

    def glyph_width(self, digit: int) -> int:
        """Pixel width of the glyph for ``digit``."""
        return self.digit(digit).get_width()


# Global asset provider instance
_asset_provider: Optional[AssetProvider] = None


def get_asset_provider() -> AssetProvider:
    """Get or create the global asset provider."""
    global _asset_provider
    if _asset_provider is None:
        pygame.init()  # Ensure pygame is initialized
        _asset_provider = AssetProvider()
    return _asset_provider
