"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import yaml


@dataclass(frozen=True)
class BoardConfig:
    """Screen geometry."""
    width: int          # Visible width in pixels
    height: int         # Visible height in pixels
    ground_height: int  # Height of the scrolling base strip

    @property
    def floor_y(self) -> float:
        """Y coordinate of the top of the ground."""
        return float(self.height - self.ground_height)

    @property
    def center_y(self) -> float:
        return self.height / 2


@dataclass(frozen=True)
class PhysicsConfig:
    """Bird kinematics, per tick."""
    gravity: float
    jump_velocity: float
    max_tilt: float       # Upper clamp on presentation tilt (radians)
    tilt_divisor: float


@dataclass(frozen=True)
class BirdConfig:
    """Bird placement and collision circle."""
    x: float
    radius: float
    sprite_width: int
    sprite_height: int


@dataclass(frozen=True)
class PipeConfig:
    """Pipe geometry and spawn cadence."""
    gap: float
    distance: int         # Spawn timer threshold in ticks
    width: float
    height: float
    scroll_speed: float
    gap_margin_top: int
    gap_margin_total: int


@dataclass(frozen=True)
class GroundConfig:
    """Cosmetic ground scroll."""
    scroll_speed: float


@dataclass(frozen=True)
class AudioConfig:
    """Audio cue timing."""
    die_delay: float


@dataclass(frozen=True)
class CapsConfig:
    """Episode limits for the Gymnasium wrapper."""
    max_ticks: int


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_pipes: int
    image_enabled: bool
    image_width: int
    image_height: int
    render_style: str


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    board: BoardConfig
    physics: PhysicsConfig
    bird: BirdConfig
    pipe: PipeConfig
    ground: GroundConfig
    audio: AudioConfig
    caps: CapsConfig
    observation: ObservationConfig

    @property
    def floor_y(self) -> float:
        """Y coordinate of the floor boundary."""
        return self.board.floor_y

    @property
    def gap_top_span(self) -> int:
        """Number of distinct integer gap tops a spawned pipe can take."""
        return int(
            self.board.height
            - self.board.ground_height
            - self.pipe.gap
            - self.pipe.gap_margin_total
        )

    @property
    def gap_top_range(self) -> Tuple[int, int]:
        """Half-open (low, high) range of spawned gap tops."""
        low = self.pipe.gap_margin_top
        return (low, low + self.gap_top_span)


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    board = config.board
    if board.width <= 0 or board.height <= 0:
        raise ValueError(f"Board size must be positive, got {board.width}x{board.height}")

    if not 0 <= board.ground_height < board.height:
        raise ValueError(
            f"ground_height ({board.ground_height}) must lie within board height ({board.height})"
        )

    if config.physics.gravity <= 0:
        raise ValueError(f"gravity must be positive, got {config.physics.gravity}")

    # Flapping moves the bird up the screen (negative y)
    if config.physics.jump_velocity >= 0:
        raise ValueError(f"jump_velocity must be negative, got {config.physics.jump_velocity}")

    if config.physics.tilt_divisor == 0:
        raise ValueError("tilt_divisor must be non-zero")

    if config.bird.radius <= 0:
        raise ValueError(f"bird radius must be positive, got {config.bird.radius}")

    if config.pipe.width <= 0 or config.pipe.gap <= 0:
        raise ValueError("pipe width and gap must be positive")

    # Pipes must drift left or they are never retired
    if config.pipe.scroll_speed <= 0:
        raise ValueError(f"pipe scroll_speed must be positive, got {config.pipe.scroll_speed}")

    if config.pipe.distance < 0:
        raise ValueError(f"pipe distance must be non-negative, got {config.pipe.distance}")

    # The whole gap has to fit in the playable area
    if config.gap_top_span <= 0:
        raise ValueError(
            f"Pipe gap ({config.pipe.gap}) plus margins ({config.pipe.gap_margin_total}) "
            f"do not fit above the ground ({board.height - board.ground_height})"
        )

    if config.observation.max_pipes <= 0:
        raise ValueError(f"observation.max_pipes must be positive, got {config.observation.max_pipes}")

    if config.observation.render_style not in ("solid", "full"):
        raise ValueError(f"render_style must be 'solid' or 'full', got '{config.observation.render_style}'")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    board_data = raw["board"]
    board = BoardConfig(
        width=int(board_data["width"]),
        height=int(board_data["height"]),
        ground_height=int(board_data.get("ground_height", 112))
    )

    physics_data = raw["physics"]
    physics = PhysicsConfig(
        gravity=float(physics_data["gravity"]),
        jump_velocity=float(physics_data["jump_velocity"]),
        max_tilt=float(physics_data.get("max_tilt", 0.7853981633974483)),
        tilt_divisor=float(physics_data.get("tilt_divisor", 10.0))
    )

    bird_data = raw["bird"]
    bird = BirdConfig(
        x=float(bird_data["x"]),
        radius=float(bird_data["radius"]),
        sprite_width=int(bird_data.get("sprite_width", 34)),
        sprite_height=int(bird_data.get("sprite_height", 24))
    )

    pipe_data = raw["pipe"]
    pipe = PipeConfig(
        gap=float(pipe_data["gap"]),
        distance=int(pipe_data["distance"]),
        width=float(pipe_data["width"]),
        height=float(pipe_data.get("height", 320)),
        scroll_speed=float(pipe_data.get("scroll_speed", 2)),
        gap_margin_top=int(pipe_data.get("gap_margin_top", 40)),
        gap_margin_total=int(pipe_data.get("gap_margin_total", 80))
    )

    # Parse remaining sections (all optional)
    ground_data = raw.get("ground", {})
    ground = GroundConfig(
        scroll_speed=float(ground_data.get("scroll_speed", 2))
    )

    audio_data = raw.get("audio", {})
    audio = AudioConfig(
        die_delay=float(audio_data.get("die_delay", 0.3))
    )

    caps_data = raw.get("caps", {})
    caps = CapsConfig(
        max_ticks=int(caps_data.get("max_ticks", 100000))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_pipes=int(obs_data.get("max_pipes", 4)),
        image_enabled=bool(obs_data.get("image_enabled", False)),
        image_width=int(obs_data.get("image_width", 144)),
        image_height=int(obs_data.get("image_height", 256)),
        render_style=str(obs_data.get("render_style", "solid"))
    )

    config = GameConfig(
        board=board,
        physics=physics,
        bird=bird,
        pipe=pipe,
        ground=ground,
        audio=audio,
        caps=caps,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level singleton for convenience
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
