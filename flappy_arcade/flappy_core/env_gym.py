"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the game. One environment step
is one optional flap followed by one tick.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from flappy_arcade.flappy_core.config_loader import GameConfig, load_config
from flappy_arcade.flappy_core.entities import GameState
from flappy_arcade.flappy_core.game import CoreGame
from flappy_arcade.flappy_core.state_snapshot import GameSnapshot


class FlappyEnv(gym.Env):
    """
    Flappy Bird as a Gymnasium environment.

    Action Space:
        Discrete(2): 0 = do nothing, 1 = flap.

    Observation Space:
        Dict containing bird state, next-pipe features, fixed-size pipe
        arrays with a mask, and an optional RGB image.

    Reward:
        Points scored during the step (0 or 1).

    Info:
        Contains score, delta_score, frame, state, etc.
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        render_style: Optional[str] = None,
        image_obs: Optional[bool] = None,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        debug: bool = False,
    ):
        """
        Initialize Flappy environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            render_style: "solid" for hitboxes, "full" for sprites. Config value if None.
            image_obs: If True, include board_rgb in observations. Config value if None.
            image_width: Override observation image width.
            image_height: Override observation image height.
            debug: If True, enables verbose debug output.
        """
        super().__init__()

        # Load config
        self._config = load_config(config_path)
        obs_config = self._config.observation

        # Store render settings
        self.render_mode = render_mode
        self._render_style = render_style or obs_config.render_style
        self._image_obs = obs_config.image_enabled if image_obs is None else image_obs
        self._debug = debug

        # Image dimensions
        self._img_width = image_width or obs_config.image_width
        self._img_height = image_height or obs_config.image_height

        # Initialize game
        self._game = CoreGame(config=self._config)
        self._elapsed_ticks = 0

        # Initialize renderer (lazy)
        self._renderer = None
        self._screen_renderer = None

        self.action_space = spaces.Discrete(2)
        self.observation_space = self._build_observation_space()

        if self._debug:
            print(f"[DEBUG] FlappyEnv initialized")
            print(f"[DEBUG]   Board: {self._config.board.width}x{self._config.board.height}")
            print(f"[DEBUG]   Floor Y: {self._config.floor_y}")
            print(f"[DEBUG]   Max pipes: {obs_config.max_pipes}")

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_pipes = self._config.observation.max_pipes
        board = self._config.board
        width = float(board.width)
        height = float(board.height)

        obs_dict = {
            # Core state
            "state": spaces.Box(low=0, high=len(GameState) - 1, shape=(), dtype=np.int32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "frame": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),

            # Bird
            "bird_y": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "bird_vy": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),
            "distance_to_floor": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),

            # Next pipe
            "next_pipe_dx": spaces.Box(low=-width, high=width, shape=(), dtype=np.float32),
            "next_gap_dy": spaces.Box(low=-np.inf, high=np.inf, shape=(), dtype=np.float32),

            # Pipe arrays
            "pipe_x": spaces.Box(low=-width, high=width, shape=(max_pipes,), dtype=np.float32),
            "pipe_top": spaces.Box(low=0, high=height, shape=(max_pipes,), dtype=np.float32),
            "pipe_bottom": spaces.Box(low=0, high=height, shape=(max_pipes,), dtype=np.float32),
            "pipe_mask": spaces.MultiBinary(max_pipes),
        }

        if self._image_obs:
            obs_dict["board_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and start a run (the start input flaps once).

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._game.reset(seed=seed)
        self._game.activate()
        self._game.drain_signals()
        self._elapsed_ticks = 0

        obs = self._snapshot_to_obs(self._game.snapshot())
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: 1 to flap before the tick, 0 to do nothing.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item())

        if self._game.is_over:
            # Episode already ended; do not let a flap restart it
            snapshot = self._game.snapshot()
            info = self._game.get_info()
            info["delta_score"] = 0
            return self._snapshot_to_obs(snapshot), 0.0, True, False, info

        if action == 1:
            self._game.activate()
        result = self._game.tick()
        self._elapsed_ticks += 1
        signals = self._game.drain_signals()

        obs = self._snapshot_to_obs(self._game.snapshot())
        reward = float(result.delta_score)
        terminated = result.state == GameState.ENDED
        truncated = not terminated and self._elapsed_ticks >= self._config.caps.max_ticks

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["signals"] = [event.signal.value for event in signals]

        if self._debug:
            print(f"[DEBUG] Step: action={action}, y={info['bird_y']:.1f}, "
                  f"vy={info['bird_vy']:.2f}, score={info['score']}")
            if terminated:
                print(f"[DEBUG] TERMINATED at frame {info['frame']}")

        return obs, reward, terminated, truncated, info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        obs = snapshot.to_obs_dict()

        if self._image_obs:
            obs["board_rgb"] = self._render_to_array(snapshot)

        return obs

    def _render_to_array(self, snapshot: Optional[GameSnapshot] = None) -> np.ndarray:
        """Render board to RGB array."""
        if self._renderer is None:
            self._init_renderer()

        if snapshot is None:
            snapshot = self._game.snapshot()
        return self._renderer.render(snapshot, self._img_width, self._img_height)

    def _init_renderer(self) -> None:
        """Initialize renderer based on style."""
        if self._render_style == "full":
            from flappy_arcade.flappy_core.render_full_pygame import PygameRenderer
            self._renderer = PygameRenderer(self._config)
        else:
            from flappy_arcade.flappy_core.render_solid import SolidRenderer
            self._renderer = SolidRenderer(self._config)

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()

        if self.render_mode == "human":
            if self._screen_renderer is None:
                from flappy_arcade.flappy_core.render_full_pygame import PygameRenderer
                self._screen_renderer = PygameRenderer(self._config)
            self._screen_renderer.render_to_screen(self._game.snapshot())
            self._screen_renderer.handle_events()
            return None

        return None

    def close(self) -> None:
        """Clean up resources."""
        for renderer in (self._renderer, self._screen_renderer):
            if renderer is not None:
                renderer.close()
        self._renderer = None
        self._screen_renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
