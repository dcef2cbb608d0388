"""
Flappy Core - The game simulation and its adapters.

This module provides the tick-driven game core, the Gymnasium environment
wrapper and all supporting systems (physics, pipes, collisions, signals).

Main exports:
- CoreGame: Tick/activate driven game state machine
- FlappyEnv: Gymnasium environment for single-agent training
- GameConfig: Configuration loaded from game_config.yaml
- GameSnapshot: Read-only per-tick state for drawing
"""

from flappy_arcade.flappy_core.config_loader import GameConfig, load_config
from flappy_arcade.flappy_core.entities import Bird, FlapPhase, GameState, Pipe, Session
from flappy_arcade.flappy_core.signals import Signal, SignalBus, SignalEvent
from flappy_arcade.flappy_core.game import CoreGame, TickResult
from flappy_arcade.flappy_core.state_snapshot import GameSnapshot
from flappy_arcade.flappy_core.env_gym import FlappyEnv

__all__ = [
    "GameConfig",
    "load_config",
    "Bird",
    "FlapPhase",
    "GameState",
    "Pipe",
    "Session",
    "Signal",
    "SignalBus",
    "SignalEvent",
    "CoreGame",
    "TickResult",
    "GameSnapshot",
    "FlappyEnv",
]
