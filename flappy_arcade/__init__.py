"""
Flappy Arcade Package
=====================

This package contains the game logic for a single-screen Flappy Bird clone:

- Bird physics (gravity and flap impulse)
- Pipe spawning, scrolling and scoring
- Collision detection
- The idle/playing/ended state machine
- pygame presentation and a Gymnasium wrapper

All tunable parameters are in game_config.yaml.
"""
