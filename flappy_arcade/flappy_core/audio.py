"""
Audio Cues
==========

Turns core signals into sound playback. Delayed cues are held here against
a wall clock and played once due; nothing in this module touches game state.
"""

from __future__ import annotations

import time
from typing import Callable, Iterable, List, Optional, Tuple

from flappy_arcade.flappy_core.signals import Signal, SignalEvent

# Signal -> sound name in the asset set
SOUND_FOR_SIGNAL = {
    Signal.FLAP: "wing",
    Signal.HIT: "hit",
    Signal.DIE: "die",
    Signal.POINT: "point",
    Signal.SWOOSH: "swoosh",
}


class AudioCuePlayer:
    """
    Plays sounds for signal events.

    ``sounds`` is anything with a ``sound(name)`` method returning a
    playable object or None (the AssetProvider in practice). Cues whose
    sound is unavailable are dropped without error.
    """

    def __init__(self, sounds, clock: Optional[Callable[[], float]] = None):
        self._sounds = sounds
        self._clock = clock or time.monotonic
        self._pending: List[Tuple[float, Signal]] = []
        self.played: List[Signal] = []

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def handle(self, event: SignalEvent) -> None:
        """Play now, or hold until ``event.delay`` seconds have passed."""
        if event.delay > 0:
            self._pending.append((self._clock() + event.delay, event.signal))
        else:
            self.play(event.signal)

    def handle_all(self, events: Iterable[SignalEvent]) -> None:
        for event in events:
            self.handle(event)

    def update(self) -> None:
        """Play every held cue that has come due."""
        if not self._pending:
            return
        now = self._clock()
        due = [item for item in self._pending if item[0] <= now]
        self._pending = [item for item in self._pending if item[0] > now]
        for _, signal in sorted(due, key=lambda item: item[0]):
            self.play(signal)

    def play(self, signal: Signal) -> None:
        sound = self._sounds.sound(SOUND_FOR_SIGNAL[signal])
        if sound is None:
            return
        # Restart from the beginning if it is still playing
        try:
            sound.stop()
            sound.play()
        except RuntimeError:
            # pygame.error: mixer went away mid-game
            return
        self.played.append(signal)
