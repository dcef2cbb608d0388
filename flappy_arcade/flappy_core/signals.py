"""
Signals
=======

Payload-free cues the core emits for the presentation layer (sounds).

The core publishes into a queue during a tick or an input; the loop drains
the queue between ticks. A delayed cue carries its delay as a value and is
scheduled by whoever consumes it, so it can never reach back into core state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List


class Signal(str, Enum):
    """Cues understood by the presentation layer."""
    FLAP = "flap"
    HIT = "hit"
    DIE = "die"
    POINT = "point"
    SWOOSH = "swoosh"


@dataclass(frozen=True)
class SignalEvent:
    """One emitted cue and how long after emission it should fire (seconds)."""
    signal: Signal
    delay: float = 0.0


class SignalBus:
    """In-memory queue of signal events drained between ticks."""

    def __init__(self) -> None:
        self._queue: List[SignalEvent] = []

    def publish(self, signal: Signal, delay: float = 0.0) -> None:
        self._queue.append(SignalEvent(signal, delay))

    def drain(self) -> List[SignalEvent]:
        """Remove and return everything published since the last drain."""
        events = self._queue
        self._queue = []
        return events

    def clear(self) -> None:
        self._queue.clear()
