"""
Scoring System
==============

Counts cleared pipes and lays out the score digits for drawing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol


# Vertical position of the score row, in screen pixels
SCORE_Y = 50


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    total: int
    frame: int

    def __repr__(self) -> str:
        return f"ScoreEvent(+{self.points} -> {self.total} @ frame {self.frame})"


class ScoreTracker:
    """
    Tracks the game score.

    Every cleared pipe is worth exactly one point; the tracker only ever
    counts up until reset().
    """

    POINTS_PER_PIPE = 1

    def __init__(self):
        self._score: int = 0

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    def apply_pass(self, frame: int = 0) -> ScoreEvent:
        """
        Award the points for one cleared pipe.

        Args:
            frame: Frame counter at the time of the pass.

        Returns:
            ScoreEvent describing the points awarded.
        """
        self._score += self.POINTS_PER_PIPE
        return ScoreEvent(points=self.POINTS_PER_PIPE, total=self._score, frame=frame)

    def reset(self) -> None:
        """Reset score to zero."""
        self._score = 0


class GlyphMetrics(Protocol):
    """Read-only query for the pixel width of each digit glyph (0-9)."""

    def glyph_width(self, digit: int) -> int:
        ...


@dataclass(frozen=True)
class DigitPlacement:
    """Where to draw one score digit."""
    digit: int
    x: float
    y: float


def layout_score_digits(
    score: int,
    metrics: GlyphMetrics,
    screen_width: int,
    y: float = SCORE_Y
) -> List[DigitPlacement]:
    """
    Centre the decimal digits of ``score`` horizontally on the screen.

    Args:
        score: Non-negative score to lay out.
        metrics: Provider of per-digit glyph widths.
        screen_width: Width of the screen in pixels.
        y: Top of the digit row.

    Returns:
        One placement per digit, left to right.
    """
    if score < 0:
        raise ValueError(f"Score must be non-negative, got {score}")

    digits = [int(c) for c in str(score)]
    total_width = sum(metrics.glyph_width(d) for d in digits)

    x = (screen_width - total_width) / 2
    placements = []
    for digit in digits:
        placements.append(DigitPlacement(digit=digit, x=x, y=y))
        x += metrics.glyph_width(digit)
    return placements
