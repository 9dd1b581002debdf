"""Celebratory confetti bursts.

Bursts are described here and handed to canvas-confetti in the browser
(see src/ui/components/effects.py). A multi-pulse effect is a list of
bursts with increasing ``delay_ms``.
"""

import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

GOLD_PALETTE = ["#FFD700", "#FF4500", "#FFFFFF", "#FFA500"]
BLESSING_PALETTE = ["#FFD700", "#FFA500", "#FF69B4", "#FFFF00"]
MONEY_PALETTE = ["#FFD700", "#FFA500", "#FFFF00", "#DAA520"]


@dataclass
class Burst:
    """One canvas-confetti call."""

    particle_count: int
    spread: float
    origin_x: float = 0.5
    origin_y: float = 0.5
    colors: list[str] = field(default_factory=lambda: list(GOLD_PALETTE))
    angle: Optional[float] = None
    shapes: Optional[list[str]] = None
    gravity: Optional[float] = None
    scalar: Optional[float] = None
    delay_ms: int = 0

    def to_options(self) -> dict:
        """canvas-confetti options object."""
        options = {
            "particleCount": self.particle_count,
            "spread": self.spread,
            "origin": {"x": self.origin_x, "y": self.origin_y},
            "colors": list(self.colors),
        }
        if self.angle is not None:
            options["angle"] = self.angle
        if self.shapes is not None:
            options["shapes"] = list(self.shapes)
        if self.gravity is not None:
            options["gravity"] = self.gravity
        if self.scalar is not None:
            options["scalar"] = self.scalar
        return options


def completion_burst() -> list[Burst]:
    """Fired when speech playback finishes."""
    return [Burst(particle_count=200, spread=100, origin_y=0.6, colors=list(GOLD_PALETTE))]


def blessing_burst() -> list[Burst]:
    """Fired when the pig icon is double-pressed."""
    return [
        Burst(
            particle_count=100,
            spread=70,
            origin_x=0.5,
            origin_y=0.85,
            colors=list(BLESSING_PALETTE),
        )
    ]


def money_shower(
    duration_ms: int = 3000,
    interval_ms: int = 50,
    rng: Optional[random.Random] = None,
) -> list[Burst]:
    """Small bursts from random points along the top edge until the deadline."""
    rng = rng or random.Random()
    bursts = []
    for delay in range(interval_ms, duration_ms, interval_ms):
        bursts.append(
            Burst(
                particle_count=4,
                angle=round(rng.uniform(55, 125), 2),
                spread=round(rng.uniform(50, 70), 2),
                origin_x=round(rng.uniform(0.1, 0.9), 3),
                origin_y=0,
                colors=list(MONEY_PALETTE),
                shapes=["circle"],
                gravity=1.2,
                scalar=1.2,
                delay_ms=delay,
            )
        )
    return bursts


class BlessingTracker:
    """Double-press detection for the decorative pig icon.

    Streamlit has no double-click event, so two presses of the icon button
    within ``double_click_window`` seconds count as one double-click. Each
    double-click increments the blessing counter, shows the "복 받았습니다"
    overlay for ``blessing_duration`` seconds and fires one burst.
    """

    def __init__(
        self,
        blessing_duration: float = 2.5,
        double_click_window: float = 0.6,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.blessing_duration = blessing_duration
        self.double_click_window = double_click_window
        self.clock = clock
        self.count = 0
        self._last_press: Optional[float] = None
        self._overlay_until: Optional[float] = None

    def press(self) -> Optional[list[Burst]]:
        """Register one press; returns the burst when it completes a double-click."""
        now = self.clock()
        if self._last_press is not None and now - self._last_press <= self.double_click_window:
            self._last_press = None
            return self.double_click()
        self._last_press = now
        return None

    def double_click(self) -> list[Burst]:
        now = self.clock()
        self.count += 1
        self._overlay_until = now + self.blessing_duration
        return blessing_burst()

    def overlay_visible(self) -> bool:
        return self._overlay_until is not None and self.clock() < self._overlay_until
