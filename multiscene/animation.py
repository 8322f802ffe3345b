"""The shared animation clock every surface reads from."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from multiscene import config
from multiscene.types import DeltaTime

logger = logging.getLogger(__name__)


@dataclass
class AnimationState:
    """Process-wide elapsed time and rotation accumulators.

    Owned by the render loop and advanced exactly once per frame. The angles
    are never wrapped; they only ever reach the GPU through sin/cos.
    """

    elapsed_time: float = 0.0
    angle_a: float = 0.0
    angle_b: float = 0.0
    is_playing: bool = True
    angle_a_rate: float = config.ANGLE_A_RATE
    angle_b_rate: float = config.ANGLE_B_RATE

    def advance(self, delta_time: DeltaTime) -> None:
        """Move the clock forward by ``delta_time`` seconds if playing."""
        if not self.is_playing:
            return
        if delta_time < 0:
            raise ValueError(f"delta_time must be non-negative, got {delta_time}")

        self.elapsed_time += delta_time
        self.angle_a += self.angle_a_rate * delta_time
        self.angle_b += self.angle_b_rate * delta_time

    def toggle_playing(self) -> bool:
        """Flip play/pause and return the new ``is_playing`` value."""
        self.is_playing = not self.is_playing
        logger.info("Animation resumed" if self.is_playing else "Animation paused")
        return self.is_playing

    def pulse_scale(self) -> float:
        """Scale factor oscillating around ``PULSE_BASE``."""
        return config.PULSE_BASE + config.PULSE_AMPLITUDE * math.sin(
            self.elapsed_time * config.PULSE_FREQUENCY
        )

    def bounce_offset(self) -> float:
        """Vertical offset for shapes that bob up and down."""
        return config.BOUNCE_AMPLITUDE * math.sin(
            self.elapsed_time * config.BOUNCE_FREQUENCY
        )
