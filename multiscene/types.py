from __future__ import annotations

from enum import Enum, auto
from typing import NewType

# =============================================================================
# GEOMETRY & COLOR
# =============================================================================

# Normalized device coordinates, x and y in [-1, 1] for anything on screen.
Vec2 = tuple[float, float]

# Linear RGB with each channel in [0.0, 1.0].
RGB = tuple[float, float, float]

# =============================================================================
# TIME-RELATED TYPES
# =============================================================================

# Represents the real-world time elapsed between two rendered frames.
# Animation is advanced by this amount so that it looks the same
# regardless of how fast frames are presented.
DeltaTime = NewType("DeltaTime", float)

# =============================================================================
# INPUT & VISUAL STATE
# =============================================================================


class ColorOverride(Enum):
    """Which override color a surface paints its meshes with."""

    NONE = auto()
    A = auto()
    B = auto()
    C = auto()
    # A color picked at random per surface, kept in LocalVisualState.
    RANDOM = auto()


class TransformMode(Enum):
    """Which part of a surface's transform the arrow keys adjust."""

    SCALE = auto()
    ROTATE = auto()
    TRANSLATE = auto()


class Action(Enum):
    """What a bound key or mouse button asks a surface to do."""

    TOGGLE_PLAY = auto()
    OVERRIDE_NONE = auto()
    OVERRIDE_A = auto()
    OVERRIDE_B = auto()
    OVERRIDE_C = auto()
    RANDOMIZE_COLOR = auto()
    CYCLE_MODE = auto()
    NUDGE_LEFT = auto()
    NUDGE_RIGHT = auto()
    NUDGE_UP = auto()
    NUDGE_DOWN = auto()
    CYCLE_BACKGROUND = auto()
    CLOSE = auto()
