"""
Configuration constants.

Centralizes all magic numbers and configuration values used throughout the codebase.
Organized by functional area for easy maintenance.
"""

import logging
import sys
from typing import Literal

from multiscene.input_events import KeySym, MouseButton
from multiscene.types import RGB, Action, ColorOverride

# =============================================================================
# GENERAL
# =============================================================================

# Test environment detection
IS_TEST_ENVIRONMENT = "pytest" in sys.modules

LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

# =============================================================================
# WINDOWS
# =============================================================================

PRIMARY_SURFACE_NAME = "stripes"
PRIMARY_WINDOW_TITLE = "Shapes - Stripes"

# (name, title) for each secondary window, in creation order.
SECONDARY_SURFACES = (
    ("ellipse", "Shapes - Ellipse"),
    ("triangle", "Shapes - Triangle"),
)

WINDOW_WIDTH = 600
WINDOW_HEIGHT = 600

# OpenGL context version requested from GLFW. moderngl needs 3.3 core.
GL_VERSION = (3, 3)

# Presentation blocks on vsync; it is the only thing bounding the frame rate.
VSYNC = True

# =============================================================================
# ANIMATION
# =============================================================================

# Angular velocities of the two shared rotation accumulators, in rad/s.
ANGLE_A_RATE = 0.8
ANGLE_B_RATE = -1.2

# Oscillations borrowed from the single-window shapes demo.
PULSE_BASE = 0.9
PULSE_AMPLITUDE = 0.15
PULSE_FREQUENCY = 1.6
BOUNCE_AMPLITUDE = 0.35
BOUNCE_FREQUENCY = 1.2

# How far one arrow key press nudges a surface's transform, per mode.
PHASE_STEP = 0.1  # radians
SCALE_STEP = 0.1
TRANSLATE_STEP = 0.1  # normalized device units

# Shrinking stops here so shapes never vanish or mirror.
MIN_SCALE_BIAS = 0.1

FPS_SAMPLE_SIZE = 256  # Number of frame time samples to track

# =============================================================================
# MESHES
# =============================================================================

CIRCLE_SEGMENTS = 64
CIRCLE_RADIUS = 0.18

ELLIPSE_SEGMENTS = 64
ELLIPSE_RADII = (0.6, 0.35)

STRIPE_LAYERS = 8
STRIPE_OUTER_HALF_SIZE = 0.45

TRIANGLE_SIZE = 0.25
SQUARE_HALF_SIZE = 0.25

# =============================================================================
# COLORS
# =============================================================================

RED: RGB = (1.0, 0.0, 0.0)
GREEN: RGB = (0.0, 1.0, 0.0)
BLUE: RGB = (0.0, 0.0, 1.0)

OVERRIDE_COLORS: dict[ColorOverride, RGB] = {
    ColorOverride.A: RED,
    ColorOverride.B: GREEN,
    ColorOverride.C: BLUE,
}

# Backgrounds a surface cycles through on left click. Each surface starts at a
# different index so the windows are told apart at a glance.
BACKGROUND_PALETTE: tuple[RGB, ...] = (
    (0.1, 0.1, 0.1),
    (0.95, 0.95, 0.95),
    (0.2, 0.25, 0.35),
    (0.3, 0.2, 0.25),
)

# =============================================================================
# INPUT
# =============================================================================

KEY_BINDINGS: dict[KeySym, Action] = {
    KeySym.SPACE: Action.TOGGLE_PLAY,
    KeySym.N0: Action.OVERRIDE_NONE,
    KeySym.N1: Action.OVERRIDE_A,
    KeySym.N2: Action.OVERRIDE_B,
    KeySym.N3: Action.OVERRIDE_C,
    KeySym.C: Action.RANDOMIZE_COLOR,
    KeySym.M: Action.CYCLE_MODE,
    KeySym.LEFT: Action.NUDGE_LEFT,
    KeySym.RIGHT: Action.NUDGE_RIGHT,
    KeySym.UP: Action.NUDGE_UP,
    KeySym.DOWN: Action.NUDGE_DOWN,
    KeySym.ESCAPE: Action.CLOSE,
}

MOUSE_BINDINGS: dict[MouseButton, Action] = {
    MouseButton.LEFT: Action.CYCLE_BACKGROUND,
}

# =============================================================================
# SHADERS
# =============================================================================

SHADER_VERTEX_PATH = "scene/shape.vert"
SHADER_FRAGMENT_PATH = "scene/shape.frag"

# "fatal" aborts startup on a compile/link failure; "log" reports the
# diagnostic and keeps running with a program that draws nothing.
ShaderErrorPolicy = Literal["fatal", "log"]
SHADER_ERROR_POLICY: ShaderErrorPolicy = "fatal"
