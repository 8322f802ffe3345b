"""What each surface draws, and how shared and local state become uniforms."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from multiscene import config
from multiscene.meshes import MeshKind
from multiscene.types import RGB, Vec2

if TYPE_CHECKING:
    from multiscene.animation import AnimationState
    from multiscene.input_handler import LocalVisualState


class Spin(Enum):
    """Which shared angle accumulator drives a draw's rotation."""

    NONE = auto()
    A = auto()
    B = auto()


class Motion(Enum):
    STATIC = auto()
    PULSE = auto()  # scale oscillates
    BOUNCE = auto()  # y offset oscillates


@dataclass(frozen=True)
class DrawSpec:
    """One draw call: which mesh, where, and how it animates."""

    mesh: str
    offset: Vec2 = (0.0, 0.0)
    scale: float = 1.0
    spin: Spin = Spin.NONE
    motion: Motion = Motion.STATIC


@dataclass(frozen=True)
class DrawUniforms:
    offset: Vec2
    scale: float
    angle: float
    use_override: bool
    override_color: RGB


_NO_OVERRIDE_COLOR: RGB = (0.0, 0.0, 0.0)


def compute_uniforms(
    spec: DrawSpec, animation: AnimationState, state: LocalVisualState
) -> DrawUniforms:
    """Combine shared animation and a surface's local state for one draw."""
    match spec.spin:
        case Spin.A:
            angle = animation.angle_a
        case Spin.B:
            angle = animation.angle_b
        case _:
            angle = 0.0
    angle += state.rotation_phase

    x, y = spec.offset
    bias_x, bias_y = state.offset_bias
    x += bias_x
    y += bias_y
    scale = spec.scale * state.scale_bias
    if spec.motion is Motion.PULSE:
        scale *= animation.pulse_scale()
    elif spec.motion is Motion.BOUNCE:
        y += animation.bounce_offset()

    override_color = state.override_color
    return DrawUniforms(
        offset=(x, y),
        scale=scale,
        angle=angle,
        use_override=override_color is not None,
        override_color=override_color or _NO_OVERRIDE_COLOR,
    )


# =============================================================================
# DEFAULT SCENE
# =============================================================================

# (mesh name, kind, builder params) for every mesh uploaded at startup.
DEFAULT_MESHES: tuple[tuple[str, MeshKind, dict[str, Any]], ...] = (
    (
        "stripes",
        MeshKind.STRIPED_SQUARES,
        {
            "layers": config.STRIPE_LAYERS,
            "outer_half_size": config.STRIPE_OUTER_HALF_SIZE,
        },
    ),
    (
        "circle",
        MeshKind.CIRCLE,
        {
            "segments": config.CIRCLE_SEGMENTS,
            "radius": config.CIRCLE_RADIUS,
            "color": config.GREEN,
        },
    ),
    (
        "ellipse",
        MeshKind.ELLIPSE,
        {
            "segments": config.ELLIPSE_SEGMENTS,
            "radius_x": config.ELLIPSE_RADII[0],
            "radius_y": config.ELLIPSE_RADII[1],
            "color": (0.9, 0.6, 0.1),
        },
    ),
    (
        "triangle",
        MeshKind.TRIANGLE,
        {
            "size": config.TRIANGLE_SIZE,
            "colors": (config.RED, config.GREEN, config.BLUE),
        },
    ),
    (
        "square",
        MeshKind.SQUARE,
        {"half_size": config.SQUARE_HALF_SIZE, "color": config.BLUE},
    ),
)

# Draw lists keyed by surface name, drawn in list order.
DEFAULT_DRAW_LISTS: dict[str, tuple[DrawSpec, ...]] = {
    "stripes": (
        DrawSpec("stripes", offset=(-0.4, 0.0), spin=Spin.A),
        DrawSpec("circle", offset=(0.55, 0.0), motion=Motion.BOUNCE),
    ),
    "ellipse": (DrawSpec("ellipse", spin=Spin.B, motion=Motion.PULSE),),
    "triangle": (
        DrawSpec("triangle", offset=(-0.4, 0.0), scale=1.5, spin=Spin.A),
        DrawSpec("square", offset=(0.5, 0.0), motion=Motion.PULSE),
    ),
}
