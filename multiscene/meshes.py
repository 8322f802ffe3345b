"""Procedural 2D meshes and the registry that owns their GPU buffers.

Every mesh shares one interleaved vertex layout: two position floats followed
by three color floats. Builders are pure functions that return that layout as
an ``(n, 5)`` float32 array, so they can be tested without a GPU. The
``MeshRegistry`` uploads each array once into a static buffer and never
touches it again.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

import moderngl
import numpy as np

from multiscene.errors import MeshAllocationError
from multiscene.types import RGB

if TYPE_CHECKING:
    from numpy.typing import NDArray

logger = logging.getLogger(__name__)

FLOATS_PER_VERTEX = 5
VERTEX_FORMAT = "2f 3f"
VERTEX_ATTRIBUTES = ("in_position", "in_color")

BLACK: RGB = (0.0, 0.0, 0.0)
WHITE: RGB = (1.0, 1.0, 1.0)


class MeshKind(Enum):
    STRIPED_SQUARES = "striped_squares"
    ELLIPSE = "ellipse"
    CIRCLE = "circle"
    TRIANGLE = "triangle"
    SQUARE = "square"


def _vertex(x: float, y: float, color: RGB) -> tuple[float, ...]:
    return (x, y, *color)


def _as_vertex_array(vertices: list[tuple[float, ...]]) -> NDArray[np.float32]:
    return np.asarray(vertices, dtype=np.float32).reshape(-1, FLOATS_PER_VERTEX)


def build_striped_squares(
    layers: int, outer_half_size: float
) -> NDArray[np.float32]:
    """Concentric squares alternating black and white, outermost first.

    Layer ``i`` has half size ``outer_half_size * (1 - i / layers)``. Each
    layer is two independent triangles (six vertices) so the stack draws as a
    plain triangle list with later, smaller layers painted on top.
    """
    if layers < 1:
        raise ValueError(f"layers must be at least 1, got {layers}")
    if outer_half_size <= 0:
        raise ValueError(f"outer_half_size must be positive, got {outer_half_size}")

    vertices: list[tuple[float, ...]] = []
    for i in range(layers):
        h = outer_half_size * (1 - i / layers)
        color = BLACK if i % 2 == 0 else WHITE
        vertices += [
            _vertex(-h, -h, color),
            _vertex(h, -h, color),
            _vertex(h, h, color),
            _vertex(h, h, color),
            _vertex(-h, h, color),
            _vertex(-h, -h, color),
        ]
    return _as_vertex_array(vertices)


def build_ellipse(
    segments: int, radius_x: float, radius_y: float, color: RGB
) -> NDArray[np.float32]:
    """Triangle-fan ellipse: a center vertex followed by ``segments + 1``
    perimeter vertices, the last one repeating angle 0 to close the ring."""
    if segments < 3:
        raise ValueError(f"segments must be at least 3, got {segments}")
    if radius_x <= 0 or radius_y <= 0:
        raise ValueError(f"radii must be positive, got ({radius_x}, {radius_y})")

    vertices = [_vertex(0.0, 0.0, color)]
    for i in range(segments + 1):
        # i == segments wraps back to theta == 0 exactly
        theta = 2.0 * math.pi * (i % segments) / segments
        vertices.append(
            _vertex(radius_x * math.cos(theta), radius_y * math.sin(theta), color)
        )
    return _as_vertex_array(vertices)


def build_circle(segments: int, radius: float, color: RGB) -> NDArray[np.float32]:
    return build_ellipse(segments, radius, radius, color)


def build_triangle(
    size: float, colors: tuple[RGB, RGB, RGB] = (BLACK, BLACK, BLACK)
) -> NDArray[np.float32]:
    if size <= 0:
        raise ValueError(f"size must be positive, got {size}")
    top, left, right = colors
    return _as_vertex_array(
        [
            _vertex(0.0, size, top),
            _vertex(-size, -size, left),
            _vertex(size, -size, right),
        ]
    )


def build_square(half_size: float, color: RGB) -> NDArray[np.float32]:
    """Four-corner square wound counter-clockwise for a triangle fan."""
    if half_size <= 0:
        raise ValueError(f"half_size must be positive, got {half_size}")
    h = half_size
    return _as_vertex_array(
        [
            _vertex(-h, -h, color),
            _vertex(h, -h, color),
            _vertex(h, h, color),
            _vertex(-h, h, color),
        ]
    )


MESH_BUILDERS: dict[MeshKind, Callable[..., NDArray[np.float32]]] = {
    MeshKind.STRIPED_SQUARES: build_striped_squares,
    MeshKind.ELLIPSE: build_ellipse,
    MeshKind.CIRCLE: build_circle,
    MeshKind.TRIANGLE: build_triangle,
    MeshKind.SQUARE: build_square,
}

# Fans must be drawn as fans; everything else is a plain triangle list.
MESH_PRIMITIVES: dict[MeshKind, int] = {
    MeshKind.STRIPED_SQUARES: moderngl.TRIANGLES,
    MeshKind.ELLIPSE: moderngl.TRIANGLE_FAN,
    MeshKind.CIRCLE: moderngl.TRIANGLE_FAN,
    MeshKind.TRIANGLE: moderngl.TRIANGLES,
    MeshKind.SQUARE: moderngl.TRIANGLE_FAN,
}


def build_vertices(kind: MeshKind, **params: Any) -> NDArray[np.float32]:
    """Run the builder for ``kind`` with ``params``."""
    return MESH_BUILDERS[kind](**params)


@dataclass(frozen=True)
class Mesh:
    """An immutable GPU vertex buffer plus what is needed to draw it."""

    name: str
    kind: MeshKind
    buffer: moderngl.Buffer
    vertex_count: int

    @property
    def primitive(self) -> int:
        return MESH_PRIMITIVES[self.kind]


class MeshRegistry:
    """Owns every mesh buffer in the application.

    Created once against the primary window's context. Because secondary
    windows share that context's object namespace, a single registry serves
    all of them; surfaces look meshes up by name and never copy them.
    """

    def __init__(self, mgl_context: moderngl.Context) -> None:
        self.mgl_context = mgl_context
        self._meshes: dict[str, Mesh] = {}

    def build_mesh(self, name: str, kind: MeshKind, **params: Any) -> Mesh:
        """Build the vertices for ``kind`` and upload them as mesh ``name``.

        Raises:
            ValueError: If a mesh called ``name`` already exists, or the
                builder rejects ``params``.
            MeshAllocationError: If the GPU buffer cannot be created.
        """
        if name in self._meshes:
            raise ValueError(f"Mesh {name!r} is already registered")

        vertices = build_vertices(kind, **params)
        try:
            buffer = self.mgl_context.buffer(vertices.tobytes())
        except moderngl.Error as e:
            raise MeshAllocationError(
                f"Failed to allocate GPU buffer for mesh {name!r}: {e}"
            ) from e

        mesh = Mesh(name=name, kind=kind, buffer=buffer, vertex_count=len(vertices))
        self._meshes[name] = mesh
        logger.debug(f"Uploaded mesh {name!r} ({kind.value}, {len(vertices)} verts)")
        return mesh

    def __getitem__(self, name: str) -> Mesh:
        return self._meshes[name]

    def __contains__(self, name: object) -> bool:
        return name in self._meshes

    def __iter__(self) -> Iterator[Mesh]:
        return iter(self._meshes.values())

    def __len__(self) -> int:
        return len(self._meshes)

    def release_all(self) -> None:
        """Release every mesh buffer. Only valid at shutdown."""
        for mesh in self._meshes.values():
            mesh.buffer.release()
        self._meshes.clear()
