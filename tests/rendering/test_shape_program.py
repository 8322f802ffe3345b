"""Pixel readback through the shipped shape program on a headless context.

An ellipse 0.4 wide and 0.2 tall is scaled by 1.5, turned a quarter turn and
moved right by 0.5, so it ends up 0.3 wide and 0.6 tall centred on (0.5, 0).
"""

from __future__ import annotations

import math
from collections.abc import Iterator

import moderngl
import numpy as np
import pytest

from multiscene.backends.moderngl.shader_manager import ShaderManager
from multiscene.config import SHADER_FRAGMENT_PATH, SHADER_VERTEX_PATH
from multiscene.meshes import VERTEX_ATTRIBUTES, VERTEX_FORMAT, MeshKind, MeshRegistry
from multiscene.scene import DrawUniforms

SIZE = 64
MESH_COLOR = (1.0, 0.0, 0.0)
GREEN = (0.0, 1.0, 0.0)


def _pixel(image: np.ndarray, x: float, y: float) -> tuple[int, ...]:
    """Color at normalized device coordinate (x, y)."""
    col = int((x + 1.0) / 2.0 * SIZE)
    row = int((y + 1.0) / 2.0 * SIZE)
    return tuple(int(channel) for channel in image[row, col])


@pytest.fixture
def draw_ellipse(gl_context: moderngl.Context) -> Iterator:
    program = ShaderManager(gl_context).create_program(
        SHADER_VERTEX_PATH, SHADER_FRAGMENT_PATH
    )
    registry = MeshRegistry(gl_context)
    mesh = registry.build_mesh(
        "ellipse",
        MeshKind.ELLIPSE,
        segments=64,
        radius_x=0.4,
        radius_y=0.2,
        color=MESH_COLOR,
    )
    assert program.program is not None
    vao = gl_context.vertex_array(
        program.program, [(mesh.buffer, VERTEX_FORMAT, *VERTEX_ATTRIBUTES)]
    )
    fbo = gl_context.simple_framebuffer((SIZE, SIZE))

    def draw(uniforms: DrawUniforms) -> np.ndarray:
        fbo.use()
        fbo.clear(0.0, 0.0, 0.0, 1.0)
        program.apply(uniforms)
        vao.render(mesh.primitive, vertices=mesh.vertex_count)
        # Rows come back bottom-up, matching device y.
        data = fbo.read(components=3)
        return np.frombuffer(data, dtype=np.uint8).reshape(SIZE, SIZE, 3)

    yield draw

    fbo.release()
    vao.release()
    registry.release_all()
    program.program.release()


def test_transform_and_override_color(draw_ellipse) -> None:
    image = draw_ellipse(
        DrawUniforms(
            offset=(0.5, 0.0),
            scale=1.5,
            angle=math.pi / 2,
            use_override=True,
            override_color=GREEN,
        )
    )

    # Inside the tall, shifted ellipse
    assert _pixel(image, 0.5, 0.45) == (0, 255, 0)
    assert _pixel(image, 0.5, -0.45) == (0, 255, 0)
    # Would be covered without the quarter turn
    assert _pixel(image, 0.92, 0.0) == (0, 0, 0)
    # Would be covered without the offset
    assert _pixel(image, 0.0, 0.0) == (0, 0, 0)


def test_vertex_color_when_override_is_off(draw_ellipse) -> None:
    image = draw_ellipse(
        DrawUniforms(
            offset=(0.0, 0.0),
            scale=1.0,
            angle=0.0,
            use_override=False,
            override_color=GREEN,
        )
    )

    assert _pixel(image, 0.0, 0.0) == (255, 0, 0)
    assert _pixel(image, 0.3, 0.0) == (255, 0, 0)
    assert _pixel(image, 0.0, 0.3) == (0, 0, 0)
