"""Tests for drawing surfaces from the shared registry and program."""

from __future__ import annotations

import logging

import moderngl
import pytest

from multiscene import config
from multiscene.backends.moderngl.renderer import SurfaceRenderer
from multiscene.backends.moderngl.shader_manager import ShaderProgram
from multiscene.input_handler import LocalVisualState
from multiscene.meshes import WHITE, MeshKind, MeshRegistry
from multiscene.render_loop import RenderLoop
from multiscene.scene import DrawSpec, Spin
from multiscene.types import ColorOverride
from tests.helpers import FakeContext, FakeProgram, FakeWindow, make_surfaces

DRAW_LIST = (
    DrawSpec("stripes", offset=(-0.5, 0.0), spin=Spin.A),
    DrawSpec("circle", offset=(0.5, 0.0)),
)


class FlakyWindow(FakeWindow):
    """A window whose next draw fails with a GPU error while ``fail`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.fail = False

    def get_framebuffer_size(self) -> tuple[int, int]:
        if self.fail:
            raise moderngl.Error("context lost")
        return super().get_framebuffer_size()


@pytest.fixture
def ctx() -> FakeContext:
    return FakeContext()


@pytest.fixture
def program() -> FakeProgram:
    return FakeProgram()


@pytest.fixture
def renderer(ctx: FakeContext, program: FakeProgram) -> SurfaceRenderer:
    meshes = MeshRegistry(ctx)  # type: ignore[arg-type]
    meshes.build_mesh(
        "stripes", MeshKind.STRIPED_SQUARES, layers=3, outer_half_size=0.4
    )
    meshes.build_mesh("circle", MeshKind.CIRCLE, segments=16, radius=0.2, color=WHITE)
    shader = ShaderProgram(program)  # type: ignore[arg-type]
    return SurfaceRenderer(ctx, meshes, shader)  # type: ignore[arg-type]


class TestRenderSurface:
    def test_clears_draws_and_presents(
        self, renderer: SurfaceRenderer, ctx: FakeContext
    ) -> None:
        surfaces, animation, _ = make_surfaces(draw_list=DRAW_LIST)
        surface = surfaces.primary

        assert renderer.render_surface(surface, animation) is True

        assert surface.window.make_current_calls == 1
        assert ctx.viewport == (0, 0, 600, 600)
        assert ctx.clears == [(*surface.state.background_color, 1.0)]
        assert [(mode, count) for _, mode, count in ctx.draw_calls] == [
            (moderngl.TRIANGLES, 18),
            (moderngl.TRIANGLE_FAN, 18),
        ]
        assert surface.window.flips == 1

    def test_last_draw_uniforms(
        self, renderer: SurfaceRenderer, program: FakeProgram
    ) -> None:
        surfaces, animation, _ = make_surfaces(draw_list=DRAW_LIST)
        surface = surfaces.get("two")
        surface.state = LocalVisualState(color_override=ColorOverride.C)

        renderer.render_surface(surface, animation)

        assert program["u_offset"].value == (0.5, 0.0)
        assert program["u_scale"].value == 1.0
        assert program["u_angle"].value == 0.0
        assert program["u_use_override"].value == 1
        assert program["u_override_color"].value == config.OVERRIDE_COLORS[
            ColorOverride.C
        ]

    def test_meshes_are_shared_not_copied(
        self, renderer: SurfaceRenderer, ctx: FakeContext
    ) -> None:
        surfaces, animation, _ = make_surfaces(draw_list=DRAW_LIST)

        for _ in range(3):
            for surface in surfaces:
                renderer.render_surface(surface, animation)

        # Two buffers total, one vertex array per (surface, mesh)
        assert len(ctx.buffers) == 2
        assert renderer.vertex_array_count == 3 * 2
        referenced = {id(vao.content[0][0]) for vao in ctx.vertex_arrays}
        assert referenced == {id(buffer) for buffer in ctx.buffers}

    def test_release_surface_only_drops_its_vertex_arrays(
        self, renderer: SurfaceRenderer, ctx: FakeContext
    ) -> None:
        surfaces, animation, _ = make_surfaces(draw_list=DRAW_LIST)
        for surface in surfaces:
            renderer.render_surface(surface, animation)

        renderer.release_surface(surfaces.get("two"))

        assert renderer.vertex_array_count == 4
        released = [vao for vao in ctx.vertex_arrays if vao.released]
        assert len(released) == 2
        assert not any(buffer.released for buffer in ctx.buffers)


class TestFailures:
    def test_gpu_error_skips_only_that_surface(
        self,
        renderer: SurfaceRenderer,
        ctx: FakeContext,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        surfaces, animation, _ = make_surfaces(draw_list=DRAW_LIST)
        flaky = FlakyWindow()
        flaky.fail = True
        surfaces.get("two").window = flaky
        loop = RenderLoop(surfaces, animation, renderer, poll_events=lambda: None)

        with caplog.at_level(logging.WARNING):
            assert loop.step()

        assert surfaces.get("one").window.flips == 1
        assert flaky.flips == 0
        assert surfaces.get("three").window.flips == 1
        assert "'two'" in caplog.text

        # Transient: the next frame draws it again
        flaky.fail = False
        assert loop.step()
        assert flaky.flips == 1

    def test_draw_call_failure_is_caught(
        self, renderer: SurfaceRenderer, ctx: FakeContext
    ) -> None:
        surfaces, animation, _ = make_surfaces(draw_list=DRAW_LIST)
        ctx.fail_draws = True

        assert renderer.render_surface(surfaces.primary, animation) is False
        assert surfaces.primary.window.flips == 0

    def test_unusable_program_still_clears_and_presents(
        self, ctx: FakeContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        meshes = MeshRegistry(ctx)  # type: ignore[arg-type]
        renderer = SurfaceRenderer(
            ctx,  # type: ignore[arg-type]
            meshes,
            ShaderProgram(program=None, diagnostic="error: boom"),
        )
        surfaces, animation, _ = make_surfaces(draw_list=DRAW_LIST)

        with caplog.at_level(logging.WARNING):
            for surface in surfaces:
                assert renderer.render_surface(surface, animation) is True

        assert len(ctx.clears) == 3
        assert ctx.draw_calls == []
        assert caplog.text.count("unusable") == 1
