"""Fakes standing in for windows and GL objects so tests need no display."""

from __future__ import annotations

from typing import Any

import moderngl

from multiscene.animation import AnimationState
from multiscene.input_handler import SurfaceInputHandler
from multiscene.scene import DrawSpec
from multiscene.surfaces import Surface, SurfaceConfig, SurfaceSet


class FakeWindow:
    """Records what a surface asked of its window."""

    def __init__(self, width: int = 600, height: int = 600) -> None:
        self.width = width
        self.height = height
        self.close_requested = False
        self.hidden = False
        self.flips = 0
        self.make_current_calls = 0

    def get_framebuffer_size(self) -> tuple[int, int]:
        return (self.width, self.height)

    def make_current(self) -> None:
        self.make_current_calls += 1

    def flip(self) -> None:
        self.flips += 1

    def should_close(self) -> bool:
        return self.close_requested

    def set_should_close(self, value: bool) -> None:
        self.close_requested = value

    def hide(self) -> None:
        self.hidden = True


class FakeUniform:
    def __init__(self) -> None:
        self.value: Any = None


class FakeProgram:
    """Program whose uniforms are plain attributes; records every write."""

    def __init__(self) -> None:
        self.uniforms: dict[str, FakeUniform] = {}

    def __getitem__(self, name: str) -> FakeUniform:
        return self.uniforms.setdefault(name, FakeUniform())

    def release(self) -> None:
        pass


class FakeBuffer:
    def __init__(self, data: bytes) -> None:
        self.data = data
        self.released = False

    def release(self) -> None:
        self.released = True


class FakeVertexArray:
    def __init__(self, ctx: FakeContext, program: Any, content: list) -> None:
        self.ctx = ctx
        self.program = program
        self.content = content
        self.released = False

    def render(self, mode: int, vertices: int = -1) -> None:
        if self.ctx.fail_draws:
            raise moderngl.Error("simulated draw failure")
        self.ctx.draw_calls.append((self, mode, vertices))

    def release(self) -> None:
        self.released = True


class FakeScreen:
    def use(self) -> None:
        pass


class FakeContext:
    """Just enough of moderngl.Context for the registry and renderer."""

    def __init__(self) -> None:
        self.screen = FakeScreen()
        self.viewport: tuple[int, int, int, int] | None = None
        self.clears: list[tuple[float, ...]] = []
        self.buffers: list[FakeBuffer] = []
        self.vertex_arrays: list[FakeVertexArray] = []
        self.draw_calls: list[tuple[FakeVertexArray, int, int]] = []
        self.fail_draws = False
        self.fail_buffers = False
        self.info = {"GL_VERSION": "3.3.0 (fake)"}
        self.programs: list[FakeProgram] = []
        self.released = False

    def buffer(self, data: bytes) -> FakeBuffer:
        if self.fail_buffers:
            raise moderngl.Error("out of memory")
        buffer = FakeBuffer(data)
        self.buffers.append(buffer)
        return buffer

    def vertex_array(self, program: Any, content: list) -> FakeVertexArray:
        vao = FakeVertexArray(self, program, content)
        self.vertex_arrays.append(vao)
        return vao

    def clear(self, *color: float) -> None:
        self.clears.append(color)

    def program(self, vertex_shader: str, fragment_shader: str) -> FakeProgram:
        program = FakeProgram()
        self.programs.append(program)
        return program

    def release(self) -> None:
        self.released = True


def make_surfaces(
    names: tuple[str, ...] = ("one", "two", "three"),
    draw_list: tuple[DrawSpec, ...] = (),
) -> tuple[SurfaceSet, AnimationState, dict[str, SurfaceInputHandler]]:
    """A primary plus secondaries backed by FakeWindows, with input handlers."""
    animation = AnimationState()
    surfaces = SurfaceSet()
    handlers: dict[str, SurfaceInputHandler] = {}
    primary_name = names[0]
    for index, name in enumerate(names):
        surface_config = SurfaceConfig(
            name=name,
            title=name.title(),
            share_context_with=None if index == 0 else primary_name,
            background_index=index,
            draw_list=draw_list,
        )
        surface = Surface(surface_config, FakeWindow())
        surfaces.add(surface)
        handlers[name] = SurfaceInputHandler(surface, animation)
    return surfaces, animation, handlers
