"""Per-surface drawing from the shared mesh registry and shader program."""

import logging
from typing import TYPE_CHECKING

import moderngl

from multiscene.meshes import VERTEX_ATTRIBUTES, VERTEX_FORMAT, Mesh, MeshRegistry
from multiscene.scene import compute_uniforms

from .shader_manager import ShaderProgram

if TYPE_CHECKING:
    from multiscene.animation import AnimationState
    from multiscene.surfaces import Surface

logger = logging.getLogger(__name__)


class SurfaceRenderer:
    """
    Draws one surface per call from the shared mesh registry and program.

    Buffers and programs live in the shared GL object namespace, but vertex
    array objects are containers that OpenGL never shares between contexts.
    Each surface therefore gets its own small vertex array per mesh, created
    while that surface's context is current, all pointing at the same buffer.
    """

    def __init__(
        self,
        mgl_context: moderngl.Context,
        meshes: MeshRegistry,
        program: ShaderProgram,
    ) -> None:
        self.mgl_context = mgl_context
        self.meshes = meshes
        self.program = program
        self._vertex_arrays: dict[tuple[str, str], moderngl.VertexArray] = {}
        self._warned_unusable_program = False

    def render_surface(self, surface: "Surface", animation: "AnimationState") -> bool:
        """Clear, draw and present ``surface``.

        A GPU error is logged and the surface is skipped for this frame; the
        next frame tries again. Returns whether the frame was presented.
        """
        try:
            self._draw(surface, animation)
        except moderngl.Error as e:
            logger.warning(f"Skipping frame for surface {surface.name!r}: {e}")
            return False

        surface.window.flip()
        return True

    def _draw(self, surface: "Surface", animation: "AnimationState") -> None:
        surface.window.make_current()
        ctx = self.mgl_context

        width, height = surface.window.get_framebuffer_size()
        ctx.screen.use()
        ctx.viewport = (0, 0, width, height)
        ctx.clear(*surface.state.background_color, 1.0)

        if not self.program.usable:
            if not self._warned_unusable_program:
                logger.warning("Shader program is unusable; drawing backgrounds only")
                self._warned_unusable_program = True
            return

        for spec in surface.draw_list:
            mesh = self.meshes[spec.mesh]
            vao = self._vertex_array(surface, mesh)
            self.program.apply(compute_uniforms(spec, animation, surface.state))
            vao.render(mesh.primitive, vertices=mesh.vertex_count)

    def _vertex_array(self, surface: "Surface", mesh: Mesh) -> moderngl.VertexArray:
        key = (surface.name, mesh.name)
        vao = self._vertex_arrays.get(key)
        if vao is None:
            assert self.program.program is not None
            vao = self.mgl_context.vertex_array(
                self.program.program,
                [(mesh.buffer, VERTEX_FORMAT, *VERTEX_ATTRIBUTES)],
            )
            self._vertex_arrays[key] = vao
            logger.debug(f"Bound mesh {mesh.name!r} for surface {surface.name!r}")
        return vao

    def release_surface(self, surface: "Surface") -> None:
        """Drop the vertex arrays made for ``surface``.

        Must run while that surface's context is still alive and current.
        """
        for key in [key for key in self._vertex_arrays if key[0] == surface.name]:
            self._vertex_arrays.pop(key).release()

    @property
    def vertex_array_count(self) -> int:
        return len(self._vertex_arrays)
