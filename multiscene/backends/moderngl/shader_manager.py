"""Shader management utility for the ModernGL backend.

Loads GLSL sources from the package's asset directory, builds the single
program every surface draws with, and turns moderngl's build failures into
``CompileError``/``LinkError`` carrying the driver's diagnostic text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import moderngl

from multiscene.config import ShaderErrorPolicy
from multiscene.errors import CompileError, LinkError, ShaderError

if TYPE_CHECKING:
    from multiscene.scene import DrawUniforms

logger = logging.getLogger(__name__)

# multiscene/backends/moderngl/shader_manager.py -> multiscene/assets/shaders/
SHADER_DIR = Path(__file__).parent.parent.parent / "assets" / "shaders"


@dataclass
class ShaderProgram:
    """The one program shared by every draw call on every surface.

    ``program`` is ``None`` when the build failed under the "log" policy; such
    a program is kept so callers have something to hold, but it draws nothing.
    """

    program: moderngl.Program | None
    diagnostic: str | None = None

    @property
    def usable(self) -> bool:
        return self.program is not None

    def apply(self, uniforms: DrawUniforms) -> None:
        """Push one draw call's transform and color uniforms."""
        if self.program is None:
            raise RuntimeError("Cannot set uniforms on a program that failed to build")
        program = self.program
        program["u_offset"].value = uniforms.offset
        program["u_scale"].value = uniforms.scale
        program["u_angle"].value = uniforms.angle
        program["u_use_override"].value = 1 if uniforms.use_override else 0
        program["u_override_color"].value = uniforms.override_color


def classify_build_error(error: moderngl.Error) -> ShaderError:
    """Map a moderngl build failure to the stage that produced it.

    moderngl compiles and links in one call and reports either failure as
    ``moderngl.Error``; the message names the stage ("GLSL Compiler failed" or
    "GLSL Linker failed") followed by the driver's log.
    """
    diagnostic = str(error)
    if "linker" in diagnostic.lower():
        return LinkError("Shader program failed to link", diagnostic)
    return CompileError("Shader stage failed to compile", diagnostic)


class ShaderManager:
    """Manages loading and caching of GLSL shaders from asset files."""

    def __init__(
        self,
        mgl_context: moderngl.Context,
        error_policy: ShaderErrorPolicy = "fatal",
        shader_dir: Path = SHADER_DIR,
    ) -> None:
        """Initialize the shader manager.

        Args:
            mgl_context: The ModernGL context for creating shader programs
            error_policy: "fatal" to raise on build failure, "log" to report
                and return an unusable program
            shader_dir: Root directory that shader paths are relative to
        """
        self.mgl_context = mgl_context
        self.error_policy = error_policy
        self.shader_dir = shader_dir
        self._shader_cache: dict[str, str] = {}

        if not self.shader_dir.exists():
            raise FileNotFoundError(f"Shader directory not found: {self.shader_dir}")

        logger.debug(
            f"ShaderManager initialized with shader directory: {self.shader_dir}"
        )

    def load_shader_source(self, shader_path: str) -> str:
        """Load shader source code from a file.

        Args:
            shader_path: Path to shader file relative to the shader directory
                        (e.g., "scene/shape.vert")

        Returns:
            The shader source code as a string

        Raises:
            FileNotFoundError: If the shader file doesn't exist
        """
        if shader_path in self._shader_cache:
            return self._shader_cache[shader_path]

        full_path = self.shader_dir / shader_path
        if not full_path.exists():
            raise FileNotFoundError(f"Shader file not found: {full_path}")

        source = full_path.read_text(encoding="utf-8")
        self._shader_cache[shader_path] = source
        logger.debug(f"Loaded shader: {shader_path}")
        return source

    def create_program(
        self, vertex_shader_path: str, fragment_shader_path: str
    ) -> ShaderProgram:
        """Create the program from vertex and fragment shader files.

        Args:
            vertex_shader_path: Path to vertex shader (e.g., "scene/shape.vert")
            fragment_shader_path: Path to fragment shader

        Returns:
            The built program, or an unusable one under the "log" policy

        Raises:
            CompileError: If a stage fails to compile and the policy is "fatal"
            LinkError: If linking fails and the policy is "fatal"
        """
        vertex_source = self.load_shader_source(vertex_shader_path)
        fragment_source = self.load_shader_source(fragment_shader_path)
        return self.compile_program(vertex_source, fragment_source)

    def compile_program(
        self, vertex_source: str, fragment_source: str
    ) -> ShaderProgram:
        """Compile and link a program from GLSL source text."""
        try:
            program = self.mgl_context.program(
                vertex_shader=vertex_source, fragment_shader=fragment_source
            )
        except moderngl.Error as e:
            error = classify_build_error(e)
            logger.error(f"{error}:\n{error.diagnostic}")
            if self.error_policy == "fatal":
                raise error from e
            logger.warning("Continuing with an unusable shader program")
            return ShaderProgram(program=None, diagnostic=error.diagnostic)

        logger.debug("Created shader program")
        return ShaderProgram(program=program)
