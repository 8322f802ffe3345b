"""GLFW implementation of the application driver."""

from __future__ import annotations

import logging
from functools import partial

import glfw
import moderngl

from multiscene import input_events
from multiscene.animation import AnimationState
from multiscene.app import App, AppConfig
from multiscene.backends.moderngl.renderer import SurfaceRenderer
from multiscene.backends.moderngl.shader_manager import ShaderManager, ShaderProgram
from multiscene.config import GL_VERSION, SHADER_FRAGMENT_PATH, SHADER_VERTEX_PATH
from multiscene.errors import StartupError
from multiscene.input_handler import SurfaceInputHandler
from multiscene.meshes import MeshRegistry
from multiscene.render_loop import RenderLoop
from multiscene.scene import DEFAULT_MESHES
from multiscene.surfaces import (
    Surface,
    SurfaceConfig,
    SurfaceSet,
    validate_surface_configs,
)

from .window import GlfwWindow

logger = logging.getLogger(__name__)

_KEY_MAP = {
    glfw.KEY_SPACE: input_events.KeySym.SPACE,
    glfw.KEY_C: input_events.KeySym.C,
    glfw.KEY_M: input_events.KeySym.M,
    glfw.KEY_ESCAPE: input_events.KeySym.ESCAPE,
    glfw.KEY_RIGHT: input_events.KeySym.RIGHT,
    glfw.KEY_LEFT: input_events.KeySym.LEFT,
    glfw.KEY_DOWN: input_events.KeySym.DOWN,
    glfw.KEY_UP: input_events.KeySym.UP,
}

_BUTTON_MAP = {
    glfw.MOUSE_BUTTON_LEFT: input_events.MouseButton.LEFT,
    glfw.MOUSE_BUTTON_MIDDLE: input_events.MouseButton.MIDDLE,
    glfw.MOUSE_BUTTON_RIGHT: input_events.MouseButton.RIGHT,
}


class GlfwApp(App):
    """
    The GLFW implementation of the application driver.

    Creates one window per surface config. The primary window's context is
    the one moderngl attaches to and the one every mesh and the program are
    created against; every secondary window is created sharing that context's
    object namespace. Uses GLFW's callback-based event system with a single
    polling main loop that serves all windows.
    """

    def __init__(self, app_config: AppConfig) -> None:
        validate_surface_configs(app_config.surfaces)
        self.app_config = app_config
        self.animation = AnimationState()
        self.surfaces = SurfaceSet()
        self.windows: dict[str, GlfwWindow] = {}
        self.input_handlers: dict[str, SurfaceInputHandler] = {}
        self.mgl_context: moderngl.Context | None = None
        self.meshes: MeshRegistry | None = None
        self.program: ShaderProgram | None = None
        self.renderer: SurfaceRenderer | None = None

        self._initialize_glfw()
        try:
            for surface_config in app_config.surfaces:
                self._create_surface(surface_config)
            self._initialize_graphics()
            self._register_callbacks()
        except Exception:
            self._shutdown()
            raise

        assert self.renderer is not None
        self.loop = RenderLoop(
            self.surfaces, self.animation, self.renderer, glfw.poll_events
        )

    def _initialize_glfw(self) -> None:
        """Initialize GLFW and set the context hints shared by every window."""
        try:
            initialized = glfw.init()
        except glfw.GLFWError as e:
            raise StartupError(f"Failed to initialize GLFW: {e}") from e
        if not initialized:
            raise StartupError("Failed to initialize GLFW")

        # Configure OpenGL context for ModernGL
        glfw.window_hint(glfw.CONTEXT_VERSION_MAJOR, GL_VERSION[0])
        glfw.window_hint(glfw.CONTEXT_VERSION_MINOR, GL_VERSION[1])
        glfw.window_hint(glfw.OPENGL_PROFILE, glfw.OPENGL_CORE_PROFILE)
        glfw.window_hint(glfw.OPENGL_FORWARD_COMPAT, True)
        glfw.window_hint(glfw.RESIZABLE, glfw.TRUE)

    def _create_surface(self, surface_config: SurfaceConfig) -> None:
        """Create the window for ``surface_config`` and register its surface."""
        share = None
        if surface_config.share_context_with is not None:
            share = self.windows[surface_config.share_context_with].glfw_window

        try:
            handle = glfw.create_window(
                surface_config.width,
                surface_config.height,
                surface_config.title,
                None,
                share,
            )
        except glfw.GLFWError as e:
            raise StartupError(
                f"Failed to create window {surface_config.title!r}: {e}"
            ) from e
        if not handle:
            raise StartupError(f"Failed to create window {surface_config.title!r}")

        window = GlfwWindow(handle)
        self.windows[surface_config.name] = window
        surface = Surface(surface_config, window)
        self.surfaces.add(surface)
        self.input_handlers[surface.name] = SurfaceInputHandler(
            surface, self.animation
        )

        # Swap interval is per context. Only the primary waits for vsync,
        # otherwise every extra window would divide the frame rate.
        window.make_current()
        glfw.swap_interval(1 if self.app_config.vsync and surface.is_primary else 0)
        logger.info(
            f"Created {'primary' if surface.is_primary else 'secondary'} surface "
            f"{surface.name!r} ({surface_config.width}x{surface_config.height})"
        )

    def _initialize_graphics(self) -> None:
        """Attach moderngl to the primary context and build shared resources."""
        primary = self.surfaces.primary
        primary.window.make_current()
        try:
            self.mgl_context = moderngl.create_context()
        except Exception as e:
            raise StartupError(f"Failed to create ModernGL context: {e}") from e
        logger.info(f"OpenGL {self.mgl_context.info['GL_VERSION']}")

        shader_manager = ShaderManager(
            self.mgl_context, error_policy=self.app_config.shader_error_policy
        )
        self.program = shader_manager.create_program(
            SHADER_VERTEX_PATH, SHADER_FRAGMENT_PATH
        )

        self.meshes = MeshRegistry(self.mgl_context)
        for name, kind, params in DEFAULT_MESHES:
            self.meshes.build_mesh(name, kind, **params)

        self.renderer = SurfaceRenderer(self.mgl_context, self.meshes, self.program)

    def _register_callbacks(self) -> None:
        """Register GLFW event callbacks, each bound to its own surface."""
        for name, window in self.windows.items():
            handler = self.input_handlers[name]
            glfw.set_key_callback(window.glfw_window, partial(self._on_key, handler))
            glfw.set_mouse_button_callback(
                window.glfw_window, partial(self._on_mouse_button, handler)
            )

    def run(self) -> None:
        """Runs the render loop until the primary surface closes."""
        try:
            self.loop.run()
        finally:
            self._shutdown()

    def _shutdown(self) -> None:
        """Release GPU resources while their contexts still exist, then GLFW."""
        if self.renderer is not None:
            # Vertex arrays belong to the context they were made in.
            for surface in self.surfaces:
                surface.window.make_current()
                self.renderer.release_surface(surface)
            self.renderer = None

        if self.surfaces and self.mgl_context is not None:
            self.surfaces.primary.window.make_current()
            if self.meshes is not None:
                self.meshes.release_all()
            if self.program is not None and self.program.program is not None:
                self.program.program.release()
            self.mgl_context.release()
            self.mgl_context = None

        # Secondaries first; the primary context is the one they share with.
        for window in reversed(list(self.windows.values())):
            window.destroy()
        self.windows.clear()
        glfw.terminate()
        logger.debug("GLFW terminated")

    # Event callback methods
    def _on_key(
        self, handler: SurfaceInputHandler, window, key, scancode, action, mods
    ):
        """Handle keyboard events for one surface."""
        if action == glfw.PRESS or action == glfw.REPEAT:
            event = input_events.KeyDown(
                sym=self._glfw_key_to_keysym(key),
                scancode=scancode,
                mod=self._glfw_mods_to_modifier(mods),
                repeat=action == glfw.REPEAT,
            )
        elif action == glfw.RELEASE:
            event = input_events.KeyUp(
                sym=self._glfw_key_to_keysym(key),
                scancode=scancode,
                mod=self._glfw_mods_to_modifier(mods),
            )
        else:
            return
        handler.dispatch(event)

    def _on_mouse_button(
        self, handler: SurfaceInputHandler, window, button, action, mods
    ):
        """Handle mouse button presses for one surface."""
        if action != glfw.PRESS:
            return
        x, y = glfw.get_cursor_pos(window)
        event = input_events.MouseButtonDown(
            position=input_events.Point(int(x), int(y)),
            button=_BUTTON_MAP.get(button, input_events.MouseButton.UNKNOWN),
            mod=self._glfw_mods_to_modifier(mods),
        )
        handler.dispatch(event)

    @staticmethod
    def _glfw_key_to_keysym(key: int) -> input_events.KeySym:
        """Converts a GLFW key code to a KeySym."""
        if glfw.KEY_0 <= key <= glfw.KEY_9:
            return input_events.KeySym(ord("0") + (key - glfw.KEY_0))
        if glfw.KEY_KP_0 <= key <= glfw.KEY_KP_9:
            return input_events.KeySym(ord("0") + (key - glfw.KEY_KP_0))
        return _KEY_MAP.get(key, input_events.KeySym.UNKNOWN)

    @staticmethod
    def _glfw_mods_to_modifier(mods: int) -> input_events.Modifier:
        mod = input_events.Modifier.NONE
        if mods & glfw.MOD_SHIFT:
            mod |= input_events.Modifier.SHIFT
        if mods & glfw.MOD_CONTROL:
            mod |= input_events.Modifier.CTRL
        if mods & glfw.MOD_ALT:
            mod |= input_events.Modifier.ALT
        return mod
