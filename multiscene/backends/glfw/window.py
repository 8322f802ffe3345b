"""GLFW window wrapper implementing the GLWindow protocol."""

import glfw


class GlfwWindow:
    """
    Wraps a GLFW window to implement the GLWindow protocol.

    This lets surfaces and the renderer work with any window without knowing
    it is backed by GLFW.
    """

    def __init__(self, glfw_window):
        # Handle returned by glfw.create_window(); shared contexts pass it as share=.
        self.glfw_window = glfw_window

    def get_framebuffer_size(self) -> tuple[int, int]:
        """Drawable size in pixels; larger than the window size on high-DPI."""
        return glfw.get_framebuffer_size(self.glfw_window)

    def make_current(self) -> None:
        glfw.make_context_current(self.glfw_window)

    def flip(self) -> None:
        """Swaps the back and front buffers, displaying the rendered frame."""
        glfw.swap_buffers(self.glfw_window)

    def should_close(self) -> bool:
        return bool(glfw.window_should_close(self.glfw_window))

    def set_should_close(self, value: bool) -> None:
        glfw.set_window_should_close(self.glfw_window, value)

    def hide(self) -> None:
        glfw.hide_window(self.glfw_window)

    def destroy(self) -> None:
        glfw.destroy_window(self.glfw_window)
