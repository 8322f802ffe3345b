from typing import Protocol


class GLWindow(Protocol):
    """
    Defines the minimal interface a windowing library must provide
    to be a presentation surface for the shared OpenGL resources.

    Every window *implies* a GL context whose object namespace is shared
    with the primary window's context, so meshes and the program created
    there can be drawn here once this window's context is current.
    """

    def get_framebuffer_size(self) -> tuple[int, int]:
        """Drawable size in pixels; can exceed the window size on high DPI."""
        ...

    def make_current(self) -> None:
        """Makes this window's context the target of subsequent GL calls."""
        ...

    def flip(self) -> None:
        """Swaps the back and front buffers, displaying the rendered frame."""
        ...

    def should_close(self) -> bool:
        """Whether the user asked the window system to close this window."""
        ...

    def set_should_close(self, value: bool) -> None: ...

    def hide(self) -> None:
        """Removes the window from the screen without destroying its context."""
        ...
