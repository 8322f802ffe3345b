"""The per-frame poll/update/render/present cycle shared by all surfaces."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

from multiscene.util.clock import Clock

if TYPE_CHECKING:
    from multiscene.animation import AnimationState
    from multiscene.surfaces import Surface, SurfaceSet

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    def render_surface(self, surface: Surface, animation: AnimationState) -> bool:
        """Draw and present one surface; False if it was skipped this frame."""
        ...


class RenderLoop:
    """
    Drives every surface from one thread.

    Each ``step()`` is strictly ordered: measure the frame delta, advance the
    shared animation, poll input for all windows at once, then draw each open
    surface, primary first and secondaries in creation order. The only
    termination signal is the primary surface closing, checked once per step.
    """

    def __init__(
        self,
        surfaces: SurfaceSet,
        animation: AnimationState,
        renderer: Renderer,
        poll_events: Callable[[], None],
        clock: Clock | None = None,
    ) -> None:
        self.surfaces = surfaces
        self.animation = animation
        self.renderer = renderer
        self.poll_events = poll_events
        self.clock = clock or Clock()
        self.frame_count = 0

    def step(self) -> bool:
        """Run one frame. Returns False once the loop should stop."""
        if not self.surfaces.is_running:
            return False

        delta_time = self.clock.tick()
        self.animation.advance(delta_time)

        self.poll_events()
        self.surfaces.sync_close()

        for surface in self.surfaces.live():
            self.renderer.render_surface(surface, self.animation)

        self.frame_count += 1
        return self.surfaces.is_running

    def run(self) -> None:
        """Step until the primary surface closes."""
        logger.info(f"Render loop started with {len(self.surfaces)} surface(s)")
        while self.step():
            pass
        logger.info(
            f"Render loop finished after {self.frame_count} frames "
            f"(mean {self.clock.mean_fps:.1f} FPS)"
        )
