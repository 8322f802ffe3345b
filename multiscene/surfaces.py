"""The ordered set of presentation surfaces.

One primary surface plus any number of secondaries. The primary owns the
"keep running" decision: the application ends when it closes, whatever the
secondaries are doing. Secondaries close independently and simply drop out
of the draw order.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

from multiscene import config
from multiscene.backends.gl_window import GLWindow
from multiscene.errors import StartupError
from multiscene.input_handler import LocalVisualState
from multiscene.scene import DEFAULT_DRAW_LISTS, DrawSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurfaceConfig:
    """How to create one window.

    ``share_context_with`` names the surface whose GL object namespace this
    one joins; it is ``None`` only for the primary.
    """

    name: str
    title: str
    width: int = config.WINDOW_WIDTH
    height: int = config.WINDOW_HEIGHT
    share_context_with: str | None = None
    background_index: int = 0
    draw_list: tuple[DrawSpec, ...] = field(default_factory=tuple)

    @property
    def is_primary(self) -> bool:
        return self.share_context_with is None


def validate_surface_configs(configs: Sequence[SurfaceConfig]) -> None:
    """Check the layout can be created in order with shared contexts.

    Raises:
        StartupError: If there is not exactly one primary (first), names
            repeat, sizes are not positive, or a secondary shares with a
            surface that is not created before it.
    """
    if not configs:
        raise StartupError("At least one surface is required")
    if not configs[0].is_primary:
        raise StartupError(
            f"First surface {configs[0].name!r} must be the primary "
            "(share_context_with=None)"
        )

    seen: set[str] = set()
    for surface_config in configs:
        name = surface_config.name
        if name in seen:
            raise StartupError(f"Duplicate surface name {name!r}")
        if surface_config.width <= 0 or surface_config.height <= 0:
            raise StartupError(
                f"Surface {name!r} has invalid size "
                f"{surface_config.width}x{surface_config.height}"
            )
        if seen and surface_config.is_primary:
            raise StartupError(f"Surface {name!r} must share a context")
        target = surface_config.share_context_with
        if target is not None and target not in seen:
            raise StartupError(
                f"Surface {name!r} shares with {target!r}, "
                "which is not created before it"
            )
        seen.add(name)


def default_surface_configs(
    secondary_count: int = len(config.SECONDARY_SURFACES),
    width: int = config.WINDOW_WIDTH,
    height: int = config.WINDOW_HEIGHT,
) -> list[SurfaceConfig]:
    """The primary surface followed by the first ``secondary_count`` secondaries."""
    if not 0 <= secondary_count <= len(config.SECONDARY_SURFACES):
        raise ValueError(
            f"secondary_count must be between 0 and "
            f"{len(config.SECONDARY_SURFACES)}, got {secondary_count}"
        )

    primary = SurfaceConfig(
        name=config.PRIMARY_SURFACE_NAME,
        title=config.PRIMARY_WINDOW_TITLE,
        width=width,
        height=height,
        draw_list=DEFAULT_DRAW_LISTS[config.PRIMARY_SURFACE_NAME],
    )
    secondaries = [
        SurfaceConfig(
            name=name,
            title=title,
            width=width,
            height=height,
            share_context_with=primary.name,
            background_index=index + 1,
            draw_list=DEFAULT_DRAW_LISTS[name],
        )
        for index, (name, title) in enumerate(
            config.SECONDARY_SURFACES[:secondary_count]
        )
    ]
    return [primary, *secondaries]


class Surface:
    """One window plus the visual state only it may change."""

    def __init__(self, surface_config: SurfaceConfig, window: GLWindow) -> None:
        self.config = surface_config
        self.window = window
        self.state = LocalVisualState(background_index=surface_config.background_index)
        self.closed = False

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def is_primary(self) -> bool:
        return self.config.is_primary

    @property
    def draw_list(self) -> tuple[DrawSpec, ...]:
        return self.config.draw_list

    def request_close(self) -> None:
        """Ask for this surface to close at the next sync."""
        self.window.set_should_close(True)

    def sync_close(self) -> bool:
        """Latch the window's close request. Returns True if it just closed."""
        if self.closed or not self.window.should_close():
            return False

        self.closed = True
        logger.info(f"Surface {self.name!r} closed")
        if not self.is_primary:
            self.window.hide()
        return True

    def __repr__(self) -> str:
        return (
            f"Surface({self.name!r}, primary={self.is_primary}, "
            f"closed={self.closed})"
        )


class SurfaceSet:
    """Surfaces in creation order, primary first."""

    def __init__(self) -> None:
        self._surfaces: list[Surface] = []

    def add(self, surface: Surface) -> None:
        if not self._surfaces and not surface.is_primary:
            raise StartupError("The first surface added must be the primary")
        if self._surfaces and surface.is_primary:
            raise StartupError("Only one primary surface is allowed")
        self._surfaces.append(surface)

    @property
    def primary(self) -> Surface:
        if not self._surfaces:
            raise LookupError("No surfaces have been added")
        return self._surfaces[0]

    @property
    def is_running(self) -> bool:
        """False once the primary surface has closed."""
        return bool(self._surfaces) and not self.primary.closed

    def get(self, name: str) -> Surface:
        for surface in self._surfaces:
            if surface.name == name:
                return surface
        raise KeyError(name)

    def sync_close(self) -> None:
        for surface in self._surfaces:
            surface.sync_close()

    def live(self) -> Iterator[Surface]:
        """Open surfaces in draw order."""
        return (surface for surface in self._surfaces if not surface.closed)

    def __iter__(self) -> Iterator[Surface]:
        return iter(self._surfaces)

    def __len__(self) -> int:
        return len(self._surfaces)
