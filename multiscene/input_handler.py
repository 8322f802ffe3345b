"""Per-surface input handling.

Each surface's visual state is changed by a pure reducer,
``reduce_local_state(action, state) -> state``. ``SurfaceInputHandler`` is
the thin stateful shell the window backend calls: it resolves an event to an
action through the binding tables, applies shared actions to the explicitly
passed ``AnimationState``, and swaps in the reduced local state. A handler
only ever writes to its own surface.

Arrow keys adjust whichever transform the surface's mode selects:

- ``SCALE``: up and down grow or shrink every shape, never below
  ``config.MIN_SCALE_BIAS``.
- ``ROTATE``: right and up turn forward, left and down turn back.
- ``TRANSLATE``: each arrow moves the whole scene that way.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

from multiscene import config
from multiscene.input_events import (
    InputEvent,
    KeyDown,
    KeySym,
    MouseButton,
    MouseButtonDown,
)
from multiscene.types import RGB, Action, ColorOverride, TransformMode, Vec2

if TYPE_CHECKING:
    from multiscene.animation import AnimationState
    from multiscene.surfaces import Surface

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LocalVisualState:
    """Visual state owned by exactly one surface."""

    color_override: ColorOverride = ColorOverride.NONE
    background_index: int = 0
    transform_mode: TransformMode = TransformMode.ROTATE
    rotation_phase: float = 0.0
    scale_bias: float = 1.0
    offset_bias: Vec2 = (0.0, 0.0)
    random_color: RGB = (1.0, 1.0, 1.0)

    @property
    def background_color(self) -> RGB:
        palette = config.BACKGROUND_PALETTE
        return palette[self.background_index % len(palette)]

    @property
    def override_color(self) -> RGB | None:
        """The color meshes are painted with, or None to keep vertex colors."""
        if self.color_override is ColorOverride.NONE:
            return None
        if self.color_override is ColorOverride.RANDOM:
            return self.random_color
        return config.OVERRIDE_COLORS[self.color_override]


_OVERRIDE_ACTIONS = {
    Action.OVERRIDE_NONE: ColorOverride.NONE,
    Action.OVERRIDE_A: ColorOverride.A,
    Action.OVERRIDE_B: ColorOverride.B,
    Action.OVERRIDE_C: ColorOverride.C,
}

# (x, y) direction of each arrow
_NUDGE_DIRECTIONS: dict[Action, tuple[int, int]] = {
    Action.NUDGE_LEFT: (-1, 0),
    Action.NUDGE_RIGHT: (1, 0),
    Action.NUDGE_UP: (0, 1),
    Action.NUDGE_DOWN: (0, -1),
}

_MODE_ORDER = tuple(TransformMode)


def _nudge(state: LocalVisualState, dx: int, dy: int) -> LocalVisualState:
    match state.transform_mode:
        case TransformMode.SCALE:
            scale = state.scale_bias + dy * config.SCALE_STEP
            return replace(state, scale_bias=max(config.MIN_SCALE_BIAS, scale))
        case TransformMode.ROTATE:
            phase = state.rotation_phase + (dx + dy) * config.PHASE_STEP
            return replace(state, rotation_phase=phase)
        case TransformMode.TRANSLATE:
            x, y = state.offset_bias
            return replace(
                state,
                offset_bias=(
                    x + dx * config.TRANSLATE_STEP,
                    y + dy * config.TRANSLATE_STEP,
                ),
            )
    return state


def reduce_local_state(action: Action, state: LocalVisualState) -> LocalVisualState:
    """Return the state a surface should have after ``action``.

    Actions that do not touch local state return ``state`` unchanged. So does
    ``RANDOMIZE_COLOR``, which needs a color source; see
    ``randomize_color``.
    """
    if action in _OVERRIDE_ACTIONS:
        return replace(state, color_override=_OVERRIDE_ACTIONS[action])
    if action in _NUDGE_DIRECTIONS:
        return _nudge(state, *_NUDGE_DIRECTIONS[action])
    if action is Action.CYCLE_MODE:
        index = _MODE_ORDER.index(state.transform_mode)
        return replace(
            state, transform_mode=_MODE_ORDER[(index + 1) % len(_MODE_ORDER)]
        )
    if action is Action.CYCLE_BACKGROUND:
        next_index = (state.background_index + 1) % len(config.BACKGROUND_PALETTE)
        return replace(state, background_index=next_index)
    return state


def randomize_color(state: LocalVisualState, rng: random.Random) -> LocalVisualState:
    """Switch to a freshly drawn random override color."""
    color = (rng.random(), rng.random(), rng.random())
    return replace(state, color_override=ColorOverride.RANDOM, random_color=color)


@dataclass(frozen=True)
class Bindings:
    keys: dict[KeySym, Action]
    mouse: dict[MouseButton, Action]

    @classmethod
    def default(cls) -> Bindings:
        return cls(keys=dict(config.KEY_BINDINGS), mouse=dict(config.MOUSE_BINDINGS))

    def resolve(self, event: InputEvent) -> Action | None:
        """The action bound to ``event``, if any.

        Only fresh key presses and mouse presses act; releases and key
        repeats are ignored.
        """
        if isinstance(event, KeyDown):
            if event.repeat:
                return None
            return self.keys.get(event.sym)
        if isinstance(event, MouseButtonDown):
            return self.mouse.get(event.button)
        return None


class SurfaceInputHandler:
    """Dispatches one surface's input events."""

    def __init__(
        self,
        surface: Surface,
        animation: AnimationState,
        bindings: Bindings | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.surface = surface
        self.animation = animation
        self.bindings = bindings or Bindings.default()
        self.rng = rng or random.Random()

    def dispatch(self, event: InputEvent) -> None:
        """Apply ``event`` to this surface and, from the primary, shared flags."""
        action = self.bindings.resolve(event)
        if action is None:
            return

        if action is Action.TOGGLE_PLAY:
            if self.surface.is_primary:
                self.animation.toggle_playing()
            else:
                logger.debug(
                    f"Ignoring play/pause from secondary surface "
                    f"{self.surface.name!r}"
                )
            return

        if action is Action.CLOSE:
            self.surface.request_close()
            return

        previous = self.surface.state
        if action is Action.RANDOMIZE_COLOR:
            self.surface.state = randomize_color(previous, self.rng)
        else:
            self.surface.state = reduce_local_state(action, previous)

        if self.surface.state.transform_mode is not previous.transform_mode:
            logger.info(
                f"Surface {self.surface.name!r} transform mode: "
                f"{self.surface.state.transform_mode.name.lower()}"
            )
        logger.debug(
            f"Surface {self.surface.name!r}: {action.name} -> {self.surface.state}"
        )
