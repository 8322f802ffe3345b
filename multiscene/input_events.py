"""Backend-agnostic input events.

Windowing backends translate their native callbacks into these types so that
input handling can be driven (and replayed in tests) without a real window.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag


class KeySym(IntEnum):
    """Key symbols for the keys the application binds.

    Letter and digit values follow the SDL convention of lowercase ASCII.
    """

    UNKNOWN = 0
    ESCAPE = 27
    SPACE = 32
    N0 = ord("0")
    N1 = ord("1")
    N2 = ord("2")
    N3 = ord("3")
    N4 = ord("4")
    N5 = ord("5")
    N6 = ord("6")
    N7 = ord("7")
    N8 = ord("8")
    N9 = ord("9")
    C = ord("c")
    M = ord("m")
    RIGHT = 0x4000004F
    LEFT = 0x40000050
    DOWN = 0x40000051
    UP = 0x40000052


class Modifier(IntFlag):
    NONE = 0
    SHIFT = 1
    CTRL = 2
    ALT = 4


class MouseButton(IntEnum):
    UNKNOWN = 0
    LEFT = 1
    MIDDLE = 2
    RIGHT = 3


@dataclass(frozen=True)
class Point:
    x: int
    y: int


@dataclass(frozen=True)
class KeyDown:
    sym: KeySym
    scancode: int = 0
    mod: Modifier = Modifier.NONE
    repeat: bool = False


@dataclass(frozen=True)
class KeyUp:
    sym: KeySym
    scancode: int = 0
    mod: Modifier = Modifier.NONE


@dataclass(frozen=True)
class MouseButtonDown:
    position: Point
    button: MouseButton
    mod: Modifier = Modifier.NONE


InputEvent = KeyDown | KeyUp | MouseButtonDown
