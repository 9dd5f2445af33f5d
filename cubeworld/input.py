"""Buttons of the handheld and the state of the keys from frame to frame."""

from __future__ import annotations

from enum import IntEnum


class Key(IntEnum):
    """The console's buttons."""

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3
    A = 4
    B = 5
    X = 6
    Y = 7
    TL = 8
    TR = 9
    MENU = 10
    SELECT = 11
    START = 12


_FUNKEY_KEYS = {
    "u": Key.UP,
    "d": Key.DOWN,
    "l": Key.LEFT,
    "r": Key.RIGHT,
    "a": Key.A,
    "b": Key.B,
    "x": Key.X,
    "y": Key.Y,
    "m": Key.TL,
    "n": Key.TR,
    "q": Key.MENU,
    "k": Key.SELECT,
    "s": Key.START,
}

_DESKTOP_KEYS = {
    "up": Key.UP,
    "down": Key.DOWN,
    "left": Key.LEFT,
    "right": Key.RIGHT,
    "a": Key.A,
    "s": Key.B,
    "x": Key.X,
    "y": Key.Y,
    "u": Key.TL,
    "i": Key.TR,
    "q": Key.MENU,
    "n": Key.SELECT,
    "m": Key.START,
}


def map_key(name: str, funkey: bool = False) -> Key | None:
    """The button a keyboard key stands for, or None if it has no meaning.

    ``funkey`` selects the layout the handheld reports its buttons with.
    """
    layout = _FUNKEY_KEYS if funkey else _DESKTOP_KEYS
    return layout.get(name.lower())


class KeyState:
    """Which buttons are held now and which were held the frame before."""

    def __init__(self) -> None:
        self._held: set[Key] = set()
        self._previous: set[Key] = set()

    def begin_frame(self) -> None:
        """Remember the current state as the previous frame's."""
        self._previous = set(self._held)

    def set(self, key: Key, pressed: bool) -> None:
        """Record a button going down or up."""
        if pressed:
            self._held.add(Key(key))
        else:
            self._held.discard(Key(key))

    def is_pressed(self, key: Key) -> bool:
        """Whether the button is held."""
        return Key(key) in self._held

    def just_pressed(self, key: Key) -> bool:
        """Whether the button went down since the previous frame."""
        key = Key(key)
        return key in self._held and key not in self._previous

    def just_released(self, key: Key) -> bool:
        """Whether the button came up since the previous frame."""
        key = Key(key)
        return key in self._previous and key not in self._held