import pytest

from cubeworld.input import Key, KeyState, map_key


@pytest.mark.parametrize(
    "name, key",
    [("up", Key.UP), ("a", Key.A), ("s", Key.B), ("u", Key.TL), ("m", Key.START), ("n", Key.SELECT)],
)
def test_desktop_layout(name, key):
    assert map_key(name, False) == key


@pytest.mark.parametrize(
    "name, key",
    [("u", Key.UP), ("b", Key.B), ("s", Key.START), ("m", Key.TL), ("k", Key.SELECT), ("q", Key.MENU)],
)
def test_funkey_layout(name, key):
    assert map_key(name, True) == key


def test_unknown_keys():
    assert map_key("up", True) is None
    assert map_key("z", False) is None


def test_each_layout_covers_every_button():
    desktop = {map_key(n, False) for n in ["up", "down", "left", "right", "a", "s", "x", "y", "u", "i", "q", "n", "m"]}
    funkey = {map_key(n, True) for n in "udlrabxymnqks"}
    assert desktop == set(Key)
    assert funkey == set(Key)


def test_press_and_release_edges():
    state = KeyState()
    state.begin_frame()
    state.set(Key.A, True)
    assert state.is_pressed(Key.A)
    assert state.just_pressed(Key.A)
    assert not state.just_released(Key.A)

    state.begin_frame()
    assert state.is_pressed(Key.A)
    assert not state.just_pressed(Key.A)

    state.set(Key.A, False)
    assert not state.is_pressed(Key.A)
    assert state.just_released(Key.A)

    state.begin_frame()
    assert not state.just_released(Key.A)


def test_keys_are_independent():
    state = KeyState()
    state.set(Key.UP, True)
    assert state.is_pressed(Key.UP)
    assert not state.is_pressed(Key.DOWN)
    assert not state.just_pressed(Key.DOWN)