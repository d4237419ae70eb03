"""Unit tests for ViewState."""

import pytest

from nicepanzoom.image_panel.view_state import ViewState


def test_aspect_ratio_is_float():
    state = ViewState(image_size=(1599, 900))
    assert state.aspect_ratio == pytest.approx(1599 / 900)
    assert state.aspect_ratio != 1


def test_aspect_ratio_without_image():
    state = ViewState()
    assert state.aspect_ratio == 0.0
    assert state.has_image is False


def test_total_pan_adds_delta():
    state = ViewState(pan_offset=(1.0, 2.0), pan_delta=(0.5, -4.0))
    assert state.total_pan == (1.5, -2.0)


def test_reset_transforms():
    state = ViewState(
        image_size=(10, 10),
        viewport_size=(20, 20),
        scale=4.0,
        pan_offset=(1.0, 1.0),
        pan_delta=(2.0, 2.0),
        pan_anchor=(3.0, 3.0),
        user_transformed=True,
    )
    state.reset_transforms()
    assert state.scale == 1.0
    assert state.pan_offset == (0.0, 0.0)
    assert state.pan_delta == (0.0, 0.0)
    assert state.pan_anchor is None
    assert state.user_transformed is False
    # sizes are not transforms
    assert state.image_size == (10, 10)
    assert state.viewport_size == (20, 20)


def test_copy_is_independent():
    state = ViewState(scale=2.0)
    other = state.copy()
    other.scale = 3.0
    other.pan_offset = (9.0, 9.0)
    assert state.scale == 2.0
    assert state.pan_offset == (0.0, 0.0)


def test_from_dict_round_trip():
    state = ViewState(
        image_size=(640, 480),
        viewport_size=(300, 200),
        scale=0.5,
        pan_offset=(3.0, 4.0),
        pan_anchor=(1.0, 1.0),
    )
    restored = ViewState.from_dict(state.to_dict())
    assert restored == state


def test_from_dict_accepts_lists():
    """JSON-decoded dicts carry lists instead of tuples."""
    state = ViewState.from_dict(
        {"image_size": [4, 3], "viewport_size": [8, 6], "pan_offset": [1, 2]}
    )
    assert state.image_size == (4, 3)
    assert state.viewport_size == (8, 6)
    assert state.pan_offset == (1.0, 2.0)
