from __future__ import annotations

import pytest

from echofield.viewport import ViewTransform


def test_identity_by_default() -> None:
    t = ViewTransform()
    assert t.apply((12.5, -3)) == (12.5, -3)
    assert t.to_dict() == {"panX": 0.0, "panY": 0.0, "scale": 1.0}


def test_apply_is_scale_then_pan() -> None:
    t = ViewTransform()
    t.zoom_by(2.0)
    t.pan(10, -5)
    assert t.apply((3, 4)) == (16, 3)


def test_scale_is_clamped() -> None:
    t = ViewTransform(min_scale=0.1, max_scale=5)
    t.zoom_by(100)
    assert t.scale == 5
    t.zoom_by(0.0001)
    assert t.scale == 0.1


def test_bad_zoom_factors_are_ignored() -> None:
    t = ViewTransform()
    t.zoom_by(0)
    t.zoom_by(-2)
    t.zoom_by(float("nan"))
    assert t.scale == 1.0


def test_zoom_keeps_anchor_point_fixed() -> None:
    t = ViewTransform()
    t.pan(30, 40)
    anchor = (200.0, 150.0)
    model = t.invert(anchor)
    t.zoom_by(1.1, anchor)
    assert t.apply(model) == pytest.approx(anchor)


def test_reset_restores_identity() -> None:
    t = ViewTransform()
    t.pan(5, 5)
    t.zoom_by(3, (10, 10))
    t.reset()
    assert (t.pan_x, t.pan_y, t.scale) == (0.0, 0.0, 1.0)


@pytest.mark.parametrize("scale", [0.1, 0.37, 1.0, 2.5, 5.0])
def test_apply_inverts_invert(scale) -> None:
    t = ViewTransform()
    t.zoom_by(scale)
    t.pan(-123.4, 56.7)
    for p in [(0.0, 0.0), (640.0, 480.0), (-17.25, 3.5)]:
        assert t.apply(t.invert(p)) == pytest.approx(p)


def test_invalid_scale_range_rejected() -> None:
    with pytest.raises(ValueError):
        ViewTransform(min_scale=0)
    with pytest.raises(ValueError):
        ViewTransform(min_scale=2, max_scale=1)


def test_non_finite_zoom_anchor_is_ignored() -> None:
    t = ViewTransform()
    t.pan(5, 5)
    t.zoom_by(1.1, (float("nan"), 0))
    t.zoom_by(2, (0, float("inf")))
    assert t.to_dict() == {"panX": 5.0, "panY": 5.0, "scale": 1.0}
