import pytest

from core.scales import LinearScale
from core.transform import IDENTITY, ViewTransform, ZoomSettings


def test_identity():
    assert IDENTITY.is_identity
    assert IDENTITY.apply_x(123.0) == 123.0
    assert IDENTITY.invert_y(45.0) == 45.0


def test_apply_and_invert():
    t = ViewTransform(translate_x=10, translate_y=-20, scale=2)
    assert t.apply_x(5) == 20
    assert t.apply_y(5) == -10
    assert t.invert_x(t.apply_x(7.5)) == pytest.approx(7.5)
    assert t.invert_y(t.apply_y(-3.0)) == pytest.approx(-3.0)


def test_translate_accumulates():
    t = IDENTITY.translate(5, 0).translate(-2, 7)
    assert (t.translate_x, t.translate_y, t.scale) == (3, 7, 1.0)
    assert IDENTITY.is_identity


def test_scale_by_keeps_center_fixed():
    center = (500.0, 300.0)
    t = IDENTITY.scale_by(2.0, center)
    assert t.scale == 2.0
    assert t.apply_x(center[0]) == pytest.approx(center[0])
    assert t.apply_y(center[1]) == pytest.approx(center[1])

    moved = t.translate(40, 0).scale_by(1.3, center)
    assert moved.scale == pytest.approx(2.6)
    # the base point under the centre stays under the centre
    base_x = t.translate(40, 0).invert_x(center[0])
    assert moved.apply_x(base_x) == pytest.approx(center[0])


def test_scale_by_clamps_to_extent():
    settings = ZoomSettings()
    assert IDENTITY.scale_by(100, (0, 0), settings.scale_extent).scale == 10.0
    assert IDENTITY.scale_by(0.01, (0, 0), settings.scale_extent).scale == 0.5


def test_zoom_steps_are_roughly_inverse():
    settings = ZoomSettings()
    assert settings.zoom_in_step * settings.zoom_out_step == pytest.approx(1.0, abs=0.01)


def test_rescale_axes():
    x = LinearScale(domain=(0, 10), range=(0, 100))
    t = ViewTransform(scale=2)
    assert t.rescale_x(x).domain == pytest.approx((0, 5))
    assert t.rescale_x(x).range == x.range

    y = LinearScale(domain=(50, 85), range=(570, 10))
    assert IDENTITY.rescale_y(y).domain == pytest.approx((50, 85))
    panned = ViewTransform(translate_y=56).rescale_y(y)
    assert panned.domain == pytest.approx((53.5, 88.5))
