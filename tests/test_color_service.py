"""
RGB -> HSL conversion
"""
import numpy as np
import pytest

from services.color_service import ColorService


@pytest.fixture
def svc():
    return ColorService()


@pytest.mark.parametrize("rgb, hue", [
    ((255, 0, 0), 0.0),
    ((0, 255, 0), 120.0),
    ((0, 0, 255), 240.0),
    ((255, 255, 0), 60.0),
    ((0, 255, 255), 180.0),
    ((255, 0, 255), 300.0),
])
def test_primary_and_secondary_hues(svc, rgb, hue):
    h, s, l = svc.pixel_to_hsl(*rgb)
    assert h == pytest.approx(hue)
    assert s == pytest.approx(1.0)
    assert l == pytest.approx(0.5)


@pytest.mark.parametrize("value", [0, 128, 255])
def test_achromatic_has_zero_hue_and_saturation(svc, value):
    h, s, l = svc.pixel_to_hsl(value, value, value)
    assert h == 0.0
    assert s == 0.0
    assert l == pytest.approx(value / 255)


def test_red_max_with_blue_above_green_wraps_into_upper_range(svc):
    h, _, _ = svc.pixel_to_hsl(255, 0, 128)
    assert h == pytest.approx((6 - 128 / 255) * 60)
    assert 300 < h < 360


def test_saturation_uses_light_branch_above_half(svc):
    # max=1.0, min=0.6 -> l=0.8, d=0.4, s = 0.4 / (2 - 1.6)
    h, s, l = svc.pixel_to_hsl(153, 255, 153)
    assert l == pytest.approx(0.8)
    assert s == pytest.approx(1.0)
    assert h == pytest.approx(120.0)


def test_tie_between_red_and_green_resolves_to_red_case(svc):
    h, _, _ = svc.pixel_to_hsl(200, 200, 50)
    assert h == pytest.approx(60.0)


def test_vectorised_shape_is_preserved(svc):
    r = np.array([[255, 0], [0, 10]], dtype=np.uint8)
    g = np.array([[0, 255], [0, 10]], dtype=np.uint8)
    b = np.array([[0, 0], [255, 10]], dtype=np.uint8)
    h, s, l = svc.rgb_to_hsl(r, g, b)
    assert h.shape == s.shape == l.shape == (2, 2)
    np.testing.assert_allclose(h, [[0, 120], [240, 0]])
