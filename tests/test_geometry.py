import math

import pytest

from tikzmouse.errors import DegenerateCalibration
from tikzmouse.geometry import Point, angle_between, linear_fit, rotate_point


@pytest.mark.parametrize('v', [Point(1, 0), Point(0, -2), Point(-3.5, 4.25), Point(1e-3, 7)])
def test_angle_between_vector_and_itself_is_zero(v):
    assert angle_between(v, v) == 0.0


@pytest.mark.parametrize(
    'v1, v2, expected',
    [
        (Point(1, 0), Point(0, 1), math.pi / 2),
        (Point(1, 0), Point(-1, 0), math.pi),
        (Point(1, 0), Point(0, -1), 3 * math.pi / 2),
        (Point(0, 1), Point(1, 0), 3 * math.pi / 2),
        (Point(2, 2), Point(-1, 1), math.pi / 2),
    ],
)
def test_angle_between_is_counter_clockwise(v1, v2, expected):
    assert angle_between(v1, v2) == pytest.approx(expected)


@pytest.mark.parametrize(
    'v1, v2',
    [
        (Point(1, 0), Point(1, -1e-17)),
        (Point(3, 4), Point(-4, 3)),
        (Point(-1, -1), Point(1, -1)),
        (Point(0.5, -2), Point(0.5, 2)),
    ],
)
def test_angle_between_stays_in_half_open_range(v1, v2):
    theta = angle_between(v1, v2)
    assert 0.0 <= theta < 2 * math.pi


def test_angle_between_rejects_zero_vector():
    with pytest.raises(ValueError):
        angle_between(Point(0, 0), Point(1, 0))


def test_rotate_quarter_turn_about_origin():
    p = rotate_point(Point(1, 0), Point(0, 0), math.pi / 2)
    assert p.x == pytest.approx(0.0, abs=1e-12)
    assert p.y == pytest.approx(1.0)


def test_rotate_about_center_keeps_center_fixed():
    center = Point(2, -1)
    assert rotate_point(center, center, 1.234) == center


@pytest.mark.parametrize(
    'p, c, theta',
    [
        (Point(1, 2), Point(0, 0), 0.3),
        (Point(-4.5, 3), Point(1, 1), 2.5),
        (Point(100, -250), Point(-7, 12), -1.1),
        (Point(0, 0), Point(3, 3), 6.0),
    ],
)
def test_rotate_then_rotate_back_returns_point(p, c, theta):
    back = rotate_point(rotate_point(p, c, theta), c, -theta)
    assert back.x == pytest.approx(p.x, abs=1e-9)
    assert back.y == pytest.approx(p.y, abs=1e-9)


def test_linear_fit_solves_two_samples():
    axis = linear_fit((10, 110), (0, 10))
    assert axis.slope == pytest.approx(0.1)
    assert axis.intercept == pytest.approx(-1.0)
    assert axis.apply(10) == pytest.approx(0.0)
    assert axis.apply(110) == pytest.approx(10.0)


def test_linear_fit_handles_flipped_axis():
    # screen y grows downwards, drawing y upwards
    axis = linear_fit((100, 300), (5, 1))
    assert axis.slope == pytest.approx(-0.02)
    assert axis.apply(200) == pytest.approx(3.0)
    assert axis.invert(3.0) == pytest.approx(200.0)


def test_linear_fit_rejects_identical_device_samples():
    with pytest.raises(DegenerateCalibration) as exc:
        linear_fit((42, 42), (0, 10), axis='x')
    assert exc.value.axis == 'x'
    assert 'device samples coincide' in str(exc.value)


def test_linear_fit_rejects_identical_drawing_targets():
    with pytest.raises(DegenerateCalibration) as exc:
        linear_fit((0, 10), (3, 3), axis='y')
    assert 'drawing targets coincide' in str(exc.value)
