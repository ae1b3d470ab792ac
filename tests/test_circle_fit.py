import numpy as np
import pytest

from trunk_detection import (
    CircleFitter,
    DegenerateFitError,
    NotEnoughPointsError,
    Point2D,
    fit_circle
)


def on_circle(cx, cy, radius, count, span=2 * np.pi):
    thetas = np.arange(count) * span / count
    return [Point2D(cx + radius * np.cos(t), cy + radius * np.sin(t)) for t in thetas]


def test_exact_circle():
    fit = fit_circle(on_circle(100, 200, 50, 12))

    assert fit.center.x == pytest.approx(100, abs=1e-3)
    assert fit.center.y == pytest.approx(200, abs=1e-3)
    assert fit.radius == pytest.approx(50, abs=1e-3)


def test_partial_arc():
    # Quarter of a trunk facing the sensor
    fit = fit_circle(on_circle(2000, -500, 180, 20, span=np.pi / 2))

    assert fit.center.x == pytest.approx(2000, abs=1e-3)
    assert fit.center.y == pytest.approx(-500, abs=1e-3)
    assert fit.radius == pytest.approx(180, abs=1e-3)


def test_noisy_circle():
    rng = np.random.default_rng(3)
    points = [Point2D(p.x + dx, p.y + dy)
              for p, (dx, dy) in zip(on_circle(1500, 300, 150, 60),
                                     rng.normal(0, 2, size=(60, 2)))]
    fit = fit_circle(points)

    assert np.hypot(fit.center.x - 1500, fit.center.y - 300) < 2
    assert fit.radius == pytest.approx(150, abs=2)


def test_radius_is_mean_distance_to_center():
    points = [Point2D(-100, 0), Point2D(0, 60), Point2D(100, 0), Point2D(0, -60)]
    fit = fit_circle(points)

    expected = np.mean([np.hypot(p.x - fit.center.x, p.y - fit.center.y) for p in points])
    assert fit.radius == pytest.approx(expected)


def test_three_collinear_points():
    with pytest.raises(DegenerateFitError):
        fit_circle([Point2D(0, 0), Point2D(1, 1), Point2D(2, 2)])


def test_collinear_wall_at_scan_scale():
    xs = np.linspace(1000.0, 3000.0, 25)
    points = [Point2D(x, 0.37 * x + 512.3) for x in xs]

    with pytest.raises(DegenerateFitError):
        fit_circle(points)


def test_not_enough_points():
    with pytest.raises(NotEnoughPointsError):
        fit_circle([Point2D(0, 0), Point2D(1, 0)])


def test_accepts_coordinate_pairs():
    fit = CircleFitter().fit([(10.0, 0.0), (0.0, 10.0), (-10.0, 0.0), (0.0, -10.0)])

    assert fit.center.x == pytest.approx(0, abs=1e-9)
    assert fit.center.y == pytest.approx(0, abs=1e-9)
    assert fit.radius == pytest.approx(10)
