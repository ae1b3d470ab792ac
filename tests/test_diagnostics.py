import logging

import pytest

from trunk_detection import ScanStatistics, calibration_warnings, compute_statistics, decode_scan_frame
from trunk_detection.diagnostics import log_statistics


def test_statistics_of_ramp_scan(ramp_frame):
    stats = compute_statistics(decode_scan_frame(ramp_frame))

    assert stats.total == stats.valid == 682
    assert stats.invalid == 0
    assert stats.min_distance == 1000
    assert stats.max_distance == 1681
    assert stats.mean_distance == pytest.approx(1340.5)
    assert stats.median_distance == pytest.approx(1340.5)
    assert stats.min_angle == pytest.approx(-120.0)
    assert stats.angle_span == pytest.approx(240.0 - 240.0 / 682)
    assert stats.unique_distances == 682


def test_empty_scene_has_no_valid_distances(simulator):
    stats = compute_statistics(decode_scan_frame(simulator.simulate_frame([])))

    assert stats.valid == 0
    assert stats.invalid == 682
    assert stats.warnings == ["No valid distances in scan"]


def test_no_samples():
    stats = compute_statistics([])
    assert stats.total == 0
    assert stats.warnings


def healthy(**changes):
    values = dict(total=682, valid=600, invalid=82, mean_distance=2000.0,
                  min_angle=-120.0, max_angle=119.6,
                  x_min=-2000.0, x_max=2100.0, y_min=-2500.0, y_max=2400.0,
                  unique_distances=500)
    values.update(changes)
    return ScanStatistics(**values)


def test_healthy_statistics_have_no_warnings():
    assert calibration_warnings(healthy()) == []


@pytest.mark.parametrize('changes,fragment', [
    (dict(mean_distance=300.0), "too small"),
    (dict(mean_distance=4500.0), "too large"),
    (dict(min_angle=-60.0, max_angle=60.0), "too narrow"),
    (dict(x_max=4000.0), "X extent"),
    (dict(y_min=-100.0), "Y extent"),
    (dict(unique_distances=20), "distinct distances"),
])
def test_calibration_warnings(changes, fragment):
    warnings = calibration_warnings(healthy(**changes))
    assert len(warnings) == 1
    assert fragment in warnings[0]


def test_log_statistics(caplog):
    stats = healthy(mean_distance=300.0)
    stats.warnings = calibration_warnings(stats)

    with caplog.at_level(logging.INFO):
        log_statistics(stats)

    assert "682 samples" in caplog.text
    assert any(r.levelno == logging.WARNING for r in caplog.records)
