# =============================================================================
# Trunk Detection - Scan Diagnostics
# =============================================================================
# Distance, angle and coordinate statistics of a decoded scan, with the
# calibration checks used to spot decoding or mounting problems.
# =============================================================================

import logging
import numpy as np
from typing import List

from .types import RangeSample, ScanStatistics

from .config import (
    SCAN_MAX_RANGE,
    DIAG_MIN_MEAN_DISTANCE,
    DIAG_MAX_MEAN_DISTANCE,
    DIAG_MIN_ANGLE_SPAN,
    DIAG_MAX_ASYMMETRY,
    DIAG_MIN_UNIQUE_RATIO
)

logger = logging.getLogger(__name__)


def compute_statistics(samples: List[RangeSample],
                       max_range: float = SCAN_MAX_RANGE) -> ScanStatistics:
    """
    Summarize a scan.

    Distances count as valid when 0 < d < max_range. Angle and coordinate
    extents cover every sample.
    """
    if not samples:
        stats = ScanStatistics(total=0, valid=0, invalid=0)
        stats.warnings = calibration_warnings(stats)
        return stats

    distances = np.array([s.distance for s in samples], dtype=float)
    angles = np.rad2deg([s.angle for s in samples])
    xs = np.array([s.x for s in samples], dtype=float)
    ys = np.array([s.y for s in samples], dtype=float)

    valid = distances[(distances > 0) & (distances < max_range)]

    stats = ScanStatistics(
        total=len(samples),
        valid=len(valid),
        invalid=len(samples) - len(valid),
        min_angle=float(angles.min()),
        max_angle=float(angles.max()),
        x_min=float(xs.min()),
        x_max=float(xs.max()),
        y_min=float(ys.min()),
        y_max=float(ys.max()),
        unique_distances=len(np.unique(distances))
    )
    if len(valid):
        stats.min_distance = float(valid.min())
        stats.max_distance = float(valid.max())
        stats.mean_distance = float(valid.mean())
        stats.median_distance = float(np.median(valid))

    stats.warnings = calibration_warnings(stats)
    return stats


def calibration_warnings(stats: ScanStatistics) -> List[str]:
    """Return human-readable warnings for implausible statistics."""
    warnings = []
    if stats.valid == 0:
        warnings.append("No valid distances in scan")
        return warnings

    if stats.mean_distance < DIAG_MIN_MEAN_DISTANCE:
        warnings.append(
            f"Mean distance {stats.mean_distance:.0f}mm is too small, check range decoding")
    elif stats.mean_distance > DIAG_MAX_MEAN_DISTANCE:
        warnings.append(
            f"Mean distance {stats.mean_distance:.0f}mm is too large, check range decoding")

    if stats.angle_span < DIAG_MIN_ANGLE_SPAN:
        warnings.append(
            f"Angle span {stats.angle_span:.1f}deg is too narrow, check angle assignment")

    x_asymmetry = abs(stats.x_min + stats.x_max)
    y_asymmetry = abs(stats.y_min + stats.y_max)
    if x_asymmetry > DIAG_MAX_ASYMMETRY:
        warnings.append(f"X extent is asymmetric ({x_asymmetry:.0f}mm)")
    if y_asymmetry > DIAG_MAX_ASYMMETRY:
        warnings.append(f"Y extent is asymmetric ({y_asymmetry:.0f}mm)")

    if stats.unique_distances < stats.total * DIAG_MIN_UNIQUE_RATIO:
        warnings.append(
            f"Only {stats.unique_distances} distinct distances in {stats.total} samples")

    return warnings


def log_statistics(stats: ScanStatistics) -> None:
    logger.info("Scan: %d samples, %d valid, distance min=%.0f max=%.0f "
                "mean=%.0f median=%.0f mm, angle [%.1f, %.1f] deg",
                stats.total, stats.valid, stats.min_distance, stats.max_distance,
                stats.mean_distance, stats.median_distance,
                stats.min_angle, stats.max_angle)
    for warning in stats.warnings:
        logger.warning(warning)
