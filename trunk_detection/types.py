# =============================================================================
# Trunk Detection - Types and Data Structures
# =============================================================================
# Common data structures for decoding, clustering and trunk fitting.
# =============================================================================

import numpy as np
from dataclasses import dataclass, field
from typing import List, Sequence, Any

from .config import (
    SCAN_START_ANGLE,
    SCAN_END_ANGLE,
    SCAN_TOTAL_POINTS,
    SCAN_MIN_RANGE,
    SCAN_MAX_RANGE,
    DBSCAN_EPS,
    DBSCAN_MIN_POINTS,
    TRUNK_MIN_RADIUS,
    TRUNK_MAX_RADIUS
)


# =============================================================================
# Sensor Data Structures
# =============================================================================

@dataclass(frozen=True)
class RangeSample:
    """Single point decoded from a scan frame."""
    angle: float      # Beam angle (radians)
    distance: float   # Distance from sensor (mm)
    x: float          # X coordinate in sensor frame (mm)
    y: float          # Y coordinate in sensor frame (mm)


@dataclass(frozen=True)
class HeightMeasurement:
    """One record of a point-rangefinder packet."""
    distance: int           # Measured distance (mm)
    noise: int              # Ambient noise
    peak_intensity: int     # Received signal strength
    confidence: int         # Measurement confidence
    integration_count: int  # Integration cycles
    reference_tof: int      # Reference time of flight (temperature proxy)
    timestamp_ms: int       # Packet arrival time (ms)


@dataclass(frozen=True)
class HeightSample:
    """Entry of the height history."""
    height: float
    timestamp_ms: int
    noise: int
    confidence: int


# =============================================================================
# Geometry
# =============================================================================

@dataclass(frozen=True)
class Point2D:
    x: float
    y: float


@dataclass(frozen=True)
class CircleFit:
    center: Point2D
    radius: float


# A cluster is an input-ordered list of points
Cluster = List[Any]


@dataclass
class DetectedObject:
    """Trunk candidate accepted by the detection pipeline."""
    center: Point2D        # Circle center (mm)
    radius: float          # Fitted radius (mm)
    diameter: float        # 2 * radius (mm)
    points: Cluster        # Samples composing the trunk

    @property
    def num_points(self) -> int:
        return len(self.points)


# =============================================================================
# Parameter Records
# =============================================================================

@dataclass(frozen=True)
class ScanParams:
    """Scan geometry and valid distance window."""
    start_angle: float = SCAN_START_ANGLE    # degrees
    end_angle: float = SCAN_END_ANGLE        # degrees
    total_points: int = SCAN_TOTAL_POINTS
    min_range: float = SCAN_MIN_RANGE        # mm
    max_range: float = SCAN_MAX_RANGE        # mm

    def __post_init__(self):
        if self.total_points < 1:
            raise ValueError(f"total_points must be positive, got {self.total_points}")
        if self.min_range > self.max_range:
            raise ValueError(
                f"min_range ({self.min_range}) exceeds max_range ({self.max_range})")

    @property
    def angle_step(self) -> float:
        """Angular resolution in degrees."""
        return (self.end_angle - self.start_angle) / self.total_points


@dataclass(frozen=True)
class DetectionParams:
    """Clustering thresholds and accepted trunk radius."""
    eps: float = DBSCAN_EPS
    min_points: int = DBSCAN_MIN_POINTS
    min_radius: float = TRUNK_MIN_RADIUS
    max_radius: float = TRUNK_MAX_RADIUS

    def __post_init__(self):
        if self.eps < 0:
            raise ValueError(f"eps must be non-negative, got {self.eps}")
        if self.min_points < 1:
            raise ValueError(f"min_points must be at least 1, got {self.min_points}")
        if self.min_radius < 0 or self.min_radius > self.max_radius:
            raise ValueError(
                f"invalid radius bounds [{self.min_radius}, {self.max_radius}]")


@dataclass
class ScanStatistics:
    """Summary of one decoded scan, used for calibration checks."""
    total: int
    valid: int
    invalid: int
    min_distance: float = 0.0
    max_distance: float = 0.0
    mean_distance: float = 0.0
    median_distance: float = 0.0
    min_angle: float = 0.0      # degrees
    max_angle: float = 0.0      # degrees
    x_min: float = 0.0
    x_max: float = 0.0
    y_min: float = 0.0
    y_max: float = 0.0
    unique_distances: int = 0
    warnings: List[str] = field(default_factory=list)

    @property
    def angle_span(self) -> float:
        return self.max_angle - self.min_angle


# =============================================================================
# Helpers
# =============================================================================

def points_to_array(points: Sequence[Any]) -> np.ndarray:
    """
    Stack points into an (N, 2) float array.

    Accepts objects exposing ``x``/``y`` attributes (RangeSample, Point2D)
    as well as plain ``(x, y)`` pairs.
    """
    if len(points) == 0:
        return np.empty((0, 2), dtype=float)
    if hasattr(points[0], 'x'):
        return np.array([[p.x, p.y] for p in points], dtype=float)
    return np.asarray(points, dtype=float).reshape(-1, 2)
