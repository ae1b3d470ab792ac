# =============================================================================
# Geometry helpers for the trunk detection tests
# =============================================================================

import numpy as np

from trunk_detection import RangeSample


def circle_samples(cx, cy, radius, count, start=0.0, span=2 * np.pi):
    """Samples evenly spaced on a circle, expressed in sensor polar form."""
    thetas = start + np.arange(count) * span / count
    return [point_sample(cx + radius * np.cos(t), cy + radius * np.sin(t)) for t in thetas]


def point_sample(x, y):
    """Range sample located at (x, y)."""
    return RangeSample(float(np.arctan2(y, x)), float(np.hypot(x, y)), float(x), float(y))


def scattered_background(count, avoid, clearance, spacing, seed=0,
                         min_distance=300.0, max_distance=5000.0):
    """
    Random points farther than ``clearance`` from every point of ``avoid``
    and at least ``spacing`` apart from each other.
    """
    rng = np.random.default_rng(seed)
    avoid_xy = np.array([[p.x, p.y] for p in avoid])
    chosen = []
    while len(chosen) < count:
        distance = rng.uniform(min_distance, max_distance)
        angle = rng.uniform(-np.pi, np.pi)
        xy = np.array([distance * np.cos(angle), distance * np.sin(angle)])
        if len(avoid_xy) and np.min(np.hypot(*(avoid_xy - xy).T)) <= clearance:
            continue
        if chosen and min(np.hypot(*(xy - c)) for c in chosen) < spacing:
            continue
        chosen.append(xy)
    return [point_sample(x, y) for x, y in chosen]
