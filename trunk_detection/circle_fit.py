# =============================================================================
# Trunk Detection - Circle Fitter
# =============================================================================
# Closed-form least-squares circle center from first to third order moments.
# The radius is the mean distance of the points to that center.
# =============================================================================

import numpy as np
from typing import Sequence, Any

from .types import CircleFit, Point2D, points_to_array
from .errors import NotEnoughPointsError, DegenerateFitError

from .config import (
    CIRCLE_FIT_MIN_POINTS,
    CIRCLE_FIT_DET_EPSILON,
    CIRCLE_FIT_RELATIVE_TOLERANCE
)


class CircleFitter:
    """
    Fits a circle to a cluster of 2D points.

    Solves the 2x2 normal equations of the algebraic fit for the center,
    then averages the point-to-center distances for the radius.
    """

    def __init__(self,
                 det_epsilon: float = CIRCLE_FIT_DET_EPSILON,
                 relative_tolerance: float = CIRCLE_FIT_RELATIVE_TOLERANCE):
        """
        Args:
            det_epsilon: Absolute determinant below which the fit is degenerate
            relative_tolerance: Degenerate when |det| <= tolerance * A * C
        """
        self.det_epsilon = det_epsilon
        self.relative_tolerance = relative_tolerance

    def fit(self, points: Sequence[Any]) -> CircleFit:
        """
        Fit a circle to the points.

        Args:
            points: At least 3 points exposing x/y (or (x, y) pairs)

        Returns:
            CircleFit with center and mean radius

        Raises:
            NotEnoughPointsError: fewer than 3 points
            DegenerateFitError: collinear or ill-conditioned points
        """
        if len(points) < CIRCLE_FIT_MIN_POINTS:
            raise NotEnoughPointsError(
                f"Circle fit needs {CIRCLE_FIT_MIN_POINTS} points, got {len(points)}")

        xy = points_to_array(points)
        x = xy[:, 0]
        y = xy[:, 1]
        n = len(xy)

        sum_x, sum_y = x.sum(), y.sum()
        sum_x2, sum_y2, sum_xy = (x * x).sum(), (y * y).sum(), (x * y).sum()
        sum_x3, sum_y3 = (x ** 3).sum(), (y ** 3).sum()
        sum_xy2, sum_x2y = (x * y * y).sum(), (x * x * y).sum()

        A = n * sum_x2 - sum_x * sum_x
        B = n * sum_xy - sum_x * sum_y
        C = n * sum_y2 - sum_y * sum_y
        D = 0.5 * (n * sum_xy2 - sum_x * sum_y2 + n * sum_x3 - sum_x * sum_x2)
        E = 0.5 * (n * sum_x2y - sum_y * sum_x2 + n * sum_y3 - sum_y * sum_y2)

        det = A * C - B * B
        if abs(det) < self.det_epsilon or abs(det) <= self.relative_tolerance * A * C:
            raise DegenerateFitError(
                f"Degenerate circle fit (det={det:.3e}) for {n} points")

        cx = (D * C - B * E) / det
        cy = (A * E - B * D) / det

        # Mean distance to the center, not the algebraic radius
        radius = np.mean(np.hypot(x - cx, y - cy))

        return CircleFit(center=Point2D(float(cx), float(cy)), radius=float(radius))


def fit_circle(points: Sequence[Any]) -> CircleFit:
    """Fit a circle with the default tolerances."""
    return CircleFitter().fit(points)
