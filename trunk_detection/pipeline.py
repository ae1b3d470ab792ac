# =============================================================================
# Trunk Detection - Detection Pipeline
# =============================================================================
# Extracts trunk candidates from decoded scan samples:
# 1. Filter samples by distance window
# 2. Cluster points by density
# 3. Fit a circle per cluster and keep plausible trunk radii
# =============================================================================

import logging
from typing import List, Optional

from .types import RangeSample, DetectedObject, ScanParams, DetectionParams, Cluster
from .clustering import SpatialClusterer
from .circle_fit import CircleFitter
from .errors import FitError, InsufficientPointsError

logger = logging.getLogger(__name__)


class DetectionPipeline:
    """
    Turns range samples into trunk detections.

    Holds no state between runs; all thresholds come from the parameter
    records passed to ``run``.
    """

    def __init__(self, fitter: Optional[CircleFitter] = None):
        self.fitter = fitter or CircleFitter()

    def filter_samples(self, samples: List[RangeSample],
                       scan_params: ScanParams) -> List[RangeSample]:
        """Keep samples strictly inside (min_range, max_range)."""
        return [s for s in samples
                if scan_params.min_range < s.distance < scan_params.max_range]

    def cluster_samples(self, samples: List[RangeSample],
                        detection_params: DetectionParams) -> List[Cluster]:
        """
        Cluster valid samples.

        Raises:
            InsufficientPointsError: fewer samples than ``min_points``
        """
        if len(samples) < detection_params.min_points:
            raise InsufficientPointsError(
                f"Only {len(samples)} valid samples, need {detection_params.min_points}",
                available=len(samples),
                required=detection_params.min_points
            )
        clusterer = SpatialClusterer(detection_params.eps, detection_params.min_points)
        return clusterer.cluster(samples)

    def fit_cluster(self, cluster: Cluster,
                    detection_params: DetectionParams) -> Optional[DetectedObject]:
        """Fit one cluster; None when the fit fails or the radius is out of bounds."""
        try:
            circle = self.fitter.fit(cluster)
        except FitError as e:
            logger.debug("Rejected cluster of %d points: %s", len(cluster), e)
            return None

        if not detection_params.min_radius <= circle.radius <= detection_params.max_radius:
            logger.debug("Rejected cluster of %d points: radius %.1fmm outside [%.1f, %.1f]",
                         len(cluster), circle.radius,
                         detection_params.min_radius, detection_params.max_radius)
            return None

        return DetectedObject(
            center=circle.center,
            radius=circle.radius,
            diameter=circle.radius * 2,
            points=cluster
        )

    def run(self, samples: List[RangeSample],
            scan_params: Optional[ScanParams] = None,
            detection_params: Optional[DetectionParams] = None) -> List[DetectedObject]:
        """
        Full pipeline: filter, cluster and fit.

        Args:
            samples: Decoded range samples
            scan_params: Valid distance window
            detection_params: Clustering and radius thresholds

        Returns:
            Accepted detections in cluster order (possibly empty)
        """
        scan_params = scan_params or ScanParams()
        detection_params = detection_params or DetectionParams()

        valid = self.filter_samples(samples, scan_params)
        try:
            clusters = self.cluster_samples(valid, detection_params)
        except InsufficientPointsError as e:
            logger.warning("Not enough valid samples to cluster: %s", e)
            return []

        detections = []
        for cluster in clusters:
            if len(cluster) < detection_params.min_points:
                continue
            detection = self.fit_cluster(cluster, detection_params)
            if detection is not None:
                detections.append(detection)

        logger.info("Detected %d trunks from %d clusters (%d valid samples)",
                    len(detections), len(clusters), len(valid))
        return detections


def detect_trunks(samples: List[RangeSample],
                  scan_params: Optional[ScanParams] = None,
                  detection_params: Optional[DetectionParams] = None) -> List[DetectedObject]:
    """Run the default pipeline once."""
    return DetectionPipeline().run(samples, scan_params, detection_params)
