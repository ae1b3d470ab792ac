# =============================================================================
# Trunk Detection - Scan Session
# =============================================================================
# Session state for one field run, integrating:
# - Scan frame decoding and statistics
# - Trunk detection on the latest scan
# - Height history from the point rangefinder
# =============================================================================

import logging
import numpy as np
from dataclasses import replace
from typing import List, Optional

from .types import (
    RangeSample,
    HeightMeasurement,
    HeightSample,
    DetectedObject,
    ScanParams,
    DetectionParams,
    ScanStatistics
)
from .scan_frame import ScanFrameDecoder
from .height_packet import HeightPacketDecoder
from .pipeline import DetectionPipeline
from .diagnostics import compute_statistics, log_statistics
from .errors import TrunkDetectionError, IncompleteDataError

from .config import (
    HEIGHT_PACKET_SIZE,
    HEIGHT_CHANGE_THRESHOLD,
    DIAG_RAW_PREVIEW_LENGTH
)

logger = logging.getLogger(__name__)


class HeightMonitor:
    """
    Height history of the rig above ground.

    Warns when two consecutive heights differ by more than ``threshold``.
    """

    def __init__(self, threshold: float = HEIGHT_CHANGE_THRESHOLD):
        self.threshold = threshold
        self.history: List[HeightSample] = []
        self.current_height = 0.0
        self.count = 0

    def add(self, measurement: HeightMeasurement) -> Optional[float]:
        """
        Record a measurement.

        Returns:
            The height change when it exceeds the threshold, else None
        """
        self.current_height = float(measurement.distance)
        self.history.append(HeightSample(
            height=self.current_height,
            timestamp_ms=measurement.timestamp_ms,
            noise=measurement.noise,
            confidence=measurement.confidence
        ))
        self.count += 1

        if len(self.history) < 2:
            return None
        previous = self.history[-2].height
        change = abs(self.current_height - previous)
        if change > self.threshold:
            logger.warning("Height change %.0fmm (current %.0fmm, previous %.0fmm)",
                           change, self.current_height, previous)
            return change
        return None

    def average_height(self) -> float:
        if not self.history:
            return 0.0
        return float(np.mean([h.height for h in self.history]))

    def clear(self):
        self.history = []
        self.current_height = 0.0
        self.count = 0


class ScanSession:
    """
    Owns everything that outlives a single frame.

    Decoding and detection are delegated to the stateless components; a
    failed cycle leaves samples, detections and history untouched. Not
    thread-safe: callers run one cycle at a time per session.
    """

    def __init__(self,
                 scan_params: Optional[ScanParams] = None,
                 detection_params: Optional[DetectionParams] = None,
                 height_threshold: float = HEIGHT_CHANGE_THRESHOLD):
        """
        Args:
            scan_params: Scan geometry and valid distance window
            detection_params: Clustering and radius thresholds
            height_threshold: Height change that triggers a warning (mm)
        """
        self.scan_params = scan_params or ScanParams()
        self.detection_params = detection_params or DetectionParams()

        self.frame_decoder = ScanFrameDecoder()
        self.packet_decoder = HeightPacketDecoder()
        self.pipeline = DetectionPipeline()
        self.height_monitor = HeightMonitor(height_threshold)

        self.samples: List[RangeSample] = []
        self.detections: List[DetectedObject] = []
        self.statistics: Optional[ScanStatistics] = None
        self.scan_count = 0

    # =========================================================================
    # Scan Cycle
    # =========================================================================

    def process_frame(self, frame) -> List[RangeSample]:
        """
        Decode a frame and make it the current scan.

        Raises:
            TrunkDetectionError: the frame could not be decoded
        """
        try:
            samples = self.frame_decoder.decode(frame, self.scan_params)
        except TrunkDetectionError as e:
            preview = frame[:DIAG_RAW_PREVIEW_LENGTH]
            logger.error("Frame decoding failed: %s", e)
            logger.error("Raw frame start: %r", preview)
            raise

        self.samples = samples
        self.scan_count += 1
        self.statistics = compute_statistics(samples, self.scan_params.max_range)
        log_statistics(self.statistics)
        return samples

    def detect(self) -> List[DetectedObject]:
        """
        Run detection on the current scan.

        The previous detections are replaced, or cleared when nothing is
        accepted or the current scan holds no samples.
        """
        if not self.samples:
            logger.warning("No scan data to run detection on")
            self.detections = []
            return self.detections

        self.detections = self.pipeline.run(
            self.samples, self.scan_params, self.detection_params)
        return self.detections

    def process_scan(self, frame) -> List[DetectedObject]:
        """Decode a frame and detect trunks on it."""
        self.process_frame(frame)
        return self.detect()

    def process_height_packet(self, packet: bytes,
                              timestamp_ms: Optional[int] = None) -> List[HeightMeasurement]:
        """
        Decode a height packet and record its first measurement.

        Raises:
            IncompleteDataError: packet shorter than a full sensor packet
            FramingError: bad start byte
        """
        if len(packet) < HEIGHT_PACKET_SIZE:
            raise IncompleteDataError(
                f"Incomplete height packet: {len(packet)} < {HEIGHT_PACKET_SIZE} bytes",
                received=len(packet),
                expected=HEIGHT_PACKET_SIZE
            )
        measurements = self.packet_decoder.decode(packet, timestamp_ms)
        if measurements:
            self.height_monitor.add(measurements[0])
        return measurements

    # =========================================================================
    # Configuration
    # =========================================================================

    def update_detection_params(self, **changes) -> DetectionParams:
        """Replace detection thresholds; invalid values raise ValueError."""
        self.detection_params = replace(self.detection_params, **changes)
        logger.info("Updated detection parameters: %s", changes)
        return self.detection_params

    # =========================================================================
    # Query Methods
    # =========================================================================

    def valid_samples(self) -> List[RangeSample]:
        return self.pipeline.filter_samples(self.samples, self.scan_params)

    def get_statistics(self) -> dict:
        """Get session statistics."""
        valid = self.valid_samples()
        distances = [s.distance for s in valid]
        return {
            "scan_count": self.scan_count,
            "sample_count": len(self.samples),
            "valid_sample_count": len(valid),
            "detection_count": len(self.detections),
            "average_diameter": float(np.mean([d.diameter for d in self.detections]))
            if self.detections else 0.0,
            "average_distance": float(np.mean(distances)) if distances else 0.0,
            "max_distance": float(np.max(distances)) if distances else 0.0,
            "height_count": self.height_monitor.count,
            "current_height": self.height_monitor.current_height,
            "average_height": self.height_monitor.average_height(),
        }

    def clear_results(self):
        """Drop the current detections."""
        self.detections = []
        logger.info("Detection results cleared")

    def reset(self):
        """Reset the session."""
        self.samples = []
        self.detections = []
        self.statistics = None
        self.scan_count = 0
        self.height_monitor.clear()
