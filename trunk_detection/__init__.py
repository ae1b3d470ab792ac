# =============================================================================
# Trunk Detection Package
# =============================================================================
# Sensor decoding and trunk detection for field scan sessions.
#
# Responsibilities:
# - SCIP scan frame decoding (scanning rangefinder)
# - Height packet decoding (point rangefinder)
# - Density clustering and circle fitting of trunk candidates
# - Session state: latest scan, detections, height history
#
# Usage:
#   from trunk_detection import ScanSession
#   session = ScanSession()
#   trunks = session.process_scan(frame)
# =============================================================================

# Types
from .types import (
    RangeSample,
    HeightMeasurement,
    HeightSample,
    Point2D,
    CircleFit,
    DetectedObject,
    ScanParams,
    DetectionParams,
    ScanStatistics
)

# Errors
from .errors import (
    TrunkDetectionError,
    FramingError,
    IncompleteInputError,
    IncompleteFrameError,
    IncompleteDataError,
    MissingMarkerError,
    FormatError,
    FitError,
    NotEnoughPointsError,
    DegenerateFitError,
    InsufficientPointsError
)

# Core components
from .codec import RangeValueCodec, decode_range_value, encode_range_value
from .scan_frame import ScanFrameDecoder, decode_scan_frame
from .height_packet import HeightPacketDecoder, decode_height_packet
from .clustering import SpatialClusterer
from .circle_fit import CircleFitter, fit_circle
from .pipeline import DetectionPipeline, detect_trunks
from .diagnostics import compute_statistics, calibration_warnings

# Session and simulation
from .session import HeightMonitor, ScanSession
from .simulator import ScanSimulator, build_height_packet

__all__ = [
    # Types
    'RangeSample',
    'HeightMeasurement',
    'HeightSample',
    'Point2D',
    'CircleFit',
    'DetectedObject',
    'ScanParams',
    'DetectionParams',
    'ScanStatistics',

    # Errors
    'TrunkDetectionError',
    'FramingError',
    'IncompleteInputError',
    'IncompleteFrameError',
    'IncompleteDataError',
    'MissingMarkerError',
    'FormatError',
    'FitError',
    'NotEnoughPointsError',
    'DegenerateFitError',
    'InsufficientPointsError',

    # Components
    'RangeValueCodec',
    'decode_range_value',
    'encode_range_value',
    'ScanFrameDecoder',
    'decode_scan_frame',
    'HeightPacketDecoder',
    'decode_height_packet',
    'SpatialClusterer',
    'CircleFitter',
    'fit_circle',
    'DetectionPipeline',
    'detect_trunks',
    'compute_statistics',
    'calibration_warnings',

    # Session
    'HeightMonitor',
    'ScanSession',
    'ScanSimulator',
    'build_height_packet',
]

__version__ = '1.0.0'
