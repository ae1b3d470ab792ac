# =============================================================================
# Trunk Detection - Errors
# =============================================================================
# Typed failures raised by the decoders, the fitter and the pipeline.
# A decode failure aborts only the current frame or packet.
# =============================================================================

from typing import Optional


class TrunkDetectionError(Exception):
    """Base class for every error raised by this package."""


# =============================================================================
# Input framing
# =============================================================================

class FramingError(TrunkDetectionError):
    """Bad start marker or insufficient frame markers."""


class IncompleteInputError(TrunkDetectionError):
    """Buffer shorter than required."""

    def __init__(self, message: str, received: int = 0, expected: int = 0):
        super().__init__(message)
        self.received = received
        self.expected = expected


class IncompleteFrameError(IncompleteInputError):
    """Scan frame shorter than the expected frame size."""


class IncompleteDataError(IncompleteInputError):
    """Height packet shorter than required."""


class MissingMarkerError(IncompleteFrameError, FramingError):
    """Frame has the right length but fewer marker characters than needed."""

    def __init__(self, message: str, marker: str, found: int, expected: int):
        super().__init__(message, received=found, expected=expected)
        self.marker = marker
        self.found = found


class FormatError(TrunkDetectionError):
    """Encoded character outside the printable range of the SCIP scheme."""

    def __init__(self, message: str, group: str = '', index: Optional[int] = None):
        super().__init__(message)
        self.group = group
        self.index = index


# =============================================================================
# Geometry
# =============================================================================

class FitError(TrunkDetectionError):
    """Circle fit could not produce a result."""


class NotEnoughPointsError(FitError):
    """Fewer points than a circle fit needs."""


class DegenerateFitError(FitError):
    """Collinear or ill-conditioned cluster."""


class InsufficientPointsError(TrunkDetectionError):
    """Too few valid samples to cluster; yields an empty result, never fatal."""

    def __init__(self, message: str, available: int, required: int):
        super().__init__(message)
        self.available = available
        self.required = required
