# =============================================================================
# Trunk Detection - Scan Frame Decoder
# =============================================================================
# Turns one raw GD response of the scanning rangefinder into range samples:
# 1. Locate the payload after the third frame marker
# 2. Strip per-block checksum/LF framing
# 3. Decode 3-character SCIP groups
# 4. Project each distance onto its beam angle
# =============================================================================

import logging
import numpy as np
from typing import List, Optional, Union

from .types import RangeSample, ScanParams
from .codec import decode_range_value
from .errors import FormatError, IncompleteFrameError, MissingMarkerError

from .config import (
    SCAN_EXPECTED_FRAME_SIZE,
    SCAN_MARKER_OFFSET,
    SCAN_MARKER_COUNT,
    SCAN_BLOCK_COUNT,
    SCAN_BLOCK_SIZE,
    SCAN_BLOCK_DATA_START,
    SCAN_BLOCK_DATA_END,
    SCAN_GROUP_SIZE
)

logger = logging.getLogger(__name__)


class ScanFrameDecoder:
    """
    Decodes fixed-size SCIP scan frames.

    The decoder holds only frame geometry, so a single instance can be
    shared by any number of sessions.
    """

    def __init__(self,
                 expected_frame_size: int = SCAN_EXPECTED_FRAME_SIZE,
                 marker_offset: int = SCAN_MARKER_OFFSET,
                 marker_count: int = SCAN_MARKER_COUNT,
                 block_count: int = SCAN_BLOCK_COUNT,
                 block_size: int = SCAN_BLOCK_SIZE,
                 block_data_start: int = SCAN_BLOCK_DATA_START,
                 block_data_end: int = SCAN_BLOCK_DATA_END):
        """
        Args:
            expected_frame_size: Minimum frame length; longer frames are truncated
            marker_offset: Offset of the marker character
            marker_count: Marker occurrences preceding the payload
            block_count: Number of payload blocks
            block_size: Characters per block, framing included
            block_data_start: First retained character of each block
            block_data_end: End (exclusive) of the retained span
        """
        if not 0 <= block_data_start < block_data_end <= block_size:
            raise ValueError(
                f"invalid block span [{block_data_start}, {block_data_end}) "
                f"for block size {block_size}")
        self.expected_frame_size = expected_frame_size
        self.marker_offset = marker_offset
        self.marker_count = marker_count
        self.block_count = block_count
        self.block_size = block_size
        self.block_data_start = block_data_start
        self.block_data_end = block_data_end

    def decode(self, frame: Union[str, bytes],
               scan_params: Optional[ScanParams] = None) -> List[RangeSample]:
        """
        Decode a raw frame into range samples.

        Args:
            frame: Raw GD response (text or ASCII bytes)
            scan_params: Scan geometry; defaults to the sensor's nominal geometry

        Returns:
            min(decoded, total_points) samples in increasing angle order

        Raises:
            IncompleteFrameError: frame shorter than expected
            MissingMarkerError: fewer marker characters than required
            FormatError: invalid encoded character
        """
        if scan_params is None:
            scan_params = ScanParams()

        payload = self.extract_payload(frame)
        data = self.reorganize(payload)
        ranges = self.decode_ranges(data)
        samples = self.project(ranges, scan_params)

        logger.debug("Decoded %d samples from %d distance groups",
                     len(samples), len(ranges))
        return samples

    # =========================================================================
    # Decoding Steps
    # =========================================================================

    def extract_payload(self, frame: Union[str, bytes]) -> str:
        """Return the characters between the last header marker and the final character."""
        if isinstance(frame, (bytes, bytearray)):
            frame = frame.decode('latin-1')

        if len(frame) < self.expected_frame_size:
            raise IncompleteFrameError(
                f"Incomplete frame: {len(frame)} < {self.expected_frame_size} characters",
                received=len(frame),
                expected=self.expected_frame_size
            )
        frame = frame[:self.expected_frame_size]

        marker = frame[self.marker_offset]
        positions = [i for i, char in enumerate(frame) if char == marker]
        if len(positions) < self.marker_count:
            raise MissingMarkerError(
                f"Malformed frame: found {len(positions)} occurrences of marker "
                f"{marker!r}, expected at least {self.marker_count}",
                marker=marker,
                found=len(positions),
                expected=self.marker_count
            )

        return frame[positions[self.marker_count - 1] + 1:-1]

    def reorganize(self, payload: str) -> str:
        """Concatenate the data span of every block, dropping block framing."""
        spans = []
        for block in range(self.block_count):
            start = block * self.block_size + self.block_data_start
            end = block * self.block_size + self.block_data_end
            if end <= len(payload):
                spans.append(payload[start:end])
        return ''.join(spans)

    def decode_ranges(self, data: str) -> List[int]:
        """Decode consecutive 3-character groups; a partial trailing group is ignored."""
        ranges = []
        for index in range(len(data) // SCAN_GROUP_SIZE):
            group = data[index * SCAN_GROUP_SIZE:(index + 1) * SCAN_GROUP_SIZE]
            try:
                ranges.append(decode_range_value(group))
            except FormatError as e:
                raise FormatError(f"Group {index}: {e}", group=group, index=index) from e
        return ranges

    def project(self, ranges: List[int], scan_params: ScanParams) -> List[RangeSample]:
        """Assign each distance its beam angle and Cartesian coordinates."""
        count = min(len(ranges), scan_params.total_points)
        if count == 0:
            return []

        indices = np.arange(count)
        angles = np.deg2rad(scan_params.start_angle + indices * scan_params.angle_step)
        distances = np.asarray(ranges[:count], dtype=float)
        xs = distances * np.cos(angles)
        ys = distances * np.sin(angles)

        return [RangeSample(float(a), float(d), float(x), float(y))
                for a, d, x, y in zip(angles, distances, xs, ys)]


def decode_scan_frame(frame: Union[str, bytes],
                      scan_params: Optional[ScanParams] = None) -> List[RangeSample]:
    """Decode a frame with the default decoder geometry."""
    return ScanFrameDecoder().decode(frame, scan_params)
