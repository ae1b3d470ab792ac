# =============================================================================
# Trunk Detection - Sensor Simulator
# =============================================================================
# Produces well-formed sensor input without hardware:
# - Ray-cast scans of circular trunks
# - SCIP GD response frames carrying those scans
# - Point rangefinder packets carrying height records
# =============================================================================

import struct
import numpy as np
from typing import List, Optional, Sequence, Tuple

from .types import ScanParams
from .codec import encode_range_value, scip_checksum

from .config import (
    SCIP_COMMANDS,
    SCIP_STATUS_OK,
    SCAN_MAX_RANGE,
    HEIGHT_PACKET_SIZE,
    HEIGHT_START_BYTE,
    HEIGHT_DATA_START,
    HEIGHT_RECORD_SIZE,
    HEIGHT_RECORD_FORMAT
)

# Encoded characters per SCIP data line
SCIP_LINE_LENGTH = 64

# Records carried by one height packet
HEIGHT_RECORDS_PER_PACKET = (HEIGHT_PACKET_SIZE - HEIGHT_DATA_START) // HEIGHT_RECORD_SIZE

Trunk = Tuple[float, float, float]  # (center x, center y, radius) in mm


class ScanSimulator:
    """
    Scanning rangefinder simulator.

    Emulates the beam layout of the real sensor: ``total_points`` beams from
    ``start_angle`` in steps of (end - start) / total_points.
    """

    def __init__(self, scan_params: Optional[ScanParams] = None,
                 max_range: float = SCAN_MAX_RANGE,
                 noise_std: float = 0.0,
                 seed: Optional[int] = None):
        """
        Args:
            scan_params: Beam geometry
            max_range: Reading of beams that hit nothing (mm)
            noise_std: Gaussian range noise standard deviation (mm)
            seed: Seed of the noise generator
        """
        self.scan_params = scan_params or ScanParams()
        self.max_range = max_range
        self.noise_std = noise_std
        self.rng = np.random.default_rng(seed)
        indices = np.arange(self.scan_params.total_points)
        self.angles = np.deg2rad(
            self.scan_params.start_angle + indices * self.scan_params.angle_step)

    def scan(self, trunks: Sequence[Trunk]) -> np.ndarray:
        """
        Ray-cast every beam against the trunks.

        Args:
            trunks: Circles as (cx, cy, radius) in the sensor frame

        Returns:
            Integer ranges (mm), one per beam
        """
        ranges = np.full(len(self.angles), float(self.max_range))

        for beam, angle in enumerate(self.angles):
            direction = np.array([np.cos(angle), np.sin(angle)])
            nearest = self.max_range
            for cx, cy, radius in trunks:
                center = np.array([cx, cy])
                proj = np.dot(center, direction)
                if proj <= 0:
                    continue
                offset = np.linalg.norm(center - proj * direction)
                if offset <= radius:
                    dist = proj - np.sqrt(radius ** 2 - offset ** 2)
                    if 0 < dist < nearest:
                        nearest = dist
            ranges[beam] = nearest

        if self.noise_std > 0:
            ranges += self.rng.normal(0, self.noise_std, ranges.shape)
        ranges = np.clip(ranges, 0, self.max_range)
        return np.rint(ranges).astype(int)

    def build_frame(self, ranges: Sequence[int], timestamp: int = 0) -> str:
        """
        Wrap ranges in a GD response frame.

        Layout: echo, status line, timestamp line, data lines of 64
        characters each closed by checksum and LF, and a final LF.
        """
        data = ''.join(encode_range_value(int(r), 3) for r in ranges)
        status = SCIP_STATUS_OK
        stamp = encode_range_value(timestamp & 0xFFFFFF, 4)

        lines = [
            SCIP_COMMANDS['scan'] + '\n',
            status + scip_checksum(status) + '\n',
            stamp + scip_checksum(stamp) + '\n',
        ]
        for start in range(0, len(data), SCIP_LINE_LENGTH):
            chunk = data[start:start + SCIP_LINE_LENGTH]
            lines.append(chunk + scip_checksum(chunk) + '\n')
        lines.append('\n')
        return ''.join(lines)

    def simulate_frame(self, trunks: Sequence[Trunk], timestamp: int = 0) -> str:
        """Scan the trunks and encode the result as a frame."""
        return self.build_frame(self.scan(trunks), timestamp)


def build_height_packet(distances: Sequence[int],
                        noise: int = 0,
                        peak_intensity: int = 0,
                        confidence: int = 100,
                        integration_count: int = 0,
                        reference_tof: int = 0) -> bytes:
    """
    Build a full point-rangefinder packet.

    Records beyond ``distances`` repeat its last value; the header and the
    trailing bytes after the records are zero apart from the start byte.
    """
    if not distances:
        raise ValueError("at least one distance is required")
    if len(distances) > HEIGHT_RECORDS_PER_PACKET:
        raise ValueError(f"a packet holds at most {HEIGHT_RECORDS_PER_PACKET} records")

    record = struct.Struct(HEIGHT_RECORD_FORMAT)
    packet = bytearray(HEIGHT_PACKET_SIZE)
    packet[0] = HEIGHT_START_BYTE

    values: List[int] = list(distances)
    values += [values[-1]] * (HEIGHT_RECORDS_PER_PACKET - len(values))
    for i, distance in enumerate(values):
        record.pack_into(packet, HEIGHT_DATA_START + i * HEIGHT_RECORD_SIZE,
                         distance, noise, peak_intensity, confidence,
                         integration_count, reference_tof)
    return bytes(packet)
