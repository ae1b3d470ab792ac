# =============================================================================
# Trunk Detection - Height Packet Decoder
# =============================================================================
# Decodes the fixed binary packet of the point rangefinder used to measure
# the height of the rig above ground.
# =============================================================================

import logging
import struct
import time
from typing import List, Optional

from .types import HeightMeasurement
from .errors import FramingError, IncompleteDataError

from .config import (
    HEIGHT_START_BYTE,
    HEIGHT_DATA_START,
    HEIGHT_RECORD_SIZE,
    HEIGHT_RECORD_FORMAT
)

logger = logging.getLogger(__name__)


class HeightPacketDecoder:
    """
    Splits a packet into fixed-stride measurement records.

    Each record: distance (2 bytes), noise (2), peak intensity (4),
    confidence (1), integration count (4), reference ToF (2), big-endian.
    """

    def __init__(self,
                 start_byte: int = HEIGHT_START_BYTE,
                 data_start: int = HEIGHT_DATA_START,
                 record_size: int = HEIGHT_RECORD_SIZE,
                 record_format: str = HEIGHT_RECORD_FORMAT):
        self.start_byte = start_byte
        self.data_start = data_start
        self.record_size = record_size
        self.record = struct.Struct(record_format)
        if self.record.size > record_size:
            raise ValueError(
                f"record format needs {self.record.size} bytes, stride is {record_size}")

    def decode(self, packet: bytes,
               timestamp_ms: Optional[int] = None) -> List[HeightMeasurement]:
        """
        Decode every complete record of a packet.

        Args:
            packet: Raw packet bytes
            timestamp_ms: Arrival time shared by all records (defaults to now)

        Returns:
            Measurements in packet order; empty when no full record fits

        Raises:
            IncompleteDataError: empty packet
            FramingError: first byte is not the start marker
        """
        packet = bytes(packet)
        if not packet:
            raise IncompleteDataError("Empty height packet", received=0, expected=1)
        if packet[0] != self.start_byte:
            raise FramingError(
                f"Bad start byte 0x{packet[0]:02X}, expected 0x{self.start_byte:02X}")

        if timestamp_ms is None:
            timestamp_ms = int(time.time() * 1000)

        measurements = []
        offset = self.data_start
        while offset + self.record_size <= len(packet):
            distance, noise, peak, confidence, intg, reftof = \
                self.record.unpack_from(packet, offset)
            measurements.append(HeightMeasurement(
                distance=distance,
                noise=noise,
                peak_intensity=peak,
                confidence=confidence,
                integration_count=intg,
                reference_tof=reftof,
                timestamp_ms=timestamp_ms
            ))
            offset += self.record_size

        logger.debug("Decoded %d height records from %d bytes",
                     len(measurements), len(packet))
        return measurements


def decode_height_packet(packet: bytes,
                         timestamp_ms: Optional[int] = None) -> List[HeightMeasurement]:
    """Decode a packet with the default record layout."""
    return HeightPacketDecoder().decode(packet, timestamp_ms)
