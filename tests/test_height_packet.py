import struct

import pytest

from trunk_detection import (
    FramingError,
    HeightPacketDecoder,
    IncompleteDataError,
    build_height_packet,
    decode_height_packet
)


def make_packet(size=195):
    packet = bytearray(size)
    packet[0] = 0xAA
    return packet


def test_first_distance():
    packet = make_packet()
    packet[10] = 0x00
    packet[11] = 0x64

    measurements = decode_height_packet(bytes(packet), timestamp_ms=0)
    assert measurements[0].distance == 100


def test_full_packet_has_twelve_records():
    assert len(decode_height_packet(bytes(make_packet()), timestamp_ms=0)) == 12


def test_fields_are_big_endian():
    packet = make_packet()
    packet[25:40] = bytes([
        0x01, 0x02,              # distance
        0x03, 0x04,              # noise
        0x05, 0x06, 0x07, 0x08,  # peak intensity
        0x09,                    # confidence
        0x0A, 0x0B, 0x0C, 0x0D,  # integration count
        0x0E, 0x0F,              # reference ToF
    ])

    m = decode_height_packet(bytes(packet), timestamp_ms=42)[1]

    assert m.distance == 0x0102
    assert m.noise == 0x0304
    assert m.peak_intensity == 0x05060708
    assert m.confidence == 0x09
    assert m.integration_count == 0x0A0B0C0D
    assert m.reference_tof == 0x0E0F
    assert m.timestamp_ms == 42


def test_partial_record_is_ignored():
    assert len(decode_height_packet(bytes(make_packet(30)), timestamp_ms=0)) == 1
    assert decode_height_packet(bytes(make_packet(24)), timestamp_ms=0) == []


def test_bad_start_byte():
    packet = make_packet()
    packet[0] = 0x55
    with pytest.raises(FramingError):
        decode_height_packet(bytes(packet))


def test_empty_packet():
    with pytest.raises(IncompleteDataError):
        decode_height_packet(b'')


def test_default_timestamp_is_wall_clock():
    m = decode_height_packet(bytes(make_packet()))[0]
    assert m.timestamp_ms > 1_600_000_000_000


def test_built_packet():
    packet = build_height_packet([1500, 1510], confidence=90)
    measurements = decode_height_packet(packet, timestamp_ms=0)

    assert len(packet) == 195
    assert [m.distance for m in measurements] == [1500, 1510] + [1510] * 10
    assert all(m.confidence == 90 for m in measurements)


def test_record_format_must_fit_stride():
    with pytest.raises(ValueError):
        HeightPacketDecoder(record_size=10)


def test_custom_layout():
    decoder = HeightPacketDecoder(start_byte=0x54, data_start=2, record_size=16)
    packet = bytes([0x54, 0x00]) + struct.pack('>HHIBIH', 7, 0, 0, 0, 0, 0) + b'\x00'

    assert [m.distance for m in decoder.decode(packet, timestamp_ms=0)] == [7]
