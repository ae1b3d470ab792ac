import numpy as np
import pytest

from trunk_detection import (
    FormatError,
    FramingError,
    IncompleteFrameError,
    MissingMarkerError,
    ScanFrameDecoder,
    ScanParams,
    decode_scan_frame,
    encode_range_value
)


def test_simulated_frame_layout(ramp_frame):
    assert len(ramp_frame) == 2134
    assert ramp_frame[12] == '\n'
    assert ramp_frame.startswith('GD0044072500\n00P\n')


def test_well_formed_frame_yields_all_points(ramp_frame, ramp_ranges):
    samples = decode_scan_frame(ramp_frame)

    assert len(samples) == 682
    assert [s.distance for s in samples] == ramp_ranges


def test_angles(ramp_frame):
    samples = decode_scan_frame(ramp_frame)
    angles = np.rad2deg([s.angle for s in samples])

    assert angles[0] == pytest.approx(-120.0)
    assert angles[681] == pytest.approx(120.0 - 240.0 / 682)
    assert np.all(np.diff(angles) > 0)


def test_coordinates(ramp_frame):
    for sample in decode_scan_frame(ramp_frame)[::50]:
        assert sample.x == pytest.approx(sample.distance * np.cos(sample.angle))
        assert sample.y == pytest.approx(sample.distance * np.sin(sample.angle))


def test_bytes_frame(ramp_frame, ramp_ranges):
    samples = decode_scan_frame(ramp_frame.encode('ascii'))
    assert [s.distance for s in samples] == ramp_ranges


def test_longer_frame_is_truncated(ramp_frame, ramp_ranges):
    samples = decode_scan_frame(ramp_frame + 'GD0044072500\n')
    assert [s.distance for s in samples] == ramp_ranges


def test_short_frame():
    with pytest.raises(IncompleteFrameError) as exc:
        decode_scan_frame('GD0044072500\n' * 10)
    assert exc.value.received == 130
    assert exc.value.expected == 2134


def test_missing_markers():
    frame = list('0' * 2134)
    frame[12] = '\n'
    frame[500] = '\n'

    with pytest.raises(MissingMarkerError) as exc:
        decode_scan_frame(''.join(frame))

    assert exc.value.found == 2
    assert isinstance(exc.value, FramingError)
    assert isinstance(exc.value, IncompleteFrameError)


def test_invalid_character_reports_group_index(ramp_frame):
    # Second character of the fifth group in the first data line
    frame = list(ramp_frame)
    frame[23 + 4 * 3 + 1] = '~'

    with pytest.raises(FormatError) as exc:
        decode_scan_frame(''.join(frame))
    assert exc.value.index == 4


def test_extra_values_are_discarded(ramp_frame, ramp_ranges):
    params = ScanParams(start_angle=-90.0, end_angle=90.0, total_points=100)
    samples = decode_scan_frame(ramp_frame, params)

    assert len(samples) == 100
    assert [s.distance for s in samples] == ramp_ranges[:100]
    assert np.rad2deg(samples[1].angle) == pytest.approx(-90.0 + 1.8)


def test_reorganize_skips_framing():
    decoder = ScanFrameDecoder(block_count=2, block_size=8,
                               block_data_start=0, block_data_end=6)
    assert decoder.reorganize('abcdef#\nghijkl#\n') == 'abcdefghijkl'


def test_reorganize_skips_truncated_block():
    decoder = ScanFrameDecoder(block_count=3, block_size=8,
                               block_data_start=1, block_data_end=6)
    assert decoder.reorganize('abcdef#\nghijkl#\nmno') == 'bcdefhijkl'


def test_frame_with_leading_block_character():
    # Each block: one skipped character, 21 values, checksum and LF
    values = iter(range(1000, 1672))
    blocks = ['0' + ''.join(encode_range_value(next(values)) for _ in range(21)) + '0\n'
              for _ in range(32)]
    payload = ''.join(blocks)[:2110]
    frame = 'GD0044072500\n00P\n0000X\n' + payload + '\n'
    assert len(frame) == 2134

    samples = ScanFrameDecoder(block_data_start=1).decode(frame)

    assert [s.distance for s in samples[:3]] == [1000, 1001, 1002]
    assert [s.distance for s in samples] == list(range(1000, 1672))


def test_invalid_block_span():
    with pytest.raises(ValueError):
        ScanFrameDecoder(block_data_start=10, block_data_end=5)
