# =============================================================================
# SCAN REPLAY - Offline Decoding and Detection
# =============================================================================
# Replays captured sensor data through the trunk detection pipeline:
# - frame:  decode a captured scan frame and detect trunks
# - packet: decode a captured height packet
# - demo:   simulate a stand of trunks and detect it
# =============================================================================

import argparse
import logging
import sys

from trunk_detection import (
    ScanSession,
    ScanSimulator,
    DetectionParams,
    TrunkDetectionError,
    decode_height_packet
)
from trunk_detection.config import (
    DBSCAN_EPS,
    DBSCAN_MIN_POINTS,
    TRUNK_MIN_RADIUS,
    TRUNK_MAX_RADIUS,
    LOG_FORMAT,
    LOG_LEVEL
)

# Trunks of the demo stand: (center x, center y, radius) in mm
DEMO_TRUNKS = [
    (1500.0, 0.0, 150.0),
    (2200.0, 1400.0, 120.0),
    (1800.0, -1600.0, 200.0),
]


def configure_logging(level: str = LOG_LEVEL):
    """Console logging for the replay tool."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr
    )


def print_detections(detections):
    print(f"{'#':>3} {'X (mm)':>10} {'Y (mm)':>10} {'Diameter (mm)':>14} {'Points':>7}")
    for index, trunk in enumerate(detections, 1):
        print(f"{index:>3} {trunk.center.x:>10.0f} {trunk.center.y:>10.0f} "
              f"{trunk.diameter:>14.0f} {trunk.num_points:>7}")
    print(f"{len(detections)} trunk(s) detected")


def detection_params_from_args(args) -> DetectionParams:
    return DetectionParams(
        eps=args.eps,
        min_points=args.min_points,
        min_radius=args.min_radius,
        max_radius=args.max_radius
    )


# =============================================================================
# Commands
# =============================================================================

def run_frame(args) -> int:
    with open(args.file, 'rb') as f:
        frame = f.read()

    session = ScanSession(detection_params=detection_params_from_args(args))
    try:
        detections = session.process_scan(frame)
    except TrunkDetectionError as e:
        print(f"Frame rejected: {e}", file=sys.stderr)
        return 1

    print_detections(detections)
    return 0


def run_packet(args) -> int:
    with open(args.file, 'rb') as f:
        packet = f.read()

    try:
        measurements = decode_height_packet(packet)
    except TrunkDetectionError as e:
        print(f"Packet rejected: {e}", file=sys.stderr)
        return 1

    print(f"{'#':>3} {'Distance':>9} {'Noise':>6} {'Peak':>10} {'Conf':>5} "
          f"{'Intg':>10} {'RefToF':>7}")
    for index, m in enumerate(measurements, 1):
        print(f"{index:>3} {m.distance:>9} {m.noise:>6} {m.peak_intensity:>10} "
              f"{m.confidence:>5} {m.integration_count:>10} {m.reference_tof:>7}")
    return 0


def run_demo(args) -> int:
    simulator = ScanSimulator(noise_std=args.noise, seed=args.seed)
    frame = simulator.simulate_frame(DEMO_TRUNKS)

    session = ScanSession(detection_params=detection_params_from_args(args))
    detections = session.process_scan(frame)

    print("Simulated trunks:")
    for cx, cy, radius in DEMO_TRUNKS:
        print(f"    ({cx:.0f}, {cy:.0f}) diameter {2 * radius:.0f}mm")
    print_detections(detections)
    return 0


# =============================================================================
# Argument Parsing
# =============================================================================

def parse_arguments(argv=None):
    parser = argparse.ArgumentParser(
        description="Replay rangefinder captures through trunk detection.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
EXAMPLES:
  python scan_replay.py frame capture.txt                 # Detect trunks in a capture
  python scan_replay.py frame capture.txt --eps 80        # Tighter clustering
  python scan_replay.py packet height.bin                 # Decode a height packet
  python scan_replay.py demo --noise 5 --seed 1           # Simulated stand
"""
    )
    parser.add_argument(
        '--log-level',
        type=str,
        default=LOG_LEVEL,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help=f'Logging level (default: {LOG_LEVEL})'
    )

    detection = argparse.ArgumentParser(add_help=False)
    detection.add_argument('--eps', type=float, default=DBSCAN_EPS, metavar='MM',
                           help=f'Clustering radius (default: {DBSCAN_EPS})')
    detection.add_argument('--min-points', type=int, default=DBSCAN_MIN_POINTS, metavar='N',
                           help=f'Minimum cluster points (default: {DBSCAN_MIN_POINTS})')
    detection.add_argument('--min-radius', type=float, default=TRUNK_MIN_RADIUS, metavar='MM',
                           help=f'Minimum trunk radius (default: {TRUNK_MIN_RADIUS})')
    detection.add_argument('--max-radius', type=float, default=TRUNK_MAX_RADIUS, metavar='MM',
                           help=f'Maximum trunk radius (default: {TRUNK_MAX_RADIUS})')

    commands = parser.add_subparsers(dest='command', required=True)

    frame = commands.add_parser('frame', parents=[detection],
                                help='Decode a captured scan frame')
    frame.add_argument('file', help='File holding one raw GD response')
    frame.set_defaults(handler=run_frame)

    packet = commands.add_parser('packet', help='Decode a captured height packet')
    packet.add_argument('file', help='File holding one raw height packet')
    packet.set_defaults(handler=run_packet)

    demo = commands.add_parser('demo', parents=[detection],
                               help='Detect trunks in a simulated scan')
    demo.add_argument('--noise', type=float, default=0.0, metavar='MM',
                      help='Range noise standard deviation (default: 0)')
    demo.add_argument('--seed', type=int, default=None, metavar='N',
                      help='Noise seed')
    demo.set_defaults(handler=run_demo)

    return parser.parse_args(argv)


# =============================================================================
# Main Entry Point
# =============================================================================
def main(argv=None) -> int:
    args = parse_arguments(argv)
    configure_logging(args.log_level)
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
