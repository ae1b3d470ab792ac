# =============================================================================
# Trunk Detection - Configuration
# =============================================================================
# All configurable parameters for decoding, clustering and fitting.
# Distances are in millimetres, angles in degrees unless noted.
# =============================================================================

# =============================================================================
# SCANNING RANGEFINDER (SCIP 2.0) FRAME CONFIGURATION
# =============================================================================
# Size of one complete GD response frame (characters)
SCAN_EXPECTED_FRAME_SIZE = 2134

# Offset of the character used as frame marker (the LF closing the echo)
SCAN_MARKER_OFFSET = 12

# Number of marker occurrences that precede the payload
SCAN_MARKER_COUNT = 3

# Payload layout: fixed blocks, each closed by a checksum and a LF
SCAN_BLOCK_COUNT = 32
SCAN_BLOCK_SIZE = 66

# Span of each block holding encoded distances [start, end)
# Start at 1 to skip a leading framing character per block
SCAN_BLOCK_DATA_START = 0
SCAN_BLOCK_DATA_END = 64

# Characters per encoded distance in GD responses
SCAN_GROUP_SIZE = 3

# =============================================================================
# SCAN GEOMETRY DEFAULTS
# =============================================================================
SCAN_START_ANGLE = -120.0
SCAN_END_ANGLE = 120.0
SCAN_TOTAL_POINTS = 682

# Valid distance window; samples outside are not clustered
SCAN_MIN_RANGE = 20.0
SCAN_MAX_RANGE = 5500.0

# =============================================================================
# SCIP PROTOCOL COMMANDS
# =============================================================================
SCIP_COMMANDS = {
    'scip': 'SCIP2.0',
    'version': 'VV',
    'laser_on': 'BM',
    'scan': 'GD0044072500',
    'laser_off': 'QT',
}

# Status returned with a successful GD response
SCIP_STATUS_OK = '00'

# Offset subtracted from every encoded character
SCIP_CHAR_OFFSET = 0x30

# Bits carried by one encoded character
SCIP_BITS_PER_CHAR = 6

# =============================================================================
# POINT RANGEFINDER (STP-23L) PACKET CONFIGURATION
# =============================================================================
HEIGHT_PACKET_SIZE = 195
HEIGHT_START_BYTE = 0xAA

# First measurement record and record stride (bytes)
HEIGHT_DATA_START = 10
HEIGHT_RECORD_SIZE = 15

# Big-endian: distance, noise, peak, confidence, integration count, ref ToF
HEIGHT_RECORD_FORMAT = '>HHIBIH'

# =============================================================================
# DBSCAN CLUSTERING CONFIGURATION
# =============================================================================
# Epsilon: Maximum distance between two neighbouring points (mm)
DBSCAN_EPS = 100.0

# Minimum neighbours for a core point, and minimum cluster size
DBSCAN_MIN_POINTS = 5

# =============================================================================
# CIRCLE FIT CONFIGURATION
# =============================================================================
# Minimum points for a circle fit
CIRCLE_FIT_MIN_POINTS = 3

# Absolute determinant threshold of the normal equations
CIRCLE_FIT_DET_EPSILON = 1e-10

# Relative determinant threshold (|det| <= tol * A * C)
CIRCLE_FIT_RELATIVE_TOLERANCE = 1e-12

# =============================================================================
# TRUNK ACCEPTANCE CONFIGURATION
# =============================================================================
# Accepted trunk radius (mm)
TRUNK_MIN_RADIUS = 50.0
TRUNK_MAX_RADIUS = 500.0

# =============================================================================
# HEIGHT MONITOR CONFIGURATION
# =============================================================================
# Change between consecutive heights that raises a warning (mm)
HEIGHT_CHANGE_THRESHOLD = 1000.0

# =============================================================================
# DIAGNOSTICS CONFIGURATION
# =============================================================================
DIAG_MIN_MEAN_DISTANCE = 500.0
DIAG_MAX_MEAN_DISTANCE = 4000.0
DIAG_MIN_ANGLE_SPAN = 200.0
DIAG_MAX_ASYMMETRY = 1000.0
DIAG_MIN_UNIQUE_RATIO = 0.1

# Characters of a rejected frame echoed to the log
DIAG_RAW_PREVIEW_LENGTH = 100

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL = "INFO"
