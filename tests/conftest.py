# =============================================================================
# Shared fixtures for the trunk detection tests
# =============================================================================

import pytest

from trunk_detection import ScanSimulator


@pytest.fixture
def simulator():
    return ScanSimulator(seed=0)


@pytest.fixture
def ramp_ranges():
    """One distinct distance per beam: 1000, 1001, ..., 1681."""
    return list(range(1000, 1682))


@pytest.fixture
def ramp_frame(simulator, ramp_ranges):
    return simulator.build_frame(ramp_ranges, timestamp=1234)
