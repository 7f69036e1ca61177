"""
Pytest configuration and shared fixtures.

Provides detector configurations and signal scenarios for unit and
integration tests.
"""

import pytest

from src.assurance.detector import AssuranceDetector
from src.assurance.schema import DetectorTag
from src.core.config import AssuranceDetectorConfig

from tests.scenarios import ConstantSignal, SignalScenario, ZeroNoise


@pytest.fixture
def tag() -> DetectorTag:
    return DetectorTag(module="qos_controller", name="AssuranceDetector")


@pytest.fixture
def drop_config() -> AssuranceDetectorConfig:
    """
    Configuration shared by the step and ramp drop scenarios.

    window 8, 4 checkpoints, 50% drop threshold, severe only at 100%,
    10% near band, quorum 0.5.
    """
    return AssuranceDetectorConfig(
        window_size=8,
        max_checkpoints=4,
        fraction_threshold=0.5,
        severity_fraction=1.0,
        near_fraction=0.1,
        quorum=0.5,
    )


@pytest.fixture
def make_detector(tag):
    """Factory fixture building detectors from keyword overrides."""

    def _make(config=None, **overrides) -> AssuranceDetector:
        return AssuranceDetector(config=config, tag=tag, **overrides)

    return _make


@pytest.fixture
def step_drop() -> SignalScenario:
    """Constant 10 with a drop to 5 from iteration 10, 30 iterations."""
    return (
        SignalScenario(30)
        .use(ConstantSignal(10.0))
        .use(ZeroNoise())
        .after(10).add(-5.0)
    )


def pytest_configure(config):
    """
    Pytest hook for custom configuration.

    Registers custom markers used throughout tests.
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
