"""
Unit tests for configuration and logging setup.
"""

import logging

import pytest
from pydantic import ValidationError

from src.core.config import (
    DEFAULT_MAX_CHECKPOINTS,
    DEFAULT_QUORUM,
    DEFAULT_WINDOW_SIZE,
    AssuranceDetectorConfig,
    Config,
)
from src.core.logging_config import setup_logging


def test_detector_config_defaults_are_named_constants():
    cfg = AssuranceDetectorConfig()
    assert cfg.window_size == DEFAULT_WINDOW_SIZE
    assert cfg.max_checkpoints == DEFAULT_MAX_CHECKPOINTS
    assert cfg.quorum == DEFAULT_QUORUM
    assert cfg.baseline_statistic == "median"


@pytest.mark.parametrize("field", ["fraction_threshold", "severity_fraction", "near_fraction", "quorum"])
def test_fractions_bounded(field):
    with pytest.raises(ValidationError):
        AssuranceDetectorConfig(**{field: -0.01})
    with pytest.raises(ValidationError):
        AssuranceDetectorConfig(**{field: 1.01})
    assert getattr(AssuranceDetectorConfig(**{field: 1.0}), field) == 1.0


@pytest.mark.parametrize("field", ["window_size", "max_checkpoints", "quorum"])
def test_booleans_rejected(field):
    with pytest.raises(ValidationError):
        AssuranceDetectorConfig(**{field: True})


def test_settings_read_nested_environment(monkeypatch):
    monkeypatch.setenv("ASSURANCE_LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("ASSURANCE_DETECTOR__QUORUM", "0.5")
    monkeypatch.setenv("ASSURANCE_DETECTOR__WINDOW_SIZE", "16")

    settings = Config(_env_file=None)
    assert settings.log_level == "DEBUG"
    assert settings.detector.quorum == 0.5
    assert settings.detector.window_size == 16
    assert settings.logs_dir is None


def test_setup_logging_console_only():
    settings = Config(_env_file=None, log_level="WARNING")
    logger = setup_logging("assurance-test-console", settings=settings)
    try:
        assert logger.level == logging.WARNING
        assert len(logger.handlers) == 1
        # Second call must not stack handlers.
        assert setup_logging("assurance-test-console", settings=settings) is logger
        assert len(logger.handlers) == 1
    finally:
        logger.handlers.clear()


def test_setup_logging_with_file(tmp_path):
    settings = Config(_env_file=None, logs_dir=tmp_path / "logs")
    logger = setup_logging("assurance-test-file", settings=settings)
    try:
        assert len(logger.handlers) == 2
        assert (tmp_path / "logs").is_dir()
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers.clear()
