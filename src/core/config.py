"""
Application configuration for the assurance detector.

Provides environment-aware settings with conservative defaults. All detector
thresholds are configurable to avoid hard-coded "magic numbers".
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_WINDOW_SIZE = 8
DEFAULT_MAX_CHECKPOINTS = 4
DEFAULT_FRACTION_THRESHOLD = 0.5
DEFAULT_SEVERITY_FRACTION = 1.0
DEFAULT_NEAR_FRACTION = 0.1
# Three out of four checkpoints.
DEFAULT_QUORUM = 0.7
DEFAULT_BASELINE_STATISTIC = "median"


class AssuranceDetectorConfig(BaseModel):
	"""
	Configuration for a single assurance detector.

	Notes:
	- window_size: number of recent samples used for the baseline level.
	- max_checkpoints: capacity of the checkpoint ledger.
	- fraction_threshold: minimum relative drop that counts as a drop.
	- severity_fraction: relative drop classified as severe.
	- near_fraction: tolerance band around fraction_threshold. Drops within the
	  band above the threshold are weak signals, and an open deviation episode
	  keeps counting samples down to fraction_threshold - near_fraction.
	- quorum: minimum fraction of dropped checkpoints needed to detect.
	- baseline_statistic: 'median' or 'mean' of the baseline window.
	"""

	model_config = ConfigDict(frozen=True, extra="forbid")

	window_size: int = Field(DEFAULT_WINDOW_SIZE, ge=1)
	max_checkpoints: int = Field(DEFAULT_MAX_CHECKPOINTS, ge=1)
	fraction_threshold: float = Field(DEFAULT_FRACTION_THRESHOLD, ge=0.0, le=1.0)
	severity_fraction: float = Field(DEFAULT_SEVERITY_FRACTION, ge=0.0, le=1.0)
	near_fraction: float = Field(DEFAULT_NEAR_FRACTION, ge=0.0, le=1.0)
	quorum: float = Field(DEFAULT_QUORUM, ge=0.0, le=1.0)
	baseline_statistic: Literal["median", "mean"] = Field(
		DEFAULT_BASELINE_STATISTIC,
		description="Reference level of the baseline window: 'median' or 'mean'",
	)

	@field_validator(
		"window_size",
		"max_checkpoints",
		"fraction_threshold",
		"severity_fraction",
		"near_fraction",
		"quorum",
		mode="before",
	)
	@classmethod
	def reject_booleans(cls, value):
		# bool is an int subclass; True would pass as a window of 1.
		if isinstance(value, bool):
			raise ValueError("expected a number, got a boolean")
		return value


class Config(BaseSettings):
	"""
	Global configuration with environment overrides.

	Nested detector options are read as e.g. ASSURANCE_DETECTOR__QUORUM=0.5.
	"""

	model_config = SettingsConfigDict(
		env_prefix="ASSURANCE_",
		env_file=".env",
		env_nested_delimiter="__",
		extra="ignore",
	)

	log_level: str = Field("INFO", description="Default logging level")
	logs_dir: Optional[Path] = Field(
		None, description="Directory for log files (console only when unset)"
	)
	detector: AssuranceDetectorConfig = AssuranceDetectorConfig()


config = Config()
