"""
Assurance module: sustained-drop detection for performance signals.

Implements the rolling baseline window, deviation classifier, checkpoint
ledger, quorum voter and the detector facade that ties them together.
"""

from .baselines import BaselineWindow
from .buffers import RingBuffer
from .classifier import DeviationClassifier, relative_deviation
from .detector import AssuranceDetector, build_config
from .engine import AssuranceEngine
from .ledger import CheckpointLedger, QuorumVoter
from .replay import detection_ticks, replay
from .schema import Checkpoint, Detection, DetectorState, DetectorTag, DeviationClass

__all__ = [
	"AssuranceDetector",
	"AssuranceEngine",
	"BaselineWindow",
	"Checkpoint",
	"CheckpointLedger",
	"Detection",
	"DetectorState",
	"DetectorTag",
	"DeviationClass",
	"DeviationClassifier",
	"QuorumVoter",
	"RingBuffer",
	"build_config",
	"detection_ticks",
	"relative_deviation",
	"replay",
]
