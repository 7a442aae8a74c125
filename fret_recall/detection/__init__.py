"""Real-time pitch tracking: gating, smoothing and note conversion."""

from .frequency_smoother import FrequencySmoother
from .noise_gate import GateStatus, NoiseGate
from .pitch_tracker import PitchTracker

__all__ = ["FrequencySmoother", "GateStatus", "NoiseGate", "PitchTracker"]
