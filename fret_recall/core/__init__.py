"""Core components for the Fret Recall application."""

from .config import ConfigManager, TunerConfig
from .interfaces import IAudioInput, IFrequencyEstimator

__all__ = ["ConfigManager", "TunerConfig", "IAudioInput", "IFrequencyEstimator"]
