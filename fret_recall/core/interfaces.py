"""Defines the core interfaces for the Fret Recall application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable, Optional

import numpy as np


class IFrequencyEstimator(ABC):
    """Interface for fundamental-frequency estimators.

    Implementations must be deterministic for identical input and free of
    side effects visible to the caller.
    """

    @abstractmethod
    def estimate(self, samples: np.ndarray, sample_rate: int) -> Optional[float]:
        """Return a positive frequency in Hz, or None if no pitch was found."""
        pass


class IAudioInput(ABC):
    """Interface for audio input handlers delivering fixed-size mono frames."""

    @abstractmethod
    def start(self, callback: Callable[[np.ndarray, float], None]) -> bool:
        """Start capturing audio, calling ``callback(samples, timestamp)`` per frame."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop capturing audio."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if audio is running."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the audio stream."""
        pass
