"""Fundamental-frequency estimators plugged into the PitchTracker."""

from typing import Callable, Dict, Optional, Tuple

import aubio
import numpy as np

from ..core.interfaces import IFrequencyEstimator
from ..logger import get_logger

logger = get_logger(__name__)


class AubioYinEstimator(IFrequencyEstimator):
    """Pitch estimation with aubio's YIN detector.

    aubio needs the analysis window size up front, so one detector is kept per
    (frame size, sample rate) pair and created on first use. Each frame is
    analyzed as a whole (hop size == frame size).
    """

    def __init__(
        self,
        tolerance: float = 0.8,
        min_confidence: float = 0.0,
        method: str = "yin",
    ) -> None:
        """Initialize the estimator.

        Args:
            tolerance: aubio pitch tolerance (default 0.8)
            min_confidence: Estimates below this aubio confidence are dropped
            method: aubio pitch method name ('yin', 'yinfft', ...)
        """
        self._tolerance = float(tolerance)
        self._min_confidence = float(min_confidence)
        self._method = method
        self._detectors: Dict[Tuple[int, int], "aubio.pitch"] = {}
        self._last_confidence: float = 0.0

    def _get_detector(self, frame_size: int, sample_rate: int) -> "aubio.pitch":
        key = (frame_size, sample_rate)
        detector = self._detectors.get(key)
        if detector is None:
            detector = aubio.pitch(self._method, frame_size, frame_size, sample_rate)
            detector.set_unit("Hz")
            detector.set_tolerance(self._tolerance)
            # Gating happens upstream, let aubio analyze every frame it gets
            detector.set_silence(-100)
            self._detectors[key] = detector
            logger.info(
                f"Created aubio '{self._method}' detector: "
                f"window={frame_size}, sample_rate={sample_rate}Hz"
            )
        return detector

    def estimate(self, samples: np.ndarray, sample_rate: int) -> Optional[float]:
        frame = np.ascontiguousarray(samples, dtype=np.float32)
        if frame.size == 0:
            return None

        detector = self._get_detector(frame.size, int(sample_rate))
        pitch = float(detector(frame)[0])
        self._last_confidence = float(detector.get_confidence())
        logger.debug(f"Pitch: {pitch:.2f} Hz, Confidence: {self._last_confidence:.4f}")

        if pitch <= 0 or self._last_confidence < self._min_confidence:
            return None
        return pitch

    @property
    def last_confidence(self) -> float:
        """aubio confidence of the most recent estimate."""
        return self._last_confidence


class FunctionEstimator(IFrequencyEstimator):
    """Adapts a plain ``estimate_frequency(samples, sample_rate)`` function."""

    def __init__(self, func: Callable[[np.ndarray, int], Optional[float]]) -> None:
        self._func = func

    def estimate(self, samples: np.ndarray, sample_rate: int) -> Optional[float]:
        return self._func(samples, sample_rate)
