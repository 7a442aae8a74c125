from enum import Enum, auto
from typing import ClassVar, Optional

import numpy as np

from ..logger import get_logger

logger = get_logger(__name__)


class GateStatus(Enum):
    """Outcome of gating one frame."""

    OPEN = auto()  # Signal present, run pitch estimation
    HOLDING = auto()  # Closed, but within the hold window of the last open frame
    CLOSED = auto()


class NoiseGate:
    """
    Volume gate deciding whether a frame contains a real playing signal.

    The gate never alters the signal. It only tells the caller whether to run
    pitch estimation (OPEN), keep showing the previous result (HOLDING) or
    report silence (CLOSED). The hold window is measured from the last frame
    on which the gate was open, so brief legato dropouts are bridged.
    """

    DEFAULT_THRESHOLD: ClassVar[float] = 0.01
    DEFAULT_HOLD_TIME: ClassVar[float] = 0.1  # seconds

    def __init__(
        self,
        threshold: float = DEFAULT_THRESHOLD,
        hold_time: float = DEFAULT_HOLD_TIME,
    ) -> None:
        self._threshold = float(threshold)
        self._hold_time = float(hold_time)
        self._last_open_timestamp: Optional[float] = None
        self._last_rms: float = 0.0
        self._is_open = False

    @classmethod
    def from_config(cls, config) -> "NoiseGate":
        return cls(threshold=config.gate_threshold, hold_time=config.gate_hold_time)

    @staticmethod
    def rms(samples: np.ndarray) -> float:
        """Root-mean-square level of a frame, 0.0 for an empty frame."""
        samples = np.asarray(samples, dtype=np.float64)
        if samples.size == 0:
            return 0.0
        return float(np.sqrt(np.mean(samples**2)))

    def update(self, samples: np.ndarray, now: float) -> GateStatus:
        """Gate one frame captured at ``now`` (seconds)."""
        self._last_rms = self.rms(samples)
        self._is_open = self._last_rms > self._threshold

        if self._is_open:
            self._last_open_timestamp = now
            return GateStatus.OPEN

        if (
            self._last_open_timestamp is not None
            and now - self._last_open_timestamp < self._hold_time
        ):
            return GateStatus.HOLDING

        return GateStatus.CLOSED

    def reset(self) -> None:
        self._last_open_timestamp = None
        self._last_rms = 0.0
        self._is_open = False

    @property
    def is_open(self) -> bool:
        """Whether the most recent frame was above the threshold."""
        return self._is_open

    @property
    def last_rms(self) -> float:
        return self._last_rms

    @property
    def last_open_timestamp(self) -> Optional[float]:
        return self._last_open_timestamp

    @property
    def threshold(self) -> float:
        return self._threshold

    @property
    def hold_time(self) -> float:
        return self._hold_time
