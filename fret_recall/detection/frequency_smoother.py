from collections import deque
from typing import ClassVar, Deque, Optional, Tuple

import numpy as np

from ..logger import get_logger

logger = get_logger(__name__)


class FrequencySmoother:
    """
    Median filter over the last few accepted raw frequency estimates.

    A median drops single-frame spikes (octave jumps, plucking transients)
    without smearing a genuine note change the way a moving average would.
    """

    DEFAULT_WINDOW_SIZE: ClassVar[int] = 5
    MIN_FREQUENCY: ClassVar[float] = 40.0  # Hz, just below a bass low E
    MAX_FREQUENCY: ClassVar[float] = 2000.0  # Hz, well above fret 24 on high E

    def __init__(
        self,
        window_size: int = DEFAULT_WINDOW_SIZE,
        min_frequency: float = MIN_FREQUENCY,
        max_frequency: float = MAX_FREQUENCY,
    ) -> None:
        if window_size < 1:
            raise ValueError(f"window_size must be at least 1, got {window_size}")
        self._min_frequency = float(min_frequency)
        self._max_frequency = float(max_frequency)
        self._buffer: Deque[float] = deque(maxlen=int(window_size))

    @classmethod
    def from_config(cls, config) -> "FrequencySmoother":
        return cls(
            window_size=config.smoothing_window,
            min_frequency=config.min_frequency,
            max_frequency=config.max_frequency,
        )

    def is_valid(self, frequency: Optional[float]) -> bool:
        """Whether a raw estimate is plausible for the instrument."""
        if frequency is None or not np.isfinite(frequency):
            return False
        return self._min_frequency <= frequency <= self._max_frequency

    def add(self, frequency: Optional[float]) -> float:
        """Feed one raw estimate and return the smoothed frequency.

        Returns:
            The median of the buffer, or 0.0 if the estimate was rejected.
            A rejected estimate leaves the buffer untouched.
        """
        if not self.is_valid(frequency):
            logger.debug(f"Rejected raw frequency: {frequency}")
            return 0.0

        self._buffer.append(float(frequency))
        ordered = sorted(self._buffer)
        # Lower-middle element for an even count
        return ordered[(len(ordered) - 1) // 2]

    def clear(self) -> None:
        self._buffer.clear()

    @property
    def values(self) -> Tuple[float, ...]:
        """Buffered estimates, oldest first."""
        return tuple(self._buffer)

    @property
    def window_size(self) -> int:
        return self._buffer.maxlen

    def __len__(self) -> int:
        return len(self._buffer)
