from typing import Optional, Sequence, Union

import numpy as np

from ..core.config import TunerConfig
from ..core.interfaces import IFrequencyEstimator
from ..logger import get_logger
from ..note_types import EMPTY_NOTE, NoteInfo
from ..note_utils import note_from_frequency
from .frequency_smoother import FrequencySmoother
from .noise_gate import GateStatus, NoiseGate

logger = get_logger(__name__)


class PitchTracker:
    """Turns a stream of sample frames into a stable NoteInfo per frame.

    Pipeline per frame: input gain -> NoiseGate -> estimator -> FrequencySmoother
    -> note_from_frequency. The tracker owns the gate state, the smoothing
    buffer and the last valid note; it is meant to be driven synchronously,
    once per audio or display frame, from a single thread.
    """

    def __init__(
        self,
        estimator: IFrequencyEstimator,
        config: Optional[TunerConfig] = None,
    ) -> None:
        """Initialize the tracker.

        Args:
            estimator: Object with ``estimate(samples, sample_rate) -> Optional[float]``
            config: Pipeline constants, or None for the defaults
        """
        self._estimator = estimator
        self._config = config or TunerConfig()

        self._gate = NoiseGate.from_config(self._config)
        self._smoother = FrequencySmoother.from_config(self._config)

        self._last_valid_note: Optional[NoteInfo] = None
        self._last_valid_time: Optional[float] = None
        self._current_note: NoteInfo = EMPTY_NOTE

    def process_frame(
        self,
        samples: Union[np.ndarray, Sequence[float]],
        sample_rate: int,
        now: float,
    ) -> NoteInfo:
        """Process one frame of samples captured at ``now`` (seconds).

        Returns:
            The note for this frame, EMPTY_NOTE when nothing is being played
        """
        frame = np.asarray(samples, dtype=np.float32)
        if self._config.input_gain != 1.0:
            frame = frame * np.float32(self._config.input_gain)

        status = self._gate.update(frame, now)

        if status is GateStatus.CLOSED:
            # The smoothing buffer is kept so a quickly resumed note picks up
            # where it left off; it just receives no new values.
            note = EMPTY_NOTE
        elif status is GateStatus.HOLDING:
            note = self._replay_last_valid(now)
        else:
            note = self._estimate_note(frame, sample_rate, now)

        if note != self._current_note:
            logger.debug(
                f"Note changed: {self._current_note} -> {note} "
                f"(gate: {status.name}, rms: {self._gate.last_rms:.4f})"
            )
        self._current_note = note
        return note

    def _estimate_note(self, frame: np.ndarray, sample_rate: int, now: float) -> NoteInfo:
        try:
            raw = self._estimator.estimate(frame, sample_rate)
        except Exception as e:
            logger.error(f"Frequency estimator failed: {e}", exc_info=True)
            raw = None

        if raw is None or not np.isfinite(raw) or raw <= 0:
            return self._replay_last_valid(now)

        smoothed = self._smoother.add(raw)
        logger.debug(f"Raw: {raw:.2f} Hz, smoothed: {smoothed:.2f} Hz")
        if smoothed == 0:
            return EMPTY_NOTE

        note = note_from_frequency(smoothed)
        self._last_valid_note = note
        self._last_valid_time = now
        return note

    def _replay_last_valid(self, now: float) -> NoteInfo:
        """The last valid note if it is younger than the hold time, else EMPTY_NOTE."""
        if (
            self._last_valid_note is not None
            and now - self._last_valid_time < self._config.gate_hold_time
        ):
            return self._last_valid_note
        return EMPTY_NOTE

    def stop(self) -> None:
        """Reset all per-session state. Safe to call any number of times."""
        self._smoother.clear()
        self._gate.reset()
        self._last_valid_note = None
        self._last_valid_time = None
        self._current_note = EMPTY_NOTE

    reset = stop

    @property
    def current_note(self) -> NoteInfo:
        """The note returned by the most recent process_frame call."""
        return self._current_note

    @property
    def last_valid_note(self) -> Optional[NoteInfo]:
        return self._last_valid_note

    @property
    def config(self) -> TunerConfig:
        return self._config

    @property
    def gate(self) -> NoiseGate:
        return self._gate

    @property
    def smoother(self) -> FrequencySmoother:
        return self._smoother
