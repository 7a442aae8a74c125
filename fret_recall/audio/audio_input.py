"""Microphone capture for note detection."""

from __future__ import annotations
import time
from typing import Any, Callable, ClassVar, Dict, List, Optional, Tuple

import numpy as np
import sounddevice as sd

from ..core.interfaces import IAudioInput
from ..logger import get_logger

logger = get_logger(__name__)


def list_input_devices() -> List[Tuple[int, Dict[str, Any]]]:
    """Return (device_id, device_info) for every device with input channels."""
    devices = sd.query_devices()
    return [
        (device_id, device)
        for device_id, device in enumerate(devices)
        if device["max_input_channels"] > 0
    ]


def find_input_device(
    name_hint: str = "rocksmith",
) -> Tuple[Optional[int], Optional[Dict[str, Any]]]:
    """Find an input device whose name contains ``name_hint``.

    Returns:
        A tuple of (device_id, device_info) if found, (None, None) otherwise
    """
    for device_id, device in list_input_devices():
        if name_hint.lower() in device["name"].lower():
            logger.info(f"Found input device: {device['name']}")
            return device_id, device
    return None, None


class SoundDeviceInput(IAudioInput):
    """Audio input handler using the sounddevice library.

    The callback runs on the PortAudio thread. Keep it short: hand the frame
    to a queue and do the pitch work on the consumer side.
    """

    # Audio configuration
    SAMPLE_RATE: ClassVar[int] = 44100  # Hz
    FRAMES_PER_BUFFER: ClassVar[int] = 2048
    CHANNELS: ClassVar[int] = 1  # Mono audio

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: Optional[int] = None,
        frames_per_buffer: Optional[int] = None,
        channels: Optional[int] = None,
    ) -> None:
        """Initialize the audio input handler.

        Args:
            device_id: Audio input device ID, or None to auto-detect
            sample_rate: Sample rate in Hz, or None for default (44100)
            frames_per_buffer: Buffer size in frames, or None for default (2048)
            channels: Number of audio channels, or None for default (1)
        """
        self._device_id = device_id
        self._sample_rate = int(sample_rate or self.SAMPLE_RATE)
        self._frames_per_buffer = int(frames_per_buffer or self.FRAMES_PER_BUFFER)
        self._channels = int(channels or self.CHANNELS)

        self._stream: Optional[sd.InputStream] = None
        self._callback: Optional[Callable[[np.ndarray, float], None]] = None
        self._running = False

        if self._device_id is None:
            self._device_id, _ = find_input_device()
            if self._device_id is None:
                logger.info("No guitar adapter found, using default input device")

    def _audio_callback(
        self,
        indata: np.ndarray,
        _frames: int,
        _time_info: Any,
        status: sd.CallbackFlags,
    ) -> None:
        if status:
            logger.warning(f"Audio callback status: {status}")

        if self._callback:
            # Extract mono audio data (take first channel if multi-channel)
            audio_data = indata[:, 0] if indata.ndim > 1 else indata
            # PortAudio reuses the buffer after we return
            self._callback(audio_data.copy(), time.monotonic())

    def start(self, callback: Callable[[np.ndarray, float], None]) -> bool:
        """Start capturing audio and pass each frame to the callback.

        Raises:
            sd.PortAudioError: If the stream cannot be opened
        """
        if self._running:
            logger.warning("Audio input already running")
            return False

        self._callback = callback
        self._stream = sd.InputStream(
            device=self._device_id,
            samplerate=self._sample_rate,
            blocksize=self._frames_per_buffer,
            channels=self._channels,
            dtype="float32",
            callback=self._audio_callback,
        )
        try:
            self._stream.start()
        except sd.PortAudioError:
            self._stream.close()
            self._stream = None
            self._callback = None
            raise

        self._running = True
        logger.info(
            f"Audio input started: device={self._device_id}, "
            f"{self._sample_rate}Hz, {self._frames_per_buffer} frames/buffer"
        )
        return True

    def stop(self) -> None:
        """Stop capturing audio. Safe to call when not running."""
        if not self._running:
            return

        self._running = False
        self._callback = None
        if self._stream is not None:
            try:
                self._stream.stop()
                self._stream.close()
                logger.info("Audio input stopped")
            except sd.PortAudioError as e:
                logger.error(f"Error stopping audio input: {e}", exc_info=True)
            finally:
                self._stream = None

    def is_running(self) -> bool:
        return self._running

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frames_per_buffer(self) -> int:
        return self._frames_per_buffer
