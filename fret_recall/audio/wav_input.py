"""WAV file playback as an audio input, for offline analysis and tests."""

import threading
import time
from typing import Callable, Iterator, Optional, Tuple

import numpy as np
import soundfile as sf

from ..core.interfaces import IAudioInput
from ..logger import get_logger

logger = get_logger(__name__)


class WavFileInput(IAudioInput):
    """Provides fixed-size mono frames by reading from a WAV file.

    Timestamps are derived from the sample position, so offline runs are
    deterministic regardless of how fast they are processed.
    """

    def __init__(
        self,
        file_path: str,
        chunk_size: int = 2048,
        loop: bool = False,
        realtime: bool = True,
    ) -> None:
        self._file_path = file_path
        self._chunk_size = int(chunk_size)
        self._loop = loop
        self._realtime = realtime
        self._callback: Optional[Callable[[np.ndarray, float], None]] = None
        self._is_running = False
        self._thread: Optional[threading.Thread] = None

        with sf.SoundFile(self._file_path) as f:
            self._sample_rate = f.samplerate
            self._channels = f.channels
            self._frames_total = f.frames

    def frames(self) -> Iterator[Tuple[np.ndarray, float]]:
        """Yield (samples, timestamp) for each chunk of the file, once.

        The last chunk is zero-padded to chunk_size. Multi-channel files are
        reduced to their first channel.
        """
        position = 0
        with sf.SoundFile(self._file_path) as f:
            while True:
                data = f.read(self._chunk_size, dtype="float32", always_2d=True)
                if len(data) == 0:
                    break
                mono = data[:, 0]
                if len(mono) < self._chunk_size:
                    mono = np.pad(mono, (0, self._chunk_size - len(mono)))
                yield mono, position / self._sample_rate
                position += len(data)

    def start(self, callback: Callable[[np.ndarray, float], None]) -> bool:
        if self._is_running:
            return False

        self._callback = callback
        self._is_running = True
        self._thread = threading.Thread(target=self._stream_data, daemon=True)
        self._thread.start()
        return True

    def stop(self) -> None:
        self._is_running = False
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None

    def is_running(self) -> bool:
        return self._is_running

    def _stream_data(self) -> None:
        offset = 0.0
        duration = self._frames_total / self._sample_rate
        while self._is_running:
            for samples, timestamp in self.frames():
                if not self._is_running:
                    break
                if self._callback:
                    self._callback(samples, offset + timestamp)
                if self._realtime:
                    # Simulate real-time playback speed
                    time.sleep(self._chunk_size / self._sample_rate)
            if not self._loop:
                break
            offset += duration

        logger.debug(f"Finished streaming {self._file_path}")
        self._is_running = False

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels

    @property
    def chunk_size(self) -> int:
        return self._chunk_size
