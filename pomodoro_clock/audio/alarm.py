from __future__ import annotations

"""Alarm sound played when a phase ends.

The bundled WAV asset is decoded to float32 samples with numpy, serialized
explicitly as little-endian float32 bytes and written to a ``sounddevice``
raw output stream. Playback blocks the calling thread; ``Alarm.ring`` runs it
on a detached daemon thread so the timer never waits on audio.
"""

import io
import threading
import time
import wave
from dataclasses import dataclass
from typing import Callable, Protocol

import numpy as np

from pomodoro_clock.core.assets import load_asset_bytes
from pomodoro_clock.core.logger import log


ALARM_ASSET = "alarm.wav"
# Upper bound on decoded samples (all channels) read from the asset.
MAX_ALARM_SAMPLES = 671_558
POLL_INTERVAL = 0.1

_PCM_DTYPES = {
    1: (np.uint8, 128.0, 128.0),
    2: (np.dtype("<i2"), 0.0, 32768.0),
    4: (np.dtype("<i4"), 0.0, 2147483648.0),
}


class AlarmError(Exception):
    """Base class for alarm playback failures."""


class AlarmDecoderInitError(AlarmError):
    pass


class AlarmDecodeError(AlarmError):
    pass


class AlarmOutputError(AlarmError):
    pass


@dataclass(frozen=True)
class DecodedAudio:
    samples: np.ndarray
    sample_rate: int
    channels: int

    @property
    def frames(self) -> int:
        return len(self.samples) // self.channels

    @property
    def duration(self) -> float:
        return self.frames / self.sample_rate


class OutputStream(Protocol):
    def start(self) -> None: ...

    def write(self, data: bytes) -> object: ...

    def stop(self) -> None: ...

    def close(self) -> None: ...


OutputFactory = Callable[[int, int], OutputStream]


def pcm_to_float32(raw: bytes, sample_width: int) -> np.ndarray:
    """Convert interleaved little-endian PCM to float32 samples in [-1.0, 1.0)."""
    if sample_width not in _PCM_DTYPES:
        raise ValueError(f"unsupported sample width: {sample_width} bytes")
    dtype, offset, scale = _PCM_DTYPES[sample_width]
    ints = np.frombuffer(raw, dtype=dtype)
    return ((ints.astype(np.float32) - offset) / scale).astype(np.float32)


def to_float32le_bytes(samples: np.ndarray) -> bytes:
    return np.asarray(samples, dtype="<f4").tobytes()


def decode_wav(data: bytes, max_samples: int = MAX_ALARM_SAMPLES) -> DecodedAudio:
    try:
        reader = wave.open(io.BytesIO(data), "rb")
    except (wave.Error, EOFError) as exc:
        raise AlarmDecoderInitError(f"unable to initialize a decoder of the wav audio: {exc}") from exc

    with reader:
        channels = reader.getnchannels()
        sample_width = reader.getsampwidth()
        sample_rate = reader.getframerate()
        if sample_width not in _PCM_DTYPES:
            raise AlarmDecoderInitError(f"unable to initialize a decoder of the wav audio: unsupported sample width {sample_width}")
        max_frames = max_samples // channels
        try:
            raw = reader.readframes(min(reader.getnframes(), max_frames))
        except (wave.Error, EOFError, OSError) as exc:
            raise AlarmDecodeError(f"unable to decode the wav file: {exc}") from exc

    # A short read is the end of the stream; drop any trailing partial frame.
    frame_size = sample_width * channels
    raw = raw[: len(raw) - len(raw) % frame_size]
    try:
        samples = pcm_to_float32(raw, sample_width)
    except ValueError as exc:
        raise AlarmDecodeError(f"unable to decode the wav file: {exc}") from exc
    return DecodedAudio(samples=samples, sample_rate=sample_rate, channels=channels)


def open_output_stream(sample_rate: int, channels: int) -> OutputStream:
    # sounddevice loads PortAudio at import time, so it is only imported for playback.
    import sounddevice as sd

    return sd.RawOutputStream(samplerate=sample_rate, channels=channels, dtype="float32")


class AlarmPlayer:
    """Decodes the alarm asset and plays it to completion on the calling thread."""

    def __init__(
        self,
        asset: str = ALARM_ASSET,
        output_factory: OutputFactory = open_output_stream,
        poll_interval: float = POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._asset = asset
        self._output_factory = output_factory
        self._poll_interval = poll_interval
        self._sleep = sleep
        self._clock = clock

    def play(self) -> None:
        try:
            data = load_asset_bytes(self._asset)
        except OSError as exc:
            raise AlarmDecoderInitError(f"unable to read the alarm asset '{self._asset}': {exc}") from exc
        audio = decode_wav(data)
        payload = to_float32le_bytes(audio.samples)

        try:
            stream = self._output_factory(audio.sample_rate, audio.channels)
        except Exception as exc:
            raise AlarmOutputError(f"unable to open an audio output: {exc}") from exc

        try:
            started = self._clock()
            stream.start()
            stream.write(payload)
            while self._clock() - started < audio.duration:
                self._sleep(self._poll_interval)
            stream.stop()
        except Exception as exc:
            self._close(stream, raise_errors=False)
            raise AlarmOutputError(f"unable to play the audio: {exc}") from exc
        self._close(stream, raise_errors=True)
        log.debug(f"Played alarm '{self._asset}' ({audio.duration:.2f}s)")

    def _close(self, stream: OutputStream, raise_errors: bool) -> None:
        try:
            stream.close()
        except Exception as exc:
            if raise_errors:
                raise AlarmOutputError(f"unable to close the player: {exc}") from exc
            log.debug("Ignoring close failure after a playback error", exc_info=True)


class Alarm:
    """Fire-and-forget wrapper around an AlarmPlayer, gated by ``enabled``."""

    def __init__(self, enabled: bool, player: AlarmPlayer | None = None) -> None:
        self._enabled = enabled
        self._player = player or AlarmPlayer()

    @property
    def enabled(self) -> bool:
        return self._enabled

    def ring(self) -> threading.Thread | None:
        if not self._enabled:
            return None
        thread = threading.Thread(target=self._play, name="pomodoro-alarm", daemon=True)
        thread.start()
        return thread

    def _play(self) -> None:
        try:
            self._player.play()
        except AlarmError as exc:
            log.warning(f"unable to play the alarm sound: {exc}", exc_info=True)
        except Exception:
            log.exception("unable to play the alarm sound: unexpected playback failure")
