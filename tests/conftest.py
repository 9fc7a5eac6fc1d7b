from __future__ import annotations

from collections import deque
from pathlib import Path

import numpy as np
import pytest
import soundfile as sf

from pcm_extract.domain.models import (
    NO_OUTPUT,
    AccessUnit,
    AudioStreamDescriptor,
    FormatChanged,
    PcmChunk,
    StreamInfo,
)
from pcm_extract.errors import NoAudioTrackError


def pcm16_units(samples: np.ndarray, unit_samples: int = 4) -> list[AccessUnit]:
    """Split int16 samples into s16le access units the fake decoder passes through."""

    data = np.asarray(samples, dtype="<i2")
    units = []
    for start in range(0, data.shape[0], unit_samples):
        payload = data[start : start + unit_samples].tobytes()
        units.append(AccessUnit(payload=payload, size=len(payload), timestamp_us=start))
    return units


class ResourceLog:
    def __init__(self) -> None:
        self.calls: list[tuple[str, str]] = []

    def count(self, action: str, resource: str) -> int:
        return self.calls.count((action, resource))

    def assert_balanced(self) -> None:
        for resource in ("source", "decoder"):
            assert self.count("open", resource) == self.count("close", resource), self.calls


class FakeSource:
    def __init__(self, path: Path, log: ResourceLog, *, streams, units, sample_rate_hz=16_000, channel_count=1):
        self.path = path
        self._log = log
        self._streams = tuple(streams)
        self._units = deque(units)
        self._sample_rate_hz = sample_rate_hz
        self._channel_count = channel_count
        log.calls.append(("open", "source"))

    @property
    def streams(self):
        return self._streams

    def select_audio_stream(self) -> AudioStreamDescriptor:
        stream = next((s for s in self._streams if s.media_type == "audio"), None)
        if stream is None:
            raise NoAudioTrackError("No audio track found in file")
        return AudioStreamDescriptor(
            index=stream.index,
            codec=stream.codec,
            sample_rate_hz=self._sample_rate_hz,
            channel_count=self._channel_count,
        )

    def read_access_unit(self):
        return self._units.popleft() if self._units else None

    def close(self) -> None:
        self._log.calls.append(("close", "source"))


class BufferingDecoder:
    """Passes unit payloads through after holding ``latency`` units back."""

    def __init__(self, log: ResourceLog | None = None, *, latency: int = 2, channel_count: int = 1, fail_on_unit=None, fail_with=None):
        self._log = log
        self.latency = latency
        self.channel_count = channel_count
        self.fail_on_unit = fail_on_unit
        self.fail_with = fail_with
        self.inflight: deque[bytes] = deque()
        self.fed = 0
        self.max_inflight = 0
        self.end_of_stream_fed = False
        self.end_of_stream_emitted = False
        self.format_sent = False
        self.timeouts: list[float] = []
        if log is not None:
            log.calls.append(("open", "decoder"))

    def acquire_input_slot(self, timeout_s: float) -> bool:
        self.timeouts.append(timeout_s)
        return not self.end_of_stream_fed and len(self.inflight) <= self.latency

    def feed(self, unit: AccessUnit) -> None:
        if self.fail_on_unit is not None and self.fed == self.fail_on_unit:
            raise self.fail_with
        self.inflight.append(unit.payload)
        self.fed += 1
        self.max_inflight = max(self.max_inflight, len(self.inflight))

    def feed_end_of_stream(self) -> None:
        self.end_of_stream_fed = True

    def poll(self, timeout_s: float):
        self.timeouts.append(timeout_s)
        if not self.format_sent:
            self.format_sent = True
            return FormatChanged(sample_rate_hz=16_000, channel_count=self.channel_count)
        if self.inflight and (len(self.inflight) > self.latency or self.end_of_stream_fed):
            return PcmChunk(payload=self.inflight.popleft())
        if self.end_of_stream_fed and not self.end_of_stream_emitted:
            self.end_of_stream_emitted = True
            return PcmChunk(payload=b"", end_of_stream=True, discard=True)
        return NO_OUTPUT

    def close(self) -> None:
        if self._log is not None:
            self._log.calls.append(("close", "decoder"))


class ScriptedDecoder:
    """Accepts every unit and replays a fixed sequence of poll outcomes."""

    def __init__(self, outputs) -> None:
        self._outputs = deque(outputs)
        self.fed: list[AccessUnit] = []
        self.end_of_stream_fed = False

    def acquire_input_slot(self, timeout_s: float) -> bool:  # noqa: ARG002
        return True

    def feed(self, unit: AccessUnit) -> None:
        self.fed.append(unit)

    def feed_end_of_stream(self) -> None:
        self.end_of_stream_fed = True

    def poll(self, timeout_s: float):  # noqa: ARG002
        return self._outputs.popleft() if self._outputs else NO_OUTPUT

    def close(self) -> None:
        return


AUDIO_STREAM = StreamInfo(index=1, media_type="audio", codec="aac")
VIDEO_STREAM = StreamInfo(index=0, media_type="video", codec="h264")


@pytest.fixture
def resource_log() -> ResourceLog:
    return ResourceLog()


@pytest.fixture
def write_pcm16_wav(tmp_path):
    def _write(name: str, samples: np.ndarray, sample_rate: int) -> Path:
        path = tmp_path / name
        sf.write(path, np.asarray(samples, dtype=np.int16), samplerate=sample_rate, subtype="PCM_16")
        return path

    return _write


@pytest.fixture
def stereo_wav(write_pcm16_wav):
    frames = 3_200
    left = (np.arange(frames) * 7 % 20_000 - 10_000).astype(np.int16)
    right = (np.arange(frames) * 3 % 8_000 - 4_000).astype(np.int16)
    path = write_pcm16_wav("stereo_32k.wav", np.stack([left, right], axis=1), 32_000)
    return {"path": path, "left": left, "right": right, "sample_rate": 32_000}
