"""Domain models for the audio-to-PCM pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np

from pcm_extract.resample_options import ResampleMode


@dataclass(frozen=True, slots=True)
class StreamInfo:
    """One elementary stream as enumerated from the container."""

    index: int
    media_type: str
    codec: str


@dataclass(frozen=True, slots=True)
class AudioStreamDescriptor:
    """Decode parameters of the selected audio stream."""

    index: int
    codec: str
    sample_rate_hz: int
    channel_count: int


@dataclass(frozen=True, slots=True)
class AccessUnit:
    """A compressed unit read from the active stream."""

    payload: Any
    size: int
    timestamp_us: int | None = None


@dataclass(frozen=True, slots=True)
class PcmChunk:
    """Decoded interleaved s16le bytes produced by one decoder poll."""

    payload: bytes
    end_of_stream: bool = False
    discard: bool = False


@dataclass(frozen=True, slots=True)
class FormatChanged:
    """The decoder renegotiated its output format; carries no samples."""

    sample_rate_hz: int
    channel_count: int


@dataclass(frozen=True, slots=True)
class NoOutput:
    """No decoded output was ready within the wait bound."""


NO_OUTPUT = NoOutput()

DecoderOutput = PcmChunk | FormatChanged | NoOutput


@dataclass(frozen=True, slots=True)
class NormalizedWaveform:
    """Mono float64 samples at the requested rate, values in ``[-1.0, 1.0]``."""

    samples: np.ndarray
    sample_rate_hz: int
    source: AudioStreamDescriptor
    resample_mode: ResampleMode = ResampleMode.NEAREST
    channel_count: int = field(default=1, init=False)

    def __post_init__(self) -> None:
        samples = np.array(self.samples, dtype=np.float64, copy=True)
        samples.flags.writeable = False
        object.__setattr__(self, "samples", samples)

    def __len__(self) -> int:
        return int(self.samples.shape[0])

    @property
    def duration_seconds(self) -> float:
        return len(self) / self.sample_rate_hz if self.sample_rate_hz else 0.0

    def to_list(self) -> list[float]:
        return self.samples.tolist()
