"""DDD domain layer."""

from .events import AudioStreamSelected, DecodeFailed, DomainEvent, PcmDecoded, WaveformNormalized
from .models import (
    NO_OUTPUT,
    AccessUnit,
    AudioStreamDescriptor,
    DecoderOutput,
    FormatChanged,
    NoOutput,
    NormalizedWaveform,
    PcmChunk,
    StreamInfo,
)

__all__ = [
    "DomainEvent",
    "AudioStreamSelected",
    "PcmDecoded",
    "WaveformNormalized",
    "DecodeFailed",
    "StreamInfo",
    "AudioStreamDescriptor",
    "AccessUnit",
    "PcmChunk",
    "FormatChanged",
    "NoOutput",
    "NO_OUTPUT",
    "DecoderOutput",
    "NormalizedWaveform",
]
