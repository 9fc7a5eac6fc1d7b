"""Public package exports for pcm_extract with lazy imports."""

from __future__ import annotations

from importlib import import_module
from typing import Any

__all__ = [
    "AudioStreamDescriptor",
    "NormalizedWaveform",
    "DecodeAudioToPcm",
    "decode_to_pcm",
    "CancellationToken",
    "PcmExtractError",
    "ResampleMode",
    "resample",
    "to_mono",
    "DecodeSettings",
]

_EXPORT_MODULES: dict[str, str] = {
    "AudioStreamDescriptor": "pcm_extract.domain.models",
    "NormalizedWaveform": "pcm_extract.domain.models",
    "DecodeAudioToPcm": "pcm_extract.application.decode_service",
    "decode_to_pcm": "pcm_extract.application.decode_service",
    "CancellationToken": "pcm_extract.cancellation",
    "PcmExtractError": "pcm_extract.errors",
    "ResampleMode": "pcm_extract.resample_options",
    "resample": "pcm_extract.normalization",
    "to_mono": "pcm_extract.normalization",
    "DecodeSettings": "pcm_extract.utils.config",
}


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MODULES:
        raise AttributeError(f"module 'pcm_extract' has no attribute {name!r}")

    module = import_module(_EXPORT_MODULES[name])
    value = getattr(module, name)
    globals()[name] = value
    return value
