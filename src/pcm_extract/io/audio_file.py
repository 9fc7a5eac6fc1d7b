from __future__ import annotations

import json
from pathlib import Path

import numpy as np
import soundfile as sf

from pcm_extract.domain.models import NormalizedWaveform

SUPPORTED_OUTPUT_SUFFIXES: tuple[str, ...] = (".wav", ".json", ".npy")


def write_waveform(path: Path, waveform: NormalizedWaveform) -> Path:
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_OUTPUT_SUFFIXES:
        supported = ", ".join(SUPPORTED_OUTPUT_SUFFIXES)
        raise ValueError(f"Unsupported output format '{path.name}'. Supported extensions: {supported}")

    path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".wav":
        sf.write(path, waveform.samples, samplerate=waveform.sample_rate_hz, subtype="FLOAT")
    elif suffix == ".npy":
        np.save(path, waveform.samples)
    else:
        path.write_text(json.dumps(waveform.to_list()), encoding="utf-8")
    return path


def read_waveform(path: Path) -> tuple[np.ndarray, int]:
    audio, sample_rate = sf.read(path, always_2d=False, dtype="float64")
    return audio, int(sample_rate)
