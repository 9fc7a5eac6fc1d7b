from __future__ import annotations

from pathlib import Path

import json

from pydantic import BaseModel, Field

from pcm_extract.audio_contract import DEFAULT_SLOT_TIMEOUT_S, DEFAULT_TARGET_SAMPLE_RATE_HZ
from pcm_extract.resample_options import ResampleMode


class DecodeSettings(BaseModel):
    target_sample_rate_hz: int = Field(DEFAULT_TARGET_SAMPLE_RATE_HZ, gt=0)
    resample_mode: ResampleMode = ResampleMode.NEAREST
    input_timeout_s: float = Field(DEFAULT_SLOT_TIMEOUT_S, gt=0.0, le=1.0)
    output_timeout_s: float = Field(DEFAULT_SLOT_TIMEOUT_S, gt=0.0, le=1.0)
    max_pending_frames: int = Field(8, ge=1, le=1024)


def load_decode_settings(path: Path) -> DecodeSettings:
    data = _load_config_data(path)
    return DecodeSettings.model_validate(data)


def _load_config_data(path: Path) -> dict:
    if path.suffix.lower() in {".yaml", ".yml"}:
        try:
            import yaml
        except ImportError as exc:
            raise ImportError("PyYAML is required to load YAML configs.") from exc

        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle) or {}

    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)
