"""Application service orchestrating the audio-to-PCM use case."""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass, field
import logging
from pathlib import Path
from uuid import uuid4

import numpy as np

from pcm_extract.application.event_publisher import EventPublisher, NullEventPublisher
from pcm_extract.application.ports import DecoderFactory, SourceOpener
from pcm_extract.cancellation import CancellationToken
from pcm_extract.domain.events import AudioStreamSelected, DecodeFailed, PcmDecoded, WaveformNormalized
from pcm_extract.domain.models import NormalizedWaveform
from pcm_extract.errors import DecoderFaultError, InvalidArgumentError, PcmExtractError
from pcm_extract.frame_decoder import decode_stream, pcm16_to_float
from pcm_extract.infrastructure.pyav_decoder import create_pyav_decoder
from pcm_extract.infrastructure.pyav_source import open_media_source
from pcm_extract.normalization import normalize_samples
from pcm_extract.resample_options import ResampleMode
from pcm_extract.utils.config import DecodeSettings

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class DecodeAudioToPcm:
    """Use case that turns a media file into a mono waveform at a target rate.

    Source and decoder handles are owned by a single call and released on
    every exit path. Any failure surfaces as a :class:`PcmExtractError`; no
    partial waveform is ever returned.
    """

    settings: DecodeSettings = field(default_factory=DecodeSettings)
    open_source: SourceOpener = open_media_source
    create_decoder: DecoderFactory = create_pyav_decoder
    event_publisher: EventPublisher = field(default_factory=NullEventPublisher)

    def decode(
        self,
        path: Path | str | None,
        target_sample_rate_hz: int | None = None,
        *,
        resample_mode: ResampleMode | None = None,
        cancellation: CancellationToken | None = None,
        correlation_id: str | None = None,
    ) -> NormalizedWaveform:
        run_correlation_id = correlation_id or str(uuid4())
        target_rate = self.settings.target_sample_rate_hz if target_sample_rate_hz is None else target_sample_rate_hz
        mode = resample_mode or self.settings.resample_mode
        stage = "validate"

        try:
            source_path = _validate_request(path, target_rate)

            with ExitStack() as resources:
                stage = "open"
                source = self.open_source(source_path)
                resources.callback(source.close)

                stage = "select"
                descriptor = source.select_audio_stream()
                self.event_publisher.publish(
                    AudioStreamSelected(
                        correlation_id=run_correlation_id,
                        payload_summary={
                            "path": str(source_path),
                            "stream_index": descriptor.index,
                            "codec": descriptor.codec,
                            "sample_rate_hz": descriptor.sample_rate_hz,
                            "channel_count": descriptor.channel_count,
                        },
                    )
                )

                stage = "decode"
                decoder = self.create_decoder(
                    source,
                    descriptor,
                    max_pending_frames=self.settings.max_pending_frames,
                )
                resources.callback(decoder.close)
                pcm = decode_stream(
                    source,
                    decoder,
                    input_timeout_s=self.settings.input_timeout_s,
                    output_timeout_s=self.settings.output_timeout_s,
                    cancellation=cancellation,
                )

            self.event_publisher.publish(
                PcmDecoded(
                    correlation_id=run_correlation_id,
                    payload_summary={"sample_count": int(pcm.shape[0])},
                )
            )

            stage = "normalize"
            samples = normalize_samples(
                pcm16_to_float(pcm),
                channel_count=descriptor.channel_count,
                source_rate_hz=descriptor.sample_rate_hz,
                target_rate_hz=target_rate,
                mode=mode,
            )
            waveform = NormalizedWaveform(
                samples=samples,
                sample_rate_hz=target_rate,
                source=descriptor,
                resample_mode=mode,
            )
        except PcmExtractError as error:
            self._publish_failure(run_correlation_id, stage, error)
            raise
        except Exception as error:  # noqa: BLE001
            self._publish_failure(run_correlation_id, stage, error)
            raise DecoderFaultError(f"Unexpected failure during {stage}: {error}") from error

        self.event_publisher.publish(
            WaveformNormalized(
                correlation_id=run_correlation_id,
                payload_summary={
                    "sample_rate_hz": waveform.sample_rate_hz,
                    "sample_count": len(waveform),
                    "duration_seconds": waveform.duration_seconds,
                    "resample_mode": mode.value,
                },
            )
        )
        return waveform

    def _publish_failure(self, correlation_id: str, stage: str, error: Exception) -> None:
        code = getattr(error, "code", type(error).__name__)
        LOGGER.debug("decode failed during %s: %s", stage, error)
        try:
            self.event_publisher.publish(
                DecodeFailed(
                    correlation_id=correlation_id,
                    payload_summary={"stage": stage, "code": code, "error": str(error)},
                )
            )
        except Exception:  # noqa: BLE001
            LOGGER.exception("failed to publish DecodeFailed for %s", correlation_id)


def _validate_request(path: Path | str | None, target_sample_rate_hz: int) -> Path:
    if path is None or (isinstance(path, str) and not path.strip()):
        raise InvalidArgumentError("Audio path is null")
    if isinstance(target_sample_rate_hz, bool) or not isinstance(target_sample_rate_hz, (int, np.integer)):
        raise InvalidArgumentError(f"Sample rate must be an integer, got {target_sample_rate_hz!r}.")
    if target_sample_rate_hz <= 0:
        raise InvalidArgumentError(f"Sample rate must be positive, got {target_sample_rate_hz}.")
    return Path(path)


def decode_to_pcm(
    path: Path | str,
    target_sample_rate_hz: int | None = None,
    **kwargs,
) -> np.ndarray:
    """Decode ``path`` to mono float64 samples at ``target_sample_rate_hz`` (16 kHz by default)."""

    return DecodeAudioToPcm().decode(path, target_sample_rate_hz, **kwargs).samples
