"""Pull-loop driver that turns an audio stream into native-rate PCM samples.

Decoders may buffer several input units before the first output appears, and
keep emitting output after input has ended, so feeding and draining progress
independently. The loop tracks two flags and only stops once the decoder has
emitted its end-of-stream chunk:

* feed: while input is not exhausted, acquire an input slot (bounded wait) and
  submit the next access unit, or the end-of-stream marker once the source runs
  dry.
* drain: poll for output (bounded wait). Format changes and empty polls have no
  sample effect; decoded chunks are collected until one carries the
  end-of-stream flag.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from pcm_extract.audio_contract import DEFAULT_SLOT_TIMEOUT_S, PCM16_FULL_SCALE
from pcm_extract.cancellation import CancellationToken
from pcm_extract.domain.models import FormatChanged, PcmChunk

if TYPE_CHECKING:
    from pcm_extract.application.ports import Decoder, MediaSource

LOGGER = logging.getLogger(__name__)


def pcm16le_to_int16(payload: bytes) -> np.ndarray:
    """Interpret bytes as little-endian signed 16-bit samples; a trailing odd byte is dropped."""

    usable = len(payload) - (len(payload) % 2)
    return np.frombuffer(payload[:usable], dtype="<i2")


def pcm16_to_float(samples: np.ndarray | bytes) -> np.ndarray:
    """Scale signed 16-bit samples (or s16le bytes) to float64 in ``[-1.0, 1.0)``."""

    if isinstance(samples, (bytes, bytearray, memoryview)):
        samples = pcm16le_to_int16(bytes(samples))
    return np.asarray(samples, dtype=np.float64) / PCM16_FULL_SCALE


def decode_stream(
    source: MediaSource,
    decoder: Decoder,
    *,
    input_timeout_s: float = DEFAULT_SLOT_TIMEOUT_S,
    output_timeout_s: float = DEFAULT_SLOT_TIMEOUT_S,
    cancellation: CancellationToken | None = None,
) -> np.ndarray:
    """Drive ``decoder`` over every unit of ``source`` and return all int16 samples."""

    input_exhausted = False
    output_exhausted = False
    chunks: list[np.ndarray] = []
    units_fed = 0

    while not output_exhausted:
        if cancellation is not None:
            cancellation.raise_if_cancelled()

        if not input_exhausted and decoder.acquire_input_slot(input_timeout_s):
            unit = source.read_access_unit()
            if unit is None:
                decoder.feed_end_of_stream()
                input_exhausted = True
                LOGGER.debug("input exhausted after %d access units", units_fed)
            else:
                decoder.feed(unit)
                units_fed += 1

        output = decoder.poll(output_timeout_s)
        if isinstance(output, FormatChanged):
            LOGGER.debug(
                "decoder output format: %d Hz, %d channel(s)",
                output.sample_rate_hz,
                output.channel_count,
            )
        elif isinstance(output, PcmChunk):
            if not output.discard and output.payload:
                chunks.append(pcm16le_to_int16(output.payload))
            if output.end_of_stream:
                output_exhausted = True

    if not chunks:
        return np.zeros(0, dtype=np.int16)
    return np.concatenate(chunks).astype(np.int16, copy=False)
