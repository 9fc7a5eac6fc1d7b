"""Sample normalization between decoding and the caller.

Both transforms are pure and operate on flat float sequences:

* :func:`to_mono` averages interleaved stereo pairs. An odd trailing sample is
  passed through unpaired. Layouts other than mono/stereo are rejected.
* :func:`resample` converts between rates. The default ``nearest`` mode is a
  zero-order hold with no anti-aliasing filter, so downsampling content above
  the new Nyquist frequency aliases. ``linear`` interpolates instead. Both
  modes emit ``floor(n / ratio)`` samples where ``ratio = from / to``.

The pipeline downmixes first and resamples second, taking the channel count and
native rate from the stream descriptor.
"""

from __future__ import annotations

import numpy as np

from .errors import UnsupportedChannelLayoutError
from .resample_options import ResampleMode


def _as_float_array(samples) -> np.ndarray:
    return np.asarray(samples, dtype=np.float64).reshape(-1)


def _check_rate(rate_hz: int) -> None:
    if rate_hz <= 0:
        raise ValueError("Sample rate must be a positive integer.")


def _output_length(sample_count: int, ratio: float) -> int:
    return int(np.floor(sample_count / ratio))


def _resample_nearest(samples: np.ndarray, ratio: float) -> np.ndarray:
    target_count = _output_length(samples.shape[0], ratio)
    source_index = np.floor(np.arange(target_count, dtype=np.float64) * ratio).astype(np.int64)
    # source_index is non-decreasing, so filtering out-of-range indices is an early stop
    return samples[source_index[source_index < samples.shape[0]]]


def _resample_linear(samples: np.ndarray, ratio: float) -> np.ndarray:
    target_count = _output_length(samples.shape[0], ratio)
    if target_count == 0:
        return np.zeros(0, dtype=np.float64)
    source_positions = np.arange(samples.shape[0], dtype=np.float64)
    target_positions = np.arange(target_count, dtype=np.float64) * ratio
    return np.interp(target_positions, source_positions, samples)


def resample(
    samples,
    from_rate_hz: int,
    to_rate_hz: int,
    mode: ResampleMode = ResampleMode.NEAREST,
) -> np.ndarray:
    """Convert ``samples`` from ``from_rate_hz`` to ``to_rate_hz``."""

    audio = _as_float_array(samples)
    if from_rate_hz == to_rate_hz:
        return audio
    _check_rate(from_rate_hz)
    _check_rate(to_rate_hz)
    if audio.size == 0:
        return audio

    ratio = from_rate_hz / to_rate_hz
    if mode is ResampleMode.LINEAR:
        return _resample_linear(audio, ratio)
    return _resample_nearest(audio, ratio)


def to_mono(samples, channel_count: int = 2) -> np.ndarray:
    """Downmix interleaved ``samples`` with ``channel_count`` channels to mono."""

    audio = _as_float_array(samples)
    if channel_count == 1:
        return audio
    if channel_count != 2:
        raise UnsupportedChannelLayoutError(
            f"Downmix supports mono or stereo input, got {channel_count} channels."
        )

    paired = audio.shape[0] - (audio.shape[0] % 2)
    mono = (audio[0:paired:2] + audio[1:paired:2]) / 2.0
    if paired != audio.shape[0]:
        mono = np.append(mono, audio[-1])
    return mono


def normalize_samples(
    samples,
    *,
    channel_count: int,
    source_rate_hz: int,
    target_rate_hz: int,
    mode: ResampleMode = ResampleMode.NEAREST,
) -> np.ndarray:
    """Downmix then resample, using parameters captured from the source stream."""

    mono = to_mono(samples, channel_count)
    return resample(mono, source_rate_hz, target_rate_hz, mode=mode)
