import numpy as np
import pytest

from pcm_extract.errors import UnsupportedChannelLayoutError
from pcm_extract.normalization import normalize_samples, resample, to_mono
from pcm_extract.resample_options import ResampleMode


def test_resample_same_rate_returns_input_unchanged() -> None:
    samples = np.array([0.1, -0.2, 0.3, 0.25, -0.5])

    assert np.array_equal(resample(samples, 44_100, 44_100), samples)


def test_resample_empty_input_returns_empty() -> None:
    assert resample([], 48_000, 16_000).size == 0
    assert resample([], 8_000, 16_000, mode=ResampleMode.LINEAR).size == 0


def test_resample_halving_rate_picks_every_other_sample() -> None:
    samples = np.linspace(-1.0, 1.0, 100)

    result = resample(samples, 32_000, 16_000)

    assert result.shape == (50,)
    assert np.array_equal(result, samples[[2 * i for i in range(50)]])


def test_resample_non_integer_ratio_uses_floor_of_scaled_index() -> None:
    samples = np.arange(441, dtype=np.float64)
    ratio = 44_100 / 16_000

    result = resample(samples, 44_100, 16_000)

    assert result.shape == (int(441 / ratio),)
    assert result[1] == samples[int(1 * ratio)]
    assert result[-1] == samples[int((result.shape[0] - 1) * ratio)]


def test_resample_upsampling_repeats_samples() -> None:
    result = resample([0.1, 0.2, 0.3], 8_000, 16_000)

    assert np.allclose(result, [0.1, 0.1, 0.2, 0.2, 0.3, 0.3])


def test_resample_linear_interpolates_between_neighbours() -> None:
    result = resample([0.0, 1.0, 0.0], 8_000, 16_000, mode=ResampleMode.LINEAR)

    assert np.allclose(result, [0.0, 0.5, 1.0, 0.5, 0.0, 0.0])


def test_resample_rejects_non_positive_rates() -> None:
    with pytest.raises(ValueError):
        resample([0.1, 0.2], 0, 16_000)


def test_to_mono_single_channel_is_identity() -> None:
    samples = np.array([0.5, -0.25, 0.125])

    assert np.array_equal(to_mono(samples, channel_count=1), samples)


def test_to_mono_averages_stereo_pairs() -> None:
    assert np.allclose(to_mono([1.0, -1.0, 0.5, 0.5], channel_count=2), [0.0, 0.5])


def test_to_mono_passes_through_unpaired_tail() -> None:
    assert np.allclose(to_mono([0.2, 0.4, 0.6], channel_count=2), [0.3, 0.6])


def test_to_mono_rejects_multichannel_layouts() -> None:
    with pytest.raises(UnsupportedChannelLayoutError):
        to_mono(np.zeros(12), channel_count=6)


def test_normalize_samples_downmixes_before_resampling() -> None:
    left = np.linspace(-0.5, 0.5, 8)
    right = -left / 2
    interleaved = np.stack([left, right], axis=1).reshape(-1)

    result = normalize_samples(
        interleaved,
        channel_count=2,
        source_rate_hz=32_000,
        target_rate_hz=16_000,
    )

    assert np.allclose(result, ((left + right) / 2.0)[::2])
