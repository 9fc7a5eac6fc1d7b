"""PCM output contract shared by all external entry points.

Invariants
----------
* Decoders hand the pipeline interleaved signed 16-bit little-endian PCM.
* The pipeline hands callers mono float64 PCM in ``[-1.0, 1.0]`` at the
  requested sample rate.
"""

from __future__ import annotations

# Default rate used when a caller does not specify one.
DEFAULT_TARGET_SAMPLE_RATE_HZ = 16_000

# Decoder output encoding consumed by the frame decoder loop.
DECODED_PCM_ENCODING = "s16le"
DECODED_PCM_SAMPLE_WIDTH_BYTES = 2
PCM16_FULL_SCALE = 32768.0

# Output contract.
OUTPUT_PCM_CHANNEL_COUNT = 1
OUTPUT_PCM_ENCODING = "float64_pcm"

# Bounded waits for decoder slot acquisition (seconds).
DEFAULT_SLOT_TIMEOUT_S = 0.01
