"""Decoder capability backed by a PyAV codec context.

PyAV decodes synchronously, so input slots are gated on the size of the
undrained output backlog rather than on a hardware queue. Decoded frames are
converted to packed s16 at the rate and channel count of the stream descriptor
before being queued, so the output always matches what the normalizer is told.
"""

from __future__ import annotations

from collections import deque

import av
import numpy as np

from pcm_extract.domain.models import (
    NO_OUTPUT,
    AccessUnit,
    AudioStreamDescriptor,
    DecoderOutput,
    FormatChanged,
    PcmChunk,
)
from pcm_extract.errors import DecoderFaultError
from pcm_extract.infrastructure.pyav_source import PyAVMediaSource


def _output_layout(channel_count: int):
    return {1: "mono", 2: "stereo"}.get(channel_count, channel_count)


def _frame_bytes(frame) -> bytes:
    return np.ascontiguousarray(frame.to_ndarray()).astype("<i2", copy=False).tobytes()


class PyAVDecoder:
    """Feeds demuxed packets to a codec context and queues s16le output."""

    def __init__(
        self,
        codec_context,
        *,
        sample_rate_hz: int,
        channel_count: int,
        max_pending_frames: int = 8,
    ) -> None:
        self._codec_context = codec_context
        self._sample_rate_hz = sample_rate_hz
        self._channel_count = channel_count
        self._max_pending_frames = max(1, max_pending_frames)
        self._pending: deque[DecoderOutput] = deque()
        self._resampler = None
        self._input_format: tuple[str, int, str] | None = None
        self._end_of_stream_queued = False

    def acquire_input_slot(self, timeout_s: float) -> bool:  # noqa: ARG002
        if self._end_of_stream_queued:
            return False
        return len(self._pending) < self._max_pending_frames

    def feed(self, unit: AccessUnit) -> None:
        try:
            frames = self._codec_context.decode(unit.payload)
            for frame in frames:
                self._queue_frame(frame)
        except av.error.FFmpegError as exc:
            raise DecoderFaultError(f"Decoder failed at {unit.timestamp_us} us: {exc}") from exc

    def feed_end_of_stream(self) -> None:
        try:
            for frame in self._codec_context.decode(None):
                self._queue_frame(frame)
            self._flush_resampler()
        except av.error.FFmpegError as exc:
            raise DecoderFaultError(f"Decoder failed while draining: {exc}") from exc
        self._pending.append(PcmChunk(payload=b"", end_of_stream=True, discard=True))
        self._end_of_stream_queued = True

    def poll(self, timeout_s: float) -> DecoderOutput:  # noqa: ARG002
        if self._pending:
            return self._pending.popleft()
        return NO_OUTPUT

    def close(self) -> None:
        self._pending.clear()
        self._resampler = None

    def _queue_frame(self, frame) -> None:
        input_format = (frame.format.name, int(frame.sample_rate), frame.layout.name)
        if input_format != self._input_format:
            self._flush_resampler()
            self._input_format = input_format
            self._resampler = av.AudioResampler(
                format="s16",
                layout=_output_layout(self._channel_count),
                rate=self._sample_rate_hz,
            )
            self._pending.append(
                FormatChanged(sample_rate_hz=self._sample_rate_hz, channel_count=self._channel_count)
            )
        for converted in self._resampler.resample(frame):
            self._pending.append(PcmChunk(payload=_frame_bytes(converted)))

    def _flush_resampler(self) -> None:
        if self._resampler is None:
            return
        for converted in self._resampler.resample(None):
            self._pending.append(PcmChunk(payload=_frame_bytes(converted)))


def create_pyav_decoder(
    source: PyAVMediaSource,
    descriptor: AudioStreamDescriptor,
    *,
    max_pending_frames: int = 8,
) -> PyAVDecoder:
    """Bind a decoder to the active audio stream of ``source``."""

    return PyAVDecoder(
        source.codec_context_for(descriptor),
        sample_rate_hz=descriptor.sample_rate_hz,
        channel_count=descriptor.channel_count,
        max_pending_frames=max_pending_frames,
    )
