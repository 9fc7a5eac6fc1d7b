"""Container demuxing backed by PyAV."""

from __future__ import annotations

import logging
from fractions import Fraction
from pathlib import Path
from typing import Iterator

import av

from pcm_extract.domain.models import AccessUnit, AudioStreamDescriptor, StreamInfo
from pcm_extract.errors import (
    NoAudioTrackError,
    SourceNotFoundError,
    UnreadableContainerError,
    UnsupportedCodecError,
)

LOGGER = logging.getLogger(__name__)


def _codec_name(stream) -> str:
    codec_context = getattr(stream, "codec_context", None)
    return getattr(codec_context, "name", None) or "none"


def _timestamp_us(packet) -> int | None:
    if packet.pts is None or packet.time_base is None:
        return None
    return int(packet.pts * Fraction(packet.time_base) * 1_000_000)


class PyAVMediaSource:
    """An open container whose first audio stream can be demuxed unit by unit."""

    def __init__(self, path: Path, container) -> None:
        self.path = path
        self._container = container
        self._active_stream = None
        self._packets: Iterator | None = None
        self._streams = tuple(
            StreamInfo(index=stream.index, media_type=stream.type, codec=_codec_name(stream))
            for stream in container.streams
        )

    @property
    def streams(self) -> tuple[StreamInfo, ...]:
        return self._streams

    def select_audio_stream(self) -> AudioStreamDescriptor:
        stream = next((s for s in self._container.streams if s.type == "audio"), None)
        if stream is None:
            raise NoAudioTrackError(f"No audio track found in file: {self.path}")

        codec_context = stream.codec_context
        codec = _codec_name(stream)
        if codec_context is None or codec == "none":
            raise UnsupportedCodecError(f"No decoder available for audio stream #{stream.index}.")

        sample_rate = int(codec_context.sample_rate or 0)
        channel_count = int(codec_context.channels or 0)
        if sample_rate <= 0 or channel_count < 1:
            raise UnsupportedCodecError(
                f"Audio stream #{stream.index} ({codec}) reports {sample_rate} Hz, "
                f"{channel_count} channel(s)."
            )

        self._active_stream = stream
        self._packets = self._container.demux(stream)
        LOGGER.debug("selected audio stream #%d (%s, %d Hz, %d ch)", stream.index, codec, sample_rate, channel_count)
        return AudioStreamDescriptor(
            index=stream.index,
            codec=codec,
            sample_rate_hz=sample_rate,
            channel_count=channel_count,
        )

    def codec_context_for(self, descriptor: AudioStreamDescriptor):
        if self._active_stream is None or self._active_stream.index != descriptor.index:
            raise ValueError(f"Audio stream #{descriptor.index} is not the active stream.")
        return self._active_stream.codec_context

    def read_access_unit(self) -> AccessUnit | None:
        if self._packets is None:
            raise ValueError("No audio stream selected.")
        try:
            for packet in self._packets:
                # demux() ends with an empty flush packet; end of stream is signalled by None
                if packet.size == 0:
                    continue
                return AccessUnit(payload=packet, size=packet.size, timestamp_us=_timestamp_us(packet))
        except av.error.FFmpegError as exc:
            raise UnreadableContainerError(f"Failed to read from {self.path}: {exc}") from exc
        return None

    def close(self) -> None:
        self._packets = None
        self._active_stream = None
        self._container.close()


def open_media_source(path: Path) -> PyAVMediaSource:
    """Open ``path`` and enumerate its elementary streams."""

    path = Path(path)
    if not path.exists() or not path.is_file():
        raise SourceNotFoundError(f"Audio file not found: {path}")

    try:
        container = av.open(str(path), mode="r")
    except (av.error.FFmpegError, OSError) as exc:
        raise UnreadableContainerError(f"Unable to open media container {path}: {exc}") from exc

    try:
        return PyAVMediaSource(path, container)
    except Exception:
        container.close()
        raise
