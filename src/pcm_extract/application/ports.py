"""Ports the decode pipeline is written against.

Concrete demuxer/decoder pairs live in :mod:`pcm_extract.infrastructure`; tests
substitute in-memory doubles.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, Sequence

from pcm_extract.domain.models import AccessUnit, AudioStreamDescriptor, DecoderOutput, StreamInfo


class MediaSource(Protocol):
    """An open container file."""

    path: Path

    @property
    def streams(self) -> Sequence[StreamInfo]:
        """Elementary streams in container order."""

    def select_audio_stream(self) -> AudioStreamDescriptor:
        """Mark the first audio stream active and describe it.

        Raises :class:`~pcm_extract.errors.NoAudioTrackError` when the container
        has no audio stream.
        """

    def read_access_unit(self) -> AccessUnit | None:
        """Return the next unit of the active stream, ``None`` at end of stream."""

    def close(self) -> None:
        """Release the container handle."""


class Decoder(Protocol):
    """Decoder capability driven by the frame decoder pull loop."""

    def acquire_input_slot(self, timeout_s: float) -> bool:
        """Wait up to ``timeout_s`` for room to accept one more unit."""

    def feed(self, unit: AccessUnit) -> None:
        """Submit one compressed unit into an acquired input slot."""

    def feed_end_of_stream(self) -> None:
        """Submit the end-of-stream marker into an acquired input slot."""

    def poll(self, timeout_s: float) -> DecoderOutput:
        """Wait up to ``timeout_s`` for the next output outcome."""

    def close(self) -> None:
        """Release the decoder instance."""


class SourceOpener(Protocol):
    def __call__(self, path: Path) -> MediaSource: ...


class DecoderFactory(Protocol):
    def __call__(
        self,
        source: MediaSource,
        descriptor: AudioStreamDescriptor,
        *,
        max_pending_frames: int,
    ) -> Decoder: ...
