"""Error taxonomy for the decode pipeline.

Every failure raised by the pipeline is a :class:`PcmExtractError` carrying a
machine-readable ``code`` and a human-readable ``message``.
"""

from __future__ import annotations


class PcmExtractError(Exception):
    """Base class for all decode pipeline errors."""

    code = "decode_error"

    def __init__(self, message: str, *, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def as_dict(self) -> dict[str, str]:
        payload = {"code": self.code, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class InvalidArgumentError(PcmExtractError, ValueError):
    """Malformed request: missing path, non-positive sample rate, bad mode."""

    code = "invalid_argument"


class SourceNotFoundError(PcmExtractError, FileNotFoundError):
    """The media file does not exist."""

    code = "file_not_found"


class UnreadableContainerError(PcmExtractError):
    """The file exists but its container could not be opened."""

    code = "unreadable_container"


class NoAudioTrackError(PcmExtractError):
    """The container holds no audio stream."""

    code = "no_audio_track"


class UnsupportedCodecError(PcmExtractError):
    """The audio stream cannot be decoded or reports invalid parameters."""

    code = "unsupported_codec"


class UnsupportedChannelLayoutError(PcmExtractError):
    """Downmix was asked for a channel count other than mono or stereo."""

    code = "unsupported_channel_layout"


class DecoderFaultError(PcmExtractError):
    """Decoding failed mid-stream."""

    code = "decoder_fault"


class DecodeCancelledError(PcmExtractError):
    """A cancellation token was triggered while decoding."""

    code = "cancelled"
