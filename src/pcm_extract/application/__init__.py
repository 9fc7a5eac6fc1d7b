"""DDD application layer."""

from .decode_service import DecodeAudioToPcm, decode_to_pcm
from .event_publisher import EventPublisher, NullEventPublisher
from .ports import Decoder, DecoderFactory, MediaSource, SourceOpener

__all__ = [
    "DecodeAudioToPcm",
    "decode_to_pcm",
    "EventPublisher",
    "NullEventPublisher",
    "Decoder",
    "DecoderFactory",
    "MediaSource",
    "SourceOpener",
]
