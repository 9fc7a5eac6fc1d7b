"""Domain event contracts for decode workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True, slots=True)
class DomainEvent:
    """Base domain event emitted by application services."""

    correlation_id: str
    payload_summary: dict[str, Any]
    occurred_at: datetime = field(default_factory=lambda: datetime.now(tz=timezone.utc))


@dataclass(frozen=True, slots=True)
class AudioStreamSelected(DomainEvent):
    """The first audio stream of the container was selected for decoding."""


@dataclass(frozen=True, slots=True)
class PcmDecoded(DomainEvent):
    """The selected stream was fully decoded to native-rate PCM."""


@dataclass(frozen=True, slots=True)
class WaveformNormalized(DomainEvent):
    """Decoded PCM was downmixed and resampled to the requested rate."""


@dataclass(frozen=True, slots=True)
class DecodeFailed(DomainEvent):
    """Pipeline execution failed for a correlation id."""
