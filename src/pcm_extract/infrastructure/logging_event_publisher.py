"""Simple logging-backed implementation of the event publisher."""

from __future__ import annotations

import logging

from pcm_extract.domain.events import DecodeFailed, DomainEvent

LOGGER = logging.getLogger("pcm_extract.events")


class LoggingEventPublisher:
    """Emit event payload summaries to structured logs."""

    def publish(self, event: DomainEvent) -> None:
        level = logging.WARNING if isinstance(event, DecodeFailed) else logging.INFO
        LOGGER.log(
            level,
            "domain_event_emitted",
            extra={
                "event_name": type(event).__name__,
                "correlation_id": event.correlation_id,
                "payload_summary": event.payload_summary,
                "occurred_at": event.occurred_at.isoformat(),
            },
        )
