from __future__ import annotations

import logging

from dineflow.application.ports.publisher import EventPublisher

EVENTS_CHANNEL = "events:dineflow"

logger = logging.getLogger(__name__)


def publish_event(publisher: EventPublisher, event_type: str, message: str) -> None:
    try:
        publisher.publish(channel=EVENTS_CHANNEL, message=message)
    except Exception:
        logger.warning("event_publish_failed", extra={"event_type": event_type}, exc_info=True)
