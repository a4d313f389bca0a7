from __future__ import annotations

from typing import Protocol


class EventPublisher(Protocol):
    """Broadcasts serialized event envelopes to connected displays.

    Publishing is best effort; callers log failures and carry on.
    """

    def publish(self, channel: str, message: str) -> None: ...
