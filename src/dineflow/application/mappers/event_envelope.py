from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4

from pydantic import BaseModel

from dineflow.application.mappers.bill_mapper import to_bill_response
from dineflow.application.mappers.order_mapper import to_order_response
from dineflow.application.mappers.reservation_mapper import to_reservation_response
from dineflow.application.mappers.table_mapper import to_table_response
from dineflow.application.mappers.waitlist_mapper import to_waitlist_entry_response
from dineflow.domain.billing.entities import Bill
from dineflow.domain.order.entities import Order
from dineflow.domain.reservation.entities import Reservation
from dineflow.domain.table.entities import Table
from dineflow.domain.waitlist.entities import WaitlistEntry

EVENT_SOURCE = "dineflow"


@dataclass(frozen=True)
class EventEnvelope:
    """Wire shape of everything pushed to the events channel.

    Payloads reuse the HTTP response models so subscribers can patch their
    cached view of a table, order, bill, waitlist entry or reservation without
    refetching.
    """

    event_type: str
    occurred_at: datetime
    payload: dict[str, Any]
    trace_id: str | None = None
    request_id: str | None = None
    event_id: str = field(default_factory=lambda: f"evt_{uuid4().hex}")

    def to_json(self) -> str:
        return json.dumps(
            {
                "event_id": self.event_id,
                "event_type": self.event_type,
                "source": EVENT_SOURCE,
                "occurred_at": self.occurred_at.isoformat(),
                "request_id": self.request_id,
                "trace_id": self.trace_id,
                "payload": self.payload,
            },
            separators=(",", ":"),
            ensure_ascii=False,
        )


def _dump(model: BaseModel, **kwargs: Any) -> dict[str, Any]:
    return model.model_dump(mode="json", **kwargs)


def serialize_order_event(
    *,
    event_type: str,
    occurred_at: datetime,
    order: Order,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    # customer ids stay out of the broadcast channel
    payload = _dump(to_order_response(order), exclude={"customerId"})
    return EventEnvelope(event_type, occurred_at, payload, trace_id, request_id).to_json()


def serialize_table_event(
    *,
    occurred_at: datetime,
    table: Table,
    previous_status: str,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    payload = _dump(to_table_response(table))
    payload["previousStatus"] = previous_status
    return EventEnvelope(
        "table.status_changed", occurred_at, payload, trace_id, request_id
    ).to_json()


def serialize_bill_event(
    *,
    event_type: str,
    occurred_at: datetime,
    bill: Bill,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    payload = _dump(to_bill_response(bill), exclude={"processorReference"})
    return EventEnvelope(event_type, occurred_at, payload, trace_id, request_id).to_json()


def serialize_waitlist_event(
    *,
    event_type: str,
    occurred_at: datetime,
    entry: WaitlistEntry,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    payload = _dump(to_waitlist_entry_response(entry), exclude={"phone"})
    return EventEnvelope(event_type, occurred_at, payload, trace_id, request_id).to_json()


def serialize_reservation_event(
    *,
    event_type: str,
    occurred_at: datetime,
    reservation: Reservation,
    trace_id: str | None,
    request_id: str | None,
) -> str:
    payload = _dump(to_reservation_response(reservation), exclude={"phone", "customerId"})
    return EventEnvelope(event_type, occurred_at, payload, trace_id, request_id).to_json()
