from __future__ import annotations

from typing import NewType

MenuItemId = NewType("MenuItemId", str)
TableId = NewType("TableId", str)
OrderId = NewType("OrderId", str)
OrderLineId = NewType("OrderLineId", str)
BillId = NewType("BillId", str)
WaitlistEntryId = NewType("WaitlistEntryId", str)
UserId = NewType("UserId", str)
ReservationId = NewType("ReservationId", str)
