from __future__ import annotations

from decimal import Decimal
from typing import Annotated

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, StringConstraints

from dineflow.domain.billing.entities import PaymentMethod
from dineflow.domain.menu.entities import AvailabilityStatus
from dineflow.domain.order.entities import OrderStatus
from dineflow.domain.reservation.entities import ReservationStatus
from dineflow.domain.table.entities import TableStatus


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


# Surrounding whitespace is trimmed before the length checks.
PartyName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
MenuText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
CategoryName = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
PhoneNumber = Annotated[str, StringConstraints(strip_whitespace=True, max_length=50)]


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class CreateMenuItemRequest(CamelBaseModel):
    name: MenuText
    description: str | None = None
    price: Decimal = Field(gt=0, decimal_places=2)
    category: CategoryName
    prep_time_minutes: int = Field(default=15, gt=0)
    availability_status: AvailabilityStatus = AvailabilityStatus.AVAILABLE


class UpdateMenuItemRequest(CamelBaseModel):
    name: MenuText | None = None
    description: str | None = None
    price: Decimal | None = Field(default=None, gt=0, decimal_places=2)
    category: CategoryName | None = None
    prep_time_minutes: int | None = Field(default=None, gt=0)
    availability_status: AvailabilityStatus | None = None


class PositionRequest(CamelBaseModel):
    x: float = 0.0
    y: float = 0.0


class CreateTableRequest(CamelBaseModel):
    number: int = Field(gt=0)
    capacity: int = Field(gt=0)
    position: PositionRequest | None = None


class UpdateTableRequest(CamelBaseModel):
    status: TableStatus | None = None
    capacity: int | None = Field(default=None, gt=0)
    position: PositionRequest | None = None


class SeatPartyRequest(CamelBaseModel):
    party_name: PartyName
    party_size: int = Field(ge=1)


class OrderLineRequest(CamelBaseModel):
    menu_item_id: str
    quantity: int = Field(default=1, ge=1)
    special_requests: str | None = Field(default=None, max_length=1000)


class CreateOrderRequest(CamelBaseModel):
    table_id: str
    lines: list[OrderLineRequest] = Field(default_factory=list)


class AddOrderLinesRequest(CamelBaseModel):
    lines: list[OrderLineRequest] = Field(default_factory=list)


class UpdateOrderStatusRequest(CamelBaseModel):
    status: OrderStatus


class CartQuoteRequest(CamelBaseModel):
    lines: list[OrderLineRequest] = Field(default_factory=list)


class PayBillRequest(CamelBaseModel):
    payment_method: PaymentMethod


class AddWaitlistRequest(CamelBaseModel):
    party_name: PartyName
    party_size: int
    phone: PhoneNumber | None = None


class UpdateWaitlistRequest(CamelBaseModel):
    notified: bool | None = None


class SeatWaitlistRequest(CamelBaseModel):
    table_id: str


class UpdateSettingsRequest(CamelBaseModel):
    restaurant_name: MenuText | None = None
    opening_time: str | None = None
    closing_time: str | None = None
    tax_rate: Decimal | None = Field(default=None, ge=0, lt=1)
    service_charge: Decimal | None = Field(default=None, ge=0, lt=1)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    time_zone: str | None = None


class CreateReservationRequest(CamelBaseModel):
    customer_name: PartyName
    party_size: int
    reserved_for: AwareDatetime
    phone: PhoneNumber | None = None
    table_id: str | None = None
    notes: str | None = Field(default=None, max_length=1000)


class UpdateReservationRequest(CamelBaseModel):
    reserved_for: AwareDatetime | None = None
    party_size: int | None = None
    phone: PhoneNumber | None = None
    table_id: str | None = None
    notes: str | None = Field(default=None, max_length=1000)
    status: ReservationStatus | None = None


class SeatReservationRequest(CamelBaseModel):
    table_id: str | None = None
