from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class MoneyResponse(BaseModel):
    amountCents: int
    currency: str


class MenuItemResponse(BaseModel):
    itemId: str
    name: str
    description: str | None = None
    price: MoneyResponse
    category: str
    availabilityStatus: str
    prepTimeMinutes: int
    popularityScore: int = 0


class MenuItemListResponse(BaseModel):
    items: list[MenuItemResponse] = Field(default_factory=list)


class OccupantResponse(BaseModel):
    partyName: str
    partySize: int
    seatedAt: datetime


class PositionResponse(BaseModel):
    x: float
    y: float


class TableResponse(BaseModel):
    tableId: str
    number: int
    capacity: int
    status: str
    occupant: OccupantResponse | None = None
    position: PositionResponse


class TableListResponse(BaseModel):
    tables: list[TableResponse] = Field(default_factory=list)


class TableQrCodeResponse(BaseModel):
    tableId: str
    tableNumber: int
    orderUrl: str
    imageUrl: str


class OrderLineResponse(BaseModel):
    lineId: str
    menuItemId: str
    name: str
    quantity: int
    unitPrice: MoneyResponse
    lineTotal: MoneyResponse
    specialRequests: str | None = None


class OrderResponse(BaseModel):
    orderId: str
    tableId: str
    status: str
    lines: list[OrderLineResponse] = Field(default_factory=list)
    taxRate: float
    subtotal: MoneyResponse
    tax: MoneyResponse
    total: MoneyResponse
    createdAt: datetime
    updatedAt: datetime
    completedAt: datetime | None = None
    customerId: str | None = None


class OrderListResponse(BaseModel):
    orders: list[OrderResponse] = Field(default_factory=list)


class CartQuoteLineResponse(BaseModel):
    menuItemId: str
    name: str
    quantity: int
    unitPrice: MoneyResponse
    lineTotal: MoneyResponse
    specialRequests: str | None = None


class CartQuoteResponse(BaseModel):
    lines: list[CartQuoteLineResponse] = Field(default_factory=list)
    itemCount: int
    taxRate: float
    subtotal: MoneyResponse
    tax: MoneyResponse
    total: MoneyResponse


class BillResponse(BaseModel):
    billId: str
    tableId: str
    orderIds: list[str] = Field(default_factory=list)
    totalAmount: MoneyResponse
    isPaid: bool
    paymentMethod: str | None = None
    paidAt: datetime | None = None
    processorReference: str | None = None
    createdAt: datetime


class BillSplitResponse(BaseModel):
    billId: str
    ways: int
    shares: list[MoneyResponse] = Field(default_factory=list)


class SettleBillResponse(BaseModel):
    bill: BillResponse
    settledOrderIds: list[str] = Field(default_factory=list)
    failedOrderIds: list[str] = Field(default_factory=list)


class WaitlistEntryResponse(BaseModel):
    entryId: str
    partyName: str
    partySize: int
    phone: str | None = None
    status: str
    notified: bool
    estimatedWaitMinutes: int
    createdAt: datetime


class WaitlistResponse(BaseModel):
    entries: list[WaitlistEntryResponse] = Field(default_factory=list)
    estimatedWaitMinutes: int


class SeatWaitlistResponse(BaseModel):
    entry: WaitlistEntryResponse
    table: TableResponse


class FloorStatsResponse(BaseModel):
    occupancyRate: float
    totalTables: int
    occupiedTables: int
    availableTables: int
    totalSeats: int
    occupiedSeats: int
    waitingParties: int
    estimatedWaitMinutes: int
    averageQuotedWaitMinutes: float


class PopularDishResponse(BaseModel):
    menuItemId: str
    name: str
    orderCount: int


class AnalyticsSummaryResponse(BaseModel):
    totalRevenue: MoneyResponse
    totalOrders: int
    averageOrderValue: MoneyResponse
    popularDishes: list[PopularDishResponse] = Field(default_factory=list)
    generatedAt: datetime


class SettingsResponse(BaseModel):
    restaurantName: str
    openingTime: str
    closingTime: str
    taxRate: float
    serviceCharge: float
    currency: str
    timeZone: str


class ReceiptLineResponse(BaseModel):
    name: str
    quantity: int
    unitPrice: MoneyResponse
    lineTotal: MoneyResponse


class ReceiptResponse(BaseModel):
    restaurantName: str
    orderId: str
    tableNumber: int | None = None
    status: str
    lines: list[ReceiptLineResponse] = Field(default_factory=list)
    taxRate: float
    subtotal: MoneyResponse
    tax: MoneyResponse
    total: MoneyResponse
    createdAt: datetime


class KitchenTicketLineResponse(BaseModel):
    name: str
    quantity: int
    category: str
    prepTimeMinutes: int
    specialRequests: str | None = None


class KitchenTicketResponse(BaseModel):
    orderId: str
    tableNumber: int | None = None
    status: str
    lines: list[KitchenTicketLineResponse] = Field(default_factory=list)
    estimatedPrepMinutes: int
    createdAt: datetime


class ReservationResponse(BaseModel):
    reservationId: str
    customerName: str
    partySize: int
    reservedFor: datetime
    status: str
    phone: str | None = None
    tableId: str | None = None
    notes: str | None = None
    customerId: str | None = None
    createdAt: datetime
    updatedAt: datetime


class ReservationListResponse(BaseModel):
    reservations: list[ReservationResponse] = Field(default_factory=list)


class SeatReservationResponse(BaseModel):
    reservation: ReservationResponse
    table: TableResponse
