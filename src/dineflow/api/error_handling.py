from __future__ import annotations

import logging
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dineflow.api.auth import ForbiddenError, UnauthenticatedError
from dineflow.api.middleware.request_id import get_request_id
from dineflow.application.ports.payments import PaymentProcessorUnavailableError
from dineflow.application.ports.repositories import StoreUnavailableError
from dineflow.application.use_cases.billing import (
    BillAlreadyPaidError,
    BillNotFoundError,
    BillNotPaidError,
    InvalidBillSplitError,
    NoCompletedOrdersError,
    PaymentDeclinedError,
)
from dineflow.application.use_cases.catalog import InvalidMenuItemError, MenuItemNotFoundError
from dineflow.application.use_cases.floor import (
    CapacityExceededError,
    DuplicateTableNumberError,
    InvalidTableTransitionError,
    TableNotAvailableError,
    TableNotFoundError,
)
from dineflow.application.use_cases.orders import (
    EmptyOrderError,
    InvalidOrderTransitionError,
    MenuItemUnavailableError,
    OrderClosedError,
    OrderNotFoundError,
)
from dineflow.application.use_cases.reservations import (
    InvalidReservationError,
    InvalidReservationTransitionError,
    ReservationNotFoundError,
)
from dineflow.application.use_cases.settings import InvalidSettingsError
from dineflow.application.use_cases.waitlist import (
    InvalidPartySizeError,
    WaitlistEntryNotFoundError,
    WaitlistEntryNotWaitingError,
)


logger = logging.getLogger(__name__)

# Domain and port errors, mapped to (HTTP status, envelope code).
ERROR_CODES: dict[type[Exception], tuple[int, str]] = {
    UnauthenticatedError: (401, "UNAUTHENTICATED"),
    ForbiddenError: (403, "FORBIDDEN"),
    TableNotFoundError: (404, "TABLE_NOT_FOUND"),
    TableNotAvailableError: (404, "TABLE_NOT_AVAILABLE"),
    MenuItemNotFoundError: (404, "MENU_ITEM_NOT_FOUND"),
    OrderNotFoundError: (404, "ORDER_NOT_FOUND"),
    BillNotFoundError: (404, "BILL_NOT_FOUND"),
    WaitlistEntryNotFoundError: (404, "WAITLIST_ENTRY_NOT_FOUND"),
    ReservationNotFoundError: (404, "RESERVATION_NOT_FOUND"),
    EmptyOrderError: (400, "EMPTY_ORDER"),
    InvalidPartySizeError: (400, "INVALID_PARTY_SIZE"),
    InvalidBillSplitError: (400, "INVALID_SPLIT"),
    InvalidMenuItemError: (400, "INVALID_MENU_ITEM"),
    InvalidSettingsError: (400, "INVALID_SETTINGS"),
    InvalidReservationError: (400, "INVALID_RESERVATION"),
    PaymentDeclinedError: (402, "PAYMENT_DECLINED"),
    InvalidOrderTransitionError: (409, "INVALID_ORDER_TRANSITION"),
    InvalidTableTransitionError: (409, "INVALID_TABLE_TRANSITION"),
    CapacityExceededError: (409, "CAPACITY_EXCEEDED"),
    DuplicateTableNumberError: (409, "DUPLICATE_TABLE_NUMBER"),
    MenuItemUnavailableError: (409, "MENU_ITEM_UNAVAILABLE"),
    OrderClosedError: (409, "ORDER_CLOSED"),
    NoCompletedOrdersError: (409, "NO_COMPLETED_ORDERS"),
    BillAlreadyPaidError: (409, "ALREADY_PAID"),
    BillNotPaidError: (409, "BILL_NOT_PAID"),
    WaitlistEntryNotWaitingError: (409, "WAITLIST_ENTRY_CLOSED"),
    InvalidReservationTransitionError: (409, "INVALID_RESERVATION_TRANSITION"),
    StoreUnavailableError: (503, "UNAVAILABLE"),
    PaymentProcessorUnavailableError: (503, "UNAVAILABLE"),
}

HTTP_STATUS_CODES = {
    400: "BAD_REQUEST",
    401: "UNAUTHENTICATED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def error_body(code: str, message: str, details: dict[str, Any] | None = None) -> dict[str, Any]:
    return {
        "error": {"code": code, "message": message, "details": details or {}},
        "requestId": get_request_id(),
    }


async def _mapped_error_handler(_: Request, exc: Exception) -> JSONResponse:
    status_code, code = next(
        ERROR_CODES[cls] for cls in type(exc).__mro__ if cls in ERROR_CODES
    )
    if status_code >= 500:
        logger.warning("dependency_unavailable", extra={"reason": str(exc)})
    return JSONResponse(status_code=status_code, content=error_body(code, str(exc)))


async def _http_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    http_exc = cast(StarletteHTTPException, exc)
    return JSONResponse(
        status_code=http_exc.status_code,
        content=error_body(
            HTTP_STATUS_CODES.get(http_exc.status_code, "HTTP_ERROR"),
            str(http_exc.detail) if http_exc.detail else "request failed",
        ),
        headers=getattr(http_exc, "headers", None),
    )


async def _validation_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    errors = jsonable_encoder(cast(RequestValidationError, exc).errors())
    return JSONResponse(
        status_code=400,
        content=error_body("INVALID_REQUEST", "request validation failed", {"errors": errors}),
    )


def register_exception_handlers(app: FastAPI) -> None:
    for exc_cls in ERROR_CODES:
        app.add_exception_handler(exc_cls, _mapped_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
