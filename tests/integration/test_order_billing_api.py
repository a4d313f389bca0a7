from __future__ import annotations

import pytest

import dineflow.api.routes.bills as bills_route
from dineflow.application.ports.payments import PaymentResult
from dineflow.domain.common.money import Money


class DecliningGateway:
    def charge(self, amount: Money, reference: str) -> PaymentResult:
        return PaymentResult(succeeded=False, processor_reference=None, failure_reason="insufficient_funds")


@pytest.fixture
def seated_table(client, staff, create_table) -> dict:
    table = create_table(5, 4)
    response = client.post(
        f"/v1/tables/{table['tableId']}/allocate",
        json={"partyName": "Diaz", "partySize": 2},
        headers=staff,
    )
    assert response.status_code == 200
    return response.json()


@pytest.fixture
def burger(create_menu_item) -> dict:
    return create_menu_item("Burger", "10.00", prepTimeMinutes=12)


def _place_order(client, headers, table_id: str, item_id: str, quantity: int = 2) -> dict:
    response = client.post(
        "/v1/orders",
        json={"tableId": table_id, "lines": [{"menuItemId": item_id, "quantity": quantity}]},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def _complete(client, staff, order_id: str) -> dict:
    body = {}
    for status in ("preparing", "ready", "completed"):
        response = client.put(f"/v1/orders/{order_id}", json={"status": status}, headers=staff)
        assert response.status_code == 200, response.text
        body = response.json()
    return body


def test_customer_order_is_priced_with_tax(client, customer, seated_table, burger) -> None:
    order = _place_order(client, customer, seated_table["tableId"], burger["itemId"])

    assert order["status"] == "pending"
    assert order["subtotal"] == {"amountCents": 2000, "currency": "USD"}
    assert order["tax"]["amountCents"] == 160
    assert order["total"]["amountCents"] == 2160
    assert order["customerId"] == "usr_guest"


def test_order_against_unknown_item_or_table(client, customer, seated_table, burger) -> None:
    unknown_item = client.post(
        "/v1/orders",
        json={"tableId": seated_table["tableId"], "lines": [{"menuItemId": "itm_nope"}]},
        headers=customer,
    )
    unknown_table = client.post(
        "/v1/orders",
        json={"tableId": "tbl_nope", "lines": [{"menuItemId": burger["itemId"]}]},
        headers=customer,
    )
    empty = client.post("/v1/orders", json={"tableId": seated_table["tableId"], "lines": []}, headers=customer)

    assert unknown_item.json()["error"]["code"] == "MENU_ITEM_NOT_FOUND"
    assert unknown_table.json()["error"]["code"] == "TABLE_NOT_FOUND"
    assert empty.status_code == 400
    assert empty.json()["error"]["code"] == "EMPTY_ORDER"


def test_oversized_special_requests_are_refused(client, customer, seated_table, burger) -> None:
    response = client.post(
        "/v1/orders",
        json={
            "tableId": seated_table["tableId"],
            "lines": [{"menuItemId": burger["itemId"], "specialRequests": "x" * 1001}],
        },
        headers=customer,
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INVALID_REQUEST"


def test_unavailable_item_is_refused(client, customer, seated_table, create_menu_item) -> None:
    soup = create_menu_item("Soup", "6.00", availabilityStatus="unavailable")

    response = client.post(
        "/v1/orders",
        json={"tableId": seated_table["tableId"], "lines": [{"menuItemId": soup["itemId"]}]},
        headers=customer,
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "MENU_ITEM_UNAVAILABLE"


def test_kitchen_flow_and_transition_guard(client, customer, staff, seated_table, burger) -> None:
    order = _place_order(client, customer, seated_table["tableId"], burger["itemId"])

    skipped = client.put(f"/v1/orders/{order['orderId']}", json={"status": "ready"}, headers=staff)
    assert skipped.status_code == 409
    assert skipped.json()["error"]["code"] == "INVALID_ORDER_TRANSITION"

    queue = client.get("/v1/kitchen/queue", headers=staff)
    assert [item["orderId"] for item in queue.json()["orders"]] == [order["orderId"]]

    completed = _complete(client, staff, order["orderId"])
    assert completed["completedAt"] is not None
    assert client.get("/v1/kitchen/queue", headers=staff).json()["orders"] == []


def test_adding_lines_until_kitchen_marks_ready(client, customer, staff, seated_table, burger) -> None:
    order = _place_order(client, customer, seated_table["tableId"], burger["itemId"], quantity=1)
    url = f"/v1/orders/{order['orderId']}"

    added = client.post(f"{url}/lines", json={"lines": [{"menuItemId": burger["itemId"]}]}, headers=staff)
    assert added.json()["lines"][0]["quantity"] == 2
    assert added.json()["total"]["amountCents"] == 2160

    client.put(url, json={"status": "preparing"}, headers=staff)
    client.put(url, json={"status": "ready"}, headers=staff)
    closed = client.post(f"{url}/lines", json={"lines": [{"menuItemId": burger["itemId"]}]}, headers=staff)
    assert closed.status_code == 409
    assert closed.json()["error"]["code"] == "ORDER_CLOSED"


def test_bill_payment_settles_orders_but_keeps_table(client, customer, staff, seated_table, burger) -> None:
    table_id = seated_table["tableId"]
    first = _place_order(client, customer, table_id, burger["itemId"])
    second = _place_order(client, customer, table_id, burger["itemId"], quantity=1)
    _complete(client, staff, first["orderId"])
    _complete(client, staff, second["orderId"])

    bill = client.post(f"/v1/bills/{table_id}", headers=staff)
    assert bill.status_code == 201
    assert bill.json()["totalAmount"]["amountCents"] == 2160 + 1080
    assert client.get(f"/v1/tables/{table_id}/bill", headers=staff).json()["billId"] == bill.json()["billId"]

    split = client.get(f"/v1/bills/{bill.json()['billId']}/split", params={"ways": 3}, headers=staff)
    assert [share["amountCents"] for share in split.json()["shares"]] == [1080, 1080, 1080]

    paid = client.post(f"/v1/bills/{bill.json()['billId']}/pay", json={"paymentMethod": "cash"}, headers=staff)
    assert paid.status_code == 200
    assert paid.json()["bill"]["isPaid"] is True
    assert sorted(paid.json()["settledOrderIds"]) == sorted([first["orderId"], second["orderId"]])
    assert client.get(f"/v1/orders/{first['orderId']}", headers=staff).json()["status"] == "paid"
    assert client.get(f"/v1/tables/{table_id}", headers=staff).json()["status"] == "occupied"

    again = client.post(f"/v1/bills/{bill.json()['billId']}/pay", json={"paymentMethod": "cash"}, headers=staff)
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "ALREADY_PAID"

    settle = client.post(f"/v1/bills/{bill.json()['billId']}/settle", headers=staff)
    assert settle.status_code == 200
    assert settle.json()["failedOrderIds"] == []


def test_bill_without_completed_orders_conflicts(client, staff, seated_table) -> None:
    response = client.post(f"/v1/bills/{seated_table['tableId']}", headers=staff)

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "NO_COMPLETED_ORDERS"


def test_card_payment_without_processor_is_unavailable(client, customer, staff, seated_table, burger) -> None:
    order = _place_order(client, customer, seated_table["tableId"], burger["itemId"])
    _complete(client, staff, order["orderId"])
    bill = client.post(f"/v1/bills/{seated_table['tableId']}", headers=staff).json()

    response = client.post(f"/v1/bills/{bill['billId']}/pay", json={"paymentMethod": "card"}, headers=staff)

    assert response.status_code == 503
    assert response.json()["error"]["code"] == "UNAVAILABLE"


def test_declined_card_payment(client, customer, staff, seated_table, burger, monkeypatch) -> None:
    monkeypatch.setattr(bills_route, "get_payment_gateway", lambda: DecliningGateway())
    order = _place_order(client, customer, seated_table["tableId"], burger["itemId"])
    _complete(client, staff, order["orderId"])
    bill = client.post(f"/v1/bills/{seated_table['tableId']}", headers=staff).json()

    response = client.post(f"/v1/bills/{bill['billId']}/pay", json={"paymentMethod": "digital"}, headers=staff)

    assert response.status_code == 402
    assert response.json()["error"]["code"] == "PAYMENT_DECLINED"
    assert client.get(f"/v1/bills/{bill['billId']}", headers=staff).json()["isPaid"] is False


def test_cart_quote_is_public(client, burger) -> None:
    response = client.post("/v1/cart/quote", json={"lines": [{"menuItemId": burger["itemId"], "quantity": 3}]})

    assert response.status_code == 200
    assert response.json()["itemCount"] == 3
    assert response.json()["total"]["amountCents"] == 3240


def test_receipt_and_kitchen_ticket_for_an_order(
    client, owner, customer, staff, seated_table, burger, create_menu_item
) -> None:
    client.put("/v1/settings", json={"restaurantName": "Casa Nova"}, headers=owner)
    soup = create_menu_item("Soup", "6.50", category="starters", prepTimeMinutes=20)
    response = client.post(
        "/v1/orders",
        json={
            "tableId": seated_table["tableId"],
            "lines": [
                {"menuItemId": burger["itemId"], "quantity": 2, "specialRequests": "no onions"},
                {"menuItemId": soup["itemId"]},
            ],
        },
        headers=customer,
    )
    order = response.json()

    receipt = client.get(f"/v1/print/receipt/{order['orderId']}", headers=staff)
    ticket = client.get(f"/v1/print/kitchen-ticket/{order['orderId']}", headers=staff)

    assert receipt.status_code == 200
    assert receipt.json()["restaurantName"] == "Casa Nova"
    assert receipt.json()["tableNumber"] == 5
    assert [line["lineTotal"]["amountCents"] for line in receipt.json()["lines"]] == [2000, 650]
    assert receipt.json()["total"] == order["total"]
    assert ticket.status_code == 200
    assert [(line["name"], line["category"], line["prepTimeMinutes"]) for line in ticket.json()["lines"]] == [
        ("Burger", "mains", 12),
        ("Soup", "starters", 20),
    ]
    assert ticket.json()["lines"][0]["specialRequests"] == "no onions"
    assert ticket.json()["estimatedPrepMinutes"] == 20


def test_printing_is_for_staff_and_known_orders(client, customer, staff) -> None:
    forbidden = client.get("/v1/print/receipt/ord_missing", headers=customer)
    missing = client.get("/v1/print/kitchen-ticket/ord_missing", headers=staff)

    assert forbidden.status_code == 403
    assert missing.status_code == 404
    assert missing.json()["error"]["code"] == "ORDER_NOT_FOUND"
