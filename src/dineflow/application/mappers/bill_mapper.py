from __future__ import annotations

from dineflow.application.dto.responses import BillResponse
from dineflow.application.mappers.money_mapper import to_money_response
from dineflow.domain.billing.entities import Bill


def to_bill_response(bill: Bill) -> BillResponse:
    return BillResponse(
        billId=str(bill.bill_id),
        tableId=str(bill.table_id),
        orderIds=[str(order_id) for order_id in bill.order_ids],
        totalAmount=to_money_response(bill.total_amount),
        isPaid=bill.is_paid,
        paymentMethod=bill.payment_method.value if bill.payment_method else None,
        paidAt=bill.paid_at,
        processorReference=bill.processor_reference,
        createdAt=bill.created_at,
    )
