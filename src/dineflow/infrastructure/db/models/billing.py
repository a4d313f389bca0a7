from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from dineflow.infrastructure.db.models.menu import Base


class BillModel(Base):
    __tablename__ = "bills"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    table_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("restaurant_tables.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    total_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False)
    is_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    payment_method: Mapped[str | None] = mapped_column(String(20), nullable=True)
    processor_reference: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    paid_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    orders: Mapped[list["BillOrderModel"]] = relationship(
        back_populates="bill",
        cascade="all, delete-orphan",
        order_by="BillOrderModel.position",
    )


class BillOrderModel(Base):
    __tablename__ = "bill_orders"

    bill_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("bills.id", ondelete="CASCADE"),
        primary_key=True,
    )
    order_id: Mapped[str] = mapped_column(
        String(50),
        ForeignKey("orders.id", ondelete="CASCADE"),
        primary_key=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False)

    bill: Mapped[BillModel] = relationship(back_populates="orders")
