from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from dineflow.infrastructure.db.models.menu import Base


class WaitlistEntryModel(Base):
    __tablename__ = "waitlist_entries"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    party_name: Mapped[str] = mapped_column(String(255), nullable=False)
    party_size: Mapped[int] = mapped_column(Integer, nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    notified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    estimated_wait_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
