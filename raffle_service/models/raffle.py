# raffle_service/models/raffle.py
import uuid
from sqlalchemy import (
    Column, String, Text, Integer, Numeric, DateTime, JSON, CheckConstraint, func,
)
from sqlalchemy.orm import relationship
from raffle_service.db.base_class import Base


class Raffle(Base):
    __tablename__ = "raffles"

    id = Column(
        String, primary_key=True, default=lambda: f"raf_{uuid.uuid4().hex[:12]}"
    )
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    photos = Column(JSON, nullable=False, default=list)  # hosted image URLs

    ticket_price = Column(Numeric(10, 2), nullable=False)
    total_tickets = Column(Integer, nullable=False)

    # Confirmed (PAID) tickets; moved only by confirm/reject.
    sold_tickets = Column(Integer, nullable=False, default=0, server_default="0")
    # Issuance sequence backing ticket correlatives; moved only by purchase creation.
    issued_tickets = Column(Integer, nullable=False, default=0, server_default="0")

    starts_at = Column(DateTime(timezone=True), nullable=True)
    ends_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    purchases = relationship("Purchase", back_populates="raffle")

    __table_args__ = (
        CheckConstraint("ticket_price > 0", name="ck_raffles_ticket_price_positive"),
        CheckConstraint("total_tickets > 0", name="ck_raffles_total_tickets_positive"),
        CheckConstraint("sold_tickets >= 0", name="ck_raffles_sold_non_negative"),
        CheckConstraint("sold_tickets <= total_tickets", name="ck_raffles_sold_within_total"),
        CheckConstraint("issued_tickets >= 0", name="ck_raffles_issued_non_negative"),
    )
