# raffle_service/models/purchase.py
import uuid
from sqlalchemy import (
    Column, String, Integer, Numeric, DateTime, ForeignKey, CheckConstraint, func,
)
from sqlalchemy.orm import relationship
from raffle_service.db.base_class import Base
from raffle_service.constants.purchase import PurchaseStatus, PAYMENT_METHOD


class Purchase(Base):
    __tablename__ = "purchases"

    id = Column(
        String, primary_key=True, default=lambda: f"pur_{uuid.uuid4().hex[:12]}"
    )
    raffle_id = Column(String, ForeignKey("raffles.id"), nullable=False, index=True)

    # Buyer (validated upstream)
    name = Column(String(255), nullable=False)
    national_id = Column(String(20), nullable=False, index=True)
    phone = Column(String(20), nullable=False)
    email = Column(String(255), nullable=False)

    quantity = Column(Integer, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(String(20), nullable=False, default=PAYMENT_METHOD)

    status = Column(String(20), nullable=False, default=PurchaseStatus.PENDING)
    # Values: 'PENDING', 'PAID', 'FAILED'

    # Payment reference, unique across every raffle and status
    operation_number = Column(String(100), nullable=False, unique=True)

    # Copied from the referral at commit time, not a live reference
    referral_code = Column(String(50), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    raffle = relationship("Raffle", back_populates="purchases")
    tickets = relationship(
        "RaffleTicket",
        back_populates="purchase",
        order_by="RaffleTicket.position",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_purchases_quantity_positive"),
        CheckConstraint("amount >= 0", name="ck_purchases_amount_non_negative"),
        CheckConstraint(
            "status IN ('PENDING', 'PAID', 'FAILED')", name="ck_purchases_status"
        ),
    )

    @property
    def ticket_codes(self) -> list[str]:
        """Ticket codes in issuance order."""
        return [t.code for t in self.tickets]
