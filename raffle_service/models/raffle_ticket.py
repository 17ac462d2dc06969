# raffle_service/models/raffle_ticket.py
from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from raffle_service.db.base_class import Base


class RaffleTicket(Base):
    """One issued ticket code. Codes are unique per raffle, not globally."""

    __tablename__ = "raffle_tickets"

    id = Column(Integer, primary_key=True, autoincrement=True)
    raffle_id = Column(String, ForeignKey("raffles.id"), nullable=False)
    purchase_id = Column(
        String, ForeignKey("purchases.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position = Column(Integer, nullable=False)
    code = Column(String(50), nullable=False, index=True)

    purchase = relationship("Purchase", back_populates="tickets")

    __table_args__ = (
        UniqueConstraint("raffle_id", "code", name="uq_raffle_tickets_raffle_code"),
    )
