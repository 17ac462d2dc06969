# raffle_service/crud/crud_purchase.py
from typing import List, Optional
from sqlalchemy.orm import Session, joinedload, selectinload

from raffle_service.models.purchase import Purchase
from raffle_service.models.raffle import Raffle
from raffle_service.models.raffle_ticket import RaffleTicket
from raffle_service.models.referral import Referral


class CRUDPurchase:
    """Purchase queries. Writes happen inside the purchase services' transactions."""

    def get(self, db: Session, purchase_id: str) -> Optional[Purchase]:
        """Get a purchase with its tickets loaded."""
        return (
            db.query(Purchase)
            .options(selectinload(Purchase.tickets))
            .filter(Purchase.id == purchase_id)
            .first()
        )

    def operation_number_exists(self, db: Session, operation_number: str) -> bool:
        """Check every purchase, whatever its raffle or status."""
        return db.query(Purchase.id).filter(
            Purchase.operation_number == operation_number
        ).first() is not None

    def add_with_tickets(
        self, db: Session, *, purchase: Purchase, codes: List[str]
    ) -> Purchase:
        """Stage a purchase and its ticket rows; the caller flushes/commits."""
        purchase.tickets = [
            RaffleTicket(raffle_id=purchase.raffle_id, position=i, code=code)
            for i, code in enumerate(codes)
        ]
        db.add(purchase)
        return purchase

    def list_for_admin(self, db: Session, *, skip: int = 0, limit: int = 200) -> List[dict]:
        """
        All purchases, newest first, with raffle title and the referral
        owner's contact data looked up by the copied code.
        """
        rows = (
            db.query(Purchase, Raffle.title, Referral.name, Referral.email)
            .options(selectinload(Purchase.tickets))
            .outerjoin(Raffle, Raffle.id == Purchase.raffle_id)
            .outerjoin(Referral, Referral.code == Purchase.referral_code)
            .order_by(Purchase.created_at.desc(), Purchase.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )
        return [
            {
                "purchase": purchase,
                "raffle_title": raffle_title,
                "referral_name": referral_name,
                "referral_email": referral_email,
            }
            for purchase, raffle_title, referral_name, referral_email in rows
        ]

    def search(
        self,
        db: Session,
        *,
        national_id: Optional[str] = None,
        operation_number: Optional[str] = None,
        ticket_code: Optional[str] = None,
    ) -> List[Purchase]:
        """Find purchases matching every given criterion."""
        query = db.query(Purchase).options(
            joinedload(Purchase.raffle), selectinload(Purchase.tickets)
        )

        if national_id:
            query = query.filter(Purchase.national_id == national_id)
        if operation_number:
            query = query.filter(Purchase.operation_number == operation_number)
        if ticket_code:
            query = query.filter(
                Purchase.tickets.any(RaffleTicket.code == ticket_code)
            )

        return query.order_by(Purchase.created_at.desc()).all()


purchase = CRUDPurchase()
