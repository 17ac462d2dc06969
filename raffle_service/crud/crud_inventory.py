# raffle_service/crud/crud_inventory.py
"""
Raffle inventory counters.

Every method here runs inside the caller's transaction and never commits.
Counter columns are only ever changed with single UPDATE statements
(fetch-and-add style), never read-then-write.

- confirmed count: tickets of PAID purchases, used for availability
- issued count: tickets of ALL purchases, backing the ticket correlative
"""

from typing import Optional
from sqlalchemy import case, func, update
from sqlalchemy.orm import Session

from raffle_service.constants.purchase import PurchaseStatus
from raffle_service.models.purchase import Purchase
from raffle_service.models.raffle import Raffle


class CRUDInventory:
    """Atomic inventory operations scoped to one raffle."""

    def lock_raffle(self, db: Session, raffle_id: str) -> Optional[Raffle]:
        """
        Load the raffle with SELECT FOR UPDATE.

        Purchase creation and confirm/reject of one raffle all take this lock
        first, so they are serialized against each other.
        """
        return (
            db.query(Raffle)
            .filter(Raffle.id == raffle_id)
            .populate_existing()
            .with_for_update()
            .first()
        )

    def confirmed_count(self, db: Session, raffle_id: str) -> int:
        """Sum of quantity over PAID purchases, read at call time."""
        return db.query(func.coalesce(func.sum(Purchase.quantity), 0)).filter(
            Purchase.raffle_id == raffle_id,
            Purchase.status == PurchaseStatus.PAID,
        ).scalar() or 0

    def issued_count(self, db: Session, raffle_id: str) -> int:
        """Sum of quantity over every purchase of the raffle, any status."""
        return db.query(func.coalesce(func.sum(Purchase.quantity), 0)).filter(
            Purchase.raffle_id == raffle_id
        ).scalar() or 0

    def reserve_issuance(self, db: Session, raffle_id: str, quantity: int) -> int:
        """
        Reserve `quantity` issuance slots and return the issued count before
        the reservation. Two reservations can never get overlapping ranges.
        """
        new_total = db.execute(
            update(Raffle)
            .where(Raffle.id == raffle_id)
            .values(issued_tickets=Raffle.issued_tickets + quantity)
            .returning(Raffle.issued_tickets)
        ).scalar_one()
        return new_total - quantity

    def increment_sold(self, db: Session, raffle_id: str, quantity: int) -> Optional[int]:
        """
        Add `quantity` to sold_tickets unless that would pass total_tickets.

        Returns the new sold count, or None when the ceiling blocked it.
        """
        return db.execute(
            update(Raffle)
            .where(
                Raffle.id == raffle_id,
                Raffle.sold_tickets + quantity <= Raffle.total_tickets,
            )
            .values(sold_tickets=Raffle.sold_tickets + quantity)
            .returning(Raffle.sold_tickets)
        ).scalar_one_or_none()

    def decrement_sold(self, db: Session, raffle_id: str, quantity: int) -> int:
        """Subtract `quantity` from sold_tickets, floored at zero."""
        return db.execute(
            update(Raffle)
            .where(Raffle.id == raffle_id)
            .values(
                sold_tickets=case(
                    (Raffle.sold_tickets > quantity, Raffle.sold_tickets - quantity),
                    else_=0,
                )
            )
            .returning(Raffle.sold_tickets)
        ).scalar_one()


# Singleton instance
inventory = CRUDInventory()
