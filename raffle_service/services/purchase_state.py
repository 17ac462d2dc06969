# raffle_service/services/purchase_state.py
"""
Purchase lifecycle: PENDING -> PAID | FAILED, plus the PAID -> FAILED
correction path. Each status flip and its sold_tickets adjustment commit
together, under the raffle row lock.
"""

import logging
from dataclasses import dataclass
from sqlalchemy.orm import Session

from raffle_service import crud
from raffle_service.constants.purchase import PurchaseStatus
from raffle_service.core.errors import (
    InsufficientInventoryError,
    InvalidTransitionError,
    PurchaseNotFoundError,
)
from raffle_service.db.transaction import run_in_transaction
from raffle_service.models.purchase import Purchase

logger = logging.getLogger(__name__)


@dataclass
class TransitionResult:
    purchase: Purchase
    previous_status: str
    changed: bool


class PurchaseStateMachine:
    def __init__(self, db: Session):
        self.db = db

    def _load(self, db: Session, purchase_id: str) -> Purchase:
        purchase = crud.purchase.get(db, purchase_id)
        if not purchase:
            raise PurchaseNotFoundError(purchase_id)
        # lock the raffle, then re-read the purchase under the lock
        crud.inventory.lock_raffle(db, purchase.raffle_id)
        db.refresh(purchase)
        return purchase

    def confirm(self, purchase_id: str) -> TransitionResult:
        """
        Mark a purchase PAID and add its quantity to sold_tickets.

        Idempotent: confirming a PAID purchase changes nothing. A FAILED
        purchase cannot be confirmed. The confirm is refused when it would
        push sold_tickets past total_tickets.
        """

        def work(db: Session) -> TransitionResult:
            purchase = self._load(db, purchase_id)
            previous = purchase.status

            if previous == PurchaseStatus.PAID:
                return TransitionResult(purchase, previous, changed=False)
            if not PurchaseStatus.can_transition(previous, PurchaseStatus.PAID):
                raise InvalidTransitionError(previous, PurchaseStatus.PAID)

            sold = crud.inventory.increment_sold(db, purchase.raffle_id, purchase.quantity)
            if sold is None:
                raffle = purchase.raffle
                raise InsufficientInventoryError(
                    requested=purchase.quantity,
                    available=max(0, raffle.total_tickets - raffle.sold_tickets),
                )

            purchase.status = PurchaseStatus.PAID
            db.flush()
            return TransitionResult(purchase, previous, changed=True)

        result = run_in_transaction(self.db, work, label=f"confirm[{purchase_id}]")
        if result.changed:
            logger.info(
                f"Purchase {purchase_id} confirmed ({result.previous_status} -> PAID)",
                extra={"purchase_id": purchase_id},
            )
        return result

    def reject(self, purchase_id: str) -> TransitionResult:
        """
        Mark a purchase FAILED.

        A PAID purchase first gives its quantity back (sold_tickets floored at
        zero). A PENDING purchase never counted as sold, so only the status
        changes. Rejecting a FAILED purchase changes nothing.
        """

        def work(db: Session) -> TransitionResult:
            purchase = self._load(db, purchase_id)
            previous = purchase.status

            if previous == PurchaseStatus.FAILED:
                return TransitionResult(purchase, previous, changed=False)

            if previous == PurchaseStatus.PAID:
                crud.inventory.decrement_sold(db, purchase.raffle_id, purchase.quantity)

            purchase.status = PurchaseStatus.FAILED
            db.flush()
            return TransitionResult(purchase, previous, changed=True)

        result = run_in_transaction(self.db, work, label=f"reject[{purchase_id}]")
        if result.changed:
            logger.info(
                f"Purchase {purchase_id} rejected ({result.previous_status} -> FAILED)",
                extra={"purchase_id": purchase_id},
            )
        return result
