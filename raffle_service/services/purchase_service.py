# raffle_service/services/purchase_service.py
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from raffle_service import crud
from raffle_service.constants.purchase import PAYMENT_METHOD, PurchaseStatus
from raffle_service.core.errors import (
    DuplicateOperationNumberError,
    InsufficientInventoryError,
    PurchaseNotFoundError,
    RaffleNotFoundError,
    TransactionConflictError,
    ValidationFailedError,
)
from raffle_service.db.transaction import run_in_transaction
from raffle_service.models.purchase import Purchase
from raffle_service.schemas.purchase import (
    AdminPurchase,
    Purchase as PurchaseSchema,
    PurchaseCreate,
    PurchaseResult,
    PurchaseSearchResult,
)
from raffle_service.services.pricing import calculate_price
from raffle_service.services.referral_validator import validate_referral
from raffle_service.services.ticket_codes import generate_ticket_codes

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d/%m/%Y"


class PurchaseService:
    """
    Purchase transaction manager.

    This service:
    - Creates purchases and allocates their ticket codes
    - Lists purchases for the admin panel
    - Answers the public purchase lookup
    """

    def __init__(self, db: Session):
        self.db = db

    def create_purchase(
        self,
        *,
        raffle_id: str,
        input_data: PurchaseCreate,
        now: Optional[datetime] = None,
    ) -> PurchaseResult:
        """
        Create a PENDING purchase with freshly allocated tickets.

        Everything below runs in one transaction under the raffle row lock:
        1. Load and lock the raffle
        2. Reject a reused operation number (any raffle, any status)
        3. Resolve the referral code
        4. Check availability against PAID tickets only
        5. Reserve issuance slots and derive ticket codes
        6. Price the purchase
        7. Insert the purchase and its tickets
        sold_tickets is not touched; that happens on confirm.

        Raises:
            RaffleNotFoundError, DuplicateOperationNumberError,
            InvalidReferralError, InsufficientInventoryError,
            TransactionConflictError, PersistenceFailureError
        """
        moment = now or datetime.now(timezone.utc)

        def work(db: Session) -> PurchaseResult:
            raffle = crud.inventory.lock_raffle(db, raffle_id)
            if not raffle:
                raise RaffleNotFoundError(raffle_id)

            if crud.purchase.operation_number_exists(db, input_data.operation_number):
                raise DuplicateOperationNumberError(input_data.operation_number)

            referral_code = validate_referral(db, input_data.referral_code, now=moment)

            quantity = input_data.quantity
            confirmed = crud.inventory.confirmed_count(db, raffle.id)
            if confirmed + quantity > raffle.total_tickets:
                raise InsufficientInventoryError(
                    requested=quantity, available=max(0, raffle.total_tickets - confirmed)
                )

            issued = crud.inventory.reserve_issuance(db, raffle.id, quantity)
            codes = generate_ticket_codes(
                input_data.national_id, input_data.operation_number, issued, quantity
            )

            price = calculate_price(quantity, raffle.ticket_price, referral_code is not None)

            purchase = Purchase(
                raffle_id=raffle.id,
                name=input_data.name,
                national_id=input_data.national_id,
                phone=input_data.phone,
                email=str(input_data.email),
                quantity=quantity,
                amount=price.total,
                payment_method=PAYMENT_METHOD,
                status=PurchaseStatus.PENDING,
                operation_number=input_data.operation_number,
                referral_code=referral_code,
            )
            crud.purchase.add_with_tickets(db, purchase=purchase, codes=codes)

            try:
                db.flush()
            except IntegrityError as e:
                # the unique index is the backstop if the pre-check raced
                if "operation_number" in str(e.orig):
                    raise DuplicateOperationNumberError(input_data.operation_number) from e
                if "raffle_tickets" in str(e.orig):
                    raise TransactionConflictError() from e
                raise

            return PurchaseResult(
                purchase_id=purchase.id,
                tickets=codes,
                amount=float(price.total),
                referral_code=referral_code,
            )

        result = run_in_transaction(self.db, work, label=f"create_purchase[{raffle_id}]")

        logger.info(
            f"Purchase {result.purchase_id} created for raffle {raffle_id}: "
            f"{len(result.tickets)} tickets, amount {result.amount}",
            extra={"raffle_id": raffle_id, "purchase_id": result.purchase_id},
        )
        return result

    def list_purchases(self, *, skip: int = 0, limit: int = 200) -> List[AdminPurchase]:
        """Admin listing, newest first, with raffle and referral owner details."""
        rows = crud.purchase.list_for_admin(self.db, skip=skip, limit=limit)
        return [
            AdminPurchase(
                **PurchaseSchema.model_validate(row["purchase"]).model_dump(),
                raffle_title=row["raffle_title"],
                referral_name=row["referral_name"],
                referral_email=row["referral_email"],
            )
            for row in rows
        ]

    def search_purchases(
        self,
        *,
        national_id: Optional[str] = None,
        operation_number: Optional[str] = None,
        ticket_code: Optional[str] = None,
    ) -> List[PurchaseSearchResult]:
        """
        Public lookup by national id, operation number and/or ticket code.

        Returns one row per ticket. Only the buyer's first name and first
        surname are exposed.
        """
        if not national_id and not operation_number and not ticket_code:
            raise ValidationFailedError("At least one search criterion is required")
        if national_id and not (national_id.isdigit() and 8 <= len(national_id) <= 9):
            raise ValidationFailedError(
                "National id must have 8 or 9 digits", field="national_id"
            )

        purchases = crud.purchase.search(
            self.db,
            national_id=national_id,
            operation_number=operation_number,
            ticket_code=ticket_code,
        )
        if not purchases:
            raise PurchaseNotFoundError()

        results = []
        for p in purchases:
            parts = p.name.split()
            full_name = " ".join(parts[:2])
            for code in p.ticket_codes:
                results.append(
                    PurchaseSearchResult(
                        full_name=full_name,
                        ticket_code=code,
                        operation_number=p.operation_number,
                        purchase_date=p.created_at.strftime(DATE_FORMAT),
                        status=PurchaseStatus.label(p.status),
                        raffle_title=p.raffle.title if p.raffle else "Sin nombre",
                    )
                )
        return results
