from datetime import datetime
from decimal import Decimal
from typing import Optional
from sqlalchemy.orm import Session

from raffle_service import crud
from raffle_service.models.raffle import Raffle
from raffle_service.models.referral import Referral
from raffle_service.schemas.purchase import PurchaseCreate
from raffle_service.schemas.raffle import RaffleCreate
from raffle_service.schemas.referral import ReferralCreate


def create_random_raffle(
    db: Session, *, total_tickets: int = 100, ticket_price: str = "25.00"
) -> Raffle:
    """
    Creates a dummy raffle for testing purposes.
    """
    raffle_in = RaffleCreate(
        title="Toyota Corolla 2018",
        description="Test raffle",
        ticket_price=Decimal(ticket_price),
        total_tickets=total_tickets,
    )
    return crud.raffle.create(db, obj_in=raffle_in)


def create_referral(
    db: Session,
    *,
    code: str = "JUAN10",
    active_from: Optional[datetime] = None,
    active_until: Optional[datetime] = None,
) -> Referral:
    referral_in = ReferralCreate(
        name="JUAN PEREZ",
        email="juan.perez@example.com",
        code=code,
        active_from=active_from,
        active_until=active_until,
    )
    return crud.referral.create(db, obj_in=referral_in)


def purchase_request(
    *,
    operation_number: str = "99817",
    quantity: int = 2,
    national_id: str = "45678912",
    referral_code: Optional[str] = None,
) -> PurchaseCreate:
    return PurchaseCreate(
        name="edgard abanto ruiz",
        national_id=national_id,
        phone="976476422",
        email="edgard@example.com",
        quantity=quantity,
        operation_number=operation_number,
        referral_code=referral_code,
    )
