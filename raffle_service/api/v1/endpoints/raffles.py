# raffle_service/api/v1/endpoints/raffles.py
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from raffle_service import crud
from raffle_service.api import deps
from raffle_service.core.errors import RaffleNotFoundError
from raffle_service.db.session import get_db
from raffle_service.schemas.purchase import PurchaseCreate, PurchaseResult
from raffle_service.schemas.raffle import Raffle, RaffleCreate, RaffleDetail
from raffle_service.services.purchase_service import PurchaseService

router = APIRouter(prefix="/raffles", tags=["Raffles"])


@router.get("", response_model=List[Raffle])
def list_raffles(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    """
    List raffles, newest first.
    """
    return crud.raffle.get_multi(db, skip=skip, limit=limit)


@router.get("/{raffle_id}", response_model=RaffleDetail)
def get_raffle(raffle_id: str, db: Session = Depends(get_db)):
    """
    Get one raffle with its live confirmed and available ticket counts.
    """
    raffle = crud.raffle.get(db, raffle_id)
    if not raffle:
        raise RaffleNotFoundError(raffle_id)

    confirmed = crud.inventory.confirmed_count(db, raffle.id)
    return RaffleDetail(
        **Raffle.model_validate(raffle).model_dump(),
        confirmed_tickets=confirmed,
        available_tickets=max(0, raffle.total_tickets - confirmed),
    )


@router.post("", response_model=Raffle, status_code=status.HTTP_201_CREATED)
def create_raffle(
    raffle_in: RaffleCreate,
    db: Session = Depends(get_db),
    api_key: str = Depends(deps.get_internal_api_key),
):
    """
    Create a raffle. Admin only.
    """
    return crud.raffle.create(db, obj_in=raffle_in)


@router.post(
    "/{raffle_id}/purchase",
    response_model=PurchaseResult,
    status_code=status.HTTP_201_CREATED,
)
def create_purchase(
    raffle_id: str,
    purchase_in: PurchaseCreate,
    db: Session = Depends(get_db),
):
    """
    Register a purchase for a raffle and allocate its ticket codes.

    The purchase starts PENDING; tickets only count as sold once an admin
    confirms the payment.
    """
    service = PurchaseService(db)
    return service.create_purchase(raffle_id=raffle_id, input_data=purchase_in)
