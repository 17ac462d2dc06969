# raffle_service/api/v1/endpoints/purchases.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from raffle_service.core.limiter import limiter
from raffle_service.db.session import get_db
from raffle_service.schemas.purchase import PurchaseSearchResult
from raffle_service.services.purchase_service import PurchaseService

router = APIRouter(prefix="/purchases", tags=["Purchases"])


@router.get("/search", response_model=List[PurchaseSearchResult])
@limiter.limit("10/minute")  # Rate limit: 10 lookups per minute per IP
def search_purchases(
    request: Request,  # Required for rate limiter
    national_id: Optional[str] = Query(None),
    operation_number: Optional[str] = Query(None),
    ticket_code: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Public lookup of purchased tickets.

    Any combination of national id, operation number and ticket code; at
    least one is required. Returns one row per ticket.
    """
    service = PurchaseService(db)
    return service.search_purchases(
        national_id=national_id.strip() if national_id else None,
        operation_number=operation_number.strip() if operation_number else None,
        ticket_code=ticket_code.strip() if ticket_code else None,
    )
