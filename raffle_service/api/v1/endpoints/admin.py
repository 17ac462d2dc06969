# raffle_service/api/v1/endpoints/admin.py
"""
Admin purchase review: listing plus the confirm/reject decisions.

All routes require the X-Internal-Api-Key header.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from raffle_service.api import deps
from raffle_service.db.session import get_db
from raffle_service.schemas.purchase import AdminPurchase, Purchase, TransitionResponse
from raffle_service.services.notifications import notify_transition
from raffle_service.services.purchase_service import PurchaseService
from raffle_service.services.purchase_state import PurchaseStateMachine, TransitionResult

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/admin/purchases",
    tags=["Admin - Purchases"],
    dependencies=[Depends(deps.get_internal_api_key)],
)


def _transition_response(
    db: Session, result: TransitionResult, *, confirmed: bool
) -> TransitionResponse:
    if confirmed:
        message = "Purchase confirmed" if result.changed else "Purchase was already confirmed"
    else:
        message = "Purchase rejected" if result.changed else "Purchase was already rejected"

    purchase_out = Purchase.model_validate(result.purchase)

    # Sent with no transaction open; a failed send is only reported.
    report = notify_transition(db, result.purchase, confirmed=confirmed)
    if not report.email_sent:
        logger.warning(
            f"Buyer notification for purchase {purchase_out.id} not sent: {report.email_error}"
        )

    return TransitionResponse(
        message=message,
        purchase=purchase_out,
        email_sent=report.email_sent,
        email_sent_referral=report.email_sent_referral,
        email_error=report.email_error,
        email_error_referral=report.email_error_referral,
        email_message=report.email_message,
        email_message_referral=report.email_message_referral,
    )


@router.get("", response_model=List[AdminPurchase])
def list_purchases(skip: int = 0, limit: int = 200, db: Session = Depends(get_db)):
    """
    List every purchase, newest first, with raffle and referral details.
    """
    return PurchaseService(db).list_purchases(skip=skip, limit=limit)


@router.patch("/{purchase_id}/pay", response_model=TransitionResponse)
def confirm_purchase(purchase_id: str, db: Session = Depends(get_db)):
    """
    Confirm the payment of a purchase and notify the buyer (and referral owner).

    Confirming an already PAID purchase changes nothing but still resends
    the notification.
    """
    result = PurchaseStateMachine(db).confirm(purchase_id)
    return _transition_response(db, result, confirmed=True)


@router.patch("/{purchase_id}/reject", response_model=TransitionResponse)
def reject_purchase(purchase_id: str, db: Session = Depends(get_db)):
    """
    Reject a purchase, returning its tickets to inventory if it was PAID.
    """
    result = PurchaseStateMachine(db).reject(purchase_id)
    return _transition_response(db, result, confirmed=False)
