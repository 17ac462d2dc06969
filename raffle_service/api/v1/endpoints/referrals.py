# raffle_service/api/v1/endpoints/referrals.py
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from raffle_service import crud
from raffle_service.api import deps
from raffle_service.core.errors import InvalidReferralError
from raffle_service.db.session import get_db
from raffle_service.schemas.referral import Referral, ReferralCreate, ReferralValidation
from raffle_service.services.referral_validator import validate_referral

router = APIRouter(prefix="/referrals", tags=["Referrals"])


@router.get("/{code}", response_model=ReferralValidation)
def check_referral(code: str, db: Session = Depends(get_db)):
    """
    Check whether a referral code can be used right now.

    404 when the code does not exist, 400 when it exists but is outside its
    active window.
    """
    try:
        validate_referral(db, code)
    except InvalidReferralError as e:
        status_code = (
            status.HTTP_404_NOT_FOUND
            if e.reason == "not_found"
            else status.HTTP_400_BAD_REQUEST
        )
        return JSONResponse(
            status_code=status_code,
            content=ReferralValidation(valid=False, message=e.message).model_dump(),
        )
    return ReferralValidation(valid=True, message="Valid referral code")


@router.post("", response_model=Referral, status_code=status.HTTP_201_CREATED)
def create_referral(
    referral_in: ReferralCreate,
    db: Session = Depends(get_db),
    api_key: str = Depends(deps.get_internal_api_key),
):
    """
    Register a referral code. Admin only.
    """
    referral_in.code = referral_in.code.strip()
    if crud.referral.get_by_code(db, code=referral_in.code):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Referral code {referral_in.code} already exists",
        )
    return crud.referral.create(db, obj_in=referral_in)
