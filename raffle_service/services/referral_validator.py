# raffle_service/services/referral_validator.py
import logging
from datetime import datetime, timezone
from typing import Optional
from sqlalchemy.orm import Session

from raffle_service import crud
from raffle_service.core.errors import (
    InvalidReferralError,
    ReferralExpiredError,
    ReferralNotFoundError,
    ReferralNotYetActiveError,
)

logger = logging.getLogger(__name__)


def validate_referral(
    db: Session, raw_code: Optional[str], *, now: Optional[datetime] = None
) -> Optional[str]:
    """
    Resolve an optional referral code.

    Returns None when no code was given, otherwise the canonical stored code.

    Raises:
        ReferralNotFoundError: no referral has this code.
        ReferralNotYetActiveError: the window has not opened yet.
        ReferralExpiredError: the window has closed.
    """
    if raw_code is None or not raw_code.strip():
        return None

    code = raw_code.strip()
    moment = now or datetime.now(timezone.utc)

    ref = crud.referral.get_by_code(db, code=code)
    if not ref:
        raise ReferralNotFoundError(code)
    if ref.not_yet_active(moment):
        raise ReferralNotYetActiveError(code)
    if ref.expired(moment):
        raise ReferralExpiredError(code)

    return ref.code


def is_referral_valid(db: Session, code: str, *, now: Optional[datetime] = None) -> bool:
    try:
        return validate_referral(db, code, now=now) is not None
    except InvalidReferralError as e:
        logger.info(f"Referral code {code!r} rejected: {e.reason}")
        return False
