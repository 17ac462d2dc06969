# raffle_service/crud/crud_referral.py
from typing import Optional
from sqlalchemy.orm import Session

from raffle_service.crud.base import CRUDBase
from raffle_service.models.referral import Referral
from raffle_service.schemas.referral import ReferralCreate


class CRUDReferral(CRUDBase[Referral, ReferralCreate]):
    """CRUD operations for referral codes."""

    def get_by_code(self, db: Session, *, code: str) -> Optional[Referral]:
        """Get a referral by its exact code string."""
        return db.query(Referral).filter(Referral.code == code).first()


referral = CRUDReferral(Referral)
