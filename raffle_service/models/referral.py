# raffle_service/models/referral.py
import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, DateTime, func
from raffle_service.db.base_class import Base


def _aware(value):
    # SQLite hands back naive datetimes; stored values are UTC.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Referral(Base):
    __tablename__ = "referrals"

    id = Column(
        String, primary_key=True, default=lambda: f"ref_{uuid.uuid4().hex[:12]}"
    )
    # Commission beneficiary
    name = Column(String(255), nullable=False)
    national_id = Column(String(20), nullable=True)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=False)

    code = Column(String(50), nullable=False, unique=True)

    # Validity window (NULL = open-ended)
    active_from = Column(DateTime(timezone=True), nullable=True)
    active_until = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    def not_yet_active(self, moment: datetime) -> bool:
        starts = _aware(self.active_from)
        return starts is not None and moment < starts

    def expired(self, moment: datetime) -> bool:
        ends = _aware(self.active_until)
        return ends is not None and moment > ends
