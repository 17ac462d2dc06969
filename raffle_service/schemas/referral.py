# raffle_service/schemas/referral.py
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


class ReferralCreate(BaseModel):
    name: str = Field(..., min_length=1)
    national_id: Optional[str] = Field(None, pattern=r"^[0-9]{8,9}$")
    phone: Optional[str] = Field(None, pattern=r"^[0-9]{9}$")
    email: EmailStr
    code: str = Field(..., min_length=1, max_length=50, json_schema_extra={"example": "JUAN10"})
    active_from: Optional[datetime] = None
    active_until: Optional[datetime] = None


class Referral(BaseModel):
    id: str
    name: str
    email: str
    code: str
    active_from: Optional[datetime] = None
    active_until: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ReferralValidation(BaseModel):
    valid: bool
    message: str
