# raffle_service/schemas/purchase.py
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Optional
from datetime import datetime


class PurchaseCreate(BaseModel):
    """Inbound purchase request for one raffle."""

    name: str = Field(..., min_length=1, json_schema_extra={"example": "EDGARD ABANTO"})
    national_id: str = Field(..., pattern=r"^[0-9]{8,9}$", json_schema_extra={"example": "45678912"})
    phone: str = Field(..., pattern=r"^[0-9]{9}$", json_schema_extra={"example": "976476422"})
    email: EmailStr
    quantity: int = Field(..., ge=1)
    operation_number: str = Field(..., min_length=1, max_length=100)
    referral_code: Optional[str] = None

    @field_validator("name")
    @classmethod
    def upper_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        return v.upper()

    @field_validator("operation_number")
    @classmethod
    def strip_operation_number(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Operation number is required")
        return v


class PurchaseResult(BaseModel):
    purchase_id: str
    tickets: List[str]
    amount: float
    referral_code: Optional[str] = None


class Purchase(BaseModel):
    id: str
    raffle_id: str
    name: str
    national_id: str
    phone: str
    email: str
    quantity: int
    amount: float
    tickets: List[str] = Field(validation_alias="ticket_codes")
    payment_method: str
    status: str
    operation_number: str
    referral_code: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True, "populate_by_name": True}


class AdminPurchase(Purchase):
    raffle_title: Optional[str] = None
    referral_name: Optional[str] = None
    referral_email: Optional[str] = None


class PurchaseSearchResult(BaseModel):
    """One row per ticket, shaped for the public lookup page."""

    full_name: str
    ticket_code: str
    operation_number: str
    purchase_date: str
    status: str
    raffle_title: str


class TransitionResponse(BaseModel):
    message: str
    purchase: Purchase
    email_sent: bool
    email_sent_referral: Optional[bool] = None
    email_error: Optional[str] = None
    email_error_referral: Optional[str] = None
    email_message: str
    email_message_referral: Optional[str] = None
