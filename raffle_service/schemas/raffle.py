# raffle_service/schemas/raffle.py
from decimal import Decimal
from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class RaffleBase(BaseModel):
    title: str = Field(..., min_length=1, json_schema_extra={"example": "Toyota Corolla 2018"})
    description: Optional[str] = Field(
        None, json_schema_extra={"example": "Buy a ticket and take part in the draw."}
    )
    photos: List[str] = Field(default_factory=list)
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None


class RaffleCreate(RaffleBase):
    ticket_price: Decimal = Field(..., gt=0, decimal_places=2, json_schema_extra={"example": 20})
    total_tickets: int = Field(..., gt=0, json_schema_extra={"example": 1000})


class Raffle(RaffleBase):
    id: str
    ticket_price: float
    total_tickets: int
    sold_tickets: int
    created_at: datetime

    model_config = {"from_attributes": True}


class RaffleDetail(Raffle):
    confirmed_tickets: int
    available_tickets: int
