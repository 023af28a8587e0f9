# app/schemas/funding.py
from pydantic import BaseModel, Field, validator
from typing import List, Optional
from datetime import datetime
import re


# ---------- payment intent ----------
class PaymentIntentCreate(BaseModel):
    """Amount in major currency units (e.g. dollars)."""
    amount: float = Field(..., gt=0)
    currency: Optional[str] = None

    @validator('amount')
    def validate_amount(cls, v):
        if v > 1000000:
            raise ValueError("Amount is too large")
        return v

    @validator('currency')
    def validate_currency(cls, v):
        if v is not None and not re.match(r'^[a-zA-Z]{3}$', v):
            raise ValueError("Currency must be a three letter ISO code")
        return v.lower() if v else v


class PaymentIntentRead(BaseModel):
    client_secret: str
    payment_intent_id: str
    amount: float
    currency: str


# ---------- funding records ----------
class FundingCreate(BaseModel):
    amount: float = Field(..., gt=0)
    currency: Optional[str] = None
    payment_intent_id: str = Field(..., min_length=1, max_length=255)

    @validator('currency')
    def validate_currency(cls, v):
        if v is not None and not re.match(r'^[a-zA-Z]{3}$', v):
            raise ValueError("Currency must be a three letter ISO code")
        return v.lower() if v else v


class FundingRead(BaseModel):
    uuid: str
    amount: float
    currency: str
    payment_intent_id: Optional[str] = None
    payer_name: Optional[str] = None
    payer_email: str
    created_at: datetime

    class Config:
        from_attributes = True


class FundingPage(BaseModel):
    items: List[FundingRead]
    total: int
    page: int
    limit: int
    total_pages: int
    total_amount: float
