# app/api/v1/endpoints/funding.py
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.database import get_db
from core.dependencies import get_payment_gateway, get_principal_email
from core.permissions import load_user
from schemas.funding import (
    PaymentIntentCreate, PaymentIntentRead, FundingCreate, FundingRead, FundingPage
)
from services.funding_service import FundingService
from services.payment_service import PaymentService

router = APIRouter(tags=["Funding & Payments"])


@router.post("/create-payment-intent", response_model=PaymentIntentRead)
async def create_payment_intent(
        payment_data: PaymentIntentCreate,
        principal_email: str = Depends(get_principal_email),
        gateway=Depends(get_payment_gateway)
):
    service = PaymentService(gateway, settings.PAYMENT_CURRENCY)
    return await service.create_payment_intent(payment_data, principal_email)


@router.post("/funding", response_model=FundingRead, status_code=status.HTTP_201_CREATED)
async def record_funding(
        funding_data: FundingCreate,
        principal_email: str = Depends(get_principal_email),
        gateway=Depends(get_payment_gateway),
        db: AsyncSession = Depends(get_db)
):
    """Store a payment after checking it with the gateway"""
    payer = await load_user(db, principal_email)
    service = FundingService(db, gateway, settings.PAYMENT_CURRENCY)
    return await service.record_funding(funding_data, principal_email, payer)


@router.get("/funding", response_model=FundingPage)
async def list_fundings(
        page: int = Query(1, ge=1),
        limit: int = Query(20, ge=1, le=100),
        principal_email: str = Depends(get_principal_email),
        db: AsyncSession = Depends(get_db)
):
    service = FundingService(db, default_currency=settings.PAYMENT_CURRENCY)
    return await service.list_fundings(page, limit)
