# app/services/funding_service.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException
from typing import Any, Dict
import httpx
import logging

from models.funding import Funding
from models.user import User
from schemas.funding import FundingCreate
from services.payment_service import PaymentGatewayError, from_minor_units

logger = logging.getLogger(__name__)


class FundingService:
    def __init__(self, db: AsyncSession, gateway=None, default_currency: str = "usd"):
        self.db = db
        self.gateway = gateway
        self.default_currency = default_currency

    async def record_funding(self, funding_data: FundingCreate, payer_email: str, payer: User = None) -> Funding:
        """Append a record for a payment the gateway reports as succeeded."""
        amount, currency = await self._verify_payment(funding_data, payer_email)

        funding = Funding(
            amount=amount,
            currency=currency,
            payment_intent_id=funding_data.payment_intent_id,
            payer_name=payer.display_name if payer else None,
            payer_email=payer_email,
        )
        self.db.add(funding)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise HTTPException(status_code=400, detail="This payment has already been recorded")

        await self.db.refresh(funding)
        logger.info(f"Funding {funding.uuid} of {funding.amount} {funding.currency} recorded for {payer_email}")
        return funding

    async def list_fundings(self, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        total = await self.db.scalar(select(func.count(Funding.id)))
        total_amount = await self.db.scalar(select(func.coalesce(func.sum(Funding.amount), 0)))

        offset = (page - 1) * limit
        result = await self.db.execute(
            select(Funding)
            .order_by(Funding.created_at.desc(), Funding.id.asc())
            .offset(offset)
            .limit(limit)
        )
        fundings = result.scalars().all()

        return {
            "items": list(fundings),
            "total": total or 0,
            "page": page,
            "limit": limit,
            "total_pages": (total + limit - 1) // limit if total else 0,
            "total_amount": float(total_amount or 0),
        }

    async def _verify_payment(self, funding_data: FundingCreate, payer_email: str):
        try:
            intent = await self.gateway.retrieve_payment_intent(funding_data.payment_intent_id)
        except PaymentGatewayError as e:
            logger.warning(f"Payment {funding_data.payment_intent_id} from {payer_email} not verified: {str(e)}")
            if e.status_code and 400 <= e.status_code < 500:
                raise HTTPException(status_code=400, detail="Payment could not be verified")
            raise HTTPException(status_code=500, detail="Failed to verify payment")
        except httpx.HTTPError as e:
            logger.error(f"Failed to verify payment {funding_data.payment_intent_id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to verify payment")

        if intent.get("status") != "succeeded":
            raise HTTPException(status_code=400, detail="Payment has not succeeded")

        currency = intent.get("currency") or self.default_currency
        if funding_data.currency and funding_data.currency != currency:
            raise HTTPException(status_code=400, detail="Currency does not match the payment")

        received = intent.get("amount_received") or intent.get("amount") or 0
        amount = from_minor_units(received, currency)
        if abs(amount - funding_data.amount) >= 0.005:
            raise HTTPException(status_code=400, detail="Amount does not match the payment")

        return amount, currency
