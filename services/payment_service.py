# app/services/payment_service.py
import httpx
import logging
from typing import Any, Dict, Optional

from fastapi import HTTPException

from schemas.funding import PaymentIntentCreate

logger = logging.getLogger(__name__)

# currencies Stripe treats as having no minor unit
ZERO_DECIMAL_CURRENCIES = {
    "bif", "clp", "djf", "gnf", "jpy", "kmf", "krw", "mga",
    "pyg", "rwf", "ugx", "vnd", "vuv", "xaf", "xof", "xpf",
}


def to_minor_units(amount: float, currency: str) -> int:
    if currency.lower() in ZERO_DECIMAL_CURRENCIES:
        return int(round(amount))
    return int(round(amount * 100))


def from_minor_units(amount: int, currency: str) -> float:
    if currency.lower() in ZERO_DECIMAL_CURRENCIES:
        return float(amount)
    return amount / 100


class PaymentGatewayError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StripePaymentGateway:
    """Creates Stripe PaymentIntents over the REST API."""

    def __init__(self, secret_key: Optional[str], api_base: str = "https://api.stripe.com", timeout: float = 10.0):
        self.secret_key = secret_key
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout

    async def create_payment_intent(
            self,
            amount: int,
            currency: str,
            metadata: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        if not self.secret_key:
            raise PaymentGatewayError("Stripe secret key is not configured")

        data = {
            "amount": amount,
            "currency": currency,
            "payment_method_types[]": "card",
        }
        for key, value in (metadata or {}).items():
            data[f"metadata[{key}]"] = value

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                f"{self.api_base}/v1/payment_intents",
                data=data,
                auth=(self.secret_key, ""),
            )

        return self._parse(response)

    async def retrieve_payment_intent(self, intent_id: str) -> Dict[str, Any]:
        if not self.secret_key:
            raise PaymentGatewayError("Stripe secret key is not configured")

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.get(
                f"{self.api_base}/v1/payment_intents/{intent_id}",
                auth=(self.secret_key, ""),
            )

        return self._parse(response)

    @staticmethod
    def _parse(response: httpx.Response) -> Dict[str, Any]:
        if response.status_code >= 400:
            try:
                message = response.json().get("error", {}).get("message")
            except ValueError:
                message = response.text
            raise PaymentGatewayError(
                f"Stripe returned {response.status_code}: {message}",
                status_code=response.status_code,
            )

        return response.json()


class PaymentService:
    def __init__(self, gateway, default_currency: str = "usd"):
        self.gateway = gateway
        self.default_currency = default_currency

    async def create_payment_intent(self, payment_data: PaymentIntentCreate, payer_email: str) -> Dict[str, Any]:
        """Turn an amount into a client secret the browser can confirm."""
        currency = payment_data.currency or self.default_currency
        minor_amount = to_minor_units(payment_data.amount, currency)
        if minor_amount <= 0:
            raise HTTPException(status_code=400, detail="Amount is too small")

        try:
            intent = await self.gateway.create_payment_intent(
                minor_amount, currency, metadata={"payer_email": payer_email}
            )
        except (PaymentGatewayError, httpx.HTTPError) as e:
            logger.error(f"Failed to create payment intent for {payer_email}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to create payment intent")

        return {
            "client_secret": intent["client_secret"],
            "payment_intent_id": intent["id"],
            "amount": payment_data.amount,
            "currency": currency,
        }
