"""
Payment gateway client.

Creates payment intents through a Stripe-compatible REST API. The returned
client secret is handed to the client, which completes the charge before
calling back into POST /payments.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from backend.app.core.config import settings
from backend.app.core.reliability import CircuitBreaker

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Raised when the gateway rejects or fails a request."""


class PaymentGateway:
    """Async client for the payment intent endpoint."""

    def __init__(
        self,
        base_url: str,
        secret_key: str,
        timeout: float = 10.0,
        circuit_breaker: Optional[CircuitBreaker] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.secret_key = secret_key
        self.timeout = timeout
        self.circuit_breaker = circuit_breaker or CircuitBreaker("payment-gateway")
        self.transport = transport

    async def create_intent(self, amount_cents: int, currency: str = "usd") -> Dict[str, Any]:
        """
        Create a card payment intent.

        Args:
            amount_cents: Amount in the smallest currency unit
            currency: ISO currency code

        Returns:
            {"id": ..., "client_secret": ...}

        Raises:
            PaymentGatewayError: transport failure or non-2xx answer
            CircuitOpenError: too many recent failures
        """
        return await self.circuit_breaker.call(self._create_intent, amount_cents, currency)

    async def _create_intent(self, amount_cents: int, currency: str) -> Dict[str, Any]:
        form = {
            "amount": str(amount_cents),
            "currency": currency,
            "payment_method_types[]": "card",
        }

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = await client.post(
                    "/v1/payment_intents",
                    data=form,
                    auth=(self.secret_key, ""),
                )
        except httpx.HTTPError as exc:
            raise PaymentGatewayError(f"Payment gateway unreachable: {exc}") from exc

        if response.status_code >= 400:
            try:
                reason = response.json().get("error", {}).get("message", response.text)
            except ValueError:
                reason = response.text
            raise PaymentGatewayError(f"Payment gateway returned {response.status_code}: {reason}")

        payload = response.json()
        client_secret = payload.get("client_secret")
        if not client_secret:
            raise PaymentGatewayError("Payment gateway response carries no client_secret")

        logger.info(f"Payment intent {payload.get('id')} created for {amount_cents} {currency}")
        return {"id": payload.get("id"), "client_secret": client_secret}


payment_gateway = PaymentGateway(
    base_url=settings.payment_gateway_url,
    secret_key=settings.payment_gateway_secret_key,
    timeout=settings.payment_gateway_timeout,
    circuit_breaker=CircuitBreaker(
        "payment-gateway",
        failure_threshold=settings.payment_circuit_failure_threshold,
        reset_timeout=settings.payment_circuit_reset_timeout,
    ),
)


def get_payment_gateway() -> PaymentGateway:
    """FastAPI dependency returning the configured payment gateway."""
    return payment_gateway
