"""Payments API router composition for order, alternate payment and webhook endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt

from quiet_systems.adapters import PaymentGatewayPort
from quiet_systems.domain import PaymentOrderRequest, UpstreamSuccess


class PayPalOrderBody(BaseModel):
    """Request body for PayPal order creation."""

    model_config = ConfigDict(populate_by_name=True)

    amount: float = Field(gt=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    description: str = Field(default="Digital Product")
    return_url: str | None = Field(default=None, alias="returnUrl")
    cancel_url: str | None = Field(default=None, alias="cancelUrl")


class AlternatePaymentBody(BaseModel):
    """Request body for alternate-method payments."""

    amount: NonNegativeInt | NonNegativeFloat = 0
    currency: str = Field(default="USD", min_length=3, max_length=3)


def api_create_payments_router(payment_gateway: PaymentGatewayPort) -> APIRouter:
    """Create payments router.

    Args:
        payment_gateway: Payment gateway for provider calls.

    Returns:
        APIRouter: Router exposing `/api/payments` endpoints.

    Raises:
        ValueError: Raised when payment_gateway is invalid.
    """

    if payment_gateway is None:
        raise ValueError("payment_gateway must not be None")

    router = APIRouter(prefix="/api/payments", tags=["payments"])

    @router.post("/paypal")
    async def api_payments_paypal_order(body: PayPalOrderBody) -> JSONResponse:
        """Create one PayPal order; provider failures are reported as data.

        Args:
            body: Order amount, currency, description and redirect URLs.

        Returns:
            JSONResponse: Order payload or `{success: false, error}` with HTTP 200.

        Raises:
            RuntimeError: Raised when the gateway fails unexpectedly.
        """

        order_result = await payment_gateway.payment_create_order(
            PaymentOrderRequest(
                amount=body.amount,
                currency=body.currency.upper(),
                description=body.description,
                return_url=body.return_url,
                cancel_url=body.cancel_url,
            )
        )
        if isinstance(order_result, UpstreamSuccess):
            payload = {
                "success": True,
                "provider": "paypal",
                "orderId": order_result.value.order_id,
                "status": order_result.value.status,
                "links": order_result.value.links,
            }
        else:
            payload = {
                "success": False,
                "provider": "paypal",
                "error": order_result.domain_error_payload(),
            }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("/google-pay")
    async def api_payments_google_pay(body: AlternatePaymentBody | None = None) -> JSONResponse:
        """Create one locally synthesized Google Pay transaction.

        Args:
            body: Amount and currency; a missing body falls back to zero USD.

        Returns:
            JSONResponse: Transaction payload.

        Raises:
            RuntimeError: Raised when the gateway fails unexpectedly.
        """

        resolved_body = body if body is not None else AlternatePaymentBody()
        alternate_payment = await payment_gateway.payment_create_alternate(
            amount=resolved_body.amount,
            currency=resolved_body.currency.upper(),
        )
        payload = {
            "success": True,
            "provider": "google_pay",
            "transactionId": alternate_payment.transaction_id,
            "amount": alternate_payment.amount,
            "currency": alternate_payment.currency,
        }
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.post("/webhook/paypal")
    async def api_payments_paypal_webhook(request: Request) -> JSONResponse:
        """Verify and acknowledge one PayPal webhook delivery.

        Args:
            request: Raw request carrying the JSON body and transmission headers.

        Returns:
            JSONResponse: `{success, received}` or HTTP 400 when verification fails.

        Raises:
            RuntimeError: Raised when the gateway fails unexpectedly.
        """

        raw_payload = await request.body()
        acknowledgment_result = await payment_gateway.payment_acknowledge_webhook(
            payload=raw_payload,
            headers=request.headers,
        )
        if not isinstance(acknowledgment_result, UpstreamSuccess):
            payload = {
                "success": False,
                "error": acknowledgment_result.message,
                "code": "PAYMENT_400",
            }
            return JSONResponse(content=payload, status_code=status.HTTP_400_BAD_REQUEST)
        return JSONResponse(content={"success": True, "received": True}, status_code=status.HTTP_200_OK)

    return router
