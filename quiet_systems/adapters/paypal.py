"""PayPal REST adapter implementation for orders, webhooks and alternate payments."""

from __future__ import annotations

import json
import secrets
import time
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Callable, Final

import httpx
import structlog

from quiet_systems.domain import (
    HEALTH_STATE_HEALTHY,
    AlternatePayment,
    HealthStatus,
    PaymentOrder,
    PaymentOrderRequest,
    UpstreamErrorKind,
    UpstreamFailure,
    UpstreamResult,
    UpstreamSuccess,
    domain_utc_now,
)

from .http_support import adapter_response_detail
from .interfaces import PaymentGatewayPort

logger = structlog.get_logger(__name__)


class PayPalPaymentGateway(PaymentGatewayPort):
    """Payment gateway for PayPal `oauth2/token` then `checkout/orders` flow."""

    _LIVE_BASE_URL: Final[str] = "https://api-m.paypal.com"
    _SANDBOX_BASE_URL: Final[str] = "https://api-m.sandbox.paypal.com"
    _DEFAULT_RETURN_URL: Final[str] = "https://example.com/success"
    _DEFAULT_CANCEL_URL: Final[str] = "https://example.com/cancel"
    _ALTERNATE_PREFIX: Final[str] = "GP"
    _WEBHOOK_TRANSMISSION_HEADERS: Final[dict[str, str]] = {
        "auth_algo": "paypal-auth-algo",
        "cert_url": "paypal-cert-url",
        "transmission_id": "paypal-transmission-id",
        "transmission_sig": "paypal-transmission-sig",
        "transmission_time": "paypal-transmission-time",
    }

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        client_id: str,
        secret: str,
        environment: str = "sandbox",
        webhook_id: str = "",
        clock: Callable[[], datetime] | None = None,
        epoch_millis_provider: Callable[[], int] | None = None,
        token_hex_provider: Callable[[int], str] | None = None,
    ):
        """Initialize PayPal payment gateway.

        Args:
            http_client: Shared async HTTP client.
            client_id: PayPal REST client id.
            secret: PayPal REST client secret.
            environment: `live` selects production endpoints, anything else sandbox.
            webhook_id: PayPal webhook id required for signature verification.
            clock: Optional UTC clock used for health timestamps.
            epoch_millis_provider: Optional provider of epoch milliseconds for transaction ids.
            token_hex_provider: Optional provider of random hex for transaction ids.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when http_client is None.
        """

        if http_client is None:
            raise ValueError("http_client must not be None")

        self._http_client = http_client
        self._client_id = client_id.strip()
        self._secret = secret.strip()
        self._webhook_id = webhook_id.strip()
        self._base_url = (
            self._LIVE_BASE_URL if environment.strip().lower() == "live" else self._SANDBOX_BASE_URL
        )
        self._clock = clock or domain_utc_now
        self._epoch_millis_provider = epoch_millis_provider or _adapter_epoch_millis
        self._token_hex_provider = token_hex_provider or secrets.token_hex

    def payment_base_url(self) -> str:
        """Return the selected PayPal API base URL.

        Returns:
            str: Live or sandbox base URL.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        return self._base_url

    async def payment_create_order(self, order_request: PaymentOrderRequest) -> UpstreamResult[PaymentOrder]:
        """Create one CAPTURE-intent PayPal order.

        Args:
            order_request: Order amount, currency, description and redirect URLs.

        Returns:
            UpstreamResult[PaymentOrder]: Created order or soft failure with upstream payload.

        Raises:
            RuntimeError: This implementation does not raise for upstream failures.
        """

        token_result = await self._adapter_fetch_access_token()
        if isinstance(token_result, UpstreamFailure):
            return token_result

        order_body = {
            "intent": "CAPTURE",
            "purchase_units": [
                {
                    "amount": {
                        "currency_code": order_request.currency,
                        "value": f"{order_request.amount:.2f}",
                    },
                    "description": order_request.description,
                }
            ],
            "application_context": {
                "return_url": order_request.return_url or self._DEFAULT_RETURN_URL,
                "cancel_url": order_request.cancel_url or self._DEFAULT_CANCEL_URL,
            },
        }
        response_result = await self._adapter_post(
            url=f"{self._base_url}/v2/checkout/orders",
            operation="create_order",
            json=order_body,
            headers={"Authorization": f"Bearer {token_result.value}"},
        )
        if isinstance(response_result, UpstreamFailure):
            return response_result

        order_payload = response_result.value
        order_id = order_payload.get("id")
        if not order_id:
            return self._adapter_failure(
                UpstreamErrorKind.MALFORMED,
                "order response missing id",
                operation="create_order",
                detail=order_payload,
            )

        logger.info("payment_order_created", order_id=order_id, status=order_payload.get("status"))
        return UpstreamSuccess(
            value=PaymentOrder(
                order_id=str(order_id),
                status=str(order_payload.get("status", "")),
                links=list(order_payload.get("links") or []),
            )
        )

    async def payment_create_alternate(self, amount: float, currency: str) -> AlternatePayment:
        """Synthesize a `GP_<epoch-millis>_<hex>` transaction without upstream calls.

        Args:
            amount: Requested amount.
            currency: ISO currency code.

        Returns:
            AlternatePayment: Locally generated transaction record.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        transaction_id = (
            f"{self._ALTERNATE_PREFIX}_{self._epoch_millis_provider()}_{self._token_hex_provider(4)}"
        )
        return AlternatePayment(transaction_id=transaction_id, amount=amount, currency=currency)

    async def payment_acknowledge_webhook(
        self,
        payload: bytes,
        headers: Mapping[str, str],
    ) -> UpstreamResult[dict[str, object]]:
        """Verify PayPal transmission signature and acknowledge the webhook.

        Verification fails closed: no configured webhook id, missing transmission
        headers or a non-`SUCCESS` verdict all reject the delivery.

        Args:
            payload: Raw request body bytes.
            headers: Request headers carrying PayPal transmission metadata.

        Returns:
            UpstreamResult[dict[str, object]]: Parsed webhook event or verification failure.

        Raises:
            RuntimeError: This implementation does not raise for upstream failures.
        """

        if not self._webhook_id:
            return self._adapter_failure(
                UpstreamErrorKind.NOT_CONFIGURED,
                "webhook verification is not configured",
                operation="verify_webhook",
            )

        try:
            webhook_event = json.loads(payload.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return self._adapter_failure(
                UpstreamErrorKind.MALFORMED,
                "webhook payload is not valid JSON",
                operation="verify_webhook",
            )
        if not isinstance(webhook_event, dict):
            return self._adapter_failure(
                UpstreamErrorKind.MALFORMED,
                "webhook payload must be a JSON object",
                operation="verify_webhook",
            )

        normalized_headers = {str(name).lower(): value for name, value in headers.items()}
        verification_body: dict[str, object] = {}
        for field_name, header_name in self._WEBHOOK_TRANSMISSION_HEADERS.items():
            header_value = (normalized_headers.get(header_name) or "").strip()
            if not header_value:
                return self._adapter_failure(
                    UpstreamErrorKind.REJECTED,
                    f"missing webhook header {header_name}",
                    operation="verify_webhook",
                )
            verification_body[field_name] = header_value
        verification_body["webhook_id"] = self._webhook_id
        verification_body["webhook_event"] = webhook_event

        token_result = await self._adapter_fetch_access_token()
        if isinstance(token_result, UpstreamFailure):
            return token_result

        response_result = await self._adapter_post(
            url=f"{self._base_url}/v1/notifications/verify-webhook-signature",
            operation="verify_webhook",
            json=verification_body,
            headers={"Authorization": f"Bearer {token_result.value}"},
        )
        if isinstance(response_result, UpstreamFailure):
            return response_result

        verification_status = response_result.value.get("verification_status")
        if verification_status != "SUCCESS":
            return self._adapter_failure(
                UpstreamErrorKind.REJECTED,
                "webhook signature verification failed",
                operation="verify_webhook",
                detail={"verification_status": verification_status},
            )

        logger.info(
            "payment_webhook_verified",
            event_id=webhook_event.get("id"),
            event_type=webhook_event.get("event_type"),
        )
        return UpstreamSuccess(value=webhook_event)

    async def payment_check_health(self) -> HealthStatus:
        """Report payment gateway readiness.

        Returns:
            HealthStatus: Always `healthy`; no live probe is performed.

        Raises:
            RuntimeError: This implementation does not raise runtime errors.
        """

        return HealthStatus(component="payments", state=HEALTH_STATE_HEALTHY, checked_at_utc=self._clock())

    async def _adapter_fetch_access_token(self) -> UpstreamResult[str]:
        """Obtain a client-credentials bearer token.

        Returns:
            UpstreamResult[str]: Access token or soft failure.

        Raises:
            RuntimeError: This helper does not raise for upstream failures.
        """

        if not self._client_id or not self._secret:
            return self._adapter_failure(
                UpstreamErrorKind.NOT_CONFIGURED,
                "PayPal credentials are not configured",
                operation="oauth_token",
            )

        response_result = await self._adapter_post(
            url=f"{self._base_url}/v1/oauth2/token",
            operation="oauth_token",
            data={"grant_type": "client_credentials"},
            auth=(self._client_id, self._secret),
        )
        if isinstance(response_result, UpstreamFailure):
            return response_result

        access_token = response_result.value.get("access_token")
        if not access_token:
            return self._adapter_failure(
                UpstreamErrorKind.MALFORMED,
                "token response missing access_token",
                operation="oauth_token",
            )
        return UpstreamSuccess(value=str(access_token))

    async def _adapter_post(
        self,
        url: str,
        operation: str,
        **request_options: Any,
    ) -> UpstreamResult[dict[str, Any]]:
        """Execute one POST and decode a JSON object response.

        Args:
            url: Endpoint URL.
            operation: Operation label for diagnostics.
            **request_options: Keyword arguments forwarded to `httpx.AsyncClient.post`.

        Returns:
            UpstreamResult[dict[str, Any]]: Decoded response object or soft failure.

        Raises:
            RuntimeError: This helper does not raise for upstream failures.
        """

        try:
            response = await self._http_client.post(url, **request_options)
        except httpx.TimeoutException:
            return self._adapter_failure(
                UpstreamErrorKind.TIMEOUT,
                "PayPal request timed out",
                operation=operation,
            )
        except httpx.HTTPError as error:
            return self._adapter_failure(
                UpstreamErrorKind.TRANSPORT,
                f"PayPal request failed: {error}",
                operation=operation,
            )

        if response.status_code >= 400:
            return self._adapter_failure(
                UpstreamErrorKind.REJECTED,
                f"PayPal upstream returned HTTP {response.status_code}",
                operation=operation,
                detail=adapter_response_detail(response),
            )

        try:
            response_payload = response.json()
        except ValueError:
            return self._adapter_failure(
                UpstreamErrorKind.MALFORMED,
                "PayPal response is not JSON",
                operation=operation,
            )
        if not isinstance(response_payload, dict):
            return self._adapter_failure(
                UpstreamErrorKind.MALFORMED,
                "PayPal response is not a JSON object",
                operation=operation,
                detail=response_payload,
            )
        return UpstreamSuccess(value=response_payload)

    def _adapter_failure(
        self,
        kind: UpstreamErrorKind,
        message: str,
        operation: str,
        detail: Any = None,
    ) -> UpstreamFailure:
        logger.warning("payment_upstream_failed", operation=operation, kind=kind.value, message=message)
        return UpstreamFailure(kind=kind, message=message, detail=detail)


def _adapter_epoch_millis() -> int:
    return int(time.time() * 1000)
