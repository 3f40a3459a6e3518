"""Payment Gateway Client — Flutterwave v3 checkout and verification over httpx.

Invariants:
    - Every call authenticates with `Authorization: Bearer <secret key>`
    - Successful (2xx) JSON responses are returned as parsed, untouched
    - Timeouts, connection errors, non-2xx statuses and non-JSON bodies → PaymentGatewayError
    - No retry: a failed call surfaces immediately

Design Decisions:
    - One AsyncClient per call (async with): no long-lived connection state between requests
    - Optional transport injection so tests drive the client with httpx.MockTransport
"""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from app.config import Settings, get_settings
from app.core.errors import ErrorContext, PaymentGatewayError

logger = logging.getLogger(__name__)


class FlutterwaveGateway:
    """Thin async client for the Flutterwave v3 REST API."""

    def __init__(
        self,
        secret_key: str,
        base_url: str = "https://api.flutterwave.com/v3",
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.secret_key = secret_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "FlutterwaveGateway":
        return cls(
            secret_key=settings.payment_secret_key,
            base_url=settings.payment_base_url,
            timeout_seconds=settings.payment_timeout_seconds,
        )

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    async def create_checkout(
        self, payload: dict[str, Any], context: ErrorContext | None = None,
    ) -> dict:
        """POST /payments — returns the hosted-checkout response."""
        return await self._request("POST", "/payments", context, json=payload)

    async def verify_transaction(
        self, transaction_id: str, context: ErrorContext | None = None,
    ) -> dict:
        """GET /transactions/{id}/verify; the id is sent as one encoded path segment."""
        return await self._request(
            "GET", f"/transactions/{quote(transaction_id, safe='')}/verify", context,
        )

    async def verify_by_reference(
        self, tx_ref: str, context: ErrorContext | None = None,
    ) -> dict:
        """GET /transactions/verify_by_reference?tx_ref=..."""
        return await self._request(
            "GET", "/transactions/verify_by_reference", context,
            params={"tx_ref": tx_ref},
        )

    async def _request(
        self,
        method: str,
        path: str,
        context: ErrorContext | None,
        **kwargs: Any,
    ) -> dict:
        url = f"{self.base_url}{path}"
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport,
            ) as client:
                response = await client.request(
                    method, url, headers=self.headers, **kwargs,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Gateway {method} {path} failed [{e.response.status_code}]: {e.response.text}",
                extra={"gateway_status": e.response.status_code},
            )
            raise PaymentGatewayError(
                e.response.text, gateway_status=e.response.status_code,
                context=context,
            )
        except httpx.TimeoutException:
            logger.error(f"Gateway {method} {path} timed out")
            raise PaymentGatewayError("Gateway timeout", context=context)
        except httpx.HTTPError as e:
            logger.error(f"Gateway {method} {path} transport error: {e}")
            raise PaymentGatewayError(str(e), context=context)
        except ValueError as e:
            logger.error(f"Gateway {method} {path} returned non-JSON body: {e}")
            raise PaymentGatewayError("Non-JSON gateway response", context=context)

        logger.info(
            f"Gateway {method} {path} ok (status={data.get('status') if isinstance(data, dict) else None})",
            extra={"tx_ref": context.tx_ref if context else None},
        )
        return data


def get_payment_gateway() -> FlutterwaveGateway:
    """FastAPI dependency for the payment gateway client."""
    return FlutterwaveGateway.from_settings(get_settings())
