"""Payment Handlers — checkout initiation and verification proxied to the gateway.

Invariants:
    - tx_ref is generated here (single source), recorded locally, then sent to the gateway
    - The gateway's JSON is returned verbatim; nothing is added, dropped, or re-keyed
    - Verification prefers transaction_id; tx_ref lookup is the fallback
    - No retry, no reconciliation, no idempotency key

Design Decisions:
    - PaymentRequest row committed before the gateway call so every checkout link
      the gateway hands out has a local trace, even if the proxy call then fails
"""

import logging
import uuid
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.core.errors import ErrorContext
from app.infrastructure.payment_gateway import FlutterwaveGateway
from app.models.payment_request import PaymentRequest
from app.schemas.payment import PaymentInitRequest, PaymentVerifyRequest
from app.services.handle_submissions import persist_record

logger = logging.getLogger(__name__)


def new_tx_ref(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4()}"


def _json_amount(amount: Decimal) -> int | float:
    """Whole amounts go out as ints, fractional ones as floats."""
    if amount == amount.to_integral_value():
        return int(amount)
    return float(amount)


def build_checkout_payload(
    request: PaymentRequest, settings: Settings,
) -> dict:
    """Gateway checkout body for a recorded payment request."""
    customer = {
        "email": request.email,
        "phonenumber": request.phone,
        "name": request.name or request.email,
    }
    return {
        "tx_ref": request.tx_ref,
        "amount": _json_amount(request.amount),
        "currency": request.currency,
        "redirect_url": settings.payment_redirect_url,
        "customer": customer,
        "customizations": {
            "title": settings.mail_sender_name,
            "description": "Course payment",
        },
        "meta": {"source": "techalpha-hub-api"},
    }


async def initiate_payment(
    db: AsyncSession,
    gateway: FlutterwaveGateway,
    body: PaymentInitRequest,
    settings: Settings,
) -> dict:
    """Record the request, open a hosted checkout, return the gateway reply."""
    tx_ref = new_tx_ref(settings.payment_tx_ref_prefix)
    context = ErrorContext(submission_type="payment", tx_ref=tx_ref)
    record = await persist_record(
        db,
        PaymentRequest(
            tx_ref=tx_ref,
            amount=body.amount,
            currency=settings.payment_currency,
            email=str(body.email),
            phone=body.phone,
            name=body.name,
        ),
        context,
    )
    payload = build_checkout_payload(record, settings)
    logger.info(
        f"Initiating checkout for {payload['amount']} {record.currency}",
        extra={"tx_ref": tx_ref},
    )
    return await gateway.create_checkout(payload, context=context)


async def verify_payment(
    gateway: FlutterwaveGateway, body: PaymentVerifyRequest,
) -> dict:
    """Ask the gateway for the transaction's current state."""
    context = ErrorContext(submission_type="payment", tx_ref=body.tx_ref)
    if body.transaction_id:
        return await gateway.verify_transaction(body.transaction_id, context=context)
    return await gateway.verify_by_reference(body.tx_ref, context=context)
