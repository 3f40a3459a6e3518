"""Payment Routes — POST /payment (initiate) and /payment/verify.

Invariants:
    - Responses are the gateway's JSON, passed through unchanged
    - Gateway failures surface as 500 via PaymentGatewayError
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.infrastructure.database import get_db
from app.infrastructure.payment_gateway import FlutterwaveGateway, get_payment_gateway
from app.schemas.payment import PaymentInitRequest, PaymentVerifyRequest
from app.services import handle_payment

router = APIRouter(prefix="/payment", tags=["payment"])


@router.post("")
async def initiate_payment(
    body: PaymentInitRequest,
    db: AsyncSession = Depends(get_db),
    gateway: FlutterwaveGateway = Depends(get_payment_gateway),
    settings: Settings = Depends(get_settings),
):
    """Open a hosted checkout with the gateway."""
    return await handle_payment.initiate_payment(db, gateway, body, settings)


@router.post("/verify")
async def verify_payment(
    body: PaymentVerifyRequest,
    gateway: FlutterwaveGateway = Depends(get_payment_gateway),
):
    """Check a transaction's status with the gateway."""
    return await handle_payment.verify_payment(gateway, body)
