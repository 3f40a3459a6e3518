"""Form Routes — POST /contact, /register, /partnering.

Invariants:
    - Body validated by Pydantic before the handler runs (400 on failure, nothing saved)
    - Each handler is a single service call; errors propagate to the global handlers
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings, get_settings
from app.infrastructure.database import get_db
from app.infrastructure.mailer import SmtpMailer, get_mailer
from app.schemas.forms import (
    ContactForm, EnrollmentForm, PartneringForm, SubmissionResponse,
)
from app.services import handle_submissions

router = APIRouter(tags=["forms"])


@router.post("/contact", response_model=SubmissionResponse)
async def submit_contact(
    body: ContactForm,
    db: AsyncSession = Depends(get_db),
    mailer: SmtpMailer = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
):
    """Contact form: save the message, email the sender a confirmation."""
    return await handle_submissions.submit_contact(
        db, mailer, body, settings.staff_inbox,
    )


@router.post("/register", response_model=SubmissionResponse)
async def submit_enrollment(
    body: EnrollmentForm,
    db: AsyncSession = Depends(get_db),
    mailer: SmtpMailer = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
):
    """Class enrollment."""
    return await handle_submissions.submit_enrollment(
        db, mailer, body, settings.staff_inbox,
    )


@router.post("/partnering", response_model=SubmissionResponse)
async def submit_partnering(
    body: PartneringForm,
    db: AsyncSession = Depends(get_db),
    mailer: SmtpMailer = Depends(get_mailer),
    settings: Settings = Depends(get_settings),
):
    """Partnership application."""
    return await handle_submissions.submit_partnering(
        db, mailer, body, settings.staff_inbox,
    )
