"""Submission Handlers — contact, enrollment, and partnering pipelines.

Invariants:
    - Order is always: build record → insert + commit → send email(s) → respond
    - Exactly one record per successful call; a form that failed validation never gets here
    - SQLAlchemy failures become DatabaseError; SMTP failures become EmailDeliveryError
    - A mail failure after commit leaves the record in place (no compensation)

Design Decisions:
    - Submitter confirmation first, staff notification second: the submitter's email
      is the one the site promises in its success message
    - Enrollment has no submitter address, so it only notifies staff
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core import email_templates
from app.core.email_templates import OutgoingEmail
from app.core.errors import DatabaseError, ErrorContext
from app.infrastructure.mailer import SmtpMailer
from app.models.contact import Contact
from app.models.enrollment import Enrollment
from app.models.partnering import Partnering
from app.schemas.forms import (
    ContactForm, EnrollmentForm, PartneringForm, SubmissionResponse,
)

logger = logging.getLogger(__name__)

CONTACT_SUCCESS = "Form submitted successfully, and email sent!"
ENROLLMENT_SUCCESS = "Registration submitted successfully!"
PARTNERING_SUCCESS = "Partnership application submitted successfully, and email sent!"


async def persist_record(db: AsyncSession, record, context: ErrorContext):
    """Insert and commit one record, mapping driver failures to DatabaseError."""
    try:
        db.add(record)
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            f"Failed to save {context.submission_type}: {e}",
            extra={"submission_type": context.submission_type},
        )
        raise DatabaseError(str(e), "insert", context=context)
    context.record_id = str(record.id)
    logger.info(
        f"Saved {context.submission_type} {record.id}",
        extra={"submission_type": context.submission_type, "record_id": str(record.id)},
    )
    return record


async def _deliver(
    mailer: SmtpMailer, emails: list[OutgoingEmail], context: ErrorContext,
) -> None:
    for email in emails:
        await mailer.send(email, context=context)


async def submit_contact(
    db: AsyncSession, mailer: SmtpMailer, form: ContactForm, staff_inbox: str,
) -> SubmissionResponse:
    """Save a contact message and email the sender a confirmation."""
    context = ErrorContext(submission_type="contact")
    record = await persist_record(
        db,
        Contact(name=form.name, email=str(form.email), message=form.message),
        context,
    )
    await _deliver(mailer, [
        email_templates.contact_confirmation(
            name=record.name, email=record.email, message=record.message,
        ),
        email_templates.staff_notification(
            "contact",
            inbox=staff_inbox,
            fields={"name": record.name, "email": record.email, "message": record.message},
            reply_to=record.email,
        ),
    ], context)
    return SubmissionResponse(message=CONTACT_SUCCESS, id=record.id)


async def submit_enrollment(
    db: AsyncSession, mailer: SmtpMailer, form: EnrollmentForm, staff_inbox: str,
) -> SubmissionResponse:
    """Save a class enrollment and notify staff."""
    context = ErrorContext(submission_type="enrollment")
    record = await persist_record(
        db, Enrollment(**form.model_dump()), context,
    )
    await _deliver(mailer, [
        email_templates.staff_notification(
            "enrollment",
            inbox=staff_inbox,
            fields={
                "first_name": record.first_name,
                "last_name": record.last_name,
                "location": record.where,
                "class_type": record.class_type,
                "course": record.course,
                "gender": record.gender,
                "pre_knowledge": record.pre_knowledge,
            },
        ),
    ], context)
    return SubmissionResponse(message=ENROLLMENT_SUCCESS, id=record.id)


async def submit_partnering(
    db: AsyncSession, mailer: SmtpMailer, form: PartneringForm, staff_inbox: str,
) -> SubmissionResponse:
    """Save a partnership application, confirm to the applicant, notify staff."""
    context = ErrorContext(submission_type="partnering")
    data = form.model_dump()
    data["email"] = str(form.email)
    record = await persist_record(db, Partnering(**data), context)
    await _deliver(mailer, [
        email_templates.partnering_confirmation(
            first_name=record.first_name, email=record.email, program=record.program,
        ),
        email_templates.staff_notification(
            "partnering",
            inbox=staff_inbox,
            fields={
                "first_name": record.first_name,
                "last_name": record.last_name,
                "email": record.email,
                "phone": record.phone,
                "address": record.address,
                "gender": record.gender,
                "program": record.program,
                "reason": record.reason,
            },
            reply_to=record.email,
        ),
    ], context)
    return SubmissionResponse(message=PARTNERING_SUCCESS, id=record.id)
