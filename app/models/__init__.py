"""ORM Models — SQLAlchemy declarative models for submission records.

Invariants:
    - All models inherit from Base (db/base.py)
    - Records are insert-only: this service never updates or deletes them
    - No relationships between entities

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete for create_all and alembic
"""

from app.models.contact import Contact  # noqa: F401
from app.models.enrollment import Enrollment  # noqa: F401
from app.models.partnering import Partnering  # noqa: F401
from app.models.payment_request import PaymentRequest  # noqa: F401
