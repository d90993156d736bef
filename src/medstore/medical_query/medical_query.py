"""MedicalQuery aggregate — questions sent to the pharmacy.

Anyone may submit a query, signed in or not. Administrators work through
them by moving the status along and eventually answering, which resolves
the query.

Statuses:
    pending, in-progress, resolved, closed
    Any status may be set directly by an administrator.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text

from medstore.domain import medstore
from medstore.medical_query.events import MedicalQueryAnswered, MedicalQueryStatusChanged, MedicalQuerySubmitted
from medstore.shared.email import EmailAddress


class QueryStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class QueryPriority(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class Gender(Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


DEFAULT_SUBJECT = "Medical Query"


@medstore.aggregate
class MedicalQuery:
    full_name = String(required=True, max_length=100)
    email = String(required=True, max_length=254)
    phone = String(max_length=20)
    user_id = Identifier()
    subject = String(max_length=200, default=DEFAULT_SUBJECT)
    message = Text()
    product_list = Text()
    has_prescription = Boolean(default=False)
    purchase_without_prescription = Boolean(default=False)
    symptoms = Text()
    current_medications = Text()
    age = Integer(min_value=0, max_value=150)
    gender = String(max_length=10, choices=Gender)
    priority = String(max_length=10, choices=QueryPriority, default=QueryPriority.MEDIUM.value)
    status = String(max_length=20, choices=QueryStatus, default=QueryStatus.PENDING.value)
    response = Text()
    response_date = DateTime()
    submitted_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def submit(cls, full_name, email, user_id=None, **details):
        full_name = (full_name or "").strip()
        if not full_name or not (email or "").strip():
            raise ValidationError({"query": ["Full name and email are required"]})

        now = datetime.now(UTC)
        query = cls(
            full_name=full_name,
            email=EmailAddress.normalize(email).address,
            user_id=user_id,
            subject=details.pop("subject", None) or DEFAULT_SUBJECT,
            priority=details.pop("priority", None) or QueryPriority.MEDIUM.value,
            submitted_at=now,
            updated_at=now,
            **{k: v for k, v in details.items() if v is not None},
        )
        query.raise_(
            MedicalQuerySubmitted(
                query_id=query.id,
                full_name=query.full_name,
                email=query.email,
                has_prescription=bool(query.has_prescription),
                user_id=query.user_id,
                submitted_at=now,
            )
        )
        return query

    def change_status(self, status):
        try:
            new_status = QueryStatus(status)
        except ValueError:
            raise ValidationError({"status": ["Invalid status"]}) from None

        previous = self.status
        now = datetime.now(UTC)
        self.status = new_status.value
        self.updated_at = now
        self.raise_(
            MedicalQueryStatusChanged(
                query_id=self.id,
                previous_status=previous,
                new_status=self.status,
                changed_at=now,
            )
        )

    def respond(self, response):
        response = (response or "").strip()
        if not response:
            raise ValidationError({"response": ["Response is required"]})

        now = datetime.now(UTC)
        self.response = response
        self.response_date = now
        self.status = QueryStatus.RESOLVED.value
        self.updated_at = now
        self.raise_(MedicalQueryAnswered(query_id=self.id, answered_at=now))
