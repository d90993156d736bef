"""Domain events for the MedicalQuery aggregate."""

from protean.fields import Boolean, DateTime, Identifier, String

from medstore.domain import medstore


@medstore.event(part_of="MedicalQuery")
class MedicalQuerySubmitted:
    """A visitor asked the pharmacy a question."""

    __version__ = 1

    query_id: Identifier(required=True)
    full_name: String(required=True)
    email: String(required=True)
    has_prescription: Boolean(default=False)
    user_id: Identifier()
    submitted_at: DateTime(required=True)


@medstore.event(part_of="MedicalQuery")
class MedicalQueryStatusChanged:
    __version__ = 1

    query_id: Identifier(required=True)
    previous_status: String(required=True)
    new_status: String(required=True)
    changed_at: DateTime(required=True)


@medstore.event(part_of="MedicalQuery")
class MedicalQueryAnswered:
    """An administrator replied; the query is resolved."""

    __version__ = 1

    query_id: Identifier(required=True)
    answered_at: DateTime(required=True)
