"""SubmitMedicalQuery — a visitor sends the pharmacy a question."""

import structlog
from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from medstore.domain import medstore
from medstore.medical_query.medical_query import MedicalQuery

logger = structlog.get_logger(__name__)


@medstore.command(part_of="MedicalQuery")
class SubmitMedicalQuery:
    full_name = String(max_length=100)
    email = String(max_length=254)
    phone = String(max_length=20)
    user_id = Identifier()
    subject = String(max_length=200)
    message = Text()
    product_list = Text()
    has_prescription = Boolean(default=False)
    purchase_without_prescription = Boolean(default=False)
    symptoms = Text()
    current_medications = Text()
    age = Integer(min_value=0, max_value=150)
    gender = String(max_length=10)
    priority = String(max_length=10)


@medstore.command_handler(part_of=MedicalQuery)
class SubmitMedicalQueryHandler:
    @handle(SubmitMedicalQuery)
    def submit(self, command):
        query = MedicalQuery.submit(
            full_name=command.full_name,
            email=command.email,
            user_id=command.user_id,
            phone=command.phone,
            subject=command.subject,
            message=command.message,
            product_list=command.product_list,
            has_prescription=command.has_prescription,
            purchase_without_prescription=command.purchase_without_prescription,
            symptoms=command.symptoms,
            current_medications=command.current_medications,
            age=command.age,
            gender=command.gender,
            priority=command.priority,
        )
        current_domain.repository_for(MedicalQuery).add(query)
        logger.info("medical_query_submitted", query_id=str(query.id), has_prescription=query.has_prescription)
        return str(query.id)
