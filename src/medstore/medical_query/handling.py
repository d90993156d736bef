"""Administrator handling of medical queries: status changes and answers."""

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from medstore.domain import medstore
from medstore.medical_query.medical_query import MedicalQuery

logger = structlog.get_logger(__name__)


@medstore.command(part_of="MedicalQuery")
class UpdateMedicalQueryStatus:
    query_id = Identifier(required=True)
    status = String(max_length=20)


@medstore.command(part_of="MedicalQuery")
class RespondToMedicalQuery:
    query_id = Identifier(required=True)
    response = Text()
    responded_by = Identifier()


@medstore.command_handler(part_of=MedicalQuery)
class MedicalQueryHandler:
    @handle(UpdateMedicalQueryStatus)
    def update_status(self, command):
        repo = current_domain.repository_for(MedicalQuery)
        query = repo.fetch(command.query_id)
        query.change_status(command.status)
        repo.add(query)
        logger.info("medical_query_status_changed", query_id=str(query.id), status=query.status)

    @handle(RespondToMedicalQuery)
    def respond(self, command):
        repo = current_domain.repository_for(MedicalQuery)
        query = repo.fetch(command.query_id)
        query.respond(command.response)
        repo.add(query)
        logger.info("medical_query_answered", query_id=str(query.id), by=str(command.responded_by))
