"""Role administration."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from medstore.account.user import User
from medstore.domain import medstore

logger = structlog.get_logger(__name__)


@medstore.command(part_of="User")
class ChangeUserRole:
    user_id: Identifier(required=True)
    role: String(required=True, max_length=20)
    requested_by: Identifier(required=True)


@medstore.command_handler(part_of=User)
class RoleHandler:
    @handle(ChangeUserRole)
    def change_role(self, command):
        if str(command.user_id) == str(command.requested_by):
            raise ValidationError({"role": ["Cannot change your own role"]})

        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.change_role(command.role)
        repo.add(user)
        logger.info("user_role_changed", user_id=str(user.id), role=user.role, by=str(command.requested_by))
