"""Credential check for login."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from medstore.account.user import User
from medstore.domain import medstore

logger = structlog.get_logger(__name__)


@medstore.command(part_of="User")
class AuthenticateUser:
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)


@medstore.command_handler(part_of=User)
class AuthenticationHandler:
    @handle(AuthenticateUser)
    def authenticate(self, command):
        repo = current_domain.repository_for(User)
        user = repo.find_by_email(command.email)

        # Same message for unknown email and wrong password
        if user is None or not user.check_password(command.password):
            logger.info("login_failed")
            raise ValidationError({"credentials": ["Invalid credentials"]})

        user.record_login()
        repo.add(user)
        return str(user.id)
