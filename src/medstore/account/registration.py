"""Account registration — customer sign-up and first-admin bootstrap."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import String
from protean.utils.globals import current_domain

from medstore import settings
from medstore.account.user import Role, User
from medstore.domain import medstore
from medstore.shared.errors import AuthorizationError

logger = structlog.get_logger(__name__)


@medstore.command(part_of="User")
class RegisterUser:
    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)
    phone: String(max_length=20)


@medstore.command(part_of="User")
class CreateAdmin:
    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    password: String(required=True, max_length=128)
    setup_key: String(required=True, max_length=255)


@medstore.command_handler(part_of=User)
class RegistrationHandler:
    @handle(RegisterUser)
    def register_user(self, command):
        repo = current_domain.repository_for(User)
        if repo.find_by_email(command.email):
            raise ValidationError({"email": ["User already exists"]})

        user = User.register(
            name=command.name,
            email=command.email,
            password=command.password,
            phone=command.phone,
        )
        repo.add(user)
        logger.info("user_registered", user_id=str(user.id))
        return str(user.id)

    @handle(CreateAdmin)
    def create_admin(self, command):
        expected_key = settings.admin_setup_key()
        if not expected_key or command.setup_key != expected_key:
            logger.warning("admin_setup_rejected", reason="invalid_setup_key")
            raise AuthorizationError({"setup_key": ["Invalid admin setup key"]})

        repo = current_domain.repository_for(User)
        if repo.admins():
            raise AuthorizationError({"role": ["Admin user already exists. Contact existing admin."]})
        if repo.find_by_email(command.email):
            raise ValidationError({"email": ["Email already in use"]})

        admin = User.register(
            name=command.name,
            email=command.email,
            password=command.password,
            role=Role.ADMIN.value,
        )
        repo.add(admin)
        logger.info("admin_created", user_id=str(admin.id))
        return str(admin.id)
