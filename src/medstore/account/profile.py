"""Profile maintenance — personal details and password."""

import json

from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from medstore.account.user import User
from medstore.domain import medstore


@medstore.command(part_of="User")
class UpdateProfile:
    user_id: Identifier(required=True)
    name: String(max_length=100)
    phone: String(max_length=20)
    address: Text()  # JSON: partial address dict


@medstore.command(part_of="User")
class ChangePassword:
    user_id: Identifier(required=True)
    current_password: String(max_length=128)
    new_password: String(max_length=128)


@medstore.command_handler(part_of=User)
class ProfileHandler:
    @handle(UpdateProfile)
    def update_profile(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.update_profile(
            name=command.name,
            phone=command.phone,
            address=json.loads(command.address) if command.address else None,
        )
        repo.add(user)

    @handle(ChangePassword)
    def change_password(self, command):
        repo = current_domain.repository_for(User)
        user = repo.get(command.user_id)
        user.change_password(command.current_password, command.new_password)
        repo.add(user)
