"""Domain events for the User aggregate."""

from protean.fields import DateTime, Identifier, String

from medstore.domain import medstore


@medstore.event(part_of="User")
class UserRegistered:
    """A new storefront account was created."""

    __version__ = 1

    user_id: Identifier(required=True)
    name: String(required=True)
    email: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)


@medstore.event(part_of="User")
class ProfileUpdated:
    """A user changed their name, phone or address."""

    __version__ = 1

    user_id: Identifier(required=True)
    updated_at: DateTime(required=True)


@medstore.event(part_of="User")
class PasswordChanged:
    """A user replaced their password."""

    __version__ = 1

    user_id: Identifier(required=True)
    changed_at: DateTime(required=True)


@medstore.event(part_of="User")
class UserRoleChanged:
    """An administrator granted or revoked the admin role."""

    __version__ = 1

    user_id: Identifier(required=True)
    previous_role: String(required=True)
    new_role: String(required=True)
