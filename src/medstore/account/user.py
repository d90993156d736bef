"""User aggregate — storefront accounts and their roles."""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, String, ValueObject

from medstore.account.events import PasswordChanged, ProfileUpdated, UserRegistered, UserRoleChanged
from medstore.domain import medstore
from medstore.shared.email import EmailAddress
from medstore.shared.security import hash_password, verify_password


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


@medstore.value_object(part_of="User")
class PostalAddress:
    """Default delivery address kept on the user's profile."""

    street: String(max_length=255, default="")
    city: String(max_length=100, default="")
    state: String(max_length=100, default="")
    postal_code: String(max_length=20, default="")
    country: String(max_length=100, default="India")


@medstore.aggregate
class User:
    """A customer or administrator of the storefront.

    Email addresses are stored lower-cased and are unique across users; the
    uniqueness check happens in the registration handler because it needs a
    repository lookup. Only the bcrypt hash of the password is kept.
    """

    name: String(required=True, max_length=100)
    email: String(required=True, max_length=254)
    password_hash: String(required=True, max_length=128)
    role: String(choices=Role, default=Role.USER.value)
    profile_image: String(max_length=500, default="")
    phone: String(max_length=20, default="")
    address: ValueObject(PostalAddress)
    created_at: DateTime()
    last_login: DateTime()

    @property
    def is_admin(self):
        return self.role == Role.ADMIN.value

    @classmethod
    def register(cls, name, email, password, phone=None, role=Role.USER.value):
        if not password:
            raise ValidationError({"password": ["Password is required"]})

        now = datetime.now(UTC)
        user = cls(
            name=name,
            email=EmailAddress.normalize(email).address,
            password_hash=hash_password(password),
            role=role,
            phone=phone or "",
            address=PostalAddress(),
            created_at=now,
        )
        user.raise_(
            UserRegistered(
                user_id=user.id,
                name=user.name,
                email=user.email,
                role=user.role,
                registered_at=now,
            )
        )
        return user

    def check_password(self, password):
        return verify_password(password, self.password_hash)

    def record_login(self):
        self.last_login = datetime.now(UTC)

    def update_profile(self, name=None, phone=None, address=None):
        """Apply a partial profile update.

        ``address`` is a dict; only the keys it carries replace the current
        address fields.
        """
        if name is not None:
            self.name = name
        if phone is not None:
            self.phone = phone
        if address is not None:
            current = self.address.to_dict() if self.address else {}
            merged = {**current, **{k: v for k, v in address.items() if v is not None}}
            self.address = PostalAddress(**merged)

        self.raise_(ProfileUpdated(user_id=self.id, updated_at=datetime.now(UTC)))

    def change_password(self, current_password, new_password):
        if not current_password or not new_password:
            raise ValidationError({"password": ["Both current and new passwords are required"]})
        if not self.check_password(current_password):
            raise ValidationError({"password": ["Current password is incorrect"]})

        self.password_hash = hash_password(new_password)
        self.raise_(PasswordChanged(user_id=self.id, changed_at=datetime.now(UTC)))

    def change_role(self, new_role):
        if new_role not in {r.value for r in Role}:
            raise ValidationError({"role": ["Invalid role"]})
        if new_role == self.role:
            return

        previous = self.role
        self.role = new_role
        self.raise_(UserRoleChanged(user_id=self.id, previous_role=previous, new_role=new_role))
