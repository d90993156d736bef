"""Repository for the User aggregate."""

from medstore.account.user import Role, User
from medstore.domain import medstore
from medstore.shared.listing import fetch_all


@medstore.repository(part_of=User)
class UserRepository:
    def find_by_email(self, email: str) -> User | None:
        return self._dao.query.filter(email=(email or "").strip().lower()).all().first

    def admins(self) -> list[User]:
        return fetch_all(User, role=Role.ADMIN.value)

    def newest_first(self) -> list[User]:
        return sorted(fetch_all(User), key=lambda u: u.created_at, reverse=True)
