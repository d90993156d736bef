"""Repository for the MedicalQuery aggregate."""

from protean.exceptions import ObjectNotFoundError

from medstore.domain import medstore
from medstore.medical_query.medical_query import MedicalQuery
from medstore.shared.listing import fetch_all
from medstore.shared.timestamps import as_utc


@medstore.repository(part_of=MedicalQuery)
class MedicalQueryRepository:
    def fetch(self, query_id: str) -> MedicalQuery:
        try:
            return self.get(query_id)
        except ObjectNotFoundError:
            raise ObjectNotFoundError({"query": ["Query not found"]}) from None

    def newest_first(self, status: str | None = None) -> list[MedicalQuery]:
        filters = {"status": status} if status else {}
        return sorted(fetch_all(MedicalQuery, **filters), key=lambda q: as_utc(q.submitted_at), reverse=True)
