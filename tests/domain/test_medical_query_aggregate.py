import pytest
from protean.exceptions import ValidationError

from medstore.medical_query.events import MedicalQueryAnswered, MedicalQueryStatusChanged, MedicalQuerySubmitted
from medstore.medical_query.medical_query import MedicalQuery


def _query(**details):
    return MedicalQuery.submit(full_name="Meera Nair", email="meera@example.com", **details)


class TestSubmit:
    def test_raises_submitted_event(self):
        query = _query(has_prescription=True)
        event = query._events[-1]
        assert isinstance(event, MedicalQuerySubmitted)
        assert event.has_prescription is True
        assert event.full_name == "Meera Nair"

    def test_blank_subject_falls_back(self):
        assert _query(subject="").subject == "Medical Query"

    def test_rejects_unknown_gender(self):
        with pytest.raises(ValidationError):
            _query(gender="unknown")


class TestChangeStatus:
    @pytest.mark.parametrize("status", ["in-progress", "resolved", "closed", "pending"])
    def test_any_known_status(self, status):
        query = _query()
        query.change_status(status)
        assert query.status == status
        assert isinstance(query._events[-1], MedicalQueryStatusChanged)

    def test_unknown_status(self):
        query = _query()
        with pytest.raises(ValidationError) as exc:
            query.change_status("archived")
        assert exc.value.messages["status"] == ["Invalid status"]


class TestRespond:
    def test_sets_response_and_resolves(self):
        query = _query()
        query.respond("Take it after meals.")
        assert query.status == "resolved"
        assert query.response == "Take it after meals."
        assert query.response_date is not None
        assert isinstance(query._events[-1], MedicalQueryAnswered)

    def test_blank_response(self):
        with pytest.raises(ValidationError):
            _query().respond("")
