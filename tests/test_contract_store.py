"""Tests for the JSON-backed contract store"""

import json
from concurrent.futures import ThreadPoolExecutor
from datetime import date, timedelta

import pytest

from contract_assistant.db.contracts import ContractStore
from contract_assistant.exceptions import NotFoundError, PersistenceError, ValidationError
from contract_assistant.models.contract import ContractStatus, ContractType

from conftest import TODAY, contract_fields


class TestCreate:

    def test_round_trip(self, contract_store):
        created = contract_store.create(contract_fields())
        fetched = contract_store.get(created.id)

        assert fetched.title == "Quality Assurance"
        assert fetched.company == "Acme Corp"
        assert fetched.client_name == "Priya Sharma"
        assert fetched.contract_type == ContractType.INDIVIDUAL
        assert fetched.start_date == date(2025, 1, 1)
        assert fetched.end_date == date(2026, 1, 1)
        assert fetched.salary == 1500000
        assert fetched.notes == "Remote"
        assert fetched.created_at == created.created_at
        assert fetched.status == created.status == ContractStatus.ACTIVE

    def test_assigns_max_plus_one(self, contract_store):
        first = contract_store.create(contract_fields())
        second = contract_store.create(contract_fields(title="Second"))
        contract_store.delete(first.id)
        third = contract_store.create(contract_fields(title="Third"))

        assert (first.id, second.id, third.id) == (1, 2, 3)

    def test_defaults(self, contract_store):
        fields = contract_fields()
        del fields["contract_type"], fields["salary"], fields["notes"]

        contract = contract_store.create(fields)

        assert contract.contract_type == ContractType.INDIVIDUAL
        assert contract.salary is None
        assert contract.notes == ""

    @pytest.mark.parametrize("missing", ["title", "company", "client_name", "start_date", "end_date"])
    def test_missing_required_field(self, contract_store, missing):
        fields = contract_fields()
        del fields[missing]

        with pytest.raises(ValidationError) as exc:
            contract_store.create(fields)

        assert exc.value.fields == [missing]
        assert contract_store.list_all() == []

    def test_blank_required_field(self, contract_store):
        with pytest.raises(ValidationError):
            contract_store.create(contract_fields(title="   "))

    def test_malformed_date(self, contract_store):
        with pytest.raises(ValidationError) as exc:
            contract_store.create(contract_fields(end_date="next year"))
        assert "end_date" in exc.value.fields
        assert contract_store.list_all() == []

    def test_negative_salary(self, contract_store):
        with pytest.raises(ValidationError):
            contract_store.create(contract_fields(salary=-1))

    def test_client_cannot_set_id_or_status(self, contract_store):
        contract = contract_store.create(contract_fields(id=99, status="active", end_date="2024-01-01"))
        assert contract.id == 1
        assert contract.status == ContractStatus.EXPIRED


class TestPersistence:

    def test_status_not_persisted(self, contract_store):
        contract_store.create(contract_fields())
        records = json.loads(contract_store.document.path.read_text(encoding="utf-8"))

        assert len(records) == 1
        assert "status" not in records[0]
        assert records[0]["end_date"] == "2026-01-01"

    def test_stale_stored_status_is_recomputed(self, contract_store):
        contract_store.document.write([{
            **contract_fields(end_date="2025-06-01"),
            "id": 1,
            "created_at": "2025-01-01T00:00:00.000Z",
            "status": "active",
        }])
        assert contract_store.get(1).status == ContractStatus.EXPIRED

    def test_missing_file_reads_empty(self, contract_store):
        assert not contract_store.document.path.exists()
        assert contract_store.list_all() == []

    def test_init_creates_default_file(self, contract_store):
        assert contract_store.init() is True
        assert json.loads(contract_store.document.path.read_text()) == []
        assert contract_store.init() is False

    def test_empty_file_reads_empty(self, contract_store):
        contract_store.document.path.write_text("  \n")
        assert contract_store.list_all() == []

    def test_corrupt_file_raises(self, contract_store):
        contract_store.document.path.write_text("[{not json")
        with pytest.raises(PersistenceError):
            contract_store.list_all()

    def test_corrupt_file_is_not_overwritten(self, contract_store):
        contract_store.document.path.write_text("[{not json")
        with pytest.raises(PersistenceError):
            contract_store.create(contract_fields())
        assert contract_store.document.path.read_text() == "[{not json"

    def test_wrong_document_shape_raises(self, contract_store):
        contract_store.document.path.write_text("{}")
        with pytest.raises(PersistenceError):
            contract_store.list_all()


class TestGetUpdateDelete:

    def test_get_unknown(self, contract_store):
        with pytest.raises(NotFoundError):
            contract_store.get(42)

    def test_update_merges_fields(self, contract_store):
        created = contract_store.create(contract_fields())

        updated = contract_store.update(created.id, {"salary": 1800000, "notes": "Promoted"})

        assert updated.salary == 1800000
        assert updated.notes == "Promoted"
        assert updated.title == "Quality Assurance"
        assert contract_store.get(created.id).salary == 1800000

    def test_update_rederives_status(self, contract_store):
        created = contract_store.create(contract_fields())
        soon = (TODAY + timedelta(days=3)).isoformat()

        updated = contract_store.update(created.id, {"end_date": soon})

        assert updated.status == ContractStatus.EXPIRING

    def test_update_keeps_immutable_fields(self, contract_store):
        created = contract_store.create(contract_fields())

        updated = contract_store.update(created.id, {
            "id": 7,
            "created_at": "2000-01-01T00:00:00Z",
            "title": "QA Lead",
        })

        assert updated.id == created.id
        assert updated.created_at == created.created_at
        assert updated.title == "QA Lead"

    @pytest.mark.parametrize("field", ["title", "company", "client_name", "start_date", "end_date"])
    def test_update_cannot_blank_required_field(self, contract_store, field):
        created = contract_store.create(contract_fields())

        with pytest.raises(ValidationError) as exc:
            contract_store.update(created.id, {field: "  "})

        assert exc.value.fields == [field]
        assert contract_store.get(created.id) == created

    def test_update_can_clear_notes_and_salary(self, contract_store):
        created = contract_store.create(contract_fields())

        updated = contract_store.update(created.id, {"notes": None, "salary": None})

        assert updated.notes == ""
        assert updated.salary is None
        assert contract_store.get(created.id).notes == ""

    def test_update_unknown(self, contract_store):
        with pytest.raises(NotFoundError):
            contract_store.update(3, {"title": "Nope"})

    def test_delete(self, contract_store):
        created = contract_store.create(contract_fields())
        assert contract_store.delete(created.id) is True
        assert contract_store.list_all() == []

    def test_delete_unknown_is_noop(self, contract_store):
        contract_store.create(contract_fields())
        assert contract_store.delete(99) is False
        assert contract_store.delete(99) is False
        assert len(contract_store.list_all()) == 1


class TestSearch:

    def test_matches_title_case_insensitively(self, contract_store):
        contract_store.create(contract_fields())
        contract_store.create(contract_fields(title="Designer", company="Globex", client_name="Meera"))

        results = contract_store.search("quality")

        assert [c.title for c in results] == ["Quality Assurance"]

    def test_matches_company_and_client(self, contract_store):
        contract_store.create(contract_fields())
        contract_store.create(contract_fields(title="Designer", company="Globex", client_name="Meera"))

        assert [c.title for c in contract_store.search("GLOBEX")] == ["Designer"]
        assert [c.title for c in contract_store.search("priya")] == ["Quality Assurance"]

    def test_matches_derived_status(self, contract_store):
        contract_store.create(contract_fields(end_date="2025-01-31"))
        contract_store.create(contract_fields(title="Designer", company="Globex", client_name="Meera"))

        results = contract_store.search("expired")

        assert [c.id for c in results] == [1]

    def test_no_match(self, contract_store):
        contract_store.create(contract_fields())
        assert contract_store.search("blockchain") == []


class TestConcurrentWrites:

    def test_parallel_creates_get_distinct_ids(self, tmp_path):
        path = tmp_path / "contracts.json"

        def create(n):
            # a fresh store per call, all sharing the same file
            return ContractStore(path, clock=lambda: TODAY).create(contract_fields(title=f"Contract {n}")).id

        with ThreadPoolExecutor(max_workers=8) as pool:
            ids = list(pool.map(create, range(40)))

        assert sorted(ids) == list(range(1, 41))
        assert len(ContractStore(path, clock=lambda: TODAY).list_all()) == 40
