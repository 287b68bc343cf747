"""
Unit tests for ExperienceService: fetch, upsert and delete.
"""

import logging
from unittest.mock import Mock

import pytest

from portfolio_api.app.schemas.response import StatusCode
from portfolio_api.app.services.experience_service import GENERIC_FAULT_MESSAGE, ExperienceService


class TestStore:
    def test_create_returns_persisted_record(self, service, store):
        envelope = service.store({"company": "Acme", "position": "Engineer"})

        assert envelope.status == StatusCode.SUCCESS
        assert envelope.message == "Data is successfully saved"
        assert envelope.payload["id"] is not None
        assert envelope.payload["company"] == "Acme"
        assert envelope.payload["position"] == "Engineer"
        assert envelope.payload["period"] is None
        assert envelope.payload["details"] is None
        assert store.find(envelope.payload["id"])["company"] == "Acme"

    @pytest.mark.parametrize("data", [{}, {"company": None}, {"company": ""}, {"company": "   "}])
    def test_missing_company_is_rejected(self, service, store, data):
        envelope = service.store(data)

        assert envelope.status == StatusCode.BAD_REQUEST
        assert envelope.message == "Validation Error"
        assert envelope.payload == {"company": ["The company field is required."]}
        assert store.select() == []

    def test_non_text_company_is_rejected(self, service, store):
        envelope = service.store({"company": 42})

        assert envelope.status == StatusCode.BAD_REQUEST
        assert envelope.payload == {"company": ["The company must be a string."]}
        assert store.select() == []

    def test_validation_failure_is_not_logged(self, service, caplog):
        with caplog.at_level(logging.ERROR):
            service.store({"position": "Engineer"})

        assert not caplog.records

    def test_update_replaces_all_editable_fields(self, service, store):
        created = service.store(
            {"company": "Acme", "period": "2019-2021", "position": "Engineer", "details": "Built things"}
        ).payload

        envelope = service.store({"id": created["id"], "company": "Acme Corp", "position": "Lead"})

        assert envelope.status == StatusCode.SUCCESS
        assert envelope.message == "Data is successfully updated"
        record = store.find(created["id"])
        assert record["company"] == "Acme Corp"
        assert record["position"] == "Lead"
        assert record["period"] is None
        assert record["details"] is None
        assert record["created_at"] == created["created_at"]
        assert len(store.select()) == 1

    def test_update_of_unknown_id_returns_lookup_envelope(self, service, store):
        envelope = service.store({"id": 999, "company": "Ghost"})

        assert envelope.status == StatusCode.NOT_FOUND
        assert envelope.message == "No result is found"
        assert envelope.payload is None
        assert store.select() == []

    def test_update_validates_before_lookup(self, service, make_experiences):
        (experience_id,) = make_experiences("Acme")

        envelope = service.store({"id": experience_id})

        assert envelope.status == StatusCode.BAD_REQUEST

    def test_store_reporting_nothing_written_is_an_error(self, service):
        service.record_store = Mock()
        service.record_store.insert.return_value = None

        envelope = service.store({"company": "Acme"})

        assert envelope.status == StatusCode.ERROR
        assert envelope.message == "Something went wrong"
        assert envelope.payload is None

    def test_update_affecting_nothing_is_an_error(self, service, caplog):
        service.record_store = Mock()
        service.record_store.find.return_value = {"id": 7}
        service.record_store.update.return_value = None

        with caplog.at_level(logging.ERROR):
            envelope = service.store({"id": 7, "company": "Acme"})

        assert envelope.status == StatusCode.ERROR
        assert envelope.message == "Something went wrong"
        assert envelope.payload is None
        service.record_store.update.assert_called_once()
        assert service.record_store.update.call_args.args[0] == 7
        assert not caplog.records

    def test_non_text_optional_field_is_rejected(self, service, store, caplog):
        with caplog.at_level(logging.ERROR):
            envelope = service.store({"company": "Acme", "period": 2020, "details": ["a"]})

        assert envelope.status == StatusCode.BAD_REQUEST
        assert envelope.payload == {
            "period": ["The period must be a string."],
            "details": ["The details must be a string."],
        }
        assert store.select() == []
        assert not caplog.records

    def test_null_optional_fields_are_accepted(self, service):
        envelope = service.store({"company": "Acme", "period": None, "position": None, "details": None})

        assert envelope.status == StatusCode.SUCCESS
        assert envelope.payload["period"] is None

    @pytest.mark.parametrize("empty_id", ["", None])
    def test_empty_id_creates_a_record(self, service, store, empty_id):
        envelope = service.store({"id": empty_id, "company": "Acme"})

        assert envelope.status == StatusCode.SUCCESS
        assert envelope.message == "Data is successfully saved"
        assert len(store.select()) == 1


class TestGetById:
    def test_existing_record(self, service, make_experiences):
        first, second = make_experiences("Acme", "Globex")

        envelope = service.get_by_id(second)

        assert envelope.status == StatusCode.SUCCESS
        assert envelope.message == "Data is fetched successfully"
        assert envelope.payload["id"] == second
        assert envelope.payload["company"] == "Globex"

    def test_missing_record(self, service, make_experiences):
        make_experiences("Acme")

        envelope = service.get_by_id(12345)

        assert envelope.status == StatusCode.NOT_FOUND
        assert envelope.payload is None

    def test_projection(self, service, make_experiences):
        (experience_id,) = make_experiences("Acme")

        envelope = service.get_by_id(experience_id, ["id", "company"])

        assert envelope.payload == {"id": experience_id, "company": "Acme"}


class TestGetAllFields:
    def test_empty_table_is_a_success(self, service):
        envelope = service.get_all_fields()

        assert envelope.status == StatusCode.SUCCESS
        assert envelope.payload == []

    def test_returns_every_record(self, service, make_experiences):
        ids = make_experiences("Acme", "Globex", "Initech")

        envelope = service.get_all_fields(["id", "company"])

        assert envelope.payload == [
            {"id": ids[0], "company": "Acme"},
            {"id": ids[1], "company": "Globex"},
            {"id": ids[2], "company": "Initech"},
        ]

    def test_repeated_reads_are_identical(self, service, make_experiences):
        ids = make_experiences("Acme", "Globex")

        assert service.get_all_fields().payload == service.get_all_fields().payload
        assert service.get_by_id(ids[0]).payload == service.get_by_id(ids[0]).payload

    def test_no_result_from_store_is_not_found(self, service):
        service.record_store = Mock()
        service.record_store.select.return_value = None

        envelope = service.get_all_fields()

        assert envelope.status == StatusCode.NOT_FOUND
        assert envelope.message == "No result found"

    def test_unknown_column_is_reported_as_error(self, service):
        envelope = service.get_all_fields(["salary"])

        assert envelope.status == StatusCode.ERROR
        assert "Unknown column 'salary'" in envelope.payload


class TestDeleteByIds:
    def test_deletes_exactly_the_given_records(self, service, store, make_experiences):
        first, second, third = make_experiences("Acme", "Globex", "Initech")

        envelope = service.delete_by_ids([first, third])

        assert envelope.status == StatusCode.SUCCESS
        assert envelope.message == "Data is deleted successfully"
        assert envelope.payload == 2
        assert [record["id"] for record in store.select()] == [second]

    def test_second_delete_has_nothing_to_delete(self, service, make_experiences, caplog):
        (experience_id,) = make_experiences("Acme")

        assert service.delete_by_ids([experience_id]).payload == 1
        caplog.clear()
        with caplog.at_level(logging.DEBUG):
            envelope = service.delete_by_ids([experience_id])

        assert envelope.status == StatusCode.ERROR
        assert envelope.message == "Nothing to Delete"
        assert envelope.payload is None
        assert not caplog.records

    def test_empty_id_list(self, service, make_experiences):
        make_experiences("Acme")

        envelope = service.delete_by_ids([])

        assert envelope.message == "Nothing to Delete"
        assert len(service.get_all_fields().payload) == 1


class TestFaults:
    @pytest.fixture
    def broken_store(self):
        store = Mock()
        error = RuntimeError("database is locked")
        store.select.side_effect = error
        store.find.side_effect = error
        store.insert.side_effect = error
        store.paginate.side_effect = error
        store.delete.side_effect = error
        return store

    @pytest.mark.parametrize(
        "call",
        [
            lambda service: service.get_all_fields(),
            lambda service: service.get_by_id(1),
            lambda service: service.store({"company": "Acme"}),
            lambda service: service.store({"id": 1, "company": "Acme"}),
            lambda service: service.get_all_fields_with_paginate({}),
            lambda service: service.delete_by_ids([1]),
        ],
    )
    def test_fault_is_logged_and_returned(self, broken_store, call, caplog):
        service = ExperienceService(broken_store, expose_fault_details=True)

        with caplog.at_level(logging.ERROR):
            envelope = call(service)

        assert envelope.status == StatusCode.ERROR
        assert envelope.message == "Something went wrong"
        assert envelope.payload == "database is locked"
        assert any("database is locked" in record.getMessage() for record in caplog.records)

    def test_fault_details_can_be_hidden(self, broken_store, caplog):
        logger = logging.getLogger("tests.experience")
        service = ExperienceService(broken_store, logger=logger, expose_fault_details=False)

        with caplog.at_level(logging.ERROR, logger="tests.experience"):
            envelope = service.get_all_fields()

        assert envelope.payload == GENERIC_FAULT_MESSAGE
        assert "database is locked" in caplog.records[0].getMessage()
        assert caplog.records[0].name == "tests.experience"

    def test_invalid_id_is_a_fault(self, service):
        envelope = service.get_by_id("abc")

        assert envelope.status == StatusCode.ERROR
