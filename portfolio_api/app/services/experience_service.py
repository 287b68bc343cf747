"""
Service layer for experience records.

``ExperienceService`` mediates every read and write of the experience
table behind a uniform result: each operation returns an ``Envelope``
(``message``, ``payload``, ``status``) and never raises.  The outcomes
are:

* validation failures -> ``BAD_REQUEST`` with per-field messages;
* lookups that find nothing -> ``NOT_FOUND``;
* mutations that affect no row -> ``ERROR`` with an empty payload;
* unexpected exceptions -> logged, then ``ERROR`` with the exception
  message as payload (or a generic text when
  ``settings.expose_fault_details`` is off).

The record store, validator and logger are passed in at construction,
which keeps the service free of global state and lets tests substitute
any of them.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

from portfolio_api.app.core.config import settings
from portfolio_api.app.schemas.experience import ExperienceFields, ExperienceStoreRules, ListingRequest
from portfolio_api.app.schemas.response import (
    Envelope,
    bad_request_envelope,
    error_envelope,
    not_found_envelope,
    success_envelope,
)
from portfolio_api.app.services.experience_store import ExperienceStore
from portfolio_api.app.services.validation import Validator


GENERIC_FAULT_MESSAGE = "An internal error occurred"


class ExperienceService:
    """Fetch, list, upsert and delete experience records."""

    def __init__(
        self,
        store: ExperienceStore,
        validator: Optional[Validator] = None,
        logger: Optional[logging.Logger] = None,
        expose_fault_details: Optional[bool] = None,
        default_page_size: Optional[int] = None,
    ):
        self.record_store = store
        self.validator = validator or Validator()
        self.logger = logger or logging.getLogger(__name__)
        self.expose_fault_details = (
            settings.expose_fault_details if expose_fault_details is None else expose_fault_details
        )
        self.default_page_size = default_page_size or settings.default_page_size

    def get_all_fields(self, columns: Optional[Sequence[str]] = None) -> Envelope:
        """Return every record, projected to ``columns`` (all by default)."""
        try:
            records = self.record_store.select(columns)
            if records is None:
                return not_found_envelope()
            return success_envelope(records)
        except Exception as exc:
            return self._fault("get_all_fields", exc)

    def get_by_id(self, experience_id: Union[int, str], columns: Optional[Sequence[str]] = None) -> Envelope:
        try:
            record = self.record_store.find(int(experience_id), columns)
            if not record:
                return not_found_envelope("No result is found")
            return success_envelope(record)
        except Exception as exc:
            return self._fault("get_by_id", exc)

    def store(self, data: Mapping[str, Any]) -> Envelope:
        """Create a record, or overwrite one when ``data`` carries an ``id``.

        ``company`` is required.  ``period``, ``position`` and ``details``
        are reset to ``None`` when not supplied.  An ``id`` that does not
        exist yields the ``NOT_FOUND`` envelope of the lookup unchanged.
        """
        try:
            validation = self.validator.validate(data, ExperienceStoreRules)
            if validation.fails():
                return bad_request_envelope(validation.errors)

            fields = ExperienceFields.from_input(data)
            experience_id = data.get("id")
            # An empty id, as sent by a blank form field, means "create".
            is_update = experience_id not in (None, "")

            if is_update:
                existing = self.get_by_id(experience_id, ["id"])
                if not existing.is_success:
                    return existing
                record = self.record_store.update(existing.payload["id"], fields)
            else:
                record = self.record_store.insert(fields)

            if not record:
                return error_envelope()

            if is_update:
                self.logger.info("Updated experience %s", record["id"])
                return success_envelope(record, "Data is successfully updated")
            self.logger.info("Created experience %s", record["id"])
            return success_envelope(record, "Data is successfully saved")
        except Exception as exc:
            return self._fault("store", exc)

    def get_all_fields_with_paginate(
        self,
        data: Union[ListingRequest, Mapping[str, Any]],
        columns: Optional[Sequence[str]] = None,
        page: int = 1,
    ) -> Envelope:
        """Return one page of records with keyword search and sorting.

        ``data`` is either a parsed ``ListingRequest`` or the raw request
        values (``params``, ``sorter``, ``columns`` as JSON text).  The
        page number comes from the caller, never from ``data``.
        """
        try:
            request = data if isinstance(data, ListingRequest) else ListingRequest.from_raw(data)
            result = self.record_store.paginate(
                per_page=request.params.page_size or self.default_page_size,
                page=page,
                columns=columns,
                sort=request.sorter,
                keyword=request.keyword,
                search_columns=request.search_columns,
            )
            if result is None:
                return not_found_envelope()
            return success_envelope(result)
        except Exception as exc:
            return self._fault("get_all_fields_with_paginate", exc)

    def delete_by_ids(self, ids: Iterable[Union[int, str]]) -> Envelope:
        try:
            deleted = self.record_store.delete([int(experience_id) for experience_id in ids])
            if deleted > 0:
                self.logger.info("Deleted %s experience(s)", deleted)
                return success_envelope(deleted, "Data is deleted successfully")
            return error_envelope(message="Nothing to Delete")
        except Exception as exc:
            return self._fault("delete_by_ids", exc)

    def _fault(self, operation: str, exc: Exception) -> Envelope:
        self.logger.error("Experience %s failed: %s", operation, exc)
        return error_envelope(str(exc) if self.expose_fault_details else GENERIC_FAULT_MESSAGE)
