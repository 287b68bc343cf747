"""
Experience endpoints for API v1.

Each route maps onto one ``ExperienceService`` operation and returns
its envelope as the JSON body, with the HTTP status code taken from the
envelope's ``status``.  The listing route receives the table state the
way table widgets send it: ``params`` and ``sorter`` as JSON text and
one JSON encoded ``columns`` value per table column.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from portfolio_api.app.schemas.response import Envelope
from portfolio_api.app.services.experience_service import ExperienceService
from portfolio_api.app.services.experience_store import SQLiteExperienceStore


router = APIRouter()


class DeleteRequest(BaseModel):
    ids: List[int]


def get_experience_service() -> ExperienceService:
    """Build the service on the configured database.

    Tests replace this dependency via ``app.dependency_overrides``.
    """
    return ExperienceService(SQLiteExperienceStore())


def _respond(envelope: Envelope) -> JSONResponse:
    return JSONResponse(status_code=int(envelope.status), content=jsonable_encoder(envelope))


@router.get("/")
def list_experiences(service: ExperienceService = Depends(get_experience_service)) -> JSONResponse:
    """Return every experience record."""
    return _respond(service.get_all_fields())


@router.get("/paginate")
def paginate_experiences(
    params: Optional[str] = Query(None, description='JSON object, e.g. {"pageSize": 10, "keyword": "Acme"}'),
    sorter: Optional[str] = Query(None, description='JSON object, e.g. {"company": "ascend"}'),
    columns: Optional[List[str]] = Query(None, description='JSON column descriptors, e.g. {"dataIndex": "company", "search": true}'),
    page: int = Query(1, ge=1),
    service: ExperienceService = Depends(get_experience_service),
) -> JSONResponse:
    """Return one page of experiences with optional keyword search and sorting."""
    data = {"params": params, "sorter": sorter, "columns": columns}
    return _respond(service.get_all_fields_with_paginate(data, page=page))


@router.get("/{experience_id}")
def get_experience(
    experience_id: int,
    service: ExperienceService = Depends(get_experience_service),
) -> JSONResponse:
    return _respond(service.get_by_id(experience_id))


@router.post("/")
def store_experience(
    data: Dict[str, Any] = Body(...),
    service: ExperienceService = Depends(get_experience_service),
) -> JSONResponse:
    """Create an experience, or update it when the body carries an ``id``.

    The body is passed through unvalidated so that a missing ``company``
    comes back as the service's ``Validation Error`` envelope instead of
    FastAPI's 422 response.
    """
    return _respond(service.store(data))


@router.delete("/")
def delete_experiences(
    request: DeleteRequest,
    service: ExperienceService = Depends(get_experience_service),
) -> JSONResponse:
    return _respond(service.delete_by_ids(request.ids))
