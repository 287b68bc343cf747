"""
Pydantic schemas for experience records.

An experience entry describes one position held at a company: the
``company`` name (required), the ``period``, the ``position`` title and
free form ``details``.  Besides the record shapes this module defines
the typed listing request.  Table clients send the listing state as
JSON encoded query values (``params``, ``sorter`` and one ``columns``
entry per table column); ``ListingRequest`` decodes them once and
applies the defaults, so the service and the store only ever see typed
values.
"""

import json
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator
from pydantic_core import PydanticCustomError


DEFAULT_SORT_COLUMN = "created_at"


class ExperienceStoreRules(BaseModel):
    """Rule set applied by ``ExperienceService.store``.

    ``company`` is required and must be text.  Blank strings count as
    missing.  ``period``, ``position`` and ``details`` may be absent or
    null but must be text otherwise.
    """

    model_config = ConfigDict(extra="ignore")

    company: StrictStr
    period: Optional[StrictStr] = None
    position: Optional[StrictStr] = None
    details: Optional[StrictStr] = None

    @field_validator("company", mode="before")
    @classmethod
    def _company_required(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise PydanticCustomError("required", "company is required")
        return value


class ExperienceFields(BaseModel):
    """The editable fields of a record, normalized for insert and update."""

    company: str
    period: Optional[str] = None
    position: Optional[str] = None
    details: Optional[str] = None

    @classmethod
    def from_input(cls, data: Mapping[str, Any]) -> "ExperienceFields":
        # Absent optional fields are written as NULL, never left untouched.
        return cls(
            company=data["company"],
            period=data.get("period"),
            position=data.get("position"),
            details=data.get("details"),
        )


class ExperiencePage(BaseModel):
    """One page of a listing plus the pagination metadata."""

    model_config = ConfigDict(populate_by_name=True)

    data: List[Dict[str, Any]]
    total: int
    current_page: int
    per_page: int
    last_page: int
    from_: Optional[int] = Field(None, alias="from")
    to: Optional[int] = None


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class SortOrder(BaseModel):
    column: str = DEFAULT_SORT_COLUMN
    direction: SortDirection = SortDirection.DESC

    @classmethod
    def from_sorter(cls, sorter: Mapping[str, Any]) -> "SortOrder":
        """Build the order from a ``{column: "ascend" | "descend"}`` mapping.

        Only one column is ever sorted on: when the mapping holds several
        entries the last one wins.
        """
        order = cls()
        for column, value in sorter.items():
            direction = SortDirection.ASC if value == "ascend" else SortDirection.DESC
            order = cls(column=column, direction=direction)
        return order


class ListingParams(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    page_size: Optional[int] = Field(None, alias="pageSize", ge=1)
    keyword: Optional[str] = None

    @field_validator("page_size", mode="before")
    @classmethod
    def _empty_page_size(cls, value: Any) -> Any:
        # 0, "" and null all mean "use the default page size"
        return value or None

    @field_validator("keyword", mode="before")
    @classmethod
    def _empty_keyword(cls, value: Any) -> Any:
        if value is None or value == "":
            return None
        return str(value)


class ColumnDescriptor(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    data_index: Optional[str] = Field(None, alias="dataIndex")
    search: Any = False

    @property
    def is_searchable(self) -> bool:
        # Only a literal JSON ``true`` enables search on a column.
        return self.search is True and bool(self.data_index)


def _decode_json(value: Any) -> Any:
    if isinstance(value, bytes):
        value = value.decode("utf-8")
    if isinstance(value, str):
        return json.loads(value) if value.strip() else None
    return value


class ListingRequest(BaseModel):
    """Listing state of a table: page size, keyword, sort and columns.

    Each field accepts either the JSON text sent by the client or the
    already decoded value.  Malformed JSON raises a validation error.
    """

    params: ListingParams = Field(default_factory=ListingParams)
    sorter: SortOrder = Field(default_factory=SortOrder)
    columns: List[ColumnDescriptor] = Field(default_factory=list)

    @field_validator("params", mode="before")
    @classmethod
    def _parse_params(cls, value: Any) -> Any:
        if isinstance(value, ListingParams):
            return value
        return _decode_json(value) or {}

    @field_validator("sorter", mode="before")
    @classmethod
    def _parse_sorter(cls, value: Any) -> Any:
        if isinstance(value, SortOrder):
            return value
        decoded = _decode_json(value)
        if not decoded:
            return SortOrder()
        if not isinstance(decoded, dict):
            raise ValueError("sorter must be a JSON object")
        return SortOrder.from_sorter(decoded)

    @field_validator("columns", mode="before")
    @classmethod
    def _parse_columns(cls, value: Any) -> Any:
        if not value:
            return []
        if isinstance(value, (str, bytes)):
            value = _decode_json(value) or []
        return [_decode_json(column) for column in value]

    @classmethod
    def from_raw(cls, data: Mapping[str, Any]) -> "ListingRequest":
        """Parse the raw ``params``/``sorter``/``columns`` values of a request."""
        return cls.model_validate(
            {
                "params": data.get("params"),
                "sorter": data.get("sorter"),
                "columns": data.get("columns"),
            }
        )

    @property
    def keyword(self) -> Optional[str]:
        return self.params.keyword

    @property
    def search_columns(self) -> List[str]:
        return [column.data_index for column in self.columns if column.is_searchable]
