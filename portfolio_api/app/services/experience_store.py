"""
Persistence for experience records.

``ExperienceStore`` is the narrow capability the service depends on:
select, find, insert, update, delete and paginate over the
``experiences`` table.  ``SQLiteExperienceStore`` implements it on top
of ``core.db``.

All values go through parameterized statements.  Column names cannot
be parameters, so every column used for projection, ordering or search
is checked against ``COLUMNS`` first; an unknown name raises
``UnknownColumnError`` the same way a database would reject it.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List, Optional, Protocol, Sequence

from portfolio_api.app.core.db import TIMESTAMP_NOW, get_cursor
from portfolio_api.app.schemas.experience import ExperienceFields, ExperiencePage, SortOrder


COLUMNS = ("id", "company", "period", "position", "details", "created_at", "updated_at")


class UnknownColumnError(ValueError):
    def __init__(self, column: Any):
        super().__init__(f"Unknown column '{column}' in table experiences")
        self.column = column


class ExperienceStore(Protocol):
    def select(self, columns: Optional[Sequence[str]] = None) -> Optional[List[Dict[str, Any]]]:
        ...

    def find(self, experience_id: int, columns: Optional[Sequence[str]] = None) -> Optional[Dict[str, Any]]:
        ...

    def insert(self, fields: ExperienceFields) -> Optional[Dict[str, Any]]:
        ...

    def update(self, experience_id: int, fields: ExperienceFields) -> Optional[Dict[str, Any]]:
        ...

    def delete(self, ids: Sequence[int]) -> int:
        ...

    def paginate(
        self,
        per_page: int,
        page: int = 1,
        columns: Optional[Sequence[str]] = None,
        sort: Optional[SortOrder] = None,
        keyword: Optional[str] = None,
        search_columns: Sequence[str] = (),
    ) -> Optional[ExperiencePage]:
        ...


def _check_column(column: Any) -> str:
    if column not in COLUMNS:
        raise UnknownColumnError(column)
    return column


def _projection(columns: Optional[Sequence[str]]) -> str:
    if not columns or list(columns) == ["*"]:
        return "*"
    return ", ".join(_check_column(column) for column in columns)


def _escape_like(keyword: str) -> str:
    return keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLiteExperienceStore:
    """``ExperienceStore`` backed by the application's SQLite database."""

    def __init__(self, db_path: Optional[str] = None):
        # ``None`` means the database configured in settings.
        self.db_path = db_path

    def select(self, columns: Optional[Sequence[str]] = None) -> Optional[List[Dict[str, Any]]]:
        query = f"SELECT {_projection(columns)} FROM experiences ORDER BY id"
        with get_cursor(self.db_path) as cursor:
            rows = cursor.execute(query).fetchall()
        return [dict(row) for row in rows]

    def find(self, experience_id: int, columns: Optional[Sequence[str]] = None) -> Optional[Dict[str, Any]]:
        query = f"SELECT {_projection(columns)} FROM experiences WHERE id = ?"
        with get_cursor(self.db_path) as cursor:
            row = cursor.execute(query, (experience_id,)).fetchone()
        return dict(row) if row else None

    def insert(self, fields: ExperienceFields) -> Optional[Dict[str, Any]]:
        with get_cursor(self.db_path) as cursor:
            cursor.execute(
                """
                INSERT INTO experiences (company, period, position, details)
                VALUES (?, ?, ?, ?)
                """,
                (fields.company, fields.period, fields.position, fields.details),
            )
            experience_id = cursor.lastrowid
            row = cursor.execute("SELECT * FROM experiences WHERE id = ?", (experience_id,)).fetchone()
        return dict(row) if row else None

    def update(self, experience_id: int, fields: ExperienceFields) -> Optional[Dict[str, Any]]:
        """Overwrite the editable fields of a record.

        Returns the record as stored after the update, or ``None`` when no
        row has the given id.
        """
        with get_cursor(self.db_path) as cursor:
            cursor.execute(
                f"""
                UPDATE experiences
                SET company = ?, period = ?, position = ?, details = ?, updated_at = {TIMESTAMP_NOW}
                WHERE id = ?
                """,
                (fields.company, fields.period, fields.position, fields.details, experience_id),
            )
            if cursor.rowcount == 0:
                return None
            row = cursor.execute("SELECT * FROM experiences WHERE id = ?", (experience_id,)).fetchone()
        return dict(row) if row else None

    def delete(self, ids: Sequence[int]) -> int:
        """Delete every record whose id is in ``ids`` and return the row count."""
        ids = list(ids)
        if not ids:
            return 0
        placeholders = ", ".join("?" for _ in ids)
        with get_cursor(self.db_path) as cursor:
            cursor.execute(f"DELETE FROM experiences WHERE id IN ({placeholders})", tuple(ids))
            return cursor.rowcount

    def paginate(
        self,
        per_page: int,
        page: int = 1,
        columns: Optional[Sequence[str]] = None,
        sort: Optional[SortOrder] = None,
        keyword: Optional[str] = None,
        search_columns: Sequence[str] = (),
    ) -> Optional[ExperiencePage]:
        """Return one page of records.

        When both ``keyword`` and ``search_columns`` are given, only rows
        where at least one of those columns contains the keyword are
        counted and returned.  Rows that tie on the sort column are
        ordered by id in the same direction.
        """
        if per_page < 1:
            raise ValueError("per_page must be a positive integer")
        if page < 1:
            raise ValueError("page must be a positive integer")
        sort = sort or SortOrder()
        sort_column = _check_column(sort.column)
        direction = sort.direction.value.upper()

        where = ""
        params: list = []
        if keyword and search_columns:
            clauses = [f"{_check_column(column)} LIKE ? ESCAPE '\\'" for column in search_columns]
            where = " WHERE (" + " OR ".join(clauses) + ")"
            params.extend(f"%{_escape_like(keyword)}%" for _ in search_columns)

        offset = (page - 1) * per_page
        with get_cursor(self.db_path) as cursor:
            total = cursor.execute(f"SELECT COUNT(*) AS total FROM experiences{where}", tuple(params)).fetchone()["total"]
            rows = cursor.execute(
                f"SELECT {_projection(columns)} FROM experiences{where} "
                f"ORDER BY {sort_column} {direction}, id {direction} LIMIT ? OFFSET ?",
                tuple(params) + (per_page, offset),
            ).fetchall()

        data = [dict(row) for row in rows]
        return ExperiencePage(
            data=data,
            total=total,
            current_page=page,
            per_page=per_page,
            last_page=max(math.ceil(total / per_page), 1),
            from_=offset + 1 if data else None,
            to=offset + len(data) if data else None,
        )
