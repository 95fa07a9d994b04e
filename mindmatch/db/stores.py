"""
Record Stores - the persistence capability every service depends on.

Two interchangeable backends:
- InMemoryRecordStore: a keyed dict per table (mock / development mode)
- SqlRecordStore: SQLAlchemy text() queries against Postgres (live mode)

Both share the same semantics, implemented once in RecordStore:
generated ids, created/updated timestamps, column whitelisting,
immutable columns and append-only tables.
"""

import copy
import json
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, ProgrammingError, SQLAlchemyError

from mindmatch.core.errors import (
    AlreadyExistsError,
    ImmutableRecordError,
    NotFoundError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from mindmatch.db.postgres import get_db_session, make_session_factory
from mindmatch.db.schema import TableSpec

logger = logging.getLogger(__name__)

# Postgres SQLSTATE codes
UNIQUE_VIOLATION = "23505"
INSUFFICIENT_PRIVILEGE = "42501"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _normalize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_normalize(v) for v in value]
    if isinstance(value, dict):
        return {k: _normalize(v) for k, v in value.items()}
    return value


class RecordStore(ABC):
    """Insert-one / select-by-id / update-by-id over a single table."""

    def __init__(self, spec: TableSpec):
        self.spec = spec

    @property
    def table(self) -> str:
        return self.spec.name

    def _check_columns(self, fields: Dict[str, Any]) -> None:
        unknown = set(fields) - set(self.spec.columns)
        if unknown:
            raise ValidationError(
                f"Unknown column(s) for {self.table}: {', '.join(sorted(unknown))}"
            )

    def insert(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a record, assigning an id and timestamps. Returns the stored row."""
        self._check_columns(record)
        row = {k: _normalize(v) for k, v in record.items()}
        if not row.get("id"):
            row["id"] = str(uuid.uuid4())
        now = utc_now()
        if self.spec.created_field:
            row[self.spec.created_field] = now
        if self.spec.updated_field:
            row[self.spec.updated_field] = now
        return self._insert(row)

    def get(self, record_id: str) -> Dict[str, Any]:
        """Fetch by id. Raises NotFoundError when absent."""
        row = self._get(record_id)
        if row is None:
            raise NotFoundError(f"{self.table} record {record_id} not found")
        return row

    def update(self, record_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        """Merge fields into an existing record and refresh its updated timestamp."""
        if self.spec.append_only:
            raise ImmutableRecordError(f"{self.table} records cannot be updated")
        self._check_columns(fields)
        changes = {
            k: _normalize(v) for k, v in fields.items() if k not in self.spec.immutable
        }
        if self.spec.updated_field:
            changes[self.spec.updated_field] = utc_now()
        return self._update(record_id, changes)

    def find(
        self,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> List[Dict[str, Any]]:
        """Select rows matching all equality filters."""
        self._check_columns(filters)
        if order_by is not None:
            self._check_columns({order_by: None})
        return self._find(
            {k: _normalize(v) for k, v in filters.items()}, order_by, descending, limit
        )

    def find_one(self, **filters: Any) -> Optional[Dict[str, Any]]:
        rows = self.find(limit=1, **filters)
        return rows[0] if rows else None

    @abstractmethod
    def _insert(self, row: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    def _get(self, record_id: str) -> Optional[Dict[str, Any]]: ...

    @abstractmethod
    def _update(self, record_id: str, changes: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    def _find(
        self,
        filters: Dict[str, Any],
        order_by: Optional[str],
        descending: bool,
        limit: Optional[int],
    ) -> List[Dict[str, Any]]: ...


# ============================================================
# IN-MEMORY BACKEND
# ============================================================

class InMemoryRecordStore(RecordStore):
    """
    Dict-backed store for development and tests.
    Rows are deep-copied on the way in and out so callers never share state.
    """

    def __init__(self, spec: TableSpec):
        super().__init__(spec)
        self._rows: Dict[str, Dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._rows)

    def _violates_unique(self, row: Dict[str, Any], ignore_id: Optional[str] = None) -> Optional[tuple]:
        for group in self.spec.unique:
            key = tuple(row.get(col) for col in group)
            if any(v is None for v in key):
                continue
            for existing_id, existing in self._rows.items():
                if existing_id == ignore_id:
                    continue
                if tuple(existing.get(col) for col in group) == key:
                    return group
        return None

    def _insert(self, row: Dict[str, Any]) -> Dict[str, Any]:
        if row["id"] in self._rows:
            raise AlreadyExistsError(f"{self.table} record {row['id']} already exists")
        group = self._violates_unique(row)
        if group:
            raise AlreadyExistsError(
                f"{self.table} record with the same {', '.join(group)} already exists"
            )
        full = {col: None for col in self.spec.columns}
        full.update(copy.deepcopy(row))
        self._rows[row["id"]] = full
        return copy.deepcopy(full)

    def _get(self, record_id: str) -> Optional[Dict[str, Any]]:
        row = self._rows.get(record_id)
        return copy.deepcopy(row) if row is not None else None

    def _update(self, record_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        existing = self._rows.get(record_id)
        if existing is None:
            raise NotFoundError(f"{self.table} record {record_id} not found")
        merged = {**existing, **copy.deepcopy(changes)}
        group = self._violates_unique(merged, ignore_id=record_id)
        if group:
            raise AlreadyExistsError(
                f"{self.table} record with the same {', '.join(group)} already exists"
            )
        self._rows[record_id] = merged
        return copy.deepcopy(merged)

    def _find(self, filters, order_by, descending, limit):
        rows = [
            row for row in self._rows.values()
            if all(row.get(k) == v for k, v in filters.items())
        ]
        if order_by:
            rows.sort(key=lambda r: (r.get(order_by) is None, r.get(order_by)), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return copy.deepcopy(rows)


# ============================================================
# SQL BACKEND
# ============================================================

class SqlRecordStore(RecordStore):
    """
    Remote relational backend. Table and column names only ever come from the
    TableSpec whitelist; values are always bound parameters.
    """

    def __init__(self, spec: TableSpec, engine: Engine):
        super().__init__(spec)
        self.engine = engine
        self.session_factory = make_session_factory(engine)

    def _bind(self, values: Dict[str, Any]) -> Dict[str, Any]:
        params = {}
        for key, value in values.items():
            if key in self.spec.json_columns and value is not None:
                value = json.dumps(value)
            elif isinstance(value, (datetime, date)):
                value = value.isoformat()
            params[key] = value
        return params

    def _decode(self, row) -> Dict[str, Any]:
        record = dict(row._mapping)
        for col in self.spec.json_columns:
            value = record.get(col)
            if isinstance(value, str):
                record[col] = json.loads(value)
        return record

    def _execute(self, sql: str, params: Dict[str, Any]):
        try:
            with get_db_session(self.session_factory) as db:
                result = db.execute(text(sql), params)
                return result.fetchall() if result.returns_rows else None
        except IntegrityError as e:
            if getattr(e.orig, "pgcode", None) == UNIQUE_VIOLATION or "unique" in str(e.orig).lower():
                raise AlreadyExistsError(f"{self.table} record already exists") from e
            raise ValidationError(f"{self.table} constraint violated: {e.orig}") from e
        except ProgrammingError as e:
            message = str(e.orig).lower()
            if (
                getattr(e.orig, "pgcode", None) == INSUFFICIENT_PRIVILEGE
                or "permission denied" in message
                or "row-level security" in message
            ):
                raise UnauthorizedError(f"Not authorized to access {self.table}") from e
            raise TransportError(f"Query on {self.table} failed: {e.orig}") from e
        except SQLAlchemyError as e:
            raise TransportError(f"Query on {self.table} failed: {e}") from e

    def _insert(self, row: Dict[str, Any]) -> Dict[str, Any]:
        columns = list(row)
        self._execute(
            f"INSERT INTO {self.table} ({', '.join(columns)}) "
            f"VALUES ({', '.join(':' + c for c in columns)})",
            self._bind(row),
        )
        return self.get(row["id"])

    def _get(self, record_id: str) -> Optional[Dict[str, Any]]:
        rows = self._execute(f"SELECT * FROM {self.table} WHERE id = :id", {"id": record_id})
        return self._decode(rows[0]) if rows else None

    def _update(self, record_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        if self._get(record_id) is None:
            raise NotFoundError(f"{self.table} record {record_id} not found")
        if changes:
            assignments = ", ".join(f"{col} = :{col}" for col in changes)
            params = self._bind(changes)
            params["_record_id"] = record_id
            self._execute(
                f"UPDATE {self.table} SET {assignments} WHERE id = :_record_id", params
            )
        return self.get(record_id)

    def _find(self, filters, order_by, descending, limit):
        sql = f"SELECT * FROM {self.table}"
        params = self._bind(filters)
        if filters:
            sql += " WHERE " + " AND ".join(f"{col} = :{col}" for col in filters)
        if order_by:
            sql += f" ORDER BY {order_by} {'DESC' if descending else 'ASC'}"
        if limit is not None:
            sql += " LIMIT :_limit"
            params["_limit"] = int(limit)
        rows = self._execute(sql, params) or []
        return [self._decode(row) for row in rows]


def build_record_stores(tables: Dict[str, TableSpec], engine: Optional[Engine] = None) -> Dict[str, RecordStore]:
    """One store per table: SQL when an engine is given, in-memory otherwise."""
    if engine is None:
        logger.info("Using in-memory record stores (mock mode)")
        return {name: InMemoryRecordStore(spec) for name, spec in tables.items()}
    logger.info("Using SQL record stores on %s", engine.url.render_as_string(hide_password=True))
    return {name: SqlRecordStore(spec, engine) for name, spec in tables.items()}
