"""
Table-scoped CRUD over SQLAlchemy.

Every terminal call returns GatewayResult(data, error): rows come back as plain
dicts (model.to_dict()), and any store exception is rolled back, logged and
reduced to an error string. Callers that cannot continue on error use unwrap().
"""
from __future__ import annotations

import logging
import uuid
from typing import Any, NamedTuple, Optional, Union

from sqlalchemy import Uuid, select as sa_select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from careerpage.core.exceptions import PersistenceFailure

logger = logging.getLogger(__name__)


class GatewayResult(NamedTuple):
    data: Any
    error: Optional[str]

    def unwrap(self) -> Any:
        if self.error:
            raise PersistenceFailure(self.error)
        return self.data


class GatewayError(ValueError):
    """Bad column name or value, detected before the store is touched."""


class TableQuery:
    """A select being built up with filter()/order(); run with execute() or maybe_single()."""

    def __init__(self, gateway: "TableGateway", columns: str = "*"):
        self._gateway = gateway
        self._columns = columns
        self._filters: list[tuple[str, Any]] = []
        self._order: list[tuple[str, str]] = []

    def filter(self, column: str, value: Any) -> "TableQuery":
        self._filters.append((column, value))
        return self

    def order(self, column: str, direction: str = "asc") -> "TableQuery":
        self._order.append((column, direction))
        return self

    def execute(self) -> GatewayResult:
        return self._gateway._run_select(self._columns, self._filters, self._order, single=False)

    def maybe_single(self) -> GatewayResult:
        """Like execute(), but data is the first row or None."""
        return self._gateway._run_select(self._columns, self._filters, self._order, single=True)


class TableGateway:
    def __init__(self, db: Session, model):
        self.db = db
        self.model = model
        self.table = model.__table__

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _column(self, name: str):
        if name not in self.table.columns:
            raise GatewayError(f"Unknown column '{name}' on {self.table.name}")
        return self.table.columns[name]

    def _coerce(self, name: str, value: Any) -> Any:
        column = self._column(name)
        if isinstance(column.type, Uuid) and isinstance(value, str):
            try:
                return uuid.UUID(value)
            except ValueError as exc:
                raise GatewayError(f"Invalid id for {name}: {value!r}") from exc
        return value

    def _coerce_record(self, record: dict) -> dict:
        return {key: self._coerce(key, value) for key, value in record.items()}

    def _columns(self, columns: str) -> Optional[list[str]]:
        if not columns or columns.strip() == "*":
            return None
        names = [c.strip() for c in columns.split(",") if c.strip()]
        for name in names:
            self._column(name)
        return names

    @staticmethod
    def _project(row: dict, names: Optional[list[str]]) -> dict:
        if names is None:
            return row
        return {name: row.get(name) for name in names}

    def _fail(self, action: str, exc: Exception) -> GatewayResult:
        self.db.rollback()
        logger.error("%s on %s failed: %s", action, self.table.name, exc)
        return GatewayResult(None, str(exc))

    def _get(self, record_id: Union[str, uuid.UUID]):
        return self.db.get(self.model, self._coerce("id", record_id))

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def select(self, columns: str = "*") -> TableQuery:
        return TableQuery(self, columns)

    def _run_select(self, columns, filters, order, single: bool) -> GatewayResult:
        try:
            names = self._columns(columns)
            stmt = sa_select(self.model)
            for name, value in filters:
                stmt = stmt.where(self._column(name) == self._coerce(name, value))
            for name, direction in order:
                col = self._column(name)
                stmt = stmt.order_by(col.desc() if direction == "desc" else col.asc())
            rows = self.db.scalars(stmt).all()
        except (GatewayError, SQLAlchemyError) as exc:
            return self._fail("select", exc)
        data = [self._project(r.to_dict(), names) for r in rows]
        if single:
            return GatewayResult(data[0] if data else None, None)
        return GatewayResult(data, None)

    def insert(self, records: Union[dict, list[dict]]) -> GatewayResult:
        """Insert one record or a batch in a single commit; a batch is all-or-nothing."""
        many = isinstance(records, list)
        batch = records if many else [records]
        try:
            objs = [self.model(**self._coerce_record(r)) for r in batch]
            self.db.add_all(objs)
            self.db.commit()
        except (GatewayError, TypeError, SQLAlchemyError) as exc:
            return self._fail("insert", exc)
        data = [o.to_dict() for o in objs]
        return GatewayResult(data if many else data[0], None)

    def update(self, record_id: Union[str, uuid.UUID], partial: dict) -> GatewayResult:
        try:
            obj = self._get(record_id)
            if obj is None:
                return GatewayResult(None, f"{self.table.name} row {record_id} not found")
            for key, value in self._coerce_record(partial).items():
                setattr(obj, key, value)
            self.db.commit()
        except (GatewayError, SQLAlchemyError) as exc:
            return self._fail("update", exc)
        return GatewayResult(obj.to_dict(), None)

    def delete(self, record_id: Union[str, uuid.UUID]) -> GatewayResult:
        try:
            obj = self._get(record_id)
            if obj is None:
                return GatewayResult(None, f"{self.table.name} row {record_id} not found")
            data = obj.to_dict()
            self.db.delete(obj)
            self.db.commit()
        except (GatewayError, SQLAlchemyError) as exc:
            return self._fail("delete", exc)
        return GatewayResult(data, None)
