"""
Generic table accessor used by the admin API and the public forms.

Every operation either returns rows/models or raises StorageError carrying the
raw driver message and the HTTP status the caller should answer with:

  * 400  constraint or coercion failure (bad input)
  * 404  row not found
  * 500  anything else
"""
from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type

import sqlalchemy as sa
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError, StatementError

from hopefoundation.extensions import db
from hopefoundation.models import (
    ContactMessage,
    Donation,
    Event,
    NewsletterSubscriber,
    Profile,
    Program,
    Project,
    ResponseTime,
    SiteSetting,
    SiteStat,
)

log = logging.getLogger(__name__)

# Managed by the database / mixins; silently ignored on writes.
SERVER_MANAGED = frozenset({"created_at", "updated_at"})

_TRUE = {"1", "true", "yes", "y", "on"}
_FALSE = {"0", "false", "no", "n", "off"}


class StorageError(Exception):
    def __init__(self, message: str, status: int = 500):
        super().__init__(message)
        self.message = message
        self.status = status

    def __str__(self) -> str:
        return self.message


# ─────────────────────────────────────────────────────────────
# Value coercion
# ─────────────────────────────────────────────────────────────
def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    s = str(value).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ValueError(f"not a boolean: {value!r}")


def _to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    else:
        s = str(value).strip()
        if s.endswith("Z"):
            s = s[:-1] + "+00:00"
        dt = datetime.fromisoformat(s)
    # stored as naive UTC
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _to_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def _to_json_list(value: Any) -> Any:
    if isinstance(value, str):
        value = json.loads(value) if value.strip() else []
    if not isinstance(value, (list, dict)):
        raise ValueError("expected a JSON list")
    return value


def coerce_value(column: sa.Column, value: Any) -> Any:
    """Convert a wire value (usually a JSON scalar) into the column's Python type."""
    if value is None:
        return None

    t = column.type
    if isinstance(t, sa.JSON):
        return _to_json_list(value)

    if value == "" and not isinstance(t, (sa.String, sa.Text)):
        return None

    if isinstance(t, sa.Boolean):
        return _to_bool(value)
    if isinstance(t, sa.Integer):
        if isinstance(value, bool):
            raise ValueError(f"not an integer: {value!r}")
        if isinstance(value, float) and not value.is_integer():
            raise ValueError(f"not an integer: {value!r}")
        return int(value)
    if isinstance(t, sa.Numeric):
        if isinstance(value, bool):
            raise ValueError(f"not a number: {value!r}")
        try:
            return Decimal(str(value))
        except InvalidOperation as e:
            raise ValueError(f"not a number: {value!r}") from e
    if isinstance(t, sa.DateTime):
        return _to_datetime(value)
    if isinstance(t, sa.Date):
        return _to_date(value)
    if isinstance(t, (sa.String, sa.Text)):
        return str(value)
    return value


# ─────────────────────────────────────────────────────────────
# Table accessor
# ─────────────────────────────────────────────────────────────
class Table:
    """CRUD over one mapped model. No business rules live here."""

    def __init__(self, model: Type[Any]):
        self.model = model
        self.name: str = model.__tablename__

    @property
    def columns(self) -> Dict[str, sa.Column]:
        return {c.key: c for c in self.model.__table__.columns}

    def has_column(self, name: str) -> bool:
        return name in self.columns

    def _clean(self, values: Mapping[str, Any], *, allow_id: bool) -> Dict[str, Any]:
        cols = self.columns
        out: Dict[str, Any] = {}
        for key, raw in values.items():
            if key in SERVER_MANAGED:
                continue
            if key == "id" and not allow_id:
                continue
            col = cols.get(key)
            if col is None:
                raise StorageError(
                    f"Could not find the '{key}' column of '{self.name}'", 400
                )
            try:
                out[key] = coerce_value(col, raw)
            except (TypeError, ValueError) as e:
                raise StorageError(f"invalid value for column '{key}': {e}", 400) from e
        return out

    def _column(self, name: str) -> sa.Column:
        col = self.columns.get(name)
        if col is None:
            raise StorageError(f"Could not find the '{name}' column of '{self.name}'", 400)
        return getattr(self.model, name)

    def _commit(self) -> None:
        self._guarded(db.session.commit)

    def _guarded(self, op: Callable[[], None]) -> None:
        try:
            op()
        except IntegrityError as e:
            db.session.rollback()
            raise StorageError(str(e.orig), 400) from e
        except (DataError, StatementError) as e:
            db.session.rollback()
            raise StorageError(str(getattr(e, "orig", None) or e), 400) from e
        except SQLAlchemyError as e:
            db.session.rollback()
            log.exception("write failed on %s", self.name)
            raise StorageError(str(e), 500) from e

    # ---- reads ----
    def select(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        order: Optional[str] = None,
    ) -> List[Any]:
        """
        Equality filters ANDed together. `order` is a column name, prefixed
        with "-" for descending.
        """
        stmt = sa.select(self.model)
        for key, raw in (filters or {}).items():
            col = self._column(key)
            try:
                value = coerce_value(self.columns[key], raw)
            except (TypeError, ValueError) as e:
                raise StorageError(f"invalid value for column '{key}': {e}", 400) from e
            stmt = stmt.where(col.is_(None) if value is None else col == value)
        if order:
            desc = order.startswith("-")
            col = self._column(order.lstrip("-"))
            stmt = stmt.order_by(col.desc() if desc else col.asc())
        try:
            return list(db.session.scalars(stmt))
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError(str(e), 500) from e

    def get(self, row_id: str) -> Any:
        try:
            obj = db.session.get(self.model, row_id)
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError(str(e), 500) from e
        if obj is None:
            raise StorageError(f"{self.name} row {row_id} not found", 404)
        return obj

    def count(self, filters: Optional[Mapping[str, Any]] = None) -> int:
        stmt = sa.select(sa.func.count()).select_from(self.model)
        for key, raw in (filters or {}).items():
            stmt = stmt.where(self._column(key) == coerce_value(self.columns[key], raw))
        try:
            return int(db.session.scalar(stmt) or 0)
        except SQLAlchemyError as e:
            db.session.rollback()
            raise StorageError(str(e), 500) from e

    # ---- writes ----
    def insert(self, values: Mapping[str, Any]) -> Any:
        obj = self.model(**self._clean(values, allow_id=True))
        db.session.add(obj)
        self._commit()
        return obj

    def update(self, row_id: str, values: Mapping[str, Any]) -> Any:
        obj = self.get(row_id)
        for key, value in self._clean(values, allow_id=False).items():
            setattr(obj, key, value)
        self._commit()
        return obj

    def upsert(self, values: Mapping[str, Any], on_conflict: str = "key") -> Any:
        row = self._stage_upsert(values, on_conflict)
        self._commit()
        return row

    def _stage_upsert(self, values: Mapping[str, Any], on_conflict: str) -> Any:
        clean = self._clean(values, allow_id=False)
        if on_conflict not in clean:
            raise StorageError(f"upsert on '{self.name}' requires '{on_conflict}'", 400)
        existing = db.session.scalar(
            sa.select(self.model).where(self._column(on_conflict) == clean[on_conflict])
        )
        if existing is None:
            existing = self.model(**clean)
            db.session.add(existing)
        else:
            for key, value in clean.items():
                setattr(existing, key, value)
        return existing

    def upsert_many(self, rows: Iterable[Mapping[str, Any]], on_conflict: str = "key") -> List[Any]:
        """All rows land in one transaction; any bad row discards the batch."""
        staged: List[Any] = []
        try:
            for r in rows:
                staged.append(self._stage_upsert(r, on_conflict))
                self._guarded(db.session.flush)
        except StorageError:
            db.session.rollback()
            raise
        self._commit()
        return staged

    def delete(self, row_id: str) -> str:
        obj = self.get(row_id)
        db.session.delete(obj)
        self._commit()
        return row_id


# ─────────────────────────────────────────────────────────────
# Registry
# ─────────────────────────────────────────────────────────────
TABLES: Dict[str, Table] = {
    t.name: t
    for t in (
        Table(Profile),
        Table(SiteSetting),
        Table(Donation),
        Table(Event),
        Table(Program),
        Table(Project),
        Table(ContactMessage),
        Table(NewsletterSubscriber),
        Table(SiteStat),
        Table(ResponseTime),
    )
}


def table(name: str) -> Table:
    try:
        return TABLES[name]
    except KeyError:
        raise StorageError(f"Unknown table '{name}'", 404) from None
