# hopefoundation/models/mixins.py
"""Shared SQLAlchemy mixins for ids, timestamps and row serialization."""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict

from hopefoundation.extensions import db


def new_uuid() -> str:
    return str(uuid.uuid4())


def jsonable(value: Any) -> Any:
    """Convert column values into JSON-safe equivalents."""
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class UUIDPrimaryKeyMixin:
    """Server-generated UUID string primary key."""

    id = db.Column(db.String(36), primary_key=True, default=new_uuid)


class CreatedAtMixin:
    created_at = db.Column(
        db.DateTime, default=datetime.utcnow, nullable=False, index=True
    )


class TimestampMixin(CreatedAtMixin):
    """Adds created_at and updated_at columns; updated_at refreshes on every UPDATE."""

    updated_at = db.Column(
        db.DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )


class RowMixin:
    """Flat row serialization shared by every table."""

    def as_dict(self) -> Dict[str, Any]:
        return {c.key: jsonable(getattr(self, c.key)) for c in self.__table__.columns}
