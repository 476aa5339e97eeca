from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from hopefoundation.extensions import db

from .mixins import RowMixin, TimestampMixin, UUIDPrimaryKeyMixin


class Event(db.Model, UUIDPrimaryKeyMixin, TimestampMixin, RowMixin):
    __tablename__ = "events"
    __table_args__ = (
        sa.CheckConstraint("current_attendees >= 0", name="ck_events_attendees_nonneg"),
        sa.CheckConstraint("registration_fee >= 0", name="ck_events_fee_nonneg"),
        sa.CheckConstraint(
            "max_attendees IS NULL OR current_attendees <= max_attendees",
            name="ck_events_capacity",
        ),
    )

    title: Mapped[str] = mapped_column(db.String(200), nullable=False)
    description: Mapped[str] = mapped_column(db.Text, nullable=False, default="")
    date: Mapped[datetime] = mapped_column(db.DateTime, nullable=False, index=True)
    location: Mapped[str] = mapped_column(db.String(255), nullable=False, default="")
    image_url: Mapped[Optional[str]] = mapped_column(db.String(500), nullable=True)

    # ── Capacity ────────────────────────────────────────────────
    max_attendees: Mapped[Optional[int]] = mapped_column(db.Integer, nullable=True)
    current_attendees: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    registration_fee: Mapped[Decimal] = mapped_column(
        db.Numeric(10, 2), nullable=False, default=Decimal("0")
    )

    # ── Visibility ──────────────────────────────────────────────
    published: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=False, index=True)
    featured: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=False)

    # ── Computed helpers ────────────────────────────────────────
    @property
    def is_full(self) -> bool:
        return self.max_attendees is not None and int(self.current_attendees or 0) >= self.max_attendees

    @property
    def spots_left(self) -> Optional[int]:
        if self.max_attendees is None:
            return None
        return max(0, self.max_attendees - int(self.current_attendees or 0))

    # ── Mutators ────────────────────────────────────────────────
    @classmethod
    def register_attendee(cls, event_id: str) -> bool:
        """
        Take one seat with a single conditional UPDATE.
        Returns False when the event is missing, unpublished or full.
        """
        stmt = (
            sa.update(cls)
            .where(
                cls.id == event_id,
                cls.published.is_(True),
                sa.or_(
                    cls.max_attendees.is_(None),
                    cls.current_attendees < cls.max_attendees,
                ),
            )
            .values(current_attendees=cls.current_attendees + 1)
            .execution_options(synchronize_session=False)
        )
        res = db.session.execute(stmt)
        return bool(res.rowcount)

    def as_dict(self) -> Dict[str, Any]:
        data = super().as_dict()
        data["is_full"] = self.is_full
        data["spots_left"] = self.spots_left
        return data

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Event {self.title!r} {self.date:%Y-%m-%d}>"
