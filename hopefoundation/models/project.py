from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

import sqlalchemy as sa
from sqlalchemy.orm import Mapped, mapped_column

from hopefoundation.extensions import db

from .mixins import RowMixin, TimestampMixin, UUIDPrimaryKeyMixin

PROJECT_STATUSES = ("active", "completed", "upcoming")


def progress_percent(raised: Any, target: Any) -> float:
    """Share of target raised, clamped to [0, 100]."""
    t = Decimal(str(target or 0))
    if t <= 0:
        return 0.0
    pct = Decimal(str(raised or 0)) / t * 100
    return float(min(max(pct, Decimal("0")), Decimal("100")))


class Project(db.Model, UUIDPrimaryKeyMixin, TimestampMixin, RowMixin):
    __tablename__ = "projects"
    __table_args__ = (
        sa.CheckConstraint("target_amount > 0", name="ck_projects_target_positive"),
        sa.CheckConstraint("raised_amount >= 0", name="ck_projects_raised_nonneg"),
        sa.CheckConstraint("beneficiaries >= 0", name="ck_projects_beneficiaries_nonneg"),
        sa.CheckConstraint(
            "status IN ('active', 'completed', 'upcoming')",
            name="ck_projects_status",
        ),
        sa.Index("ix_projects_category_published", "program_category", "published"),
    )

    title: Mapped[str] = mapped_column(db.String(200), nullable=False)
    description: Mapped[str] = mapped_column(db.Text, nullable=False, default="")
    location: Mapped[str] = mapped_column(db.String(255), nullable=False, default="")

    # ── Money (major units) ─────────────────────────────────────
    target_amount: Mapped[Decimal] = mapped_column(db.Numeric(12, 2), nullable=False)
    raised_amount: Mapped[Decimal] = mapped_column(
        db.Numeric(12, 2), nullable=False, default=Decimal("0")
    )

    # ── Schedule / status ───────────────────────────────────────
    start_date: Mapped[date] = mapped_column(db.Date, nullable=False)
    end_date: Mapped[date] = mapped_column(db.Date, nullable=False)
    status: Mapped[str] = mapped_column(db.String(20), nullable=False, default="upcoming", index=True)

    # ── Media ───────────────────────────────────────────────────
    image_url: Mapped[Optional[str]] = mapped_column(db.String(500), nullable=True)
    image_gallery: Mapped[List[str]] = mapped_column(db.JSON, nullable=False, default=list)
    show_gallery: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=False)

    beneficiaries: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    program_category: Mapped[str] = mapped_column(db.String(80), nullable=False, index=True)

    published: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=False, index=True)
    featured: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=False)

    # ── Computed helpers ────────────────────────────────────────
    @property
    def progress_percent(self) -> float:
        return progress_percent(self.raised_amount, self.target_amount)

    # ── Mutators ────────────────────────────────────────────────
    @classmethod
    def add_raised(cls, project_id: str, amount: Decimal) -> bool:
        """Atomically add a completed payment to raised_amount."""
        stmt = (
            sa.update(cls)
            .where(cls.id == project_id)
            .values(raised_amount=cls.raised_amount + amount)
            .execution_options(synchronize_session=False)
        )
        return bool(db.session.execute(stmt).rowcount)

    def as_dict(self) -> Dict[str, Any]:
        data = super().as_dict()
        data["image_gallery"] = list(self.image_gallery or [])
        data["progress_percent"] = round(self.progress_percent, 1)
        return data

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Project {self.title!r} {self.raised_amount}/{self.target_amount}>"
