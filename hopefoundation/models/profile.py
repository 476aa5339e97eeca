"""
Profile model: one row per identity-provider account.
"""
from __future__ import annotations

from typing import Optional

from flask_login import UserMixin
from sqlalchemy import CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hopefoundation.extensions import db

from .mixins import RowMixin, TimestampMixin

ROLES = ("admin", "user")


class Profile(db.Model, UserMixin, TimestampMixin, RowMixin):
    """
    Site account:
      • id is the identity-provider subject (stable for the account lifetime)
      • role gates every /admin operation
    """

    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("role IN ('admin', 'user')", name="ck_profiles_role"),
    )

    # ── Identity ────────────────────────────────────────────────
    id: Mapped[str] = mapped_column(
        db.String(128),
        primary_key=True,
        doc="Identity-provider subject (sub claim)",
    )
    email: Mapped[str] = mapped_column(
        db.String(255),
        nullable=False,
        index=True,
    )
    full_name: Mapped[Optional[str]] = mapped_column(db.String(160), nullable=True)

    # ── Role ────────────────────────────────────────────────────
    role: Mapped[str] = mapped_column(
        db.String(20),
        nullable=False,
        default="user",
        index=True,
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def display_name(self) -> str:
        return self.full_name or (
            self.email.split("@")[0] if self.email else f"User-{self.id}"
        )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Profile {self.email} ({self.role})>"
