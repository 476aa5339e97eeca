from __future__ import annotations

# -----------------------------------------------------------------------------
# Donation Model
# Major-unit amounts, one row per completed Stripe Checkout Session.
# -----------------------------------------------------------------------------
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import CheckConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column

from hopefoundation.extensions import db

from .mixins import CreatedAtMixin, RowMixin, UUIDPrimaryKeyMixin

PAYMENT_STATUSES = ("pending", "completed", "failed")


class Donation(db.Model, UUIDPrimaryKeyMixin, CreatedAtMixin, RowMixin):
    __tablename__ = "donations"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_donations_amount_positive"),
        CheckConstraint(
            "payment_status IN ('pending', 'completed', 'failed')",
            name="ck_donations_payment_status",
        ),
        Index("ix_donations_status_created", "payment_status", "created_at"),
    )

    # ---- Donor ----
    donor_name: Mapped[str] = mapped_column(db.String(160), nullable=False)
    donor_email: Mapped[str] = mapped_column(db.String(255), nullable=False, default="", index=True)
    message: Mapped[Optional[str]] = mapped_column(db.Text, nullable=True)
    is_anonymous: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=False)

    # ---- Financials (major units) ----
    amount: Mapped[Decimal] = mapped_column(
        db.Numeric(12, 2),
        nullable=False,
        doc="Donation amount in major currency units (dollars)",
    )
    currency: Mapped[str] = mapped_column(
        db.String(3),
        nullable=False,
        default="usd",
    )

    # ---- Payment tracking (Stripe) ----
    payment_status: Mapped[str] = mapped_column(
        db.String(20),
        nullable=False,
        default="completed",
        index=True,
    )
    stripe_session_id: Mapped[Optional[str]] = mapped_column(
        db.String(255),
        nullable=True,
        unique=True,
        index=True,
        doc="Stripe Checkout Session id (cs_...); one donation per session",
    )

    # ---- Optional association ----
    project_id: Mapped[Optional[str]] = mapped_column(db.String(36), nullable=True, index=True)
    program_category: Mapped[Optional[str]] = mapped_column(db.String(80), nullable=True)

    # ==========================================================
    # Computed Properties
    # ==========================================================
    @property
    def public_name(self) -> str:
        if self.is_anonymous:
            return "Anonymous"
        return self.donor_name or "Anonymous"

    def as_public_dict(self) -> Dict[str, Any]:
        """Shape returned to the success page (no email for anonymous gifts)."""
        data = self.as_dict()
        data["donor_name"] = self.public_name
        if self.is_anonymous:
            data["donor_email"] = ""
        return data

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Donation {self.donor_name} {self.amount} {self.currency} [{self.payment_status}]>"
