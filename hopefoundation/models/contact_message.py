from __future__ import annotations

from typing import Any, Dict, Optional

from sqlalchemy import CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from hopefoundation.extensions import db

from .mixins import RowMixin, TimestampMixin, UUIDPrimaryKeyMixin

CONTACT_STATUSES = ("new", "in_progress", "resolved")

HIGH_PRIORITY_SUBJECTS = ("media", "partnership", "urgent")
MEDIUM_PRIORITY_SUBJECTS = ("volunteer", "donation")


def subject_priority(subject: Optional[str]) -> str:
    s = (subject or "").strip().lower()
    if any(p in s for p in HIGH_PRIORITY_SUBJECTS):
        return "high"
    if any(p in s for p in MEDIUM_PRIORITY_SUBJECTS):
        return "medium"
    return "low"


class ContactMessage(db.Model, UUIDPrimaryKeyMixin, TimestampMixin, RowMixin):
    __tablename__ = "contact_messages"
    __table_args__ = (
        CheckConstraint(
            "status IN ('new', 'in_progress', 'resolved')",
            name="ck_contact_messages_status",
        ),
    )

    name: Mapped[str] = mapped_column(db.String(160), nullable=False)
    email: Mapped[str] = mapped_column(db.String(255), nullable=False, index=True)
    subject: Mapped[str] = mapped_column(db.String(120), nullable=False)
    message: Mapped[str] = mapped_column(db.Text, nullable=False)

    # ── Triage ──────────────────────────────────────────────────
    status: Mapped[str] = mapped_column(db.String(20), nullable=False, default="new", index=True)
    assigned_to: Mapped[Optional[str]] = mapped_column(db.String(128), nullable=True)

    @property
    def priority(self) -> str:
        return subject_priority(self.subject)

    def as_dict(self) -> Dict[str, Any]:
        data = super().as_dict()
        data["priority"] = self.priority
        return data

    def __repr__(self) -> str:  # pragma: no cover
        return f"<ContactMessage {self.email} {self.subject!r} [{self.status}]>"
