from __future__ import annotations

import secrets
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Mapped, mapped_column

from hopefoundation.extensions import db

from .mixins import RowMixin, UUIDPrimaryKeyMixin


def new_unsubscribe_token() -> str:
    return secrets.token_urlsafe(24)


class NewsletterSubscriber(db.Model, UUIDPrimaryKeyMixin, RowMixin):
    __tablename__ = "newsletter_subscribers"

    email: Mapped[str] = mapped_column(db.String(255), unique=True, index=True, nullable=False)
    name: Mapped[Optional[str]] = mapped_column(db.String(120), nullable=True)
    user_id: Mapped[Optional[str]] = mapped_column(db.String(128), nullable=True, index=True)

    subscribed_at: Mapped[datetime] = mapped_column(
        db.DateTime, nullable=False, default=datetime.utcnow, index=True
    )
    is_active: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=True, index=True)
    unsubscribe_token: Mapped[str] = mapped_column(
        db.String(64),
        unique=True,
        nullable=False,
        default=new_unsubscribe_token,
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<NewsletterSubscriber {self.email} active={self.is_active}>"
