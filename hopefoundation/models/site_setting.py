from __future__ import annotations

from typing import Optional

from sqlalchemy.orm import Mapped, mapped_column

from hopefoundation.extensions import db

from .mixins import RowMixin, TimestampMixin, UUIDPrimaryKeyMixin


class SiteSetting(db.Model, UUIDPrimaryKeyMixin, TimestampMixin, RowMixin):
    """Key/value row used for branding, text, theme and maintenance flags."""

    __tablename__ = "site_settings"

    key: Mapped[str] = mapped_column(
        db.String(120),
        unique=True,
        index=True,
        nullable=False,
    )
    value: Mapped[str] = mapped_column(db.Text, nullable=False, default="")
    description: Mapped[Optional[str]] = mapped_column(db.String(255), nullable=True)
    is_public: Mapped[bool] = mapped_column(
        db.Boolean,
        nullable=False,
        default=False,
        index=True,
        doc="Exposed to unauthenticated readers when true",
    )

    def __repr__(self) -> str:  # pragma: no cover
        return f"<SiteSetting {self.key}={self.value!r}>"
