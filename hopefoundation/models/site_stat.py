from __future__ import annotations

from sqlalchemy.orm import Mapped, mapped_column

from hopefoundation.extensions import db

from .mixins import RowMixin, UUIDPrimaryKeyMixin


class SiteStat(db.Model, UUIDPrimaryKeyMixin, RowMixin):
    """Display counter ("Lives Impacted: 50,000+") shown on a given page."""

    __tablename__ = "site_stats"

    key: Mapped[str] = mapped_column(db.String(80), nullable=False, index=True)
    label: Mapped[str] = mapped_column(db.String(160), nullable=False)
    value: Mapped[str] = mapped_column(db.String(80), nullable=False, default="")
    icon: Mapped[str] = mapped_column(db.String(60), nullable=False, default="")
    page: Mapped[str] = mapped_column(db.String(40), nullable=False, default="home", index=True)
    display_order: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=True)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<SiteStat {self.page}:{self.key}={self.value}>"


class ResponseTime(db.Model, UUIDPrimaryKeyMixin, RowMixin):
    __tablename__ = "response_times"

    inquiry_type: Mapped[str] = mapped_column(db.String(120), nullable=False)
    response_time: Mapped[str] = mapped_column(db.String(80), nullable=False)
    display_order: Mapped[int] = mapped_column(db.Integer, nullable=False, default=0)
    is_active: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=True)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<ResponseTime {self.inquiry_type}: {self.response_time}>"
