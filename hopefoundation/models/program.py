from __future__ import annotations

import re
from typing import Optional

from sqlalchemy.orm import Mapped, mapped_column

from hopefoundation.extensions import db

from .mixins import RowMixin, TimestampMixin, UUIDPrimaryKeyMixin

DEFAULT_CATEGORIES = (
    "education",
    "healthcare",
    "clean-water",
    "community-development",
    "emergency-relief",
)

_WS_RE = re.compile(r"\s+")


def slugify_category(raw: str) -> str:
    """"Environmental Protection" -> "environmental-protection"."""
    return _WS_RE.sub("-", (raw or "").strip().lower())


def category_label(slug: str) -> str:
    return " ".join(w[:1].upper() + w[1:] for w in (slug or "").split("-") if w)


class Program(db.Model, UUIDPrimaryKeyMixin, TimestampMixin, RowMixin):
    """Initiative/category (e.g. Education); projects join on program_category."""

    __tablename__ = "programs"

    title: Mapped[str] = mapped_column(db.String(200), nullable=False)
    description: Mapped[str] = mapped_column(db.Text, nullable=False, default="")
    category: Mapped[str] = mapped_column(db.String(80), nullable=False, index=True)
    image_url: Mapped[Optional[str]] = mapped_column(db.String(500), nullable=True)
    published: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=False, index=True)
    featured: Mapped[bool] = mapped_column(db.Boolean, nullable=False, default=False)

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Program {self.category}: {self.title!r}>"
