from __future__ import annotations

"""
HopeFoundation: Newsletter API
────────────────────────────────────────────────────────────
• POST /newsletter/signup      → subscribe (idempotent per email)
• POST /newsletter/unsubscribe → deactivate by unsubscribe token
• GET  /newsletter/health      → lightweight readiness probe
"""

from typing import Any, Optional, Tuple

import sqlalchemy as sa
from flask import Blueprint, current_app
from flask_login import current_user
from sqlalchemy.exc import IntegrityError

from hopefoundation.extensions import db
from hopefoundation.forms import NewsletterForm
from hopefoundation.helpers import json_error, json_ok, request_payload
from hopefoundation.models import NewsletterSubscriber

bp = Blueprint("newsletter", __name__, url_prefix="/newsletter")


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────
def _by_email(email: str) -> Optional[NewsletterSubscriber]:
    return db.session.scalar(sa.select(NewsletterSubscriber).where(NewsletterSubscriber.email == email))


def _current_user_id() -> Optional[str]:
    return current_user.get_id() if current_user.is_authenticated else None


def _get_or_create_subscriber(email: str, name: Optional[str]) -> Tuple[NewsletterSubscriber, bool]:
    """
    Returns (row, created). An inactive existing subscriber is re-activated.
    """
    row = _by_email(email)
    if row:
        if not row.is_active:
            row.is_active = True
            db.session.commit()
        return row, False

    row = NewsletterSubscriber(email=email, name=name or None, user_id=_current_user_id())
    db.session.add(row)
    try:
        db.session.commit()
    except IntegrityError:
        # lost a race against the same email
        db.session.rollback()
        existing = _by_email(email)
        if existing is None:
            raise
        return existing, False
    return row, True


# ─────────────────────────────────────────────────────────────
# Routes
# ─────────────────────────────────────────────────────────────
@bp.get("/health")
def health():
    return json_ok({"status": "ok"})


@bp.post("/signup")
def signup():
    """
    Accepts JSON or form: {"email": "...", "name": "optional"}
    Returns {"ok": true, "id": "...", "email": "...", "existing": bool}
    """
    form = NewsletterForm.from_payload(request_payload())
    if not form.validate():
        return json_error(form.first_error() or "Email is required", 400)

    try:
        row, created = _get_or_create_subscriber(form.email.data, form.name.data)
    except Exception as exc:
        current_app.logger.error("Newsletter signup failed: %s", exc, exc_info=True)
        db.session.rollback()
        return json_error("Unable to save signup. Please try again.", 500)

    if created:
        current_app.logger.info("newsletter: new subscriber %s", row.id)
    return json_ok({"id": row.id, "email": row.email, "existing": not created})


@bp.post("/unsubscribe")
def unsubscribe():
    token: Any = request_payload().get("token")
    if not token:
        return json_error("Missing unsubscribe token", 400)

    row = db.session.scalar(
        sa.select(NewsletterSubscriber).where(NewsletterSubscriber.unsubscribe_token == str(token))
    )
    if row is None:
        return json_error("Subscription not found", 404)

    row.is_active = False
    db.session.commit()
    return json_ok({"id": row.id, "email": row.email, "is_active": False})
