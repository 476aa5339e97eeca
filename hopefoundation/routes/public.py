from __future__ import annotations

"""
Public content API (mounted at /api)
────────────────────────────────────────────────────────────
Read endpoints serve published rows only and never fail hard: a storage
error is logged and the endpoint answers with an empty list.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional

from flask import Blueprint, current_app, request
from flask_login import current_user

from hopefoundation.auth import is_admin
from hopefoundation.extensions import db
from hopefoundation.forms import ContactForm
from hopefoundation.helpers import json_error, json_ok, json_response, request_payload
from hopefoundation.models import Event
from hopefoundation.services import listing, settings, theme
from hopefoundation.services.storage import TABLES, StorageError

log = logging.getLogger(__name__)

bp = Blueprint("public", __name__, url_prefix="/api")

# Needed by the client to render the maintenance page itself.
MAINTENANCE_EXEMPT = ("/api/settings", "/api/theme", "/api/maintenance")


# ─────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────
def _rows(
    table: str,
    filters: Optional[Mapping[str, Any]] = None,
    order: Optional[str] = None,
) -> List[Dict[str, Any]]:
    try:
        return [r.as_dict() for r in TABLES[table].select(filters, order)]
    except StorageError:
        log.exception("Error fetching %s", table)
        return []


def _published(table: str, order: str = "-created_at") -> List[Dict[str, Any]]:
    return _rows(table, {"published": True}, order)


def _filtered(table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return listing.filter_rows(table, rows, request.args)


def _guarded(fn: Callable[[], Any], fallback: Any) -> Any:
    try:
        return fn()
    except Exception:
        log.exception("public read failed")
        db.session.rollback()
        return fallback


def _hide_gallery(project: Dict[str, Any]) -> Dict[str, Any]:
    if not project.get("show_gallery"):
        project["image_gallery"] = []
    return project


# ─────────────────────────────────────────────────────────────
# Maintenance gate
# ─────────────────────────────────────────────────────────────
@bp.before_request
def maintenance_gate():
    if request.path in MAINTENANCE_EXEMPT:
        return None
    m = _guarded(theme.get_maintenance, None)
    if not m or not theme.is_page_in_maintenance(request.path, m):
        return None
    if m["allowAdminAccess"] and is_admin(current_user):
        return None
    return json_response(
        {
            "ok": False,
            "error": "maintenance",
            "message": m["message"],
            "estimatedTime": m["estimatedTime"],
        },
        503,
    )


# ─────────────────────────────────────────────────────────────
# Settings / theme
# ─────────────────────────────────────────────────────────────
@bp.get("/settings")
def public_settings():
    return json_ok({"settings": settings.get_public_settings()})


@bp.get("/theme")
def public_theme():
    return json_ok({"theme": _guarded(theme.get_theme, theme.theme_from_settings({}))})


@bp.get("/maintenance")
def public_maintenance():
    m = _guarded(theme.get_maintenance, theme.maintenance_from_settings({}))
    return json_ok(
        {
            "maintenance": {
                "enabled": m["enabled"],
                "mode": m["mode"],
                "message": m["message"],
                "estimatedTime": m["estimatedTime"],
            }
        }
    )


# ─────────────────────────────────────────────────────────────
# Programs / projects
# ─────────────────────────────────────────────────────────────
@bp.get("/programs")
def programs():
    return json_ok({"programs": _filtered("programs", _published("programs"))})


@bp.get("/programs/<category>")
def program_detail(category: str):
    matches = _rows("programs", {"published": True, "category": category})
    if not matches:
        return json_error("Program not found", 404)
    projects = [
        _hide_gallery(p)
        for p in _rows("projects", {"published": True, "program_category": category}, "-created_at")
    ]
    return json_ok({"program": matches[0], "projects": projects})


@bp.get("/projects")
def projects():
    rows = [_hide_gallery(p) for p in _published("projects")]
    return json_ok({"projects": _filtered("projects", rows)})


# ─────────────────────────────────────────────────────────────
# Events
# ─────────────────────────────────────────────────────────────
@bp.get("/events")
def events():
    return json_ok({"events": _filtered("events", _published("events", order="date"))})


@bp.post("/events/<event_id>/register")
def register_for_event(event_id: str):
    try:
        taken = Event.register_attendee(event_id)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception("event registration failed for %s", event_id)
        return json_error("Registration failed. Please try again.", 500)

    if not taken:
        event = db.session.get(Event, event_id)
        if event is None or not event.published:
            return json_error("Event not found", 404)
        return json_error("Event is full", 409)

    event = db.session.get(Event, event_id)
    current_app.logger.info("event %s registration -> %s attendees", event_id, event.current_attendees)
    return json_ok({"event": event.as_dict()})


# ─────────────────────────────────────────────────────────────
# Contact
# ─────────────────────────────────────────────────────────────
@bp.post("/contact")
def contact():
    form = ContactForm.from_payload(request_payload())
    if not form.validate():
        return json_error(form.first_error() or "Please fill in all required fields", 400)

    try:
        row = TABLES["contact_messages"].insert(
            {
                "name": form.name.data,
                "email": form.email.data,
                "subject": form.subject.data,
                "message": form.message.data,
                "status": "new",
            }
        )
    except StorageError as e:
        log.exception("contact message insert failed")
        return json_error("Failed to send message. Please try again.", e.status)

    return json_ok({"id": row.id}, 201)


# ─────────────────────────────────────────────────────────────
# Stats / home
# ─────────────────────────────────────────────────────────────
@bp.get("/stats")
def stats():
    filters: Dict[str, Any] = {"is_active": True}
    page = (request.args.get("page") or "").strip()
    if page:
        filters["page"] = page
    return json_ok(
        {
            "stats": _rows("site_stats", filters, "display_order"),
            "responseTimes": _rows("response_times", {"is_active": True}, "display_order"),
        }
    )


@bp.get("/home")
def home():
    def featured(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [r for r in rows if r.get("featured")]

    now = datetime.utcnow()
    upcoming = listing.apply_filters(
        _published("events", order="date"), [listing.upcoming("date", now)]
    )
    return json_ok(
        {
            "programs": featured(_published("programs")),
            "projects": [_hide_gallery(p) for p in featured(_published("projects"))],
            "events": featured(upcoming),
            "stats": _rows("site_stats", {"is_active": True, "page": "home"}, "display_order"),
        }
    )
