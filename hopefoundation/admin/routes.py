from __future__ import annotations

"""
Admin API (mounted at /admin, admin role required)

One generic CRUD implementation serves every table:
  GET    /admin/<table>                         list + filters + summary
  POST   /admin/<table>                         create
  PATCH  /admin/<table>/<id>                    overwrite fields
  POST   /admin/<table>/<id>/toggle/<field>     flip a boolean flag
  DELETE /admin/<table>/<id>                    hard delete

Plus dashboard/analytics totals and theme/maintenance management.
"""

import math
from collections import Counter
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, List

import sqlalchemy as sa
from flask import Blueprint, Response, current_app, request

from hopefoundation.auth import admin_required
from hopefoundation.extensions import db
from hopefoundation.helpers import json_error, json_ok, request_payload, storage_error
from hopefoundation.models import Donation, Event, NewsletterSubscriber, Profile
from hopefoundation.models.program import slugify_category
from hopefoundation.services import listing, settings, theme
from hopefoundation.services.payments import donation_summary
from hopefoundation.services.storage import StorageError, Table, table

bp = Blueprint("admin", __name__, url_prefix="/admin")

TOGGLE_FIELDS = ("published", "featured", "is_active", "is_public", "show_gallery")


# ── Helpers ─────────────────────────────────────────────────────────────────
def _default_order(t: Table) -> str:
    if t.has_column("display_order"):
        return "display_order"
    if t.has_column("subscribed_at"):
        return "-subscribed_at"
    return "-created_at"


def _count(model: Any, *where: Any) -> int:
    stmt = sa.select(sa.func.count()).select_from(model)
    for clause in where:
        stmt = stmt.where(clause)
    return int(db.session.scalar(stmt) or 0)


def _donation_total() -> float:
    return float(db.session.scalar(sa.select(sa.func.coalesce(sa.func.sum(Donation.amount), 0))) or 0)


def _prepare_program(values: Dict[str, Any]) -> Dict[str, Any]:
    custom = values.pop("customCategory", None)
    if values.get("category") == "custom":
        slug = slugify_category(str(custom or ""))
        if not slug:
            raise StorageError("Please enter a custom category name", 400)
        values["category"] = slug
    return values


def _prepare(table_name: str, values: Dict[str, Any]) -> Dict[str, Any]:
    values = dict(values)
    if table_name == "programs":
        values = _prepare_program(values)
    return values


def _after_write(table_name: str) -> None:
    if table_name == "site_settings":
        settings.invalidate()


# ── Per-entity summaries ────────────────────────────────────────────────────
def _publishing_summary(rows: List[Dict[str, Any]]) -> Dict[str, int]:
    return {
        "published": sum(1 for r in rows if r.get("published")),
        "draft": sum(1 for r in rows if not r.get("published")),
        "featured": sum(1 for r in rows if r.get("featured")),
    }


def _projects_summary(rows: List[Dict[str, Any]]) -> Dict[str, int]:
    out = _publishing_summary(rows)
    by_status = Counter(r.get("status") for r in rows)
    out.update({"active": by_status["active"], "upcoming": by_status["upcoming"], "completed": by_status["completed"]})
    return out


def _contacts_summary(rows: List[Dict[str, Any]]) -> Dict[str, Any]:
    today = datetime.utcnow().date().isoformat()
    by_status = Counter(r.get("status") for r in rows)
    return {
        "new": by_status["new"],
        "in_progress": by_status["in_progress"],
        "resolved": by_status["resolved"],
        "today": sum(1 for r in rows if str(r.get("created_at") or "").startswith(today)),
        "subjects": sorted({r["subject"] for r in rows if r.get("subject")}),
    }


def _subscribers_summary(rows: List[Dict[str, Any]]) -> Dict[str, int]:
    active = sum(1 for r in rows if r.get("is_active"))
    return {"active": active, "inactive": len(rows) - active}


SUMMARIES: Dict[str, Callable[[List[Dict[str, Any]]], Dict[str, Any]]] = {
    "donations": donation_summary,
    "programs": _publishing_summary,
    "events": _publishing_summary,
    "projects": _projects_summary,
    "contact_messages": _contacts_summary,
    "newsletter_subscribers": _subscribers_summary,
}


# ── Dashboard / analytics ───────────────────────────────────────────────────
@bp.get("/")
@admin_required
def dashboard():
    users = _count(Profile)
    return json_ok(
        {
            "stats": {
                "totalUsers": users,
                "totalDonations": _donation_total(),
                "totalEvents": _count(Event),
                "activeVolunteers": math.floor(users * 0.3),
            }
        }
    )


@bp.get("/analytics")
@admin_required
def analytics():
    donations = _count(Donation)
    total = Decimal(str(_donation_total()))
    return json_ok(
        {
            "analytics": {
                "totalUsers": _count(Profile),
                "totalDonations": donations,
                "totalDonationAmount": float(total),
                "averageDonation": float(total / donations) if donations else 0.0,
                "totalEvents": _count(Event),
                "newsletterSubscribers": _count(NewsletterSubscriber),
                "activeSubscribers": _count(NewsletterSubscriber, NewsletterSubscriber.is_active.is_(True)),
            }
        }
    )


# ── Theme / maintenance ─────────────────────────────────────────────────────
@bp.get("/theme")
@admin_required
def get_theme():
    return json_ok({"theme": theme.get_theme(), "maintenance": theme.get_maintenance()})


@bp.put("/theme")
@admin_required
def put_theme():
    try:
        updated = theme.update_theme(request_payload())
    except StorageError as e:
        return storage_error(e)
    _after_write("site_settings")
    return json_ok({"theme": updated})


@bp.put("/maintenance")
@admin_required
def put_maintenance():
    try:
        updated = theme.update_maintenance(request_payload())
    except StorageError as e:
        return storage_error(e)
    _after_write("site_settings")
    current_app.logger.info("maintenance updated: enabled=%s mode=%s", updated["enabled"], updated["mode"])
    return json_ok({"maintenance": updated})


@bp.post("/theme/reset")
@admin_required
def reset_theme():
    try:
        updated = theme.reset_theme()
    except StorageError as e:
        return storage_error(e)
    _after_write("site_settings")
    return json_ok({"theme": updated})


@bp.get("/theme/export")
@admin_required
def export_theme():
    return Response(
        theme.export_theme(),
        mimetype="application/json",
        headers={"Content-Disposition": "attachment; filename=theme-config.json"},
    )


@bp.post("/theme/import")
@admin_required
def import_theme():
    raw = request.get_data(as_text=True)
    try:
        imported = theme.import_theme(raw)
    except StorageError as e:
        return storage_error(e)
    _after_write("site_settings")
    return json_ok(imported)


# ── Generic CRUD ────────────────────────────────────────────────────────────
@bp.get("/<table_name>")
@admin_required
def list_rows(table_name: str):
    try:
        t = table(table_name)
        rows = [r.as_dict() for r in t.select(order=_default_order(t))]
    except StorageError as e:
        return storage_error(e)

    filtered = listing.filter_rows(table_name, rows, request.args)
    summary: Dict[str, Any] = {"total": len(rows), "filtered": len(filtered)}
    fn = SUMMARIES.get(table_name)
    if fn:
        # donations summarise the filtered view; the others describe the whole table
        summary.update(fn(filtered if table_name == "donations" else rows))
    return json_ok({"items": filtered, "summary": summary})


@bp.post("/<table_name>")
@admin_required
def create_row(table_name: str):
    try:
        t = table(table_name)
        item = t.insert(_prepare(table_name, request_payload()))
    except StorageError as e:
        return storage_error(e)
    _after_write(table_name)
    current_app.logger.info("admin %s created %s", table_name, item.id)
    return json_ok({"item": item.as_dict()}, 201)


@bp.patch("/<table_name>/<row_id>")
@admin_required
def update_row(table_name: str, row_id: str):
    try:
        item = table(table_name).update(row_id, _prepare(table_name, request_payload()))
    except StorageError as e:
        return storage_error(e)
    _after_write(table_name)
    return json_ok({"item": item.as_dict()})


@bp.post("/<table_name>/<row_id>/toggle/<field>")
@admin_required
def toggle_field(table_name: str, row_id: str, field: str):
    try:
        t = table(table_name)
        if field not in TOGGLE_FIELDS or not t.has_column(field):
            return json_error(f"'{field}' cannot be toggled on {table_name}", 400)
        current = t.get(row_id)
        item = t.update(row_id, {field: not bool(getattr(current, field))})
    except StorageError as e:
        return storage_error(e)
    _after_write(table_name)
    return json_ok({"item": item.as_dict()})


@bp.delete("/<table_name>/<row_id>")
@admin_required
def delete_row(table_name: str, row_id: str):
    try:
        deleted = table(table_name).delete(row_id)
    except StorageError as e:
        return storage_error(e)
    _after_write(table_name)
    current_app.logger.info("admin %s deleted %s", table_name, row_id)
    return json_ok({"id": deleted})
