# tests/test_public_api.py
# --------------------------------------------------------------------------------------
# Public content API: programs/projects/events listings, event registration, contact
# form, stats and the maintenance gate.
# --------------------------------------------------------------------------------------
from __future__ import annotations

from datetime import datetime, timedelta

import sqlalchemy as sa

from hopefoundation.extensions import db
from hopefoundation.forms import EMAIL_MSG, REQUIRED_MSG
from hopefoundation.models import ContactMessage, Event, ResponseTime, SiteStat
from hopefoundation.services import theme
from tests.helpers import add_event, add_program, add_project


# ---------------------------------------------------------------------------
# Programs / projects
# ---------------------------------------------------------------------------
def test_programs_only_published_and_filtered(app, client):
    with app.app_context():
        add_program(title="Education", category="education")
        add_program(title="Clean Water", category="clean-water", description="Wells for villages")
        add_program(title="Hidden", category="healthcare", published=False)

    res = client.get("/api/programs")
    assert res.status_code == 200
    titles = {p["title"] for p in res.get_json()["programs"]}
    assert titles == {"Education", "Clean Water"}

    res = client.get("/api/programs?category=clean-water&q=wells")
    assert [p["title"] for p in res.get_json()["programs"]] == ["Clean Water"]

    res = client.get("/api/programs?category=education&q=wells")
    assert res.get_json()["programs"] == []


def test_program_detail_includes_projects(app, client):
    with app.app_context():
        add_program(category="education")
        add_project(title="Visible gallery", show_gallery=True, image_gallery=["a.jpg"])
        add_project(title="Hidden gallery", show_gallery=False, image_gallery=["b.jpg"])
        add_project(title="Draft", published=False)

    res = client.get("/api/programs/education")
    assert res.status_code == 200
    body = res.get_json()
    assert body["program"]["category"] == "education"
    galleries = {p["title"]: p["image_gallery"] for p in body["projects"]}
    assert galleries == {"Visible gallery": ["a.jpg"], "Hidden gallery": []}


def test_program_detail_not_found(client):
    res = client.get("/api/programs/space-exploration")
    assert res.status_code == 404
    assert res.get_json() == {"ok": False, "error": "Program not found"}


def test_projects_report_progress(app, client):
    with app.app_context():
        add_project(title="Quarter", target_amount=1000, raised_amount=250)
        add_project(title="Overfunded", target_amount=1000, raised_amount=1500)

    res = client.get("/api/projects")
    progress = {p["title"]: p["progress_percent"] for p in res.get_json()["projects"]}
    assert progress == {"Quarter": 25.0, "Overfunded": 100.0}


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------
def test_events_upcoming_and_past(app, client):
    now = datetime.utcnow()
    with app.app_context():
        add_event(title="Next week", date=now + timedelta(days=7))
        add_event(title="Last month", date=now - timedelta(days=30))

    res = client.get("/api/events?when=upcoming")
    assert [e["title"] for e in res.get_json()["events"]] == ["Next week"]

    res = client.get("/api/events?when=past")
    assert [e["title"] for e in res.get_json()["events"]] == ["Last month"]

    res = client.get("/api/events")
    assert [e["title"] for e in res.get_json()["events"]] == ["Last month", "Next week"]


def test_register_for_event(app, client):
    with app.app_context():
        event_id = add_event(max_attendees=10, current_attendees=3)

    res = client.post(f"/api/events/{event_id}/register")
    assert res.status_code == 200
    assert res.get_json()["event"]["current_attendees"] == 4
    assert res.get_json()["event"]["spots_left"] == 6


def test_register_for_full_event(app, client):
    with app.app_context():
        event_id = add_event(max_attendees=2, current_attendees=2)

    res = client.post(f"/api/events/{event_id}/register")
    assert res.status_code == 409
    assert res.get_json()["error"] == "Event is full"
    with app.app_context():
        assert db.session.get(Event, event_id).current_attendees == 2


def test_register_for_unpublished_or_missing_event(app, client):
    with app.app_context():
        event_id = add_event(published=False)

    assert client.post(f"/api/events/{event_id}/register").status_code == 404
    assert client.post("/api/events/no-such-event/register").status_code == 404


# ---------------------------------------------------------------------------
# Contact
# ---------------------------------------------------------------------------
def _contact(**overrides):
    data = {
        "name": "Grace Hopper",
        "email": "grace@example.org",
        "subject": "volunteer",
        "message": "I would like to help at the next charity walk.",
    }
    data.update(overrides)
    return data


def test_contact_creates_new_message(app, client):
    res = client.post("/api/contact", json=_contact())
    assert res.status_code == 201
    message_id = res.get_json()["id"]
    with app.app_context():
        row = db.session.get(ContactMessage, message_id)
        assert row.status == "new"
        assert row.priority == "medium"


def test_contact_requires_all_fields(app, client):
    res = client.post("/api/contact", json=_contact(message=""))
    assert res.status_code == 400
    assert res.get_json()["error"] == REQUIRED_MSG

    res = client.post("/api/contact", json=_contact(email="grace-at-example"))
    assert res.status_code == 400
    assert res.get_json()["error"] == EMAIL_MSG

    with app.app_context():
        assert db.session.scalar(sa.select(sa.func.count()).select_from(ContactMessage)) == 0


# ---------------------------------------------------------------------------
# Stats / home
# ---------------------------------------------------------------------------
def test_stats_by_page(app, client):
    with app.app_context():
        db.session.add_all(
            [
                SiteStat(key="volunteers", label="Volunteers", value="1,200+", page="home", display_order=2),
                SiteStat(key="countries", label="Countries", value="25", page="home", display_order=1),
                SiteStat(key="offices", label="Offices", value="4", page="about"),
                SiteStat(key="retired", label="Retired", value="0", page="home", is_active=False),
                ResponseTime(inquiry_type="General Inquiries", response_time="24 hours"),
            ]
        )
        db.session.commit()

    body = client.get("/api/stats?page=home").get_json()
    assert [s["key"] for s in body["stats"]] == ["countries", "volunteers"]
    assert body["responseTimes"][0]["response_time"] == "24 hours"


def test_home_returns_featured_content(app, client):
    now = datetime.utcnow()
    with app.app_context():
        add_program(title="Featured program", featured=True)
        add_program(title="Plain program", category="healthcare")
        add_event(title="Featured soon", featured=True, date=now + timedelta(days=3))
        add_event(title="Featured past", featured=True, date=now - timedelta(days=3))

    body = client.get("/api/home").get_json()
    assert [p["title"] for p in body["programs"]] == ["Featured program"]
    assert [e["title"] for e in body["events"]] == ["Featured soon"]


# ---------------------------------------------------------------------------
# Maintenance gate
# ---------------------------------------------------------------------------
def test_maintenance_blocks_content_but_not_settings(app, client, admin_headers):
    with app.app_context():
        add_program()
        theme.update_maintenance({"enabled": True, "message": "Back soon", "estimatedTime": "1 hour"})

    res = client.get("/api/programs")
    assert res.status_code == 503
    body = res.get_json()
    assert body["error"] == "maintenance"
    assert body["message"] == "Back soon"
    assert body["estimatedTime"] == "1 hour"

    assert client.get("/api/settings").status_code == 200
    assert client.get("/api/maintenance").get_json()["maintenance"]["enabled"] is True

    # admins keep access while allowAdminAccess is on
    assert client.get("/api/programs", headers=admin_headers).status_code == 200


def test_partial_maintenance_does_not_gate(app, client):
    with app.app_context():
        theme.update_maintenance({"enabled": True, "mode": "partial"})

    assert client.get("/api/programs").status_code == 200
