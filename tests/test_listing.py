# tests/test_listing.py
# --------------------------------------------------------------------------------------
# In-memory filter composition used by the public listings and the admin console.
# --------------------------------------------------------------------------------------
from __future__ import annotations

from datetime import datetime, timedelta

from hopefoundation.services import listing

NOW = datetime(2026, 6, 15, 12, 0, 0)

PROJECTS = [
    {"title": "School in Kisumu", "description": "Classrooms", "location": "Kenya",
     "program_category": "education", "status": "active", "published": True, "featured": True},
    {"title": "Wells for Tamale", "description": "Boreholes", "location": "Ghana",
     "program_category": "clean-water", "status": "upcoming", "published": True, "featured": False},
    {"title": "Library drive", "description": "Books for the school", "location": "Peru",
     "program_category": "education", "status": "completed", "published": False, "featured": False},
]


def _titles(rows):
    return [r["title"] for r in rows]


def test_no_args_keeps_everything():
    assert listing.filter_rows("projects", PROJECTS, {}, NOW) == PROJECTS


def test_search_is_case_insensitive_across_fields():
    assert _titles(listing.filter_rows("projects", PROJECTS, {"q": "SCHOOL"}, NOW)) == [
        "School in Kisumu",
        "Library drive",
    ]
    assert _titles(listing.filter_rows("projects", PROJECTS, {"search": "ghana"}, NOW)) == ["Wells for Tamale"]


def test_filters_are_anded():
    args = {"q": "school", "category": "education", "status": "published"}
    assert _titles(listing.filter_rows("projects", PROJECTS, args, NOW)) == ["School in Kisumu"]


def test_all_disables_a_filter():
    args = {"category": "all", "status": "all"}
    assert len(listing.filter_rows("projects", PROJECTS, args, NOW)) == 3


def test_named_status_flags():
    assert _titles(listing.filter_rows("projects", PROJECTS, {"status": "draft"}, NOW)) == ["Library drive"]
    assert _titles(listing.filter_rows("projects", PROJECTS, {"status": "featured"}, NOW)) == ["School in Kisumu"]
    assert _titles(listing.filter_rows("projects", PROJECTS, {"state": "upcoming"}, NOW)) == ["Wells for Tamale"]


def test_events_upcoming_and_past():
    events = [
        {"title": "Gala", "date": (NOW + timedelta(days=2)).isoformat()},
        {"title": "Walk", "date": (NOW - timedelta(days=2)).isoformat()},
        {"title": "Undated", "date": None},
    ]
    assert _titles(listing.filter_rows("events", events, {"when": "upcoming"}, NOW)) == ["Gala"]
    assert _titles(listing.filter_rows("events", events, {"when": "past"}, NOW)) == ["Walk"]


def test_donation_date_ranges():
    donations = [
        {"donor_name": "Today", "created_at": NOW.replace(hour=1).isoformat(), "payment_status": "completed"},
        {"donor_name": "Five days", "created_at": (NOW - timedelta(days=5)).isoformat(), "payment_status": "completed"},
        {"donor_name": "Twenty days", "created_at": (NOW - timedelta(days=20)).isoformat(), "payment_status": "failed"},
        {"donor_name": "Two months", "created_at": (NOW - timedelta(days=60)).isoformat(), "payment_status": "completed"},
    ]

    def names(rng, **extra):
        return [r["donor_name"] for r in listing.filter_rows("donations", donations, dict(range=rng, **extra), NOW)]

    assert names("today") == ["Today"]
    assert names("week") == ["Today", "Five days"]
    assert names("month") == ["Today", "Five days", "Twenty days"]
    assert names("year") == ["Today", "Five days", "Twenty days", "Two months"]
    assert names("all") == ["Today", "Five days", "Twenty days", "Two months"]
    assert names("month", status="failed") == ["Twenty days"]


def test_zulu_timestamps_are_accepted():
    rows = [{"title": "Gala", "date": "2026-06-16T09:00:00Z"}]
    assert _titles(listing.filter_rows("events", rows, {"when": "upcoming"}, NOW)) == ["Gala"]


def test_subscriber_status():
    subs = [{"email": "a@example.org", "is_active": True}, {"email": "b@example.org", "is_active": False}]
    active = listing.filter_rows("newsletter_subscribers", subs, {"status": "active"}, NOW)
    assert [s["email"] for s in active] == ["a@example.org"]


def test_unnamed_status_only_filters_mapped_columns():
    assert len(listing.filter_rows("projects", PROJECTS, {"status": "active"}, NOW)) == 3

    contacts = [
        {"name": "A", "email": "a@example.org", "subject": "media", "message": "", "status": "new"},
        {"name": "B", "email": "b@example.org", "subject": "general", "message": "", "status": "resolved"},
    ]
    resolved = listing.filter_rows("contact_messages", contacts, {"status": "resolved"}, NOW)
    assert [c["name"] for c in resolved] == ["B"]
