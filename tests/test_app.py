# tests/test_app.py
# --------------------------------------------------------------------------------------
# App factory, config guardrails, health probes, error shape and model helpers.
# --------------------------------------------------------------------------------------
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

import pytest

from hopefoundation import create_app
from hopefoundation.config import TestingConfig
from hopefoundation.extensions import db
from hopefoundation.models import Event, Profile, Program, Project
from hopefoundation.models.contact_message import subject_priority
from hopefoundation.models.program import category_label, slugify_category
from hopefoundation.models.project import progress_percent
from hopefoundation.services.storage import TABLES, StorageError, table


# ---------------------------------------------------------------------------
# Factory / config
# ---------------------------------------------------------------------------
def test_missing_identity_provider_config_is_fatal():
    class NoAuthConfig(TestingConfig):
        AUTH0_DOMAIN = ""

    with pytest.raises(RuntimeError, match="AUTH0_DOMAIN"):
        create_app(NoAuthConfig)


def test_unknown_config_name_is_rejected():
    with pytest.raises(RuntimeError, match="Unknown config"):
        create_app("staging-ish")


def test_request_id_is_echoed(client):
    res = client.get("/healthz", headers={"X-Request-ID": "req-123"})
    assert res.headers["X-Request-ID"] == "req-123"
    assert "X-Response-Time-ms" in res.headers


def test_api_404_is_json(client):
    res = client.get("/api/nope/nothing")
    assert res.status_code == 404
    body = res.get_json()
    assert body["ok"] is False
    assert body["error"]["code"] == 404


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------
def test_healthz(client):
    res = client.get("/healthz")
    assert res.status_code == 200
    assert res.get_json()["status"] == "ok"


def test_health_components(client):
    body = client.get("/health").get_json()
    assert body["status"] == "ok"
    assert body["components"]["db"]["ok"] is True
    assert body["components"]["stripe"]["mode"] == "test"


def test_newsletter_health(client):
    assert client.get("/newsletter/health").get_json()["status"] == "ok"


# ---------------------------------------------------------------------------
# Model helpers
# ---------------------------------------------------------------------------
@pytest.mark.parametrize(
    "raised, target, expected",
    [(250, 1000, 25.0), (1500, 1000, 100.0), (0, 1000, 0.0), (10, 0, 0.0), (None, 500, 0.0)],
)
def test_progress_percent(raised, target, expected):
    assert progress_percent(raised, target) == expected


def test_slugify_and_label():
    assert slugify_category("  Environmental   Protection ") == "environmental-protection"
    assert category_label("clean-water") == "Clean Water"


@pytest.mark.parametrize(
    "subject, priority",
    [
        ("media", "high"),
        ("Partnership", "high"),
        ("Media Inquiry", "high"),
        ("Urgent: flooding in the valley", "high"),
        ("volunteer", "medium"),
        ("Volunteer Opportunities", "medium"),
        ("Question about my donation", "medium"),
        ("general", "low"),
        (None, "low"),
    ],
)
def test_subject_priority(subject, priority):
    assert subject_priority(subject) == priority


# ---------------------------------------------------------------------------
# Storage coercion
# ---------------------------------------------------------------------------
def test_storage_coerces_wire_values(app):
    projects = TABLES["projects"]
    with app.app_context():
        row = projects.insert(
            {
                "title": "Solar clinic",
                "description": "",
                "location": "Lusaka",
                "target_amount": "2500.50",
                "start_date": "2026-03-01",
                "end_date": "2026-09-01T00:00:00Z",
                "program_category": "healthcare",
                "published": "true",
                "image_gallery": '["a.jpg", "b.jpg"]',
                "beneficiaries": "120",
            }
        )
        assert row.target_amount == Decimal("2500.50")
        assert row.start_date == date(2026, 3, 1)
        assert row.end_date == date(2026, 9, 1)
        assert row.published is True
        assert row.image_gallery == ["a.jpg", "b.jpg"]
        assert row.beneficiaries == 120


def test_storage_errors(app):
    with app.app_context():
        with pytest.raises(StorageError) as err:
            table("volunteers")
        assert err.value.status == 404

        with pytest.raises(StorageError) as err:
            TABLES["events"].get("missing")
        assert err.value.status == 404

        with pytest.raises(StorageError) as err:
            TABLES["events"].insert({"title": "X", "date": "next tuesday"})
        assert err.value.status == 400


def test_storage_upsert_by_key(app):
    settings_table = TABLES["site_settings"]
    with app.app_context():
        first = settings_table.upsert({"key": "site_name", "value": "A", "is_public": True})
        second = settings_table.upsert({"key": "site_name", "value": "B"})
        assert first.id == second.id
        assert settings_table.count({"key": "site_name"}) == 1
        assert settings_table.select({"key": "site_name"})[0].value == "B"
        assert isinstance(second.updated_at, datetime)


def test_storage_upsert_many_is_all_or_nothing(app):
    settings_table = TABLES["site_settings"]
    with app.app_context():
        with pytest.raises(StorageError) as err:
            settings_table.upsert_many(
                [
                    {"key": "theme_mode", "value": "dark"},
                    {"key": "theme_font_size", "value": "large", "bogus": 1},
                ]
            )
        assert err.value.status == 400
        assert settings_table.count({"key": "theme_mode"}) == 0

        rows = settings_table.upsert_many(
            [{"key": "theme_mode", "value": "dark"}, {"key": "theme_font_size", "value": "large"}]
        )
        assert len(rows) == 2
        assert settings_table.count() == 2


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------
def test_seed_demo_and_promote(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["hope", "seed-demo", "--projects", "1", "--events", "2"])
    assert result.exit_code == 0, result.output

    with app.app_context():
        assert db.session.query(Program).count() == 5
        assert db.session.query(Project).count() == 5
        assert db.session.query(Event).count() == 2
        db.session.add(Profile(id="auth0|staff", email="staff@hopefoundation.org"))
        db.session.commit()

    result = runner.invoke(args=["hope", "promote", "staff@hopefoundation.org"])
    assert result.exit_code == 0, result.output
    with app.app_context():
        assert db.session.get(Profile, "auth0|staff").role == "admin"

    result = runner.invoke(args=["hope", "promote", "ghost@hopefoundation.org"])
    assert result.exit_code != 0
