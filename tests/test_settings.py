# tests/test_settings.py
# --------------------------------------------------------------------------------------
# Site settings resolver (defaults, caching, fail-open) and theme/maintenance storage.
# --------------------------------------------------------------------------------------
from __future__ import annotations

import json

import pytest

from hopefoundation.extensions import db
from hopefoundation.models import SiteSetting
from hopefoundation.services import settings, theme
from hopefoundation.services.settings import DEFAULT_SETTINGS, SettingsResolver
from hopefoundation.services.storage import StorageError


def _setting(key, value, is_public=True):
    db.session.add(SiteSetting(key=key, value=value, is_public=is_public))
    db.session.commit()


# ---------------------------------------------------------------------------
# Resolver
# ---------------------------------------------------------------------------
def test_defaults_when_table_empty(app):
    with app.app_context():
        assert settings.get_public_settings() == DEFAULT_SETTINGS


def test_public_rows_override_defaults(app):
    with app.app_context():
        _setting("site_name", "Hope International")
        _setting("internal_note", "do not show", is_public=False)

        values = settings.get_public_settings()
        assert values["site_name"] == "Hope International"
        assert "internal_note" not in values


def test_get_setting_falls_back_to_default(app):
    with app.app_context():
        _setting("logo_url", "")
        assert settings.get_setting("missing_key", "fallback") == "fallback"
        assert settings.get_setting("logo_url", "/static/logo.svg") == "/static/logo.svg"
        assert settings.get_setting("missing_key") == ""


def test_public_settings_endpoint(app, client):
    with app.app_context():
        _setting("contact_email", "hello@hopefoundation.org")

    body = client.get("/api/settings").get_json()
    assert body["ok"] is True
    assert body["settings"]["contact_email"] == "hello@hopefoundation.org"
    assert body["settings"]["site_name"] == DEFAULT_SETTINGS["site_name"]


def test_cache_ttl_and_invalidate(app):
    now = [1000.0]
    resolver = SettingsResolver(ttl=60, clock=lambda: now[0])
    with app.app_context():
        _setting("site_name", "First")
        assert resolver.get_public_settings()["site_name"] == "First"

        db.session.query(SiteSetting).filter_by(key="site_name").update({"value": "Second"})
        db.session.commit()

        now[0] += 30
        assert resolver.get_public_settings()["site_name"] == "First"

        resolver.invalidate()
        assert resolver.get_public_settings()["site_name"] == "Second"

        db.session.query(SiteSetting).filter_by(key="site_name").update({"value": "Third"})
        db.session.commit()
        now[0] += 61
        assert resolver.get_public_settings()["site_name"] == "Third"


def test_fails_open_with_last_good_then_defaults(app, monkeypatch):
    resolver = SettingsResolver(ttl=0)
    with app.app_context():
        _setting("site_name", "Cached Name")
        assert resolver.get_public_settings()["site_name"] == "Cached Name"

        def broken():
            raise RuntimeError("database unavailable")

        monkeypatch.setattr(resolver, "_fetch", broken)
        assert resolver.get_public_settings()["site_name"] == "Cached Name"

        fresh = SettingsResolver(ttl=0)
        monkeypatch.setattr(fresh, "_fetch", broken)
        assert fresh.get_public_settings() == DEFAULT_SETTINGS


# ---------------------------------------------------------------------------
# Theme / maintenance
# ---------------------------------------------------------------------------
def test_theme_defaults(app, client):
    body = client.get("/api/theme").get_json()
    assert body["theme"] == theme.DEFAULT_THEME


def test_update_theme_merges_colors(app):
    with app.app_context():
        updated = theme.update_theme({"colors": {"accent": "#ff00ff", "unknown": "#123456"}, "shadows": False})
        assert updated["colors"]["accent"] == "#ff00ff"
        assert updated["colors"]["primary"] == theme.DEFAULT_COLORS["primary"]
        assert "unknown" not in updated["colors"]

        stored = theme.get_theme()
        assert stored["shadows"] is False
        assert stored["colors"]["accent"] == "#ff00ff"


def test_update_theme_rejects_non_object_colors(app):
    with app.app_context():
        with pytest.raises(StorageError) as err:
            theme.update_theme({"colors": "blue"})
        assert err.value.status == 400


def test_is_page_in_maintenance():
    m = dict(theme.DEFAULT_MAINTENANCE, enabled=True)
    assert theme.is_page_in_maintenance("/api/programs", m) is True
    assert theme.is_page_in_maintenance("/admin/theme", m) is False
    assert theme.is_page_in_maintenance("/api/programs", dict(m, enabled=False)) is False
    assert theme.is_page_in_maintenance("/api/programs", dict(m, mode="partial")) is False


def test_update_maintenance_validates(app):
    with app.app_context():
        with pytest.raises(StorageError):
            theme.update_maintenance({"mode": "sometimes"})
        with pytest.raises(StorageError):
            theme.update_maintenance({"excludedPages": "/admin"})

        m = theme.update_maintenance({"enabled": True, "excludedPages": ["/admin", "/api/events"]})
        assert theme.get_maintenance()["excludedPages"] == ["/admin", "/api/events"]
        assert m["enabled"] is True


def test_export_import_round_trip(app):
    with app.app_context():
        theme.update_theme({"mode": "dark"})
        exported = theme.export_theme()
        theme.reset_theme()
        assert theme.get_theme()["mode"] == "light"

        imported = theme.import_theme(exported)
        assert imported["theme"]["mode"] == "dark"
        assert theme.get_theme()["mode"] == "dark"
        assert json.loads(exported)["maintenance"]["enabled"] is False


def test_import_rejects_garbage(app):
    with app.app_context():
        for bad in ("not json", "[1, 2]", json.dumps({"theme": {"mode": "neon"}})):
            with pytest.raises(StorageError) as err:
                theme.import_theme(bad)
            assert err.value.message == "Invalid theme data"
