"""
Theme and maintenance configuration stored as flat `theme_*` / `maintenance_*`
rows in site_settings.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

import sqlalchemy as sa

from hopefoundation.extensions import db
from hopefoundation.models import SiteSetting
from hopefoundation.services.storage import TABLES, StorageError

log = logging.getLogger(__name__)

THEME_MODES = ("light", "dark", "auto")
MAINTENANCE_MODES = ("full", "partial")

DEFAULT_COLORS: Dict[str, str] = {
    "primary": "#2563eb",
    "secondary": "#64748b",
    "accent": "#7c3aed",
    "background": "#ffffff",
    "surface": "#f8fafc",
    "text": "#1e293b",
    "textSecondary": "#64748b",
    "border": "#e2e8f0",
    "success": "#059669",
    "warning": "#d97706",
    "error": "#dc2626",
    "info": "#0284c7",
}

DEFAULT_THEME: Dict[str, Any] = {
    "mode": "light",
    "colors": DEFAULT_COLORS,
    "borderRadius": "medium",
    "fontSize": "medium",
    "fontFamily": "Inter, system-ui, sans-serif",
    "animations": True,
    "shadows": True,
}

DEFAULT_MAINTENANCE: Dict[str, Any] = {
    "enabled": False,
    "mode": "full",
    "excludedPages": ["/admin", "/login"],
    "message": "We are currently performing scheduled maintenance to improve your experience.",
    "estimatedTime": "2 hours",
    "allowAdminAccess": True,
}

# color name -> settings key
COLOR_KEYS: Dict[str, str] = {
    "primary": "theme_primary_color",
    "secondary": "theme_secondary_color",
    "accent": "theme_accent_color",
    "background": "theme_background",
    "surface": "theme_surface",
    "text": "theme_text",
    "textSecondary": "theme_text_secondary",
    "border": "theme_border",
    "success": "theme_success",
    "warning": "theme_warning",
    "error": "theme_error",
    "info": "theme_info",
}

THEME_KEYS = ("theme_mode", "theme_border_radius", "theme_font_size", "theme_font_family",
              "theme_animations", "theme_shadows", *COLOR_KEYS.values())
MAINTENANCE_KEYS = (
    "maintenance_enabled",
    "maintenance_mode",
    "maintenance_excluded_pages",
    "maintenance_message",
    "maintenance_estimated_time",
    "maintenance_allow_admin",
)


def _load(keys: Iterable[str]) -> Dict[str, str]:
    rows = db.session.execute(
        sa.select(SiteSetting.key, SiteSetting.value).where(SiteSetting.key.in_(list(keys)))
    ).all()
    return {k: v for k, v in rows}


def _excluded_pages(raw: Optional[str]) -> List[str]:
    if not raw:
        return list(DEFAULT_MAINTENANCE["excludedPages"])
    try:
        pages = json.loads(raw)
    except ValueError:
        log.warning("maintenance_excluded_pages is not valid JSON: %r", raw)
        return list(DEFAULT_MAINTENANCE["excludedPages"])
    return [str(p) for p in pages] if isinstance(pages, list) else list(DEFAULT_MAINTENANCE["excludedPages"])


# ─────────────────────────────────────────────────────────────
# Read
# ─────────────────────────────────────────────────────────────
def theme_from_settings(s: Mapping[str, str]) -> Dict[str, Any]:
    return {
        "mode": s.get("theme_mode") or DEFAULT_THEME["mode"],
        "colors": {name: s.get(key) or DEFAULT_COLORS[name] for name, key in COLOR_KEYS.items()},
        "borderRadius": s.get("theme_border_radius") or DEFAULT_THEME["borderRadius"],
        "fontSize": s.get("theme_font_size") or DEFAULT_THEME["fontSize"],
        "fontFamily": s.get("theme_font_family") or DEFAULT_THEME["fontFamily"],
        "animations": s.get("theme_animations") != "false",
        "shadows": s.get("theme_shadows") != "false",
    }


def maintenance_from_settings(s: Mapping[str, str]) -> Dict[str, Any]:
    return {
        "enabled": s.get("maintenance_enabled") == "true",
        "mode": s.get("maintenance_mode") or DEFAULT_MAINTENANCE["mode"],
        "excludedPages": _excluded_pages(s.get("maintenance_excluded_pages")),
        "message": s.get("maintenance_message") or DEFAULT_MAINTENANCE["message"],
        "estimatedTime": s.get("maintenance_estimated_time") or DEFAULT_MAINTENANCE["estimatedTime"],
        "allowAdminAccess": s.get("maintenance_allow_admin") != "false",
    }


def get_theme() -> Dict[str, Any]:
    return theme_from_settings(_load(THEME_KEYS))


def get_maintenance() -> Dict[str, Any]:
    return maintenance_from_settings(_load(MAINTENANCE_KEYS))


def is_page_in_maintenance(path: str, maintenance: Optional[Mapping[str, Any]] = None) -> bool:
    m = maintenance if maintenance is not None else get_maintenance()
    if not m.get("enabled") or m.get("mode") != "full":
        return False
    return not any(path.startswith(prefix) for prefix in m.get("excludedPages") or [])


# ─────────────────────────────────────────────────────────────
# Write
# ─────────────────────────────────────────────────────────────
def _theme_rows(theme: Mapping[str, Any]) -> List[Dict[str, Any]]:
    colors = theme.get("colors") or {}
    values = {
        "theme_mode": theme["mode"],
        "theme_border_radius": theme["borderRadius"],
        "theme_font_size": theme["fontSize"],
        "theme_font_family": theme["fontFamily"],
        "theme_animations": "true" if theme["animations"] else "false",
        "theme_shadows": "true" if theme["shadows"] else "false",
    }
    for name, key in COLOR_KEYS.items():
        values[key] = colors[name]
    return [
        {"key": k, "value": str(v), "description": f"Theme {k}", "is_public": False}
        for k, v in values.items()
    ]


def _maintenance_rows(m: Mapping[str, Any]) -> List[Dict[str, Any]]:
    values = {
        "maintenance_enabled": "true" if m["enabled"] else "false",
        "maintenance_mode": m["mode"],
        "maintenance_excluded_pages": json.dumps(list(m["excludedPages"])),
        "maintenance_message": m["message"],
        "maintenance_estimated_time": m["estimatedTime"],
        "maintenance_allow_admin": "true" if m["allowAdminAccess"] else "false",
    }
    return [
        {"key": k, "value": str(v), "description": f"Maintenance {k}", "is_public": False}
        for k, v in values.items()
    ]


def update_theme(updates: Mapping[str, Any]) -> Dict[str, Any]:
    """Merge `updates` over the current theme and persist every theme key."""
    theme = get_theme()
    for key, value in updates.items():
        if key == "colors":
            if not isinstance(value, Mapping):
                raise StorageError("colors must be an object", 400)
            theme["colors"].update({k: v for k, v in value.items() if k in COLOR_KEYS})
        elif key in theme:
            theme[key] = value
    if theme["mode"] not in THEME_MODES:
        raise StorageError(f"theme mode must be one of {', '.join(THEME_MODES)}", 400)
    TABLES["site_settings"].upsert_many(_theme_rows(theme))
    return theme


def update_maintenance(updates: Mapping[str, Any]) -> Dict[str, Any]:
    m = get_maintenance()
    for key, value in updates.items():
        if key in m:
            m[key] = value
    if m["mode"] not in MAINTENANCE_MODES:
        raise StorageError(f"maintenance mode must be one of {', '.join(MAINTENANCE_MODES)}", 400)
    if not isinstance(m["excludedPages"], (list, tuple)):
        raise StorageError("excludedPages must be a list", 400)
    TABLES["site_settings"].upsert_many(_maintenance_rows(m))
    return m


def reset_theme() -> Dict[str, Any]:
    return update_theme({**DEFAULT_THEME, "colors": dict(DEFAULT_COLORS)})


def export_theme() -> str:
    return json.dumps({"theme": get_theme(), "maintenance": get_maintenance()}, indent=2)


def import_theme(theme_data: Any) -> Dict[str, Any]:
    """Accepts the export document (string or already-parsed object)."""
    try:
        doc = json.loads(theme_data) if isinstance(theme_data, str) else theme_data
        if not isinstance(doc, Mapping):
            raise ValueError("not an object")
        out: Dict[str, Any] = {}
        if doc.get("theme"):
            out["theme"] = update_theme(doc["theme"])
        if doc.get("maintenance"):
            out["maintenance"] = update_maintenance(doc["maintenance"])
    except (ValueError, TypeError, AttributeError, StorageError) as e:
        log.warning("theme import rejected: %s", e)
        raise StorageError("Invalid theme data", 400) from e
    return out
