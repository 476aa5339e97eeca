"""
Public site settings with a process-wide TTL cache.

The resolver fails open: a storage error is logged and the last good map
(or the built-in defaults) is served instead.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

import sqlalchemy as sa
from flask import Flask, current_app

from hopefoundation.extensions import db
from hopefoundation.models import SiteSetting

log = logging.getLogger(__name__)

EXTENSION_KEY = "hope_settings"

DEFAULT_SETTINGS: Dict[str, str] = {
    "site_name": "HopeFoundation",
    "site_description": "Creating positive change in communities worldwide",
    "logo_url": "",
    "contact_email": "info@hopefoundation.org",
    "contact_phone": "+1 (555) 123-4567",
    "contact_address": "123 Hope Street, City, State 12345",
    "facebook_url": "",
    "twitter_url": "",
    "instagram_url": "",
    "linkedin_url": "",
    "primary_color": "#2563eb",
    "secondary_color": "#64748b",
}


class SettingsResolver:
    def __init__(self, ttl: float = 60, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._cache: Optional[Dict[str, str]] = None
        self._fetched_at: float = 0.0
        self._last_good: Optional[Dict[str, str]] = None

    def _fetch(self) -> Dict[str, str]:
        rows = db.session.execute(
            sa.select(SiteSetting.key, SiteSetting.value).where(SiteSetting.is_public.is_(True))
        ).all()
        merged = dict(DEFAULT_SETTINGS)
        merged.update({k: v for k, v in rows})
        return merged

    def _fresh(self) -> bool:
        if self._cache is None:
            return False
        return self.ttl > 0 and (self._clock() - self._fetched_at) < self.ttl

    def get_public_settings(self) -> Dict[str, str]:
        with self._lock:
            if self._fresh():
                return dict(self._cache)  # type: ignore[arg-type]
            try:
                settings = self._fetch()
            except Exception:
                log.exception("Error fetching site settings")
                db.session.rollback()
                return dict(self._last_good or DEFAULT_SETTINGS)
            self._cache = settings
            self._last_good = settings
            self._fetched_at = self._clock()
            return dict(settings)

    def get_setting(self, key: str, default: Any = "") -> Any:
        value = self.get_public_settings().get(key)
        return value if value else default

    def refetch(self) -> Dict[str, str]:
        self.invalidate()
        return self.get_public_settings()

    def invalidate(self) -> None:
        with self._lock:
            self._cache = None
            self._fetched_at = 0.0


def init_settings(app: Flask) -> SettingsResolver:
    resolver = SettingsResolver(ttl=float(app.config.get("SETTINGS_CACHE_TTL", 60)))
    app.extensions[EXTENSION_KEY] = resolver
    return resolver


def resolver() -> SettingsResolver:
    return current_app.extensions[EXTENSION_KEY]


# ----------------------------
# Module-level shortcuts
# ----------------------------
def get_public_settings() -> Dict[str, str]:
    return resolver().get_public_settings()


def get_setting(key: str, default: Any = "") -> Any:
    return resolver().get_setting(key, default)


def refetch() -> Dict[str, str]:
    return resolver().refetch()


def invalidate() -> None:
    resolver().invalidate()
