# hopefoundation/config/config.py
# Canonical HopeFoundation configuration (env-first, production-safe)

from __future__ import annotations

import os
from datetime import timedelta
from typing import Optional


# ----------------------------
# Env helpers
# ----------------------------
_TRUTHY = {"1", "true", "yes", "on", "y"}
_FALSY = {"0", "false", "no", "off", "n"}


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    v = os.getenv(name)
    if v is None:
        return default
    s = str(v).strip()
    return s if s else default


def _bool(name: str, default: bool = False) -> bool:
    v = _env(name)
    if v is None:
        return default
    s = v.strip().lower()
    if s in _TRUTHY:
        return True
    if s in _FALSY:
        return False
    return default


def _int(name: str, default: int) -> int:
    v = _env(name)
    if v is None:
        return default
    try:
        return int(str(v).strip())
    except ValueError:
        return default


def _clean_base_url(v: Optional[str]) -> str:
    return (v or "").strip().rstrip("/")


# ----------------------------
# Config classes
# ----------------------------
class BaseConfig:
    """
    Env-first config:
    - every deployment setting can be overridden via environment variables
    - safe defaults for local dev
    """

    ENV = (_env("APP_ENV") or _env("FLASK_ENV") or "base").strip().lower()

    DEBUG = _bool("FLASK_DEBUG", False)
    TESTING = _bool("TESTING", False)

    # Security
    SECRET_KEY = _env("SECRET_KEY", "dev-change-me")

    # URLs / scheme
    PUBLIC_BASE_URL = _clean_base_url(_env("PUBLIC_BASE_URL", "http://localhost:5000"))
    PREFERRED_URL_SCHEME = _env("PREFERRED_URL_SCHEME", "https")
    TRUST_PROXY = _bool("TRUST_PROXY", False)
    CORS_ORIGINS = _env("CORS_ORIGINS", "*")

    # Cookies
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = _env("SESSION_COOKIE_SAMESITE", "Lax")
    SESSION_COOKIE_SECURE = True
    PERMANENT_SESSION_LIFETIME = timedelta(days=_int("SESSION_DAYS", 31))

    # Logging
    LOG_LEVEL = _env("LOG_LEVEL", "INFO")
    SENTRY_DSN = _env("SENTRY_DSN", "")

    # SQLAlchemy
    SQLALCHEMY_DATABASE_URI = _env("DATABASE_URL", "sqlite:///hopefoundation-dev.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}
    AUTO_CREATE_SQLITE = _bool("AUTO_CREATE_SQLITE", True)

    # Stripe
    STRIPE_PUBLISHABLE_KEY = _env("STRIPE_PUBLISHABLE_KEY", "")
    STRIPE_SECRET_KEY = _env("STRIPE_SECRET_KEY", "")
    STRIPE_WEBHOOK_SECRET = _env("STRIPE_WEBHOOK_SECRET", "")
    STRIPE_MAX_NETWORK_RETRIES = _int("STRIPE_MAX_NETWORK_RETRIES", 2)
    DEFAULT_CURRENCY = (_env("DEFAULT_CURRENCY", "usd") or "usd").lower()
    DONATION_PRESET_AMOUNTS = (25, 50, 100, 250, 500)
    DONATION_SUCCESS_PATH = _env("DONATION_SUCCESS_PATH", "/donation-success")
    DONATION_CANCEL_PATH = _env("DONATION_CANCEL_PATH", "/donate")

    # Identity provider (Auth0)
    AUTH0_DOMAIN = _env("AUTH0_DOMAIN", "")
    AUTH0_CLIENT_ID = _env("AUTH0_CLIENT_ID", "")
    AUTH0_CALLBACK_URL = _env("AUTH0_CALLBACK_URL", "")
    AUTH0_AUDIENCE = _env("AUTH0_AUDIENCE", "")
    AUTH0_ROLES_CLAIM = _env("AUTH0_ROLES_CLAIM", "https://hopefoundation.org/roles")
    # HS256 shared secret; when set it replaces JWKS verification (dev/test only)
    AUTH_JWT_SECRET = _env("AUTH_JWT_SECRET", "")

    # Settings resolver cache (seconds)
    SETTINGS_CACHE_TTL = _int("SETTINGS_CACHE_TTL", 60)

    @classmethod
    def init_app(cls, app) -> None:
        """
        Boot hardening hook, called from create_app() after from_object(...).
        Missing identity-provider configuration is fatal.
        """
        missing = [k for k in ("AUTH0_DOMAIN", "AUTH0_CLIENT_ID") if not app.config.get(k)]
        if missing:
            raise RuntimeError(
                "Identity provider domain and client id must be set: missing " + ", ".join(missing)
            )

        uri = str(app.config.get("SQLALCHEMY_DATABASE_URI") or "")
        if uri.startswith("sqlite:"):
            opts = dict(app.config.get("SQLALCHEMY_ENGINE_OPTIONS") or {})
            connect_args = dict(opts.get("connect_args") or {})
            connect_args.setdefault("check_same_thread", False)
            opts["connect_args"] = connect_args
            app.config["SQLALCHEMY_ENGINE_OPTIONS"] = opts


class DevelopmentConfig(BaseConfig):
    ENV = "development"
    DEBUG = True

    SESSION_COOKIE_SECURE = False
    PREFERRED_URL_SCHEME = _env("PREFERRED_URL_SCHEME", "http")


class TestingConfig(BaseConfig):
    ENV = "testing"
    TESTING = True
    DEBUG = False

    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS: dict = {}
    SESSION_COOKIE_SECURE = False

    STRIPE_PUBLISHABLE_KEY = "pk_test_hopefoundation"
    STRIPE_SECRET_KEY = "sk_test_hopefoundation"
    STRIPE_WEBHOOK_SECRET = "whsec_test_hopefoundation"

    AUTH0_DOMAIN = "hopefoundation.test.auth0.com"
    AUTH0_CLIENT_ID = "test-client-id"
    AUTH0_CALLBACK_URL = "http://localhost/callback"
    AUTH0_AUDIENCE = ""
    AUTH0_ROLES_CLAIM = "https://hopefoundation.org/roles"
    AUTH_JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"

    SETTINGS_CACHE_TTL = 0
    SENTRY_DSN = ""
    PUBLIC_BASE_URL = "http://localhost:5000"


class ProductionConfig(BaseConfig):
    ENV = "production"
    DEBUG = False

    SESSION_COOKIE_SECURE = True
    PREFERRED_URL_SCHEME = _env("PREFERRED_URL_SCHEME", "https")
    TRUST_PROXY = _bool("TRUST_PROXY", True)
    AUTO_CREATE_SQLITE = False

    @classmethod
    def init_app(cls, app) -> None:
        super().init_app(app)

        # ---- Production guardrails (fail fast) ----
        sk = app.config.get("SECRET_KEY")
        if not sk or sk == "dev-change-me":
            raise RuntimeError("SECRET_KEY must be set to a strong random value in production.")

        base = (app.config.get("PUBLIC_BASE_URL") or "").strip()
        if base.startswith("http://"):
            raise RuntimeError("PUBLIC_BASE_URL must be https:// in production.")

        if app.config.get("AUTH_JWT_SECRET"):
            raise RuntimeError("AUTH_JWT_SECRET is for local development only; unset it in production.")
