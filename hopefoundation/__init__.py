# hopefoundation/__init__.py
# HopeFoundation: Flask app factory
# Goals:
# - deterministic blueprint registration (Stripe webhook path is fixed)
# - proxy-correct behind a reverse proxy
# - JSON error shape for every API surface

from __future__ import annotations

import logging
import os
import time
from typing import Any, Dict, Optional, Type, Union
from uuid import uuid4

import sentry_sdk
from dotenv import load_dotenv
from flask import Flask, g, jsonify, request
from sentry_sdk.integrations.flask import FlaskIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
from werkzeug.exceptions import HTTPException, InternalServerError
from werkzeug.middleware.proxy_fix import ProxyFix

# IMPORTANT: never override real env vars in prod
load_dotenv(override=False)

from hopefoundation.config import CONFIG_BY_NAME  # noqa: E402
from hopefoundation.extensions import cors, db, migrate  # noqa: E402

ConfigLike = Union[str, Type[Any]]

JSON_PREFIXES = ("/api/", "/admin", "/payments/", "/newsletter/", "/account/", "/health")


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def _resolve_config(target: Optional[ConfigLike]) -> Type[Any]:
    """
    Choose the config class.
    - explicit class or name wins
    - else FLASK_CONFIG / APP_ENV
    - else development
    """
    if target is not None and not isinstance(target, str):
        return target
    name = (target or os.getenv("FLASK_CONFIG") or os.getenv("APP_ENV") or "development").strip().lower()
    name = {"prod": "production", "dev": "development", "test": "testing"}.get(name, name)
    try:
        return CONFIG_BY_NAME[name]
    except KeyError:
        raise RuntimeError(f"Unknown config '{name}' (expected one of {', '.join(CONFIG_BY_NAME)})") from None


def _json_error(message: str, status: int, **extra: Any):
    payload: Dict[str, Any] = {"ok": False, "error": {"code": int(status), "message": str(message)}}
    rid = extra.pop("request_id", None)
    if rid:
        payload["error"]["request_id"] = rid
    if extra:
        payload["error"].update(extra)

    resp = jsonify(payload)
    resp.status_code = int(status)
    return resp


def _wants_json_response() -> bool:
    path = request.path or ""
    if path.startswith(JSON_PREFIXES):
        return True
    accept = (request.headers.get("Accept") or "").lower()
    return ("application/json" in accept) or bool(request.is_json)


def _parse_cors_origins(raw: Optional[str]):
    raw = (raw or "*").strip()
    if raw in {"", "*"}:
        return "*"
    if "," in raw:
        return [o.strip() for o in raw.split(",") if o.strip()]
    return raw


# -----------------------------------------------------------------------------
# Logging with request_id
# -----------------------------------------------------------------------------
class _RequestIDFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        try:
            record.request_id = getattr(g, "request_id", "-")
        except RuntimeError:
            # outside an app/request context
            record.request_id = "-"
        return True


def _configure_logging(app: Flask) -> None:
    fmt = "%(asctime)s [%(levelname)s] %(name)s [rid=%(request_id)s]: %(message)s"
    root = logging.getLogger()

    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        handler.addFilter(_RequestIDFilter())
        root.addHandler(handler)
    else:
        for h in root.handlers:
            if not any(isinstance(f, _RequestIDFilter) for f in h.filters):
                h.addFilter(_RequestIDFilter())
            if not getattr(h, "formatter", None) or "%(request_id)s" not in getattr(h.formatter, "_fmt", ""):
                h.setFormatter(logging.Formatter(fmt))

    root.setLevel(str(app.config.get("LOG_LEVEL", "INFO")).upper())
    logging.getLogger("werkzeug").setLevel(str(app.config.get("WERKZEUG_LOG_LEVEL", "WARNING")).upper())
    app.logger.info("Loaded config: ENV=%s DEBUG=%s", app.config.get("ENV", "?"), app.debug)


# -----------------------------------------------------------------------------
# Integrations
# -----------------------------------------------------------------------------
def _apply_proxyfix(app: Flask) -> None:
    if app.config.get("TRUST_PROXY"):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)  # type: ignore[method-assign]


def _init_sentry(app: Flask) -> None:
    dsn = (app.config.get("SENTRY_DSN") or "").strip()
    if not dsn:
        return
    sentry_sdk.init(
        dsn=dsn,
        integrations=[
            FlaskIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
            SqlalchemyIntegration(),
        ],
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.0")),
        send_default_pii=False,
        environment=app.config.get("ENV", "development"),
        release=os.getenv("GIT_COMMIT"),
    )
    app.logger.info("Sentry initialized")


def _init_cors(app: Flask) -> None:
    origins = _parse_cors_origins(app.config.get("CORS_ORIGINS"))
    cors.init_app(
        app,
        resources={
            r"/api/*": {"origins": origins},
            r"/payments/*": {"origins": origins},
            r"/newsletter/*": {"origins": origins},
        },
        expose_headers=["X-Request-ID"],
        allow_headers=["Content-Type", "Authorization", "Stripe-Signature", "X-Request-ID"],
        methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    )


def _maybe_create_sqlite_tables(app: Flask) -> None:
    uri = (app.config.get("SQLALCHEMY_DATABASE_URI") or "").strip()
    if not uri.startswith("sqlite") or app.config.get("AUTO_CREATE_SQLITE") is not True:
        return
    with app.app_context():
        db.create_all()


# -----------------------------------------------------------------------------
# Request lifecycle + errors
# -----------------------------------------------------------------------------
def _register_request_lifecycle(app: Flask) -> None:
    @app.before_request
    def _bootstrap_request():
        g.request_id = request.headers.get("X-Request-ID") or uuid4().hex
        g._start_ts = time.perf_counter()

    @app.after_request
    def _attach_request_headers(resp):
        resp.headers["X-Request-ID"] = getattr(g, "request_id", "-")
        start = getattr(g, "_start_ts", None)
        if start:
            resp.headers["X-Response-Time-ms"] = str(int((time.perf_counter() - start) * 1000))
        return resp


def _register_error_handlers(app: Flask) -> None:
    @app.errorhandler(HTTPException)
    def _http_err(err: HTTPException):
        if _wants_json_response():
            return _json_error(err.description or err.name, err.code or 500, request_id=getattr(g, "request_id", "-"))
        return err

    @app.errorhandler(Exception)
    def _uncaught(err: Exception):
        app.logger.exception("Unhandled error")
        db.session.rollback()
        if _wants_json_response():
            return _json_error("Internal Server Error", 500, request_id=getattr(g, "request_id", "-"))
        return InternalServerError()


def _register_blueprints(app: Flask) -> None:
    from hopefoundation.admin.routes import bp as admin_bp
    from hopefoundation.blueprints.health import bp as health_bp
    from hopefoundation.blueprints.payments import bp as payments_bp
    from hopefoundation.routes.account import bp as account_bp
    from hopefoundation.routes.newsletter import bp as newsletter_bp
    from hopefoundation.routes.public import bp as public_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(public_bp)
    app.register_blueprint(newsletter_bp)
    app.register_blueprint(account_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(payments_bp, url_prefix="/payments")


# -----------------------------------------------------------------------------
# Factory
# -----------------------------------------------------------------------------
def create_app(config_class: Optional[ConfigLike] = None) -> Flask:
    app = Flask(__name__, static_folder=None, template_folder=None)

    # ---- Config loading (init_app raises on fatal misconfiguration)
    cfg = _resolve_config(config_class)
    app.config.from_object(cfg)
    cfg.init_app(app)

    app.url_map.strict_slashes = False
    app.config.setdefault("JSON_SORT_KEYS", False)

    # ---- Proxy handling first
    _apply_proxyfix(app)

    # ---- Logging / optional integrations
    _configure_logging(app)
    _init_sentry(app)
    _init_cors(app)

    # ---- Core extensions
    db.init_app(app)
    migrate.init_app(app, db, compare_type=True, render_as_batch=True)

    from hopefoundation import models  # noqa: F401  (register tables on metadata)
    from hopefoundation.auth import init_auth
    from hopefoundation.cli import register_cli
    from hopefoundation.services.settings import init_settings

    _maybe_create_sqlite_tables(app)
    init_auth(app)
    init_settings(app)

    # ---- Request lifecycle / errors / blueprints / CLI
    _register_request_lifecycle(app)
    _register_error_handlers(app)
    _register_blueprints(app)
    register_cli(app)

    return app
