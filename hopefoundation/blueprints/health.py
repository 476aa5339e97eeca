from __future__ import annotations

import socket
import time
from datetime import datetime, timezone
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify
from sqlalchemy import text

from hopefoundation.extensions import db
from hopefoundation.services.payments import StripeSettings

bp = Blueprint("health", __name__)

APP_STARTED_AT = time.time()
HOSTNAME = socket.gethostname()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def _overall_status(parts: Dict[str, Dict[str, Any]]) -> str:
    return "ok" if all(p.get("ok") for p in parts.values()) else "degraded"


def _db_check() -> Dict[str, Any]:
    try:
        db.session.execute(text("SELECT 1"))
        return {"status": "ok", "ok": True}
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("health: db check failed")
        return {"status": "degraded", "ok": False, "error": str(e)[:300]}


def _stripe_check() -> Dict[str, Any]:
    s = StripeSettings.load()
    if not s.keys_present:
        return {"status": "degraded", "ok": False, "reason": "no-keys"}
    return {
        "status": "ok",
        "ok": True,
        "mode": s.mode,
        "webhook_secret": bool(s.webhook_secret),
    }


@bp.get("/healthz")
def healthz():
    return jsonify({"status": "ok", "ts": _now_iso()}), 200


@bp.get("/health")
def health():
    parts = {"db": _db_check(), "stripe": _stripe_check()}
    return jsonify(
        {
            "status": _overall_status(parts),
            "host": HOSTNAME,
            "uptime_s": int(time.time() - APP_STARTED_AT),
            "ts": _now_iso(),
            "components": parts,
        }
    ), 200
