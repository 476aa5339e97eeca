# hopefoundation/auth.py
# ─────────────────────────────────────────────────────────────────────────────
# Bearer-token identity (Auth0 JWT) + Flask-Login wiring + admin guard
# ─────────────────────────────────────────────────────────────────────────────
from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict, List, Optional, Set

import jwt  # PyJWT
from flask import Flask, current_app, g, jsonify, request
from flask_login import current_user

from hopefoundation.extensions import db, login_manager, safe_commit
from hopefoundation.models import Profile

log = logging.getLogger(__name__)

_JWKS_CLIENTS: Dict[str, jwt.PyJWKClient] = {}


# =============================================================================
# Token helpers
# =============================================================================
def _bearer_token() -> Optional[str]:
    h = request.headers.get("Authorization", "")
    return h.split(" ", 1)[1].strip() if h.lower().startswith("bearer ") else None


def _issuer(domain: str) -> str:
    return f"https://{domain.strip().rstrip('/')}/"


def _jwks_client(domain: str) -> jwt.PyJWKClient:
    url = f"{_issuer(domain)}.well-known/jwks.json"
    client = _JWKS_CLIENTS.get(url)
    if client is None:
        client = _JWKS_CLIENTS[url] = jwt.PyJWKClient(url, cache_keys=True)
    return client


def decode_token(token: str) -> Dict[str, Any]:
    """
    Verify and decode an identity-provider token.

    RS256 against the tenant JWKS in normal operation; HS256 with
    AUTH_JWT_SECRET when that is configured (local development and tests).
    """
    cfg = current_app.config
    domain = cfg["AUTH0_DOMAIN"]
    audience = cfg.get("AUTH0_AUDIENCE") or cfg["AUTH0_CLIENT_ID"]
    secret = cfg.get("AUTH_JWT_SECRET")

    if secret:
        key: Any = secret
        algorithms = ["HS256"]
    else:
        key = _jwks_client(domain).get_signing_key_from_jwt(token).key
        algorithms = ["RS256"]

    return jwt.decode(
        token,
        key=key,
        algorithms=algorithms,
        audience=audience,
        issuer=_issuer(domain),
        options={"require": ["sub", "exp"]},
    )


def token_roles(claims: Dict[str, Any]) -> Set[str]:
    raw = claims.get(current_app.config.get("AUTH0_ROLES_CLAIM") or "") or []
    if isinstance(raw, str):
        raw = [raw]
    return {str(r).lower() for r in raw}


def _profile_for_claims(claims: Dict[str, Any]) -> Optional[Profile]:
    sub = str(claims["sub"])
    profile = db.session.get(Profile, sub)
    if profile is not None:
        return profile

    profile = Profile(
        id=sub,
        email=str(claims.get("email") or ""),
        full_name=claims.get("name") or None,
        role="user",
    )
    db.session.add(profile)
    if not safe_commit():
        return None
    log.info("profile created for %s", sub)
    return profile


# =============================================================================
# Flask-Login
# =============================================================================
@login_manager.request_loader
def load_user_from_request(req) -> Optional[Profile]:
    token = _bearer_token()
    if not token:
        return None
    try:
        claims = decode_token(token)
    except jwt.PyJWTError as e:
        log.info("rejected bearer token: %s", e)
        return None
    g.token_roles = token_roles(claims)
    return _profile_for_claims(claims)


@login_manager.unauthorized_handler
def unauthorized():
    return _auth_error("unauthorized", "Authentication required", 401)


def _auth_error(code: str, message: str, status: int):
    resp = jsonify(
        {
            "ok": False,
            "error": {"code": code, "message": message, "request_id": getattr(g, "request_id", None)},
        }
    )
    resp.status_code = status
    return resp


def is_admin(user: Any) -> bool:
    if not getattr(user, "is_authenticated", False):
        return False
    roles: Set[str] = getattr(g, "token_roles", set())
    return bool(getattr(user, "is_admin", False) or "admin" in roles)


def admin_required(fn):
    """401 without a valid token, 403 for authenticated non-admins."""

    @wraps(fn)
    def wrapped(*args, **kwargs):
        if not current_user.is_authenticated:
            return login_manager.unauthorized()
        if not is_admin(current_user):
            log.warning("admin access denied for %s on %s", current_user.get_id(), request.path)
            return _auth_error("forbidden", "Admin access required", 403)
        return fn(*args, **kwargs)

    return wrapped


def init_auth(app: Flask) -> None:
    login_manager.init_app(app)


def profile_summary(user: Profile) -> Dict[str, Any]:
    data = user.as_dict()
    data["display_name"] = user.display_name
    data["is_admin"] = is_admin(user)
    return data


__all__: List[str] = [
    "admin_required",
    "decode_token",
    "init_auth",
    "is_admin",
    "profile_summary",
    "token_roles",
]
