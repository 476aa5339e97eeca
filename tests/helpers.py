# tests/helpers.py
# --------------------------------------------------------------------------------------
# Token, webhook and content factories shared by the test modules.
# The content factories must be called inside an app context.
# --------------------------------------------------------------------------------------
from __future__ import annotations

import hashlib
import hmac
import json
import time
from datetime import date, datetime, timedelta
from decimal import Decimal

import jwt

from hopefoundation.config import TestingConfig
from hopefoundation.extensions import db
from hopefoundation.models import Event, Program, Project


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------
def make_token(sub="auth0|donor-1", email="donor@example.org", roles=None, name=None, **extra):
    now = int(time.time())
    claims = {
        "sub": sub,
        "email": email,
        "iss": f"https://{TestingConfig.AUTH0_DOMAIN}/",
        "aud": TestingConfig.AUTH0_CLIENT_ID,
        "iat": now,
        "exp": now + 3600,
    }
    if name:
        claims["name"] = name
    if roles is not None:
        claims[TestingConfig.AUTH0_ROLES_CLAIM] = roles
    claims.update(extra)
    return jwt.encode(claims, TestingConfig.AUTH_JWT_SECRET, algorithm="HS256")


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


# ---------------------------------------------------------------------------
# Stripe webhook signing (same scheme the Stripe SDK verifies)
# ---------------------------------------------------------------------------
def sign_payload(payload: bytes, secret: str = TestingConfig.STRIPE_WEBHOOK_SECRET, ts=None) -> str:
    ts = int(ts or time.time())
    signed = f"{ts}.{payload.decode('utf-8')}".encode("utf-8")
    sig = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return f"t={ts},v1={sig}"


def checkout_completed_event(session_id="cs_test_a1", amount_total=5000, customer_email=None, **metadata):
    md = {
        "donorName": "Ada Lovelace",
        "donorEmail": "ada@example.org",
        "message": "",
        "isAnonymous": "false",
        "projectId": "",
        "programCategory": "",
    }
    md.update(metadata)
    return {
        "id": f"evt_{session_id}",
        "object": "event",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": session_id,
                "object": "checkout.session",
                "amount_total": amount_total,
                "currency": "usd",
                "customer_email": md["donorEmail"] if customer_email is None else customer_email,
                "metadata": md,
            }
        },
    }


def post_webhook(client, event, signature=None):
    payload = json.dumps(event).encode("utf-8")
    headers = {"Content-Type": "application/json"}
    sig = sign_payload(payload) if signature is None else signature
    if sig:
        headers["Stripe-Signature"] = sig
    return client.post("/payments/stripe/webhook", data=payload, headers=headers)


# ---------------------------------------------------------------------------
# Content factories (call inside an app context)
# ---------------------------------------------------------------------------
def add_program(**kw):
    values = {
        "title": "Education",
        "description": "Schools and scholarships",
        "category": "education",
        "published": True,
    }
    values.update(kw)
    row = Program(**values)
    db.session.add(row)
    db.session.commit()
    return row.id


def add_project(**kw):
    values = {
        "title": "Build a School",
        "description": "Classrooms for 300 children",
        "location": "Kisumu, Kenya",
        "target_amount": Decimal("1000"),
        "raised_amount": Decimal("0"),
        "start_date": date(2026, 1, 1),
        "end_date": date(2026, 12, 31),
        "status": "active",
        "program_category": "education",
        "published": True,
    }
    values.update(kw)
    row = Project(**values)
    db.session.add(row)
    db.session.commit()
    return row.id


def add_event(**kw):
    values = {
        "title": "Charity Walk",
        "description": "5k walk along the river",
        "date": datetime.utcnow() + timedelta(days=10),
        "location": "Riverside Park",
        "published": True,
    }
    values.update(kw)
    row = Event(**values)
    db.session.add(row)
    db.session.commit()
    return row.id
