# hopefoundation/services/payments.py
"""
Stripe Checkout for one-off donations.

Flow:
  1. create_checkout_session() validates the donor payload and opens a hosted
     Checkout Session carrying the donor fields as metadata.
  2. Stripe calls the webhook; handle_event() records one Donation per
     session and credits the linked project in the same transaction.
  3. The success page polls find_donation() until the row exists.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import sqlalchemy as sa
import stripe
from flask import current_app
from sqlalchemy.exc import IntegrityError

from hopefoundation.extensions import db
from hopefoundation.forms import DonationForm
from hopefoundation.models import Donation, Project

log = logging.getLogger(__name__)

COMPLETED_EVENT = "checkout.session.completed"


class PaymentError(Exception):
    """Validation or gateway failure reported to the donor as a 400."""


class WebhookError(Exception):
    """Rejected webhook delivery; Stripe retries on 400."""


# ----------------------------
# Settings
# ----------------------------
@dataclass(frozen=True)
class StripeSettings:
    secret_key: str
    publishable_key: str
    webhook_secret: str
    currency: str
    max_network_retries: int
    base_url: str
    success_path: str
    cancel_path: str
    preset_amounts: Tuple[int, ...]

    @property
    def mode(self) -> str:
        k = (self.secret_key or self.publishable_key or "").strip()
        if k.startswith(("sk_live_", "pk_live_")):
            return "live"
        if k.startswith(("sk_test_", "pk_test_")):
            return "test"
        return "unknown"

    @property
    def keys_present(self) -> bool:
        return bool(self.secret_key and self.publishable_key)

    @property
    def success_url(self) -> str:
        return f"{self.base_url}{self.success_path}?session_id={{CHECKOUT_SESSION_ID}}"

    @property
    def cancel_url(self) -> str:
        return f"{self.base_url}{self.cancel_path}"

    @classmethod
    def load(cls) -> "StripeSettings":
        cfg = current_app.config
        return cls(
            secret_key=(cfg.get("STRIPE_SECRET_KEY") or "").strip(),
            publishable_key=(cfg.get("STRIPE_PUBLISHABLE_KEY") or "").strip(),
            webhook_secret=(cfg.get("STRIPE_WEBHOOK_SECRET") or "").strip(),
            currency=(cfg.get("DEFAULT_CURRENCY") or "usd").lower(),
            max_network_retries=int(cfg.get("STRIPE_MAX_NETWORK_RETRIES") or 2),
            base_url=(cfg.get("PUBLIC_BASE_URL") or "").rstrip("/"),
            success_path=cfg.get("DONATION_SUCCESS_PATH") or "/donation-success",
            cancel_path=cfg.get("DONATION_CANCEL_PATH") or "/donate",
            preset_amounts=tuple(cfg.get("DONATION_PRESET_AMOUNTS") or (25, 50, 100, 250, 500)),
        )

    def init_stripe(self) -> None:
        if not self.secret_key.startswith("sk_"):
            raise PaymentError("Payment processing is not configured")
        stripe.api_key = self.secret_key
        stripe.max_network_retries = self.max_network_retries

    def public_config(self) -> Dict[str, Any]:
        return {
            "publishableKey": self.publishable_key,
            "currency": self.currency,
            "presetAmounts": list(self.preset_amounts),
            "mode": self.mode,
        }


# ----------------------------
# Checkout
# ----------------------------
@dataclass(frozen=True)
class CheckoutRequest:
    amount_cents: int
    donor_name: str
    donor_email: str
    message: str
    is_anonymous: bool
    project_id: str
    program_category: str

    @classmethod
    def from_payload(cls, data: Optional[Mapping[str, Any]]) -> "CheckoutRequest":
        form = DonationForm.from_payload(data)
        if not form.validate():
            raise PaymentError(form.first_error() or "Invalid donation request")
        return cls(
            amount_cents=int(form.amount.data),
            donor_name=form.donorName.data,
            donor_email=form.donorEmail.data,
            message=form.message.data or "",
            is_anonymous=bool(form.isAnonymous.data),
            project_id=form.projectId.data or "",
            program_category=form.programCategory.data or "",
        )

    def metadata(self) -> Dict[str, str]:
        # Stripe metadata values are strings
        return {
            "donorName": self.donor_name,
            "donorEmail": self.donor_email,
            "message": self.message,
            "isAnonymous": "true" if self.is_anonymous else "false",
            "projectId": self.project_id,
            "programCategory": self.program_category,
        }


def create_checkout_session(data: Optional[Mapping[str, Any]]) -> Dict[str, str]:
    req = CheckoutRequest.from_payload(data)
    s = StripeSettings.load()
    s.init_stripe()

    try:
        session = stripe.checkout.Session.create(
            mode="payment",
            payment_method_types=["card"],
            customer_email=req.donor_email,
            line_items=[
                {
                    "price_data": {
                        "currency": s.currency,
                        "product_data": {
                            "name": "Donation",
                            "description": req.message or "Thank you for supporting our mission",
                        },
                        "unit_amount": req.amount_cents,
                    },
                    "quantity": 1,
                }
            ],
            metadata=req.metadata(),
            success_url=s.success_url,
            cancel_url=s.cancel_url,
        )
    except stripe.StripeError as e:
        log.warning("checkout session create failed: %s", e)
        raise PaymentError(getattr(e, "user_message", None) or str(e)) from e

    log.info("checkout session %s opened for %s cents", session["id"], req.amount_cents)
    return {"sessionId": session["id"], "url": session["url"]}


def find_donation(session_id: str) -> Optional[Donation]:
    return db.session.scalar(sa.select(Donation).where(Donation.stripe_session_id == session_id))


# ----------------------------
# Webhook
# ----------------------------
def verify_event(payload: bytes, signature: str, secret: str) -> Dict[str, Any]:
    """Signature check over the raw body; returns the decoded event dict."""
    if not signature or not secret:
        raise WebhookError("Missing signature or webhook secret")
    stripe.Webhook.construct_event(payload, signature, secret)
    return json.loads(payload.decode("utf-8"))


def _metadata_value(md: Mapping[str, Any], key: str) -> str:
    return str(md.get(key) or "").strip()


def donation_from_session(session: Mapping[str, Any]) -> Donation:
    md = session.get("metadata") or {}
    amount_total = session.get("amount_total")
    if amount_total is None:
        raise WebhookError("Checkout session has no amount_total")
    return Donation(
        donor_name=_metadata_value(md, "donorName") or "Anonymous",
        donor_email=_metadata_value(md, "donorEmail") or (session.get("customer_email") or ""),
        message=_metadata_value(md, "message") or None,
        is_anonymous=_metadata_value(md, "isAnonymous").lower() == "true",
        amount=Decimal(int(amount_total)) / Decimal(100),
        currency=(session.get("currency") or "usd").lower(),
        payment_status="completed",
        stripe_session_id=session["id"],
        project_id=_metadata_value(md, "projectId") or None,
        program_category=_metadata_value(md, "programCategory") or None,
    )


def record_completed_session(session: Mapping[str, Any]) -> Tuple[Optional[Donation], bool]:
    """
    Insert the donation for a completed session.
    Returns (donation, created); a replayed session returns the existing row.
    """
    existing = find_donation(session["id"])
    if existing is not None:
        log.info("webhook replay for session %s ignored", session["id"])
        return existing, False

    donation = donation_from_session(session)
    try:
        db.session.add(donation)
        db.session.flush()
        if donation.project_id and not Project.add_raised(donation.project_id, donation.amount):
            log.warning("donation %s names unknown project %s", donation.id, donation.project_id)
        db.session.commit()
    except IntegrityError:
        # concurrent delivery of the same session won the insert
        db.session.rollback()
        existing = find_donation(session["id"])
        if existing is None:
            raise
        return existing, False
    except Exception:
        db.session.rollback()
        raise

    log.info(
        "donation %s recorded: %s %s from session %s",
        donation.id, donation.amount, donation.currency, donation.stripe_session_id,
    )
    return donation, True


def handle_event(event: Mapping[str, Any]) -> Dict[str, Any]:
    etype = str(event.get("type") or "")
    if etype != COMPLETED_EVENT:
        log.debug("webhook event %s ignored", etype)
        return {"received": True}

    session = (event.get("data") or {}).get("object") or {}
    if not session.get("id"):
        raise WebhookError("Checkout session has no id")
    donation, created = record_completed_session(session)
    return {"received": True, "donationId": donation.id if donation else None, "created": created}


def donation_summary(rows: Sequence[Mapping[str, Any]]) -> Dict[str, Any]:
    total = sum((Decimal(str(r.get("amount") or 0)) for r in rows), Decimal("0"))
    count = len(rows)
    return {
        "totalAmount": float(total),
        "averageDonation": float(total / count) if count else 0.0,
        "count": count,
        "completed": sum(1 for r in rows if r.get("payment_status") == "completed"),
    }
