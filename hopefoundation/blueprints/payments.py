#!/usr/bin/env python3
"""
HopeFoundation Payments Blueprint (Stripe Checkout)

Mount: /payments  (register blueprint with url_prefix="/payments")

Endpoints:
  GET  /payments/config
  POST /payments/create-payment-intent   -> {sessionId, url}
  POST /payments/donation-details        -> {donation: row|null}
  POST /payments/stripe/webhook          (Stripe-Signature required)

Contracts:
- amounts in requests are minor units (cents); stored donations are major units
- the webhook answers 400 {error} on any failure so Stripe retries delivery
"""
from __future__ import annotations

from flask import Blueprint, current_app, request
from flask_cors import cross_origin

from hopefoundation.helpers import json_error, json_ok, json_response, request_payload
from hopefoundation.services import payments as svc

bp = Blueprint("payments", __name__)


@bp.get("/config")
def payments_config():
    return json_ok(svc.StripeSettings.load().public_config())


@bp.post("/create-payment-intent")
def create_payment_intent():
    try:
        result = svc.create_checkout_session(request_payload())
    except svc.PaymentError as e:
        return json_error(str(e), 400)
    return json_ok(result)


@bp.post("/donation-details")
def donation_details():
    session_id = str(request_payload().get("sessionId") or "").strip()
    if not session_id:
        return json_error("Missing sessionId", 400)
    donation = svc.find_donation(session_id)
    return json_ok({"donation": donation.as_public_dict() if donation else None})


# ----------------------------
# Stripe webhook
# ----------------------------
@bp.route("/stripe/webhook", methods=["POST", "OPTIONS"])
@cross_origin(
    origins="*",
    methods=["POST", "OPTIONS"],
    allow_headers=["authorization", "x-client-info", "apikey", "content-type", "stripe-signature"],
)
def stripe_webhook():
    if request.method == "OPTIONS":
        return ("", 200)

    payload = request.get_data(cache=False, as_text=False)
    sig = (request.headers.get("Stripe-Signature") or "").strip()
    secret = svc.StripeSettings.load().webhook_secret

    try:
        event = svc.verify_event(payload, sig, secret)
        result = svc.handle_event(event)
    except Exception as e:
        current_app.logger.warning("payments: webhook rejected: %s", e)
        return json_response({"error": str(e)}, 400)

    return json_response(result, 200)
