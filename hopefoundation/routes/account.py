from __future__ import annotations

from flask import Blueprint
from flask_login import current_user, login_required

from hopefoundation.auth import profile_summary
from hopefoundation.helpers import json_ok
from hopefoundation.services.storage import TABLES

bp = Blueprint("account", __name__, url_prefix="/account")


@bp.get("/dashboard")
@login_required
def dashboard():
    """Signed-in donor's profile plus donations made with the profile email."""
    donations = []
    if current_user.email:
        donations = [
            d.as_dict()
            for d in TABLES["donations"].select({"donor_email": current_user.email}, "-created_at")
        ]
    total = sum(d["amount"] for d in donations if d["payment_status"] == "completed")
    return json_ok(
        {
            "profile": profile_summary(current_user),
            "donations": donations,
            "totalDonated": total,
        }
    )
