from __future__ import annotations

from wtforms import StringField
from wtforms.validators import DataRequired, Email, Length, Optional

from . import EMAIL_MSG, JsonForm, strip_filter


class NewsletterForm(JsonForm):
    email = StringField(
        "Email",
        filters=[strip_filter, lambda v: v.lower() if isinstance(v, str) else v],
        validators=[DataRequired(message="Email is required"), Email(message=EMAIL_MSG), Length(max=255)],
    )
    name = StringField("Name", filters=[strip_filter], validators=[Optional(), Length(max=120)])
