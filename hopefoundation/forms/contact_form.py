from __future__ import annotations

from wtforms import StringField, TextAreaField
from wtforms.validators import DataRequired, Email, Length

from . import EMAIL_MSG, REQUIRED_MSG, JsonForm, strip_filter


class ContactForm(JsonForm):
    name = StringField(
        "Name",
        filters=[strip_filter],
        validators=[DataRequired(message=REQUIRED_MSG), Length(max=160)],
    )
    email = StringField(
        "Email",
        filters=[strip_filter],
        validators=[DataRequired(message=REQUIRED_MSG), Email(message=EMAIL_MSG), Length(max=255)],
    )
    subject = StringField(
        "Subject",
        filters=[strip_filter],
        validators=[DataRequired(message=REQUIRED_MSG), Length(max=120)],
    )
    message = TextAreaField(
        "Message",
        filters=[strip_filter],
        validators=[DataRequired(message=REQUIRED_MSG)],
    )
