"""
Checkout request validation. Amount is in minor units (cents).
"""
from __future__ import annotations

from wtforms import BooleanField, IntegerField, StringField
from wtforms.validators import DataRequired, Email, InputRequired, Length, NumberRange, Optional

from . import EMAIL_MSG, REQUIRED_MSG, JsonForm, strip_filter

AMOUNT_MSG = "Please enter a valid donation amount"
MIN_AMOUNT_CENTS = 100


class DonationForm(JsonForm):
    amount = IntegerField(
        "Amount (cents)",
        validators=[
            InputRequired(message=AMOUNT_MSG),
            NumberRange(min=MIN_AMOUNT_CENTS, message=AMOUNT_MSG),
        ],
    )
    donorName = StringField(
        "Name",
        filters=[strip_filter],
        validators=[DataRequired(message=REQUIRED_MSG), Length(max=160)],
    )
    donorEmail = StringField(
        "Email",
        filters=[strip_filter],
        validators=[DataRequired(message=REQUIRED_MSG), Email(message=EMAIL_MSG), Length(max=255)],
    )
    message = StringField("Message", filters=[strip_filter], validators=[Optional(), Length(max=500)])
    isAnonymous = BooleanField("Anonymous")
    projectId = StringField("Project", filters=[strip_filter], validators=[Optional()])
    programCategory = StringField("Program", filters=[strip_filter], validators=[Optional()])

    def first_error(self):
        # unparseable amounts report the donation-amount message, not WTForms' own
        if self.amount.errors:
            return AMOUNT_MSG
        return super().first_error()
