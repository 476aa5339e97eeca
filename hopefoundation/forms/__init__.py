"""
JSON-bound WTForms for the public endpoints.

The API is JSON-only, so forms are bound to the decoded request payload and
CSRF is disabled per form instance.
"""
from __future__ import annotations

from typing import Any, Mapping, Optional, Type, TypeVar

from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict

REQUIRED_MSG = "Please fill in all required fields"
EMAIL_MSG = "Please enter a valid email address"

F = TypeVar("F", bound="JsonForm")


def _wire(value: Any) -> Any:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return value


def strip_filter(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


class JsonForm(FlaskForm):
    class Meta:
        csrf = False

    @classmethod
    def from_payload(cls: Type[F], payload: Optional[Mapping[str, Any]]) -> F:
        data = MultiDict({k: _wire(v) for k, v in (payload or {}).items()})
        return cls(formdata=data)

    def first_error(self) -> Optional[str]:
        """First validation message in field declaration order."""
        for field in self:
            if field.errors:
                return str(field.errors[0])
        return None


from .contact_form import ContactForm  # noqa: E402
from .donation_form import AMOUNT_MSG, DonationForm  # noqa: E402
from .newsletter_form import NewsletterForm  # noqa: E402

__all__ = [
    "AMOUNT_MSG",
    "EMAIL_MSG",
    "REQUIRED_MSG",
    "ContactForm",
    "DonationForm",
    "JsonForm",
    "NewsletterForm",
]
