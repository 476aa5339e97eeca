from __future__ import annotations

# --- Core model imports ---------------------------------------------------------
from hopefoundation.models.contact_message import ContactMessage
from hopefoundation.models.donation import Donation
from hopefoundation.models.event import Event
from hopefoundation.models.newsletter_subscriber import NewsletterSubscriber
from hopefoundation.models.profile import Profile
from hopefoundation.models.program import Program
from hopefoundation.models.project import Project
from hopefoundation.models.site_setting import SiteSetting
from hopefoundation.models.site_stat import ResponseTime, SiteStat

__all__ = [
    "ContactMessage",
    "Donation",
    "Event",
    "NewsletterSubscriber",
    "Profile",
    "Program",
    "Project",
    "ResponseTime",
    "SiteSetting",
    "SiteStat",
]
