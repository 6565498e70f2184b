"""
UYNM Backend — ORM Models
===========================

What:  SQLAlchemy mappings for the rows this backend reads and writes in the
       managed Postgres store. Importing this package registers every table
       with `Base.metadata` (used by Alembic and the test fixtures).
"""

from uynm_api.models.contact import Contact
from uynm_api.models.event import Event, EventRegistration
from uynm_api.models.member import INVOLVEMENT_TRACKS, Profile
from uynm_api.models.newsletter import NewsletterSubscriber

__all__ = [
    "Contact",
    "Event",
    "EventRegistration",
    "INVOLVEMENT_TRACKS",
    "NewsletterSubscriber",
    "Profile",
]
