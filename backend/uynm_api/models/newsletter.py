"""
UYNM Backend — Newsletter Subscriber Model
============================================

What:  At most one row per email (`newsletter_subscribers` table).

Lifecycle (soft delete only):
    absent   ──subscribe──▶ is_active=true
    active   ──unsubscribe─▶ is_active=false
    inactive ──subscribe──▶ is_active=true (same row reactivated)
"""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Index, String, UniqueConstraint, true
from sqlalchemy.orm import Mapped, mapped_column

from uynm_api.database import Base
from uynm_api.models._columns import created_at_column, uuid_pk


class NewsletterSubscriber(Base):
    __tablename__ = "newsletter_subscribers"

    id: Mapped[uuid.UUID] = uuid_pk()
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
    )
    subscribed_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        UniqueConstraint("email", name="uq_newsletter_subscribers_email"),
        Index("idx_newsletter_subscribed_at", "subscribed_at"),
    )

    def __repr__(self) -> str:
        return f"<NewsletterSubscriber(email='{self.email}', is_active={self.is_active})>"
