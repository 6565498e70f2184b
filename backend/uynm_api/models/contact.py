"""
UYNM Backend — Contact Message Model
======================================

What:  One row per contact-form submission (`contacts` table).

Lifecycle:
    1. Created by POST /api/contact with status 'unread'
    2. Status changed by an admin (PATCH /api/contact/{id}/status)
    3. Never deleted by this backend
"""

import uuid
from datetime import datetime

from sqlalchemy import Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from uynm_api.database import Base
from uynm_api.models._columns import created_at_column, uuid_pk


class Contact(Base):
    __tablename__ = "contacts"

    id: Mapped[uuid.UUID] = uuid_pk()
    first_name: Mapped[str] = mapped_column(String(120), nullable=False)
    last_name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        default="unread",
        server_default=text("'unread'"),
    )
    created_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        Index("idx_contacts_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Contact(id={self.id}, email='{self.email}', status='{self.status}')>"
