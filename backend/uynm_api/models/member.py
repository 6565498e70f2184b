"""
UYNM Backend — Member Profile Model
=====================================

What:  One row per membership registration (`profiles` table).
How:   `email` carries a UNIQUE constraint; the member service pre-checks it
       for a friendly message and maps the constraint violation to the same
       duplicate error when two submissions race.
"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from uynm_api.database import Base
from uynm_api.models._columns import created_at_column, uuid_pk

INVOLVEMENT_TRACKS = ("volunteer", "partner", "member", "mentor")


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = uuid_pk()
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    phone: Mapped[str] = mapped_column(String(50), nullable=False)
    location: Mapped[str] = mapped_column(String(255), nullable=False)
    involvement_track: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = created_at_column()

    __table_args__ = (
        UniqueConstraint("email", name="uq_profiles_email"),
    )

    def __repr__(self) -> str:
        return f"<Profile(id={self.id}, email='{self.email}', track='{self.involvement_track}')>"
