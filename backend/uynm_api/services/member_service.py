"""
UYNM Backend — Member Service
===============================

What:  Membership registrations (`profiles`) and the admin roster.
How:   One profile per email. The pre-check gives the visitor a clear message;
       the UNIQUE constraint on profiles.email settles concurrent submissions,
       and its IntegrityError is reported as the same duplicate error.
Who:   Called by uynm_api.routes.members.

Stats (admin listing), computed over the returned rows:
    {"total": 12, "volunteers": 5, "partners": 2, "members": 4, "mentors": 1}
"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from uynm_api.exceptions import ConflictError, DatabaseError, NotFoundError
from uynm_api.models.member import Profile
from uynm_api.schemas.member import MemberCreate, MemberRecord, MemberStats, MemberSummary

logger = logging.getLogger(__name__)

DUPLICATE_EMAIL_MESSAGE = (
    "This email is already registered. Please login or use a different email."
)


def _duplicate(email: str) -> ConflictError:
    return ConflictError(
        DUPLICATE_EMAIL_MESSAGE,
        error_code="duplicate_email",
        context={"email": email},
    )


def compute_stats(members: List[MemberRecord]) -> MemberStats:
    tracks = [member.involvement_track for member in members]
    return MemberStats(
        total=len(tracks),
        volunteers=tracks.count("volunteer"),
        partners=tracks.count("partner"),
        members=tracks.count("member"),
        mentors=tracks.count("mentor"),
    )


class MemberService:

    async def register_member(self, db: AsyncSession, payload: MemberCreate) -> MemberSummary:
        """
        Create a membership profile.

        Raises:
            ConflictError: email already registered (→ 400 duplicate_email)
            DatabaseError: store failure (→ 500)
        """
        try:
            existing = await db.execute(
                select(Profile.id).where(Profile.email == payload.email)
            )
            if existing.first() is not None:
                raise _duplicate(payload.email)

            profile = Profile(
                full_name=payload.full_name,
                email=payload.email,
                phone=payload.phone,
                location=payload.location,
                involvement_track=payload.involvement_track,
                reason=payload.reason,
            )
            db.add(profile)
            await db.commit()
            logger.info(
                "Member registered: %s (track=%s)", profile.id, profile.involvement_track
            )
            return MemberSummary(
                id=profile.id,
                full_name=profile.full_name,
                track=profile.involvement_track,
            )

        except ConflictError:
            raise
        except IntegrityError:
            # Lost the race against a concurrent registration of the same email
            await db.rollback()
            raise _duplicate(payload.email)
        except Exception as e:
            logger.error("Database error registering member: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def list_members(
        self, db: AsyncSession, track: Optional[str] = None
    ) -> Tuple[List[MemberRecord], MemberStats]:
        """Profiles newest first, optionally restricted to one involvement track."""
        try:
            query = select(Profile).order_by(desc(Profile.created_at))
            if track:
                query = query.where(Profile.involvement_track == track)
            result = await db.execute(query)
            members = [MemberRecord.model_validate(row) for row in result.scalars().all()]

        except Exception as e:
            logger.error("Database error listing members: %s", str(e), exc_info=True)
            raise DatabaseError(context={"track": track})

        return members, compute_stats(members)

    async def get_member(self, db: AsyncSession, member_id: UUID) -> MemberRecord:
        try:
            profile = await db.get(Profile, member_id)
        except Exception as e:
            logger.error("Database error fetching member %s: %s", member_id, str(e))
            raise DatabaseError(context={"member_id": str(member_id)})

        if profile is None:
            raise NotFoundError(resource="Member", resource_id=str(member_id))
        return MemberRecord.model_validate(profile)


member_service = MemberService()
