"""
UYNM Backend — Event Service
==============================

What:  Admin-managed events and public event registrations.
How:   Events are listed by date ascending (soonest first). Registrations are
       unique per (event_id, email); the pre-check gives the visitor a clear
       message and the UNIQUE constraint settles concurrent submissions.
Who:   Called by uynm_api.routes.events.

Registration flow:
    event exists?          no  → NotFoundError("Event")         (404)
    (event, email) new?    no  → ConflictError(already_registered) (400)
    insert registration        → (RegistrationRecord, event title)
"""

import logging
from typing import Any, Dict, List, Tuple
from uuid import UUID

from sqlalchemy import asc, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from uynm_api.exceptions import ConflictError, DatabaseError, NotFoundError, UYNMError
from uynm_api.models._columns import utcnow
from uynm_api.models.event import Event, EventRegistration
from uynm_api.schemas.event import (
    EventCreate,
    EventRecord,
    EventRegistrationCreate,
    RegistrationRecord,
)

logger = logging.getLogger(__name__)


def _already_registered(event_id: UUID, email: str) -> ConflictError:
    return ConflictError(
        "You are already registered for this event.",
        error_code="already_registered",
        context={"event_id": str(event_id), "email": email},
    )


class EventService:

    async def _load(self, db: AsyncSession, event_id: UUID) -> Event:
        event = await db.get(Event, event_id)
        if event is None:
            raise NotFoundError(resource="Event", resource_id=str(event_id))
        return event

    async def list_events(self, db: AsyncSession, upcoming: bool = False) -> List[EventRecord]:
        """
        Events ordered by event_date ascending.

        Args:
            upcoming: keep only events whose date is now or later (UTC)
        """
        try:
            query = select(Event).order_by(asc(Event.event_date))
            if upcoming:
                query = query.where(Event.event_date >= utcnow())
            result = await db.execute(query)
            return [EventRecord.model_validate(row) for row in result.scalars().all()]

        except Exception as e:
            logger.error("Database error listing events: %s", str(e), exc_info=True)
            raise DatabaseError(context={"upcoming": upcoming})

    async def get_event(self, db: AsyncSession, event_id: UUID) -> EventRecord:
        try:
            return EventRecord.model_validate(await self._load(db, event_id))
        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Database error fetching event %s: %s", event_id, str(e))
            raise DatabaseError(context={"event_id": str(event_id)})

    async def create_event(self, db: AsyncSession, payload: EventCreate) -> EventRecord:
        try:
            event = Event(**payload.model_dump())
            db.add(event)
            await db.commit()
            logger.info("Event created: %s (%s)", event.id, event.title)
            return EventRecord.model_validate(event)

        except Exception as e:
            logger.error("Database error creating event: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def update_event(
        self, db: AsyncSession, event_id: UUID, changes: Dict[str, Any]
    ) -> EventRecord:
        """
        Apply a partial update. Columns absent from `changes` keep their value.

        Raises:
            NotFoundError: no event with this id (→ 404)
        """
        try:
            event = await self._load(db, event_id)
            for column, value in changes.items():
                setattr(event, column, value)
            await db.commit()
            logger.info("Event %s updated: %s", event_id, sorted(changes))
            return EventRecord.model_validate(event)

        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Database error updating event %s: %s", event_id, str(e))
            raise DatabaseError(context={"event_id": str(event_id)})

    async def delete_event(self, db: AsyncSession, event_id: UUID) -> None:
        """Delete an event; its registrations go with it (ON DELETE CASCADE)."""
        try:
            event = await self._load(db, event_id)
            await db.delete(event)
            await db.commit()
            logger.info("Event deleted: %s", event_id)

        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Database error deleting event %s: %s", event_id, str(e))
            raise DatabaseError(context={"event_id": str(event_id)})

    async def register_for_event(
        self, db: AsyncSession, event_id: UUID, payload: EventRegistrationCreate
    ) -> Tuple[RegistrationRecord, str]:
        """
        Register a visitor for an event.

        Returns:
            The stored registration and the event's title (for the message)

        Raises:
            NotFoundError: unknown event (→ 404)
            ConflictError: this email is already registered for it (→ 400)
        """
        try:
            event = await self._load(db, event_id)
            title = event.title

            existing = await db.execute(
                select(EventRegistration.id).where(
                    EventRegistration.event_id == event_id,
                    EventRegistration.email == payload.email,
                )
            )
            if existing.first() is not None:
                raise _already_registered(event_id, payload.email)

            registration = EventRegistration(
                event_id=event_id,
                email=payload.email,
                full_name=payload.full_name,
                phone=payload.phone,
            )
            db.add(registration)
            await db.commit()
            logger.info("Registration %s for event %s", registration.id, event_id)
            return RegistrationRecord.model_validate(registration), title

        except UYNMError:
            raise
        except IntegrityError:
            await db.rollback()
            raise _already_registered(event_id, payload.email)
        except Exception as e:
            logger.error(
                "Database error registering for event %s: %s", event_id, str(e), exc_info=True
            )
            raise DatabaseError(context={"event_id": str(event_id)})


event_service = EventService()
