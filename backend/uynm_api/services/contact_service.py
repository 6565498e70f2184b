"""
UYNM Backend — Contact Service
================================

What:  Stores contact form submissions and lets admins review and mark them.
How:   Plain inserts and selects on `contacts`. There is no duplicate check:
       the same visitor may write any number of times.
Who:   Called by uynm_api.routes.contact.
"""

import logging
from typing import List
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from uynm_api.exceptions import DatabaseError, NotFoundError
from uynm_api.models.contact import Contact
from uynm_api.schemas.contact import ContactCreate, ContactReceipt, ContactRecord

logger = logging.getLogger(__name__)


class ContactService:

    async def create_message(self, db: AsyncSession, payload: ContactCreate) -> ContactReceipt:
        """
        Persist one contact message with status 'unread'.

        Raises:
            DatabaseError: the insert failed (→ 500)
        """
        try:
            contact = Contact(
                first_name=payload.first_name,
                last_name=payload.last_name,
                email=payload.email,
                subject=payload.subject,
                message=payload.message,
                status="unread",
            )
            db.add(contact)
            await db.commit()
            logger.info("Contact message stored: %s", contact.id)
            return ContactReceipt(id=contact.id, status=contact.status)

        except Exception as e:
            logger.error("Database error storing contact message: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def list_messages(self, db: AsyncSession) -> List[ContactRecord]:
        """All contact messages, newest first."""
        try:
            result = await db.execute(select(Contact).order_by(desc(Contact.created_at)))
            return [ContactRecord.model_validate(row) for row in result.scalars().all()]

        except Exception as e:
            logger.error("Database error listing contact messages: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def update_status(
        self, db: AsyncSession, contact_id: UUID, status: str
    ) -> ContactRecord:
        """
        Set the review status of one message.

        The value is stored as given (the dashboard sends unread/read/archived).

        Raises:
            NotFoundError: no message with this id (→ 404)
            DatabaseError: the update failed (→ 500)
        """
        try:
            contact = await db.get(Contact, contact_id)
            if contact is None:
                raise NotFoundError(resource="Contact message", resource_id=str(contact_id))

            contact.status = status
            await db.commit()
            logger.info("Contact message %s marked '%s'", contact_id, status)
            return ContactRecord.model_validate(contact)

        except NotFoundError:
            raise
        except Exception as e:
            logger.error("Database error updating contact %s: %s", contact_id, str(e))
            raise DatabaseError(context={"contact_id": str(contact_id)})


contact_service = ContactService()
