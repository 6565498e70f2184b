"""
UYNM Backend — Newsletter Service
===================================

What:  Newsletter subscriptions with soft unsubscribe.
How:   One row per email in `newsletter_subscribers`, never deleted.
       Unsubscribing flips is_active to false; subscribing again flips it back
       instead of inserting a second row.

Subscribe outcomes:
    no row           → insert (is_active=true)       → SubscribeOutcome.CREATED
    inactive row     → set is_active=true            → SubscribeOutcome.REACTIVATED
    active row       → ConflictError("already_subscribed")
"""

import logging
from enum import Enum
from typing import List, Tuple

from sqlalchemy import desc, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from uynm_api.exceptions import ConflictError, DatabaseError
from uynm_api.models.newsletter import NewsletterSubscriber
from uynm_api.schemas.newsletter import SubscriberRecord

logger = logging.getLogger(__name__)


class SubscribeOutcome(str, Enum):
    CREATED = "created"
    REACTIVATED = "reactivated"


def _already_subscribed(email: str) -> ConflictError:
    return ConflictError(
        "This email is already subscribed to our newsletter.",
        error_code="already_subscribed",
        context={"email": email},
    )


class NewsletterService:

    async def subscribe(self, db: AsyncSession, email: str) -> SubscribeOutcome:
        """
        Subscribe `email`, or reactivate a previous subscription.

        Raises:
            ConflictError: the address is already an active subscriber (→ 400)
            DatabaseError: store failure (→ 500)
        """
        try:
            result = await db.execute(
                select(NewsletterSubscriber).where(NewsletterSubscriber.email == email)
            )
            subscriber = result.scalar_one_or_none()

            if subscriber is not None:
                if subscriber.is_active:
                    raise _already_subscribed(email)
                subscriber.is_active = True
                await db.commit()
                logger.info("Newsletter subscription reactivated: %s", subscriber.id)
                return SubscribeOutcome.REACTIVATED

            subscriber = NewsletterSubscriber(email=email, is_active=True)
            db.add(subscriber)
            await db.commit()
            logger.info("Newsletter subscription created: %s", subscriber.id)
            return SubscribeOutcome.CREATED

        except ConflictError:
            raise
        except IntegrityError:
            await db.rollback()
            raise _already_subscribed(email)
        except Exception as e:
            logger.error("Database error subscribing to newsletter: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def unsubscribe(self, db: AsyncSession, email: str) -> None:
        """
        Deactivate `email`. Succeeds whether or not the address was subscribed.
        """
        try:
            result = await db.execute(
                update(NewsletterSubscriber)
                .where(NewsletterSubscriber.email == email)
                .values(is_active=False)
            )
            await db.commit()
            logger.info("Newsletter unsubscribe: %d row(s) deactivated", result.rowcount)

        except Exception as e:
            logger.error("Database error unsubscribing: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

    async def list_subscribers(
        self, db: AsyncSession
    ) -> Tuple[List[SubscriberRecord], int, int]:
        """Every subscriber, newest first, with the total and active counts."""
        try:
            result = await db.execute(
                select(NewsletterSubscriber).order_by(desc(NewsletterSubscriber.subscribed_at))
            )
            subscribers = [SubscriberRecord.model_validate(row) for row in result.scalars().all()]

        except Exception as e:
            logger.error("Database error listing subscribers: %s", str(e), exc_info=True)
            raise DatabaseError(context={"error_type": type(e).__name__})

        active = sum(1 for subscriber in subscribers if subscriber.is_active)
        return subscribers, len(subscribers), active


newsletter_service = NewsletterService()
