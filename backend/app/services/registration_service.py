from datetime import datetime
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.event import Event, EventCategory, EventSubcategory
from app.models.registration import Registration, RegistrationState
from app.schemas.registration import RegistrationCreate
from app.services.invitation_service import InvitationService, INVALID_INVITATION_MESSAGE
from app.utils.dates import utcnow, to_naive_utc
from app.utils.logger import get_logger

logger = get_logger("registrations")

COUNTED_STATES = (RegistrationState.PENDING, RegistrationState.VERIFIED)


class RegistrationError(Exception):
    status_code = 400
    detail = "Registration failed"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(detail or self.detail)
        if detail:
            self.detail = detail


class EventNotFound(RegistrationError):
    status_code = 404
    detail = "Event not found"


class RegistrationClosed(RegistrationError):
    detail = "Registration is closed"


class QuotaFull(RegistrationError):
    status_code = 409
    detail = "Registration quota is full"


class InvalidCategory(RegistrationError):
    detail = "Category does not belong to this event"


class InvalidSubcategory(RegistrationError):
    detail = "Subcategory does not belong to this category"


class InvalidInvitationCode(RegistrationError):
    detail = INVALID_INVITATION_MESSAGE


async def count_registrations(db: AsyncSession, event_id: int) -> int:
    result = await db.execute(
        select(func.count(Registration.id)).where(
            Registration.event_id == event_id,
            Registration.status.in_(COUNTED_STATES),
        )
    )
    return result.scalar_one()


class RegistrationService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.invitations = InvitationService(db)

    async def create_registration(
        self, event_id: int, data: RegistrationCreate, now: Optional[datetime] = None
    ) -> Registration:
        """
        Register a participant for an event.

        A registration carrying an invitation code is a waitlist admission:
        it skips the quota check but must redeem a code of this event. The
        code increment and the insert share one transaction, so a failed
        insert also gives the slot back.
        """
        now = to_naive_utc(now) or utcnow()

        event = await self.db.get(Event, event_id)
        if not event:
            raise EventNotFound()

        deadline = to_naive_utc(event.registration_deadline)
        if deadline is not None and now >= deadline:
            raise RegistrationClosed()

        if data.category_id is not None:
            category = await self.db.get(EventCategory, data.category_id)
            if not category or category.event_id != event_id:
                raise InvalidCategory()

        if data.subcategory_id is not None:
            subcategory = await self.db.get(EventSubcategory, data.subcategory_id)
            if not subcategory or data.category_id is None or subcategory.category_id != data.category_id:
                raise InvalidSubcategory()

        invitation_code_id = None
        try:
            if data.invitation_code:
                try:
                    invitation = await self.invitations.consume(event_id, data.invitation_code, now=now)
                except SQLAlchemyError as e:
                    logger.error(f"Invitation code redemption failed for event {event_id}: {e}")
                    raise InvalidInvitationCode()
                if invitation is None:
                    raise InvalidInvitationCode()
                invitation_code_id = invitation.id
            elif event.max_quota:
                if await count_registrations(self.db, event_id) >= event.max_quota:
                    raise QuotaFull()

            registration = Registration(
                event_id=event_id,
                invitation_code_id=invitation_code_id,
                status=RegistrationState.PENDING,
                **data.model_dump(exclude={"invitation_code"}),
            )
            self.db.add(registration)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise

        await self.db.refresh(registration)
        logger.info(
            f"Registration {registration.id} created for event {event_id}"
            + (" (waitlist)" if invitation_code_id else "")
        )
        return registration

    async def list_registrations(self, event_id: int) -> List[Registration]:
        result = await self.db.execute(
            select(Registration)
            .where(Registration.event_id == event_id)
            .order_by(Registration.created_at.desc(), Registration.id.desc())
        )
        return result.scalars().all()

    async def set_status(self, registration_id: int, status: RegistrationState) -> Optional[Registration]:
        registration = await self.db.get(Registration, registration_id)
        if not registration:
            return None
        registration.status = status
        await self.db.commit()
        await self.db.refresh(registration)
        logger.info(f"Registration {registration_id} marked {status.value}")
        return registration
