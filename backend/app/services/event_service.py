from typing import List, Optional, Tuple

from sqlalchemy import select, func, case
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.event import Event, EventCategory, EventSubcategory, EventJury, EventStatus
from app.schemas.event import (
    EventCreate,
    EventUpdate,
    EventCategoryCreate,
    EventSubcategoryCreate,
    EventSubcategoryUpdate,
    EventJuryCreate,
    EventJuryUpdate,
)
from app.services.registration_service import count_registrations
from app.utils.dates import to_naive_utc
from app.utils.logger import get_logger

logger = get_logger("events")

DATE_FIELDS = ("start_date", "end_date", "registration_deadline")

# "status desc" over the stored strings: upcoming, ongoing, completed
_STATUS_ORDER = case(
    (Event.status == EventStatus.UPCOMING, 0),
    (Event.status == EventStatus.ONGOING, 1),
    else_=2,
)


def _normalise_dates(values: dict) -> dict:
    for field in DATE_FIELDS:
        if values.get(field) is not None:
            values[field] = to_naive_utc(values[field])
    return values


class EventService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_events(
        self, status: Optional[EventStatus] = None, page: int = 1, limit: int = 10
    ) -> Tuple[List[Event], int]:
        """Page through events. "upcoming" also includes events that are already running."""
        query = select(Event)
        count_query = select(func.count(Event.id))
        if status == EventStatus.UPCOMING:
            condition = Event.status.in_([EventStatus.UPCOMING, EventStatus.ONGOING])
        elif status:
            condition = Event.status == status
        else:
            condition = None
        if condition is not None:
            query = query.where(condition)
            count_query = count_query.where(condition)

        query = (
            query.order_by(_STATUS_ORDER, Event.start_date.asc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        result = await self.db.execute(query)
        total = (await self.db.execute(count_query)).scalar_one()
        return result.scalars().all(), total

    async def get_event(self, event_id: int) -> Optional[Event]:
        return await self.db.get(Event, event_id)

    async def registration_count(self, event_id: int) -> int:
        return await count_registrations(self.db, event_id)

    async def create_event(self, payload: EventCreate) -> Event:
        event = Event(**_normalise_dates(payload.model_dump()))
        self.db.add(event)
        await self.db.commit()
        # reload so the eagerly loaded categories are populated
        event = await self.db.get(Event, event.id, populate_existing=True)
        logger.info(f"Created event {event.id}: {event.title}")
        return event

    async def update_event(self, event_id: int, payload: EventUpdate) -> Optional[Event]:
        event = await self.db.get(Event, event_id)
        if not event:
            return None
        for field, value in _normalise_dates(payload.model_dump(exclude_unset=True)).items():
            setattr(event, field, value)
        await self.db.commit()
        return await self.db.get(Event, event_id, populate_existing=True)

    async def add_category(self, event_id: int, payload: EventCategoryCreate) -> Optional[EventCategory]:
        event = await self.db.get(Event, event_id)
        if not event:
            return None
        category = EventCategory(event_id=event_id, **payload.model_dump())
        self.db.add(category)
        await self.db.commit()
        return await self.db.get(EventCategory, category.id, populate_existing=True)

    async def delete_category(self, event_id: int, category_id: int) -> bool:
        category = await self._get_category(event_id, category_id)
        if not category:
            return False
        await self.db.delete(category)
        await self.db.commit()
        return True

    async def _get_category(self, event_id: int, category_id: int) -> Optional[EventCategory]:
        result = await self.db.execute(
            select(EventCategory).where(
                EventCategory.id == category_id, EventCategory.event_id == event_id
            )
        )
        return result.scalar_one_or_none()

    async def _get_subcategory(
        self, event_id: int, category_id: int, subcategory_id: int
    ) -> Optional[EventSubcategory]:
        result = await self.db.execute(
            select(EventSubcategory)
            .join(EventCategory, EventSubcategory.category_id == EventCategory.id)
            .where(
                EventSubcategory.id == subcategory_id,
                EventSubcategory.category_id == category_id,
                EventCategory.event_id == event_id,
            )
        )
        return result.scalar_one_or_none()

    async def add_subcategory(
        self, event_id: int, category_id: int, payload: EventSubcategoryCreate
    ) -> Optional[EventSubcategory]:
        category = await self._get_category(event_id, category_id)
        if not category:
            return None
        subcategory = EventSubcategory(category_id=category_id, **payload.model_dump())
        self.db.add(subcategory)
        await self.db.commit()
        await self.db.refresh(subcategory)
        logger.info(f"Added subcategory {subcategory.id} to category {category_id}")
        return subcategory

    async def update_subcategory(
        self, event_id: int, category_id: int, subcategory_id: int, payload: EventSubcategoryUpdate
    ) -> Optional[EventSubcategory]:
        subcategory = await self._get_subcategory(event_id, category_id, subcategory_id)
        if not subcategory:
            return None
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(subcategory, field, value)
        await self.db.commit()
        await self.db.refresh(subcategory)
        return subcategory

    async def delete_subcategory(self, event_id: int, category_id: int, subcategory_id: int) -> bool:
        subcategory = await self._get_subcategory(event_id, category_id, subcategory_id)
        if not subcategory:
            return False
        await self.db.delete(subcategory)
        await self.db.commit()
        return True

    async def list_jury(self, event_id: int) -> List[EventJury]:
        result = await self.db.execute(
            select(EventJury)
            .where(EventJury.event_id == event_id)
            .order_by(EventJury.created_at.desc(), EventJury.id.desc())
        )
        return result.scalars().all()

    async def add_jury(self, event_id: int, payload: EventJuryCreate) -> Optional[EventJury]:
        event = await self.db.get(Event, event_id)
        if not event:
            return None
        member = EventJury(event_id=event_id, **payload.model_dump())
        self.db.add(member)
        await self.db.commit()
        await self.db.refresh(member)
        logger.info(f"Added jury member {member.id} to event {event_id}")
        return member

    async def update_jury(self, event_id: int, jury_id: int, payload: EventJuryUpdate) -> Optional[EventJury]:
        member = await self.db.get(EventJury, jury_id)
        if not member or member.event_id != event_id:
            return None
        for field, value in payload.model_dump(exclude_unset=True).items():
            setattr(member, field, value)
        await self.db.commit()
        await self.db.refresh(member)
        return member

    async def delete_jury(self, event_id: int, jury_id: int) -> bool:
        member = await self.db.get(EventJury, jury_id)
        if not member or member.event_id != event_id:
            return False
        await self.db.delete(member)
        await self.db.commit()
        return True
