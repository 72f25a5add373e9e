from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.event import EventStatus
from app.models.user import User
from app.routers.auth import get_current_admin_user
from app.schemas.event import (
    Event as EventSchema,
    EventCategory as EventCategorySchema,
    EventCategoryCreate,
    EventCreate,
    EventSubcategory as EventSubcategorySchema,
    EventSubcategoryCreate,
    EventSubcategoryUpdate,
    EventDetail,
    EventPage,
    EventUpdate,
)
from app.services.event_service import EventService

router = APIRouter(prefix="/events", tags=["events"])


@router.get("", response_model=EventPage)
async def list_events(
    status: Optional[EventStatus] = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
):
    service = EventService(db)
    events, total = await service.list_events(status=status, page=page, limit=limit)
    return {"events": events, "total": total, "page": page, "limit": limit}


@router.get("/{event_id}", response_model=EventDetail)
async def get_event(event_id: int, db: AsyncSession = Depends(get_db)):
    service = EventService(db)
    event = await service.get_event(event_id)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    detail = EventDetail.model_validate(event)
    detail.registration_count = await service.registration_count(event_id)
    return detail


@router.post("", response_model=EventSchema, status_code=201)
async def create_event(
    payload: EventCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = EventService(db)
    return await service.create_event(payload)


@router.patch("/{event_id}", response_model=EventSchema)
async def update_event(
    event_id: int,
    payload: EventUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = EventService(db)
    event = await service.update_event(event_id, payload)
    if not event:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


@router.post("/{event_id}/categories", response_model=EventCategorySchema, status_code=201)
async def add_category(
    event_id: int,
    payload: EventCategoryCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = EventService(db)
    category = await service.add_category(event_id, payload)
    if not category:
        raise HTTPException(status_code=404, detail="Event not found")
    return category


@router.delete("/{event_id}/categories/{category_id}")
async def delete_category(
    event_id: int,
    category_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = EventService(db)
    if not await service.delete_category(event_id, category_id):
        raise HTTPException(status_code=404, detail="Category not found")
    return {"status": "ok"}


@router.post(
    "/{event_id}/categories/{category_id}/subcategories",
    response_model=EventSubcategorySchema,
    status_code=201,
)
async def add_subcategory(
    event_id: int,
    category_id: int,
    payload: EventSubcategoryCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = EventService(db)
    subcategory = await service.add_subcategory(event_id, category_id, payload)
    if not subcategory:
        raise HTTPException(status_code=404, detail="Category not found")
    return subcategory


@router.patch(
    "/{event_id}/categories/{category_id}/subcategories/{subcategory_id}",
    response_model=EventSubcategorySchema,
)
async def update_subcategory(
    event_id: int,
    category_id: int,
    subcategory_id: int,
    payload: EventSubcategoryUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = EventService(db)
    subcategory = await service.update_subcategory(event_id, category_id, subcategory_id, payload)
    if not subcategory:
        raise HTTPException(status_code=404, detail="Subcategory not found")
    return subcategory


@router.delete("/{event_id}/categories/{category_id}/subcategories/{subcategory_id}")
async def delete_subcategory(
    event_id: int,
    category_id: int,
    subcategory_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = EventService(db)
    if not await service.delete_subcategory(event_id, category_id, subcategory_id):
        raise HTTPException(status_code=404, detail="Subcategory not found")
    return {"status": "ok"}
