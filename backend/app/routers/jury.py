from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.database import get_db
from app.models.user import User
from app.routers.auth import get_current_admin_user
from app.schemas.event import EventJury as EventJurySchema, EventJuryCreate, EventJuryUpdate
from app.services.event_service import EventService

logger = logging.getLogger("uvicorn.error")
router = APIRouter(prefix="/events/{event_id}/jury", tags=["jury"])


@router.get("", response_model=List[EventJurySchema])
async def list_jury(event_id: int, db: AsyncSession = Depends(get_db)):
    service = EventService(db)
    if not await service.get_event(event_id):
        raise HTTPException(status_code=404, detail="Event not found")
    return await service.list_jury(event_id)


@router.post("", response_model=EventJurySchema, status_code=201)
async def add_jury_member(
    event_id: int,
    payload: EventJuryCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = EventService(db)
    member = await service.add_jury(event_id, payload)
    if not member:
        raise HTTPException(status_code=404, detail="Event not found")
    logger.info(f"Admin {admin.email} added jury member {member.id} to event {event_id}")
    return member


@router.patch("/{jury_id}", response_model=EventJurySchema)
async def update_jury_member(
    event_id: int,
    jury_id: int,
    payload: EventJuryUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = EventService(db)
    member = await service.update_jury(event_id, jury_id, payload)
    if not member:
        raise HTTPException(status_code=404, detail="Jury member not found")
    return member


@router.delete("/{jury_id}")
async def delete_jury_member(
    event_id: int,
    jury_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = EventService(db)
    if not await service.delete_jury(event_id, jury_id):
        raise HTTPException(status_code=404, detail="Jury member not found")
    return {"status": "ok"}
