from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.database import get_db
from app.core.rate_limit import check_invite_attempts
from app.models.user import User
from app.routers.auth import get_current_admin_user
from app.schemas.registration import (
    Registration as RegistrationSchema,
    RegistrationCreate,
    RegistrationStatusUpdate,
)
from app.services.event_service import EventService
from app.services.notification_service import NotificationService, registration_payload
from app.services.registration_service import RegistrationService, RegistrationError

logger = logging.getLogger("uvicorn.error")
router = APIRouter(tags=["registrations"])


@router.post("/events/{event_id}/registrations", response_model=RegistrationSchema, status_code=201)
async def create_registration(
    event_id: int,
    payload: RegistrationCreate,
    request: Request,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    if payload.invitation_code:
        check_invite_attempts(request)

    service = RegistrationService(db)
    try:
        registration = await service.create_registration(event_id, payload)
    except RegistrationError as e:
        logger.warning(f"Registration rejected for event {event_id}: {e.detail}")
        raise HTTPException(status_code=e.status_code, detail=e.detail)

    event = await EventService(db).get_event(event_id)
    background_tasks.add_task(
        NotificationService().notify_registration,
        registration_payload(registration, event.title),
    )
    return registration


@router.get("/events/{event_id}/registrations", response_model=List[RegistrationSchema])
async def list_registrations(
    event_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = RegistrationService(db)
    return await service.list_registrations(event_id)


@router.patch("/registrations/{registration_id}/status", response_model=RegistrationSchema)
async def update_registration_status(
    registration_id: int,
    payload: RegistrationStatusUpdate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = RegistrationService(db)
    registration = await service.set_status(registration_id, payload.status)
    if not registration:
        raise HTTPException(status_code=404, detail="Registration not found")
    return registration
