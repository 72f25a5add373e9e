from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.database import get_db
from app.core.rate_limit import check_invite_attempts
from app.models.invitation_code import InvitationCode
from app.models.user import User
from app.routers.auth import get_current_admin_user
from app.schemas.invitation import (
    InvitationCode as InvitationCodeSchema,
    InvitationCodeCreate,
    InvitationCodeVerify,
    InvitationCodeVerifyResult,
)
from app.services.invitation_service import InvitationService, INVALID_INVITATION_MESSAGE
from app.utils.dates import utcnow

logger = logging.getLogger("uvicorn.error")
router = APIRouter(prefix="/events/{event_id}/invitation-codes", tags=["invitation codes"])


def _to_schema(invitation: InvitationCode) -> InvitationCodeSchema:
    schema = InvitationCodeSchema.model_validate(invitation)
    schema.is_usable = invitation.usable_at(utcnow())
    return schema


@router.post("", response_model=InvitationCodeSchema, status_code=201)
async def issue_invitation_code(
    event_id: int,
    payload: InvitationCodeCreate,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = InvitationService(db)
    try:
        invitation = await service.issue_code(
            event_id,
            payload.code,
            max_uses=payload.max_uses,
            expires_at=payload.expires_at,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not invitation:
        raise HTTPException(status_code=404, detail="Event not found")
    logger.info(f"Admin {admin.email} issued invitation code {invitation.id} for event {event_id}")
    return _to_schema(invitation)


@router.get("", response_model=List[InvitationCodeSchema])
async def list_invitation_codes(
    event_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = InvitationService(db)
    return [_to_schema(code) for code in await service.list_codes(event_id)]


@router.post("/{code_id}/deactivate")
async def deactivate_invitation_code(
    event_id: int,
    code_id: int,
    db: AsyncSession = Depends(get_db),
    admin: User = Depends(get_current_admin_user)
):
    service = InvitationService(db)
    if not await service.deactivate_code(code_id, event_id=event_id):
        raise HTTPException(status_code=404, detail="Invitation code not found")
    return {"status": "ok"}


@router.post("/verify", response_model=InvitationCodeVerifyResult, dependencies=[Depends(check_invite_attempts)])
async def verify_invitation_code(
    event_id: int,
    payload: InvitationCodeVerify,
    db: AsyncSession = Depends(get_db),
):
    """Check a code before the registration form is shown. Does not consume a use."""
    service = InvitationService(db)
    invitation = await service.find_matching_code(event_id, payload.code)
    if invitation is None:
        raise HTTPException(status_code=400, detail=INVALID_INVITATION_MESSAGE)
    return {"valid": True}
